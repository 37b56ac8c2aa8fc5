from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, conint

# Trip fields addressable through record fetch / record write
TRIP_ID = "id"
TRIP_PREFERRED_DATE = "preferred_trip_start"
TRIP_FLIGHT = "flight_id"
TRIP_CONTACT = "contact_id"

TRIP_FIELDS = [TRIP_PREFERRED_DATE, TRIP_FLIGHT, TRIP_CONTACT]

TICKET_ACTIVE = "active"
TICKET_VOID = "void"


class TripRecord(BaseModel):
    id: str
    name: Optional[str] = None
    preferred_trip_start: Optional[date] = None
    flight_id: Optional[str] = None
    contact_id: Optional[str] = None


class FlightRecord(BaseModel):
    id: str
    name: str
    start_date_time: Optional[datetime] = None
    available_tickets: Optional[int] = None


class TicketRecord(BaseModel):
    id: str
    name: Optional[str] = None
    flight_id: str
    contact_id: str
    status: str = TICKET_ACTIVE


class FlightIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)
    start_date_time: datetime
    capacity: conint(ge=0) = 0


class ToolError(BaseModel):
    code: str
    message: str
    details: Optional[dict] = None
