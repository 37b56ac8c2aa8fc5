from __future__ import annotations
from datetime import date
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from .models import FlightIn, FlightRecord, TicketRecord, TRIP_ID

class RegistryTool(BaseModel):
    name: str
    description: str
    version: str = "v1"
    input_schema: dict
    output_schema: dict
    timeout_ms: int = 5000

class ToolRegistryResponse(BaseModel):
    tools: List[RegistryTool]

# Record fetch / write
class RecordResponse(BaseModel):
    id: str
    fields: Dict[str, Any]

class UpdateRecordRequest(BaseModel):
    fields: Dict[str, Any] = Field(..., description="Partial field map; must include the record id")

    @property
    def record_id(self) -> Optional[str]:
        return self.fields.get(TRIP_ID)

class UpdateRecordResponse(BaseModel):
    id: str
    fields: Dict[str, Any]
    voided_tickets: List[str] = []

# Record creation
class CreateTripRequest(BaseModel):
    name: Optional[str] = None
    preferred_trip_start: Optional[date] = None
    contact_id: Optional[str] = None
    flight_id: Optional[str] = None

class CreateFlightRequest(FlightIn):
    pass

class CreateTicketRequest(BaseModel):
    flight_id: str
    contact_id: str
    name: Optional[str] = None

class CreatedResponse(BaseModel):
    id: str

# List query / ticket lookup
class AvailableFlightsResponse(BaseModel):
    preferred_date: date
    flights: List[FlightRecord]
    count: int

class CurrentTicketResponse(BaseModel):
    ticket: Optional[TicketRecord] = None
