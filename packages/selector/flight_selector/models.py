from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

from trip_schemas.models import FlightRecord, TripRecord

from .formatting import capacity_label, format_date_time

PLACEHOLDER_NAME = "Selected Flight"
PLACEHOLDER_START = "Loading..."


class TripSnapshot(BaseModel):
    """The trip as last delivered by the record feed."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    preferred_date: Optional[date] = None
    assigned_flight_id: Optional[str] = None
    contact_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: TripRecord) -> "TripSnapshot":
        return cls(
            record_id=record.id,
            preferred_date=record.preferred_trip_start,
            # empty string and None both mean "no flight"
            assigned_flight_id=record.flight_id or None,
            contact_id=record.contact_id or None,
        )


class FlightCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    start: Optional[datetime] = None
    available_tickets: int = 0
    available_tickets_label: str
    start_formatted: str

    @classmethod
    def from_record(cls, record: FlightRecord, tz: Optional[tzinfo] = None) -> "FlightCandidate":
        return cls(
            id=record.id,
            name=record.name,
            start=record.start_date_time,
            available_tickets=record.available_tickets or 0,
            available_tickets_label=capacity_label(record.available_tickets),
            start_formatted=format_date_time(record.start_date_time, tz),
        )


class CurrentFlightView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    start: Optional[datetime] = None
    start_formatted: str
    available_tickets: Optional[int] = None
    available_tickets_label: Optional[str] = None
    is_placeholder: bool = False

    @classmethod
    def matched(cls, candidate: FlightCandidate, tz: Optional[tzinfo] = None) -> "CurrentFlightView":
        return cls(
            id=candidate.id,
            name=candidate.name,
            start=candidate.start,
            start_formatted=format_date_time(candidate.start, tz),
            available_tickets=candidate.available_tickets,
            available_tickets_label=candidate.available_tickets_label,
        )

    @classmethod
    def placeholder(cls, flight_id: str) -> "CurrentFlightView":
        return cls(
            id=flight_id,
            name=PLACEHOLDER_NAME,
            start_formatted=PLACEHOLDER_START,
            is_placeholder=True,
        )


class PageReference(BaseModel):
    type: Literal["standard__recordPage"] = "standard__recordPage"
    attributes: Dict[str, Any]

    @classmethod
    def record_view(cls, record_id: str, object_api_name: str) -> "PageReference":
        return cls(
            attributes={
                "record_id": record_id,
                "object_api_name": object_api_name,
                "action_name": "view",
            }
        )
