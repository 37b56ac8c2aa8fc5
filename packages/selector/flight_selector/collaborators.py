"""
Contracts for the services the selector talks to.

The record tool client in the selector API implements the four data
protocols; tests supply in-memory fakes.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from trip_schemas.models import FlightRecord, TicketRecord

from .models import PageReference, TripSnapshot


class TripSource(Protocol):
    async def get_trip(self, record_id: str) -> TripSnapshot: ...


class FlightSource(Protocol):
    async def list_flights(self, preferred_date: date) -> List[FlightRecord]: ...


class TicketLookup(Protocol):
    async def get_current_ticket(self, flight_id: str, contact_id: str) -> Optional[TicketRecord]: ...


class RecordWriter(Protocol):
    async def update_record(self, fields: Dict[str, Any]) -> None: ...


class RecordService(TripSource, FlightSource, TicketLookup, RecordWriter, Protocol):
    pass


class Notifier(Protocol):
    def __call__(self, title: str, message: str, variant: str) -> None: ...


class Navigator(Protocol):
    def __call__(self, page: PageReference) -> None: ...
