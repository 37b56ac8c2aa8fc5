from __future__ import annotations

from datetime import date, tzinfo
from typing import List, Optional

from shared.logging import get_logger
from trip_schemas.models import FlightRecord

from .collaborators import Notifier
from .feeds import FeedResult
from .models import FlightCandidate, TripSnapshot

logger = get_logger(__name__)


class DataMergeLayer:
    """
    Latest known trip and candidate flights.

    Each source is replaced wholesale by its own successful result and is
    otherwise independent of the other; an error leaves the last good value
    in place.
    """

    def __init__(self, notify: Optional[Notifier] = None, tz: Optional[tzinfo] = None):
        self._notify = notify
        self._tz = tz
        self.trip: Optional[TripSnapshot] = None
        self.candidates: List[FlightCandidate] = []

    @property
    def preferred_date(self) -> Optional[date]:
        return self.trip.preferred_date if self.trip else None

    @property
    def assigned_flight_id(self) -> Optional[str]:
        return self.trip.assigned_flight_id if self.trip else None

    @property
    def contact_id(self) -> Optional[str]:
        return self.trip.contact_id if self.trip else None

    def trip_updated(self, result: FeedResult[TripSnapshot]) -> bool:
        if not result.ok:
            logger.error("trip_load_failed err=%s", result.error_message)
            return False
        self.trip = result.data
        return True

    def flights_updated(self, result: FeedResult[List[FlightRecord]]) -> bool:
        if not result.ok:
            logger.error("flights_load_failed err=%s", result.error_message)
            if self._notify is not None:
                self._notify("Error", f"Error loading flights: {result.error_message}", "error")
            return False
        self.candidates = [FlightCandidate.from_record(f, self._tz) for f in result.data or []]
        return True

    def find_candidate(self, flight_id: str) -> Optional[FlightCandidate]:
        for c in self.candidates:
            if c.id == flight_id:
                return c
        return None
