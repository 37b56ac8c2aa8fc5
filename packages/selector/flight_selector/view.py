from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel

from trip_schemas.models import TicketRecord

from .formatting import format_long_date
from .models import CurrentFlightView, FlightCandidate

if TYPE_CHECKING:
    from .selector import FlightSelector

GridDensity = Literal["compact", "scrollable"]

GRID_CLASS = "flights-grid"


def grid_density(candidates: Optional[Sequence[FlightCandidate]], threshold: int = 3) -> GridDensity:
    return "scrollable" if candidates and len(candidates) > threshold else "compact"


def flights_grid_class(candidates: Optional[Sequence[FlightCandidate]], threshold: int = 3) -> str:
    if grid_density(candidates, threshold) == "scrollable":
        return f"{GRID_CLASS} scrollable"
    return GRID_CLASS


def has_available_flights(candidates: Optional[Sequence[FlightCandidate]]) -> bool:
    return bool(candidates)


def show_flights(record_id: Optional[str], preferred_date: Optional[date], is_loading: bool) -> bool:
    return bool(record_id) and preferred_date is not None and not is_loading


class SelectorView(BaseModel):
    """Everything the flight selector UI renders, recomputed on every read."""

    record_id: Optional[str] = None
    preferred_date: Optional[date] = None
    preferred_date_formatted: str = ""
    is_loading: bool = False
    show_flights: bool = False
    grid_density: GridDensity = "compact"
    flights_grid_class: str = GRID_CLASS
    has_available_flights: bool = False
    available_flights: List[FlightCandidate] = []
    current_flight: Optional[CurrentFlightView] = None
    current_ticket: Optional[TicketRecord] = None
    labels: Dict[str, str] = {}


def build_view(selector: "FlightSelector") -> SelectorView:
    candidates = selector.available_flights
    threshold = selector.config.scroll_threshold
    formatted = format_long_date(selector.preferred_date)
    return SelectorView(
        record_id=selector.record_id,
        preferred_date=selector.preferred_date,
        preferred_date_formatted=formatted,
        is_loading=selector.is_loading,
        show_flights=show_flights(selector.record_id, selector.preferred_date, selector.is_loading),
        grid_density=grid_density(candidates, threshold),
        flights_grid_class=flights_grid_class(candidates, threshold),
        has_available_flights=has_available_flights(candidates),
        available_flights=list(candidates),
        current_flight=selector.current_flight,
        current_ticket=selector.current_ticket,
        labels=selector.labels.render(formatted),
    )
