"""
Flight selection for a single trip record.

The selector keeps two feeds (the trip record, and the flights on the trip's
preferred date) merged into one view, and runs the assignment graph when the
user picks or clears a flight. Every write is followed by a forced refresh of
both feeds; the views are only ever rebuilt from feed data, never patched
locally.

Only one assignment may run at a time. While one is running, or while the
flight list is loading, `select_flight` and `clear_flight` are rejected and
report `accepted=False`.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Set, Tuple

from shared.logging import get_logger
from trip_schemas.models import TicketRecord

from .collaborators import Navigator, Notifier, RecordService
from .config import SelectorConfig
from .derive import TicketResolver, derive_current_flight
from .errors import error_message
from .feeds import Feed, FeedResult
from .graph import assignment_graph
from .labels import DEFAULT_LABELS, Labels
from .merge import DataMergeLayer
from .models import CurrentFlightView, FlightCandidate, PageReference, TripSnapshot
from .notifications import ToastQueue
from .state import AssignmentAction, initial_state, plan_action
from .view import SelectorView, build_view

logger = get_logger(__name__)

TICKET_OBJECT = "Ticket"

ASSIGNED_OK = "Flight assigned successfully!"
ASSIGN_FAILED = "Error assigning flight"
CLEARED_OK = "Flight cleared successfully!"
CLEAR_FAILED = "Error clearing flight"


@dataclass(frozen=True)
class AssignmentResult:
    accepted: bool
    action: Optional[AssignmentAction] = None
    ok: bool = False
    steps: Tuple[str, ...] = ()
    error: Optional[str] = None


class FlightSelector:
    def __init__(
        self,
        record_id: Optional[str],
        service: RecordService,
        notify: Optional[Notifier] = None,
        navigate: Optional[Navigator] = None,
        config: Optional[SelectorConfig] = None,
        labels: Optional[Labels] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        graph=None,
    ):
        self.record_id = record_id
        self.config = config if config is not None else SelectorConfig()
        self.labels = labels if labels is not None else DEFAULT_LABELS
        self.notify = notify if notify is not None else ToastQueue(self.config.toast_limit)
        self._navigate = navigate
        self._service = service
        self._sleep = sleep
        self._graph = graph if graph is not None else assignment_graph
        self._tz = self.config.tz()

        self._merge = DataMergeLayer(self.notify, self._tz)
        self._tickets = TicketResolver(service)
        self.current_flight: Optional[CurrentFlightView] = None

        self._mutating = False
        self._flight_loads = 0
        self._tasks: Set[asyncio.Task] = set()

        self.trip_feed: Feed[str, TripSnapshot] = Feed("trip", service.get_trip, record_id)
        self.flights_feed: Feed[date, list] = Feed("flights", service.list_flights)
        self.trip_feed.subscribe(self.trip_updated)
        self.flights_feed.subscribe(self.flights_updated)

    # -- derived state --------------------------------------------------

    @property
    def preferred_date(self) -> Optional[date]:
        return self._merge.preferred_date

    @property
    def assigned_flight_id(self) -> Optional[str]:
        return self._merge.assigned_flight_id

    @property
    def contact_id(self) -> Optional[str]:
        return self._merge.contact_id

    @property
    def available_flights(self) -> List[FlightCandidate]:
        return self._merge.candidates

    @property
    def current_ticket(self) -> Optional[TicketRecord]:
        return self._tickets.ticket

    @property
    def is_loading(self) -> bool:
        return self._mutating or self._flight_loads > 0

    def view(self) -> SelectorView:
        return build_view(self)

    # -- feed handling --------------------------------------------------

    async def start(self) -> None:
        """Loads the trip; the flight list follows once the preferred date is known."""
        await self.trip_feed.refresh()

    def trip_updated(self, result: FeedResult[TripSnapshot]) -> None:
        if not self._merge.trip_updated(result):
            return
        preferred = self._merge.preferred_date
        if self.flights_feed.set_params(preferred) and preferred is not None:
            self._track(self._start_flight_load())
        self._recompute()

    def flights_updated(self, result: FeedResult[list]) -> None:
        if self._merge.flights_updated(result):
            self._recompute()

    def recompute_current_flight(self) -> Optional[CurrentFlightView]:
        self.current_flight = derive_current_flight(self._merge.assigned_flight_id, self._merge.candidates, self._tz)
        return self.current_flight

    def recompute_current_ticket(self) -> Optional[asyncio.Task]:
        return self._tickets.resolve(self._merge.assigned_flight_id, self._merge.contact_id)

    def _recompute(self) -> None:
        self.recompute_current_flight()
        self.recompute_current_ticket()

    def _start_flight_load(self) -> asyncio.Task:
        # counted before the task runs so is_loading flips in the same tick
        self._flight_loads += 1
        return asyncio.get_running_loop().create_task(self._load_flights())

    async def _load_flights(self) -> None:
        try:
            await self.flights_feed.refresh()
        finally:
            self._flight_loads -= 1

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def refresh(self) -> None:
        """Forces both feeds to fetch again; completion order is not assumed."""
        await asyncio.gather(self.trip_feed.refresh(), self._start_flight_load())

    async def wait_idle(self) -> None:
        """Waits for background flight loads and ticket lookups to settle."""
        while self._tasks or self._tickets.pending:
            if self._tasks:
                await asyncio.gather(*list(self._tasks))
            await self._tickets.drain()

    def close(self) -> None:
        self.trip_feed.close()
        self.flights_feed.close()

    # -- actions --------------------------------------------------------

    async def select_flight(self, flight_id: str) -> AssignmentResult:
        if not flight_id:
            logger.warning("select_flight_rejected record=%s reason=missing_flight_id", self.record_id)
            return AssignmentResult(accepted=False, error="A flight id is required.")
        return await self._run_assignment(flight_id, ASSIGNED_OK, ASSIGN_FAILED)

    async def clear_flight(self) -> AssignmentResult:
        return await self._run_assignment(None, CLEARED_OK, CLEAR_FAILED)

    def navigate_to_ticket(self) -> Optional[PageReference]:
        ticket = self.current_ticket
        if ticket is None or not ticket.id:
            return None
        page = PageReference.record_view(ticket.id, TICKET_OBJECT)
        if self._navigate is not None:
            self._navigate(page)
        return page

    @asynccontextmanager
    async def _workflow_slot(self, action: str) -> AsyncIterator[bool]:
        if not self.record_id or self.is_loading:
            logger.warning(
                "mutation_rejected action=%s record=%s mutating=%s flight_loads=%s",
                action,
                self.record_id,
                self._mutating,
                self._flight_loads,
            )
            yield False
            return

        self._mutating = True
        logger.info("mutation_started action=%s record=%s", action, self.record_id)
        try:
            yield True
        finally:
            self._mutating = False
            logger.info("mutation_finished action=%s record=%s", action, self.record_id)

    async def _run_assignment(self, target_flight_id: Optional[str], success: str, failure: str) -> AssignmentResult:
        async with self._workflow_slot("select" if target_flight_id else "clear") as acquired:
            if not acquired:
                return AssignmentResult(accepted=False, error="Another flight change is in progress.")

            action = plan_action(self._merge.assigned_flight_id, target_flight_id)
            state = initial_state(action, self.record_id, target_flight_id)
            config = {
                "configurable": {
                    "write_record": self._service.update_record,
                    "sleep": self._sleep,
                    "settle_seconds": self.config.settle_seconds,
                }
            }
            try:
                final = await self._graph.ainvoke(state, config=config)
            except Exception as e:
                logger.exception("assignment_graph_failed action=%s record=%s", action, self.record_id)
                final = {**state, "error": error_message(e), "failed_step": "graph"}

            steps = tuple(final.get("steps") or ())
            if final.get("error"):
                self.notify("Error", f"{failure}: {final['error']}", "error")
                return AssignmentResult(accepted=True, action=action, ok=False, steps=steps, error=final["error"])

            self.notify("Success", success, "success")
            await self.refresh()
            return AssignmentResult(accepted=True, action=action, ok=True, steps=steps)
