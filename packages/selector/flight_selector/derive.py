from __future__ import annotations

import asyncio
from datetime import tzinfo
from typing import Optional, Sequence, Set, Tuple

from shared.logging import get_logger
from trip_schemas.models import TicketRecord

from .collaborators import TicketLookup
from .errors import error_message
from .models import CurrentFlightView, FlightCandidate

logger = get_logger(__name__)

TicketKey = Tuple[str, str]


def derive_current_flight(
    assigned_flight_id: Optional[str],
    candidates: Sequence[FlightCandidate],
    tz: Optional[tzinfo] = None,
) -> Optional[CurrentFlightView]:
    """
    The assigned flight as it should be shown.

    None when nothing is assigned, the matching candidate when the flight list
    contains it, otherwise a placeholder carrying only the id.
    """
    if not assigned_flight_id:
        return None
    for candidate in candidates:
        if candidate.id == assigned_flight_id:
            return CurrentFlightView.matched(candidate, tz)
    return CurrentFlightView.placeholder(assigned_flight_id)


class TicketResolver:
    """
    Holds the ticket for the current (flight, contact) pair.

    Lookups run as background tasks. Each carries its pair and a sequence
    number; only the most recently issued lookup may write `ticket`.
    """

    def __init__(self, lookup: TicketLookup):
        self._lookup = lookup
        self._key: Optional[TicketKey] = None
        self._seq = 0
        self._pending: Set[asyncio.Task] = set()
        self.ticket: Optional[TicketRecord] = None

    @property
    def key(self) -> Optional[TicketKey]:
        return self._key

    @property
    def pending(self) -> bool:
        return bool(self._pending)

    def resolve(self, flight_id: Optional[str], contact_id: Optional[str]) -> Optional[asyncio.Task]:
        key = (flight_id, contact_id) if flight_id and contact_id else None
        self._seq += 1

        if key != self._key:
            self.ticket = None
        self._key = key

        if key is None:
            return None

        task = asyncio.get_running_loop().create_task(self._run(key, self._seq))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run(self, key: TicketKey, seq: int) -> None:
        flight_id, contact_id = key
        try:
            ticket = await self._lookup.get_current_ticket(flight_id, contact_id)
        except Exception as e:
            logger.warning("ticket_lookup_failed flight=%s contact=%s err=%s", flight_id, contact_id, error_message(e))
            ticket = None

        if key != self._key or seq != self._seq:
            logger.debug("ticket_lookup_stale flight=%s contact=%s", flight_id, contact_id)
            return
        self.ticket = ticket

    async def drain(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending))
