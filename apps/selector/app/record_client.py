from __future__ import annotations

import time
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from flight_selector.errors import RecordToolError
from flight_selector.models import TripSnapshot
from shared.logging import get_logger
from trip_schemas.models import TRIP_FIELDS, FlightRecord, TicketRecord, TripRecord
from trip_schemas.tool_schemas import AvailableFlightsResponse, CurrentTicketResponse, RecordResponse

logger = get_logger(__name__)


def _server_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict) and detail.get("message"):
        return detail["message"]
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        # FastAPI validation errors
        return "; ".join(str(d.get("msg", d)) for d in detail)
    return resp.reason_phrase


class RecordToolClient:
    """
    Record tool access for a flight selector.

    Implements the trip fetch, flight list, ticket lookup and record write
    collaborators. Failures surface as RecordToolError carrying the server's
    message; nothing is retried here.
    """

    def __init__(self, base_url: str, timeout_s: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    async def _call(
        self,
        tool_name: str,
        method: str,
        path: str,
        params: Optional[Any] = None,
        payload: Optional[dict] = None,
    ) -> dict:
        started = time.time()
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_s, transport=self._transport) as client:
                resp = await client.request(method, path, params=params, json=payload)
        except httpx.HTTPError as e:
            elapsed_ms = int((time.time() - started) * 1000)
            logger.warning("tool_call_failed tool=%s latency_ms=%s err=%r", tool_name, elapsed_ms, e)
            raise RecordToolError(f"Record tool unavailable ({e.__class__.__name__})", code="unavailable") from e

        elapsed_ms = int((time.time() - started) * 1000)
        if resp.is_error:
            message = _server_message(resp)
            logger.warning(
                "tool_call_failed tool=%s status=%s latency_ms=%s err=%s",
                tool_name,
                resp.status_code,
                elapsed_ms,
                message,
            )
            raise RecordToolError(message, status_code=resp.status_code)

        logger.debug("tool_call tool=%s status=%s latency_ms=%s", tool_name, resp.status_code, elapsed_ms)
        return resp.json()

    async def get_trip(self, record_id: str) -> TripSnapshot:
        data = await self._call(
            "record_tool.get_record",
            "GET",
            f"/records/trips/{record_id}",
            params=[("fields", f) for f in TRIP_FIELDS],
        )
        record = RecordResponse.model_validate(data)
        return TripSnapshot.from_record(TripRecord(id=record.id, **record.fields))

    async def list_flights(self, preferred_date: date) -> List[FlightRecord]:
        data = await self._call(
            "record_tool.available_flights",
            "GET",
            "/tools/available_flights",
            params={"preferred_date": preferred_date.isoformat()},
        )
        return AvailableFlightsResponse.model_validate(data).flights

    async def get_current_ticket(self, flight_id: str, contact_id: str) -> Optional[TicketRecord]:
        data = await self._call(
            "record_tool.current_ticket",
            "GET",
            "/tools/current_ticket",
            params={"flight_id": flight_id, "contact_id": contact_id},
        )
        return CurrentTicketResponse.model_validate(data).ticket

    async def update_record(self, fields: Dict[str, Any]) -> None:
        await self._call("record_tool.update_record", "POST", "/records/update", payload={"fields": fields})
