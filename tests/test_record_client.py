from datetime import date

import httpx
import pytest

from flight_selector import FlightSelector, RecordToolError, SelectorConfig, ToastQueue
from record_tool.main import app as record_app
from selector_api.record_client import RecordToolClient


def _mock_client(handler) -> RecordToolClient:
    return RecordToolClient("http://records", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_trip_requests_trip_fields_and_builds_snapshot():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["fields"] = request.url.params.get_list("fields")
        return httpx.Response(
            200,
            json={"id": "T1", "fields": {"preferred_trip_start": "2026-10-16", "flight_id": "", "contact_id": "C1"}},
        )

    trip = await _mock_client(handler).get_trip("T1")

    assert seen == {"path": "/records/trips/T1", "fields": ["preferred_trip_start", "flight_id", "contact_id"]}
    assert trip.preferred_date == date(2026, 10, 16)
    assert trip.assigned_flight_id is None
    assert trip.contact_id == "C1"


@pytest.mark.asyncio
async def test_error_detail_message_is_raised():
    def handler(request):
        return httpx.Response(400, json={"detail": {"code": "invalid_reference", "message": "Flight X does not exist."}})

    with pytest.raises(RecordToolError) as exc:
        await _mock_client(handler).update_record({"id": "T1", "flight_id": "X"})

    assert exc.value.message == "Flight X does not exist."
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_plain_and_validation_details_become_messages():
    def plain(request):
        return httpx.Response(403, json={"detail": "Not allowed"})

    def validation(request):
        return httpx.Response(422, json={"detail": [{"msg": "field required"}, {"msg": "bad date"}]})

    with pytest.raises(RecordToolError, match="Not allowed"):
        await _mock_client(plain).get_current_ticket("F1", "C1")
    with pytest.raises(RecordToolError, match="field required; bad date"):
        await _mock_client(validation).list_flights(date(2026, 10, 16))


@pytest.mark.asyncio
async def test_transport_failure_is_a_record_tool_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RecordToolError) as exc:
        await _mock_client(handler).get_trip("T1")

    assert exc.value.code == "unavailable"


async def _post(client: httpx.AsyncClient, path: str, payload: dict) -> str:
    resp = await client.post(path, json=payload)
    resp.raise_for_status()
    return resp.json()["id"]


@pytest.mark.asyncio
async def test_selector_against_record_tool_replaces_flight_and_drops_ticket(record_db_path):
    transport = httpx.ASGITransport(app=record_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://records") as seed:
        f1 = await _post(seed, "/records/flights", {"name": "LIS 101", "start_date_time": "2026-10-16T07:00:00Z", "capacity": 3})
        f2 = await _post(seed, "/records/flights", {"name": "LIS 205", "start_date_time": "2026-10-16T18:45:00Z", "capacity": 3})
        trip_id = await _post(seed, "/records/trips", {"preferred_trip_start": "2026-10-16", "contact_id": "C1", "flight_id": f1})
        ticket_id = await _post(seed, "/records/tickets", {"flight_id": f1, "contact_id": "C1", "name": "TKT-1"})

    selector = FlightSelector(
        trip_id,
        RecordToolClient("http://records", transport=transport),
        notify=ToastQueue(),
        config=SelectorConfig(settle_seconds=0.0),
    )
    await selector.start()
    await selector.wait_idle()

    assert selector.current_flight.id == f1
    assert selector.current_flight.start_formatted == "Oct 16, 2026, 07:00 AM"
    assert selector.current_ticket.id == ticket_id
    assert [f.available_tickets for f in selector.available_flights] == [2, 3]

    result = await selector.select_flight(f2)
    await selector.wait_idle()

    assert result.ok is True
    assert selector.current_flight.id == f2
    assert selector.current_ticket is None
    assert [f.available_tickets for f in selector.available_flights] == [3, 3]

    failed = await selector.select_flight("no-such-flight")

    assert failed.ok is False
    assert selector.notify.drain()[-1].message == "Error assigning flight: Flight no-such-flight does not exist."
    assert selector.is_loading is False
