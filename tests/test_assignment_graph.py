import pytest

from fakes import TRIP_ID, FakeRecordService, RecordingSleep, make_service, write_error

from flight_selector.graph import assignment_graph
from flight_selector.state import initial_state, plan_action


def _config(service: FakeRecordService, settle_seconds: float = 0.5) -> dict:
    return {
        "configurable": {
            "write_record": service.update_record,
            "sleep": RecordingSleep(service),
            "settle_seconds": settle_seconds,
        }
    }


def test_plan_action():
    assert plan_action(None, "F1") == "assign"
    assert plan_action("F1", "F1") == "assign"
    assert plan_action("F1", "F2") == "replace"
    assert plan_action("F1", None) == "clear"
    assert plan_action(None, None) == "clear"


@pytest.mark.asyncio
async def test_replace_clears_settles_then_assigns():
    service = make_service(assigned="F1")

    final = await assignment_graph.ainvoke(initial_state("replace", TRIP_ID, "F2"), config=_config(service))

    assert final["error"] is None
    assert final["steps"] == ["clear", "settle", "assign"]
    assert service.calls == [
        ("write", {"id": TRIP_ID, "flight_id": None}),
        ("sleep", 0.5),
        ("write", {"id": TRIP_ID, "flight_id": "F2"}),
    ]


@pytest.mark.asyncio
async def test_failed_clear_stops_before_settle_and_assign():
    service = make_service(assigned="F1")
    service.write_errors = [write_error("record locked")]

    final = await assignment_graph.ainvoke(initial_state("replace", TRIP_ID, "F2"), config=_config(service))

    assert final["error"] == "record locked"
    assert final["failed_step"] == "clear"
    assert final["steps"] == []
    assert service.calls == [("write", {"id": TRIP_ID, "flight_id": None})]


@pytest.mark.asyncio
async def test_failed_assign_after_clear_is_reported():
    service = make_service(assigned="F1")
    service.write_errors = [None, write_error("flight full")]

    final = await assignment_graph.ainvoke(initial_state("replace", TRIP_ID, "F2"), config=_config(service))

    assert final["error"] == "flight full"
    assert final["failed_step"] == "assign"
    assert final["steps"] == ["clear", "settle"]


@pytest.mark.asyncio
async def test_assign_is_a_single_write():
    service = make_service()

    final = await assignment_graph.ainvoke(initial_state("assign", TRIP_ID, "F1"), config=_config(service))

    assert final["steps"] == ["assign"]
    assert service.calls == [("write", {"id": TRIP_ID, "flight_id": "F1"})]


@pytest.mark.asyncio
async def test_clear_is_a_single_write_without_settling():
    service = make_service(assigned="F1")

    final = await assignment_graph.ainvoke(initial_state("clear", TRIP_ID), config=_config(service))

    assert final["steps"] == ["clear"]
    assert service.calls == [("write", {"id": TRIP_ID, "flight_id": None})]
