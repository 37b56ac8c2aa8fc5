"""
Nodes of the assignment graph.

Collaborators arrive through the run config:
    config["configurable"]["write_record"]    async (fields) -> None
    config["configurable"]["sleep"]           async (seconds) -> None
    config["configurable"]["settle_seconds"]  float
"""

from typing import Any, Dict

from langchain_core.runnables import RunnableConfig

from shared.logging import get_logger
from trip_schemas.models import TRIP_FLIGHT, TRIP_ID

from .errors import error_message
from .state import AssignmentState

logger = get_logger(__name__)


def _failed(state: AssignmentState, step: str, err: Exception) -> Dict[str, Any]:
    logger.error(
        "assignment_step_failed step=%s action=%s record=%s err=%s",
        step,
        state["action"],
        state["record_id"],
        error_message(err),
    )
    return {"error": error_message(err), "failed_step": step}


async def clear_assignment(state: AssignmentState, config: RunnableConfig) -> Dict[str, Any]:
    """Writes the trip's flight field to empty."""
    write_record = config["configurable"]["write_record"]
    try:
        await write_record({TRIP_ID: state["record_id"], TRIP_FLIGHT: None})
    except Exception as e:
        return _failed(state, "clear", e)
    return {"steps": state["steps"] + ["clear"]}


async def settle(state: AssignmentState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Waits for the host's reactions to the clear (ticket voiding) before the new
    flight is written.
    """
    sleep = config["configurable"]["sleep"]
    seconds = config["configurable"]["settle_seconds"]
    await sleep(seconds)
    return {"steps": state["steps"] + ["settle"]}


async def write_assignment(state: AssignmentState, config: RunnableConfig) -> Dict[str, Any]:
    write_record = config["configurable"]["write_record"]
    try:
        await write_record({TRIP_ID: state["record_id"], TRIP_FLIGHT: state["target_flight_id"]})
    except Exception as e:
        return _failed(state, "assign", e)
    return {"steps": state["steps"] + ["assign"]}
