from typing import List, Literal, Optional, TypedDict

# assign:  one write of the target flight
# replace: clear, settle, then write the target flight
# clear:   one write clearing the flight
AssignmentAction = Literal["assign", "replace", "clear"]


class AssignmentState(TypedDict):
    """State carried through one run of the assignment graph."""

    action: AssignmentAction
    record_id: str
    target_flight_id: Optional[str]

    # names of the steps that completed, in order
    steps: List[str]

    # set by the first failing node; the graph ends there
    error: Optional[str]
    failed_step: Optional[str]


def initial_state(action: AssignmentAction, record_id: str, target_flight_id: Optional[str] = None) -> AssignmentState:
    return AssignmentState(
        action=action,
        record_id=record_id,
        target_flight_id=target_flight_id,
        steps=[],
        error=None,
        failed_step=None,
    )


def plan_action(current_flight_id: Optional[str], target_flight_id: Optional[str]) -> AssignmentAction:
    if not target_flight_id:
        return "clear"
    if current_flight_id and current_flight_id != target_flight_id:
        return "replace"
    return "assign"
