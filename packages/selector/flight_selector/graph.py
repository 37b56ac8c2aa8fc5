from __future__ import annotations

from langgraph.graph import END, StateGraph

from .nodes import clear_assignment, settle, write_assignment
from .state import AssignmentState


def route_action(state: AssignmentState) -> str:
    return "assign" if state["action"] == "assign" else "clear"


def after_clear(state: AssignmentState) -> str:
    if state.get("error"):
        return "end"
    return "settle" if state["action"] == "replace" else "end"


def build_assignment_graph():
    workflow = StateGraph(AssignmentState)

    workflow.add_node("clear_assignment", clear_assignment)
    workflow.add_node("settle", settle)
    workflow.add_node("write_assignment", write_assignment)

    workflow.set_conditional_entry_point(
        route_action,
        {"assign": "write_assignment", "clear": "clear_assignment"},
    )

    # replace runs clear -> settle -> write; a failed clear stops here
    workflow.add_conditional_edges(
        "clear_assignment",
        after_clear,
        {"settle": "settle", "end": END},
    )
    workflow.add_edge("settle", "write_assignment")
    workflow.add_edge("write_assignment", END)

    return workflow.compile()


assignment_graph = build_assignment_graph()
