"""Flight assignment for trip records: feed reconciliation, derived views and the assignment workflow."""

from .config import SelectorConfig
from .errors import RecordToolError, SelectorError
from .feeds import Feed, FeedResult
from .models import CurrentFlightView, FlightCandidate, PageReference, TripSnapshot
from .notifications import Toast, ToastQueue
from .selector import AssignmentResult, FlightSelector
from .view import SelectorView

__all__ = [
    "AssignmentResult",
    "CurrentFlightView",
    "Feed",
    "FeedResult",
    "FlightCandidate",
    "FlightSelector",
    "PageReference",
    "RecordToolError",
    "SelectorConfig",
    "SelectorError",
    "SelectorView",
    "Toast",
    "ToastQueue",
    "TripSnapshot",
]
