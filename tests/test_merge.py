from fakes import CONTACT_ID, DAY, TRIP_ID, flight

from flight_selector.feeds import FeedResult
from flight_selector.merge import DataMergeLayer
from flight_selector.models import TripSnapshot
from flight_selector.notifications import ToastQueue


def _trip(assigned=None, preferred=DAY):
    return TripSnapshot(record_id=TRIP_ID, preferred_date=preferred, assigned_flight_id=assigned, contact_id=CONTACT_ID)


def test_trip_update_replaces_snapshot_and_exposes_fields():
    merge = DataMergeLayer()

    assert merge.trip_updated(FeedResult(data=_trip("F1"))) is True
    assert merge.preferred_date == DAY
    assert merge.assigned_flight_id == "F1"
    assert merge.contact_id == CONTACT_ID


def test_trip_error_keeps_last_good_snapshot():
    merge = DataMergeLayer()
    merge.trip_updated(FeedResult(data=_trip("F1")))

    assert merge.trip_updated(FeedResult(error=RuntimeError("timeout"))) is False
    assert merge.assigned_flight_id == "F1"


def test_fields_are_empty_before_trip_loads():
    merge = DataMergeLayer()
    assert merge.preferred_date is None
    assert merge.assigned_flight_id is None
    assert merge.contact_id is None


def test_flights_update_maps_candidates_with_display_fields():
    merge = DataMergeLayer()

    merge.flights_updated(FeedResult(data=[flight("F1", hour=9, available=3), flight("F2", available=None)]))

    first, second = merge.candidates
    assert first.id == "F1"
    assert first.start_formatted == "Oct 16, 2026, 09:30 AM"
    assert first.available_tickets_label == "3 available"
    assert second.available_tickets == 0
    assert second.available_tickets_label == "0 available"
    assert merge.find_candidate("F2") is second
    assert merge.find_candidate("nope") is None


def test_flights_error_notifies_and_keeps_candidates():
    toasts = ToastQueue()
    merge = DataMergeLayer(notify=toasts)
    merge.flights_updated(FeedResult(data=[flight("F1")]))

    merge.flights_updated(FeedResult(error=RuntimeError("query failed")))

    assert [c.id for c in merge.candidates] == ["F1"]
    (toast,) = toasts.drain()
    assert toast.variant == "error"
    assert toast.message == "Error loading flights: query failed"


def test_trip_errors_are_not_toasted():
    toasts = ToastQueue()
    merge = DataMergeLayer(notify=toasts)

    merge.trip_updated(FeedResult(error=RuntimeError("gone")))

    assert len(toasts) == 0
