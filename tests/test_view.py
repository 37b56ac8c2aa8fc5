from datetime import date

from fakes import flight

from flight_selector.labels import Labels
from flight_selector.models import FlightCandidate
from flight_selector.view import flights_grid_class, grid_density, has_available_flights, show_flights


def _candidates(n):
    return [FlightCandidate.from_record(flight(f"F{i}")) for i in range(n)]


def test_three_or_fewer_flights_are_compact():
    assert grid_density(_candidates(0)) == "compact"
    assert grid_density(_candidates(3)) == "compact"
    assert flights_grid_class(_candidates(3)) == "flights-grid"


def test_four_or_more_flights_scroll():
    assert grid_density(_candidates(4)) == "scrollable"
    assert flights_grid_class(_candidates(7)) == "flights-grid scrollable"


def test_threshold_is_configurable():
    assert grid_density(_candidates(3), threshold=2) == "scrollable"


def test_has_available_flights():
    assert has_available_flights(_candidates(1)) is True
    assert has_available_flights([]) is False
    assert has_available_flights(None) is False


def test_show_flights_requires_record_date_and_idle():
    day = date(2026, 10, 16)
    assert show_flights("trip-1", day, False) is True
    assert show_flights(None, day, False) is False
    assert show_flights("trip-1", None, False) is False
    assert show_flights("trip-1", day, True) is False


def test_labels_fill_placeholders():
    rendered = Labels().render("October 16, 2026")

    assert rendered["set_date_message"] == "Set the Preferred Trip Start field on this trip to see available flights."
    assert rendered["no_flights_message"] == "There are no flights scheduled for October 16, 2026."
    assert "preferred_trip_start" not in rendered


def test_labels_can_be_overridden():
    rendered = Labels(title="Choose your flight", no_flights_message="Nothing on {0}").render("")
    assert rendered["title"] == "Choose your flight"
    assert rendered["no_flights_message"] == "Nothing on "
