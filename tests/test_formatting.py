from datetime import date, datetime, timedelta, timezone

from flight_selector.formatting import capacity_label, format_date_time, format_long_date, parse_datetime


def test_format_long_date_uses_full_month_name():
    assert format_long_date(date(2026, 10, 16)) == "October 16, 2026"
    assert format_long_date("2026-03-01") == "March 1, 2026"


def test_format_long_date_is_empty_when_unset():
    assert format_long_date(None) == ""
    assert format_long_date("") == ""


def test_format_date_time_short_month_and_two_digit_clock():
    assert format_date_time("2026-10-16T09:30:00Z") == "Oct 16, 2026, 09:30 AM"
    assert format_date_time("2026-10-16T15:05:00+00:00") == "Oct 16, 2026, 03:05 PM"


def test_format_date_time_converts_to_display_zone():
    eastern = timezone(timedelta(hours=-4))
    assert format_date_time("2026-10-16T09:30:00Z", eastern) == "Oct 16, 2026, 05:30 AM"


def test_format_date_time_treats_naive_values_as_utc():
    assert parse_datetime("2026-10-16T09:30:00").tzinfo == timezone.utc
    assert format_date_time(datetime(2026, 10, 16, 0, 5)) == "Oct 16, 2026, 12:05 AM"


def test_format_date_time_is_empty_when_unset():
    assert format_date_time(None) == ""


def test_capacity_label_defaults_missing_counts_to_zero():
    assert capacity_label(5) == "5 available"
    assert capacity_label(0) == "0 available"
    assert capacity_label(None) == "0 available"
