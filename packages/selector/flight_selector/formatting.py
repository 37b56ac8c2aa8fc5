"""
Display formatting for trip dates and flight schedules.

Output follows the en-US conventions used across the UI:
long dates ("October 16, 2026") and short date-times ("Oct 16, 2026, 09:30 AM").
"""
from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Union

DateLike = Union[date, str, None]
DateTimeLike = Union[datetime, str, None]


def parse_date(value: DateLike) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def parse_datetime(value: DateTimeLike) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_long_date(value: DateLike) -> str:
    # Calendar dates are formatted as-is; they carry no time zone to shift.
    d = parse_date(value)
    if d is None:
        return ""
    return f"{d:%B} {d.day}, {d.year}"


def format_date_time(value: DateTimeLike, tz: Optional[tzinfo] = None) -> str:
    dt = parse_datetime(value)
    if dt is None:
        return ""
    dt = dt.astimezone(tz or timezone.utc)
    return f"{dt:%b} {dt.day}, {dt.year}, {dt:%I:%M %p}"


def capacity_label(available: Optional[int]) -> str:
    return f"{available or 0} available"
