from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo


def parse_instant(value: Any, timezone: ZoneInfo) -> datetime:
    """Parse a stored date/time value into an aware datetime.

    Accepts datetime/date objects and ISO-8601 strings. A value with a
    non-zero offset keeps that offset, since it is the client's own frame.
    Naive values and UTC values ("Z", "+00:00", as produced by browser
    toISOString) are read in `timezone`. Raises ValueError for anything
    else; there is no fallback date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Not a date/time value: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone)
    if parsed.utcoffset() == timedelta(0):
        return parsed.astimezone(timezone)
    return parsed


def merge_date_and_time(date_value: datetime, time_value: datetime) -> datetime:
    """Calendar date of `date_value` at the wall-clock time of `time_value`, in the time's frame."""
    return datetime.combine(
        date_value.date(),
        time_value.timetz().replace(second=0, microsecond=0),
    )


def format_time_slot(time_value: datetime) -> str:
    return time_value.strftime("%H:%M")
