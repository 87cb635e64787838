"""
Calendar date helpers.

Dates are ISO ``YYYY-MM-DD`` strings and compare lexicographically. Completion
timestamps are UTC ISO-8601 strings with millisecond precision and a ``Z``
suffix, so a whole UTC day is a contiguous string range.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Tuple

Clock = Callable[[], datetime]

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_iso_date(value: str) -> bool:
    """Return True if value is a real calendar date in YYYY-MM-DD form."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def today_and_yesterday(now: datetime) -> Tuple[str, str]:
    """
    Compute the (today, yesterday) date strings for a wall-clock instant.

    Naive datetimes are taken to be UTC; aware ones are converted to UTC first.
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    today = now.date()
    return today.isoformat(), (today - timedelta(days=1)).isoformat()


def format_timestamp(moment: datetime) -> str:
    """
    Format a datetime as a UTC millisecond timestamp, e.g. 2024-01-10T08:15:00.000Z.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def day_bounds(day: str) -> Tuple[str, str]:
    """
    Return the inclusive first and last millisecond timestamps of a UTC day.

    Example:
        >>> day_bounds("2024-01-10")
        ('2024-01-10T00:00:00.000Z', '2024-01-10T23:59:59.999Z')
    """
    if not is_iso_date(day):
        raise ValueError(f"Invalid calendar date: {day!r}")
    return f"{day}T00:00:00.000Z", f"{day}T23:59:59.999Z"
