"""Shared parsing helpers for calendar days and HH:MM times of day."""

import re
from datetime import date, datetime
from typing import Union

from shootbook.errors import InvalidInterval

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

DateLike = Union[date, datetime, str]


def parse_time_of_day(value: str) -> int:
    """Convert an ``HH:MM`` 24-hour string to minutes since midnight.

    ``24:00`` is accepted as the end-of-day boundary.

    Examples:
        >>> parse_time_of_day("09:30")
        570
        >>> parse_time_of_day("24:00")
        1440
    """
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidInterval(f"Invalid time of day: {value!r}. Expected HH:MM.")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60 or hours > 24 or (hours == 24 and minutes != 0):
        raise InvalidInterval(f"Invalid time of day: {value!r}. Expected HH:MM.")
    return hours * 60 + minutes


def format_time_of_day(minutes: int) -> str:
    """Convert minutes since midnight back to ``HH:MM``."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise InvalidInterval(f"Minutes out of range for a day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_date(value: DateLike) -> date:
    """Reduce a date, datetime or ``YYYY-MM-DD`` string to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    except (ValueError, AttributeError):
        raise InvalidInterval(f"Invalid date: {value!r}. Expected YYYY-MM-DD.") from None
