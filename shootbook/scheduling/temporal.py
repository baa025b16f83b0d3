"""
Temporal primitives: weekday resolution, interval overlap, and the
``TimeInterval`` value the rest of the scheduling core compares with.

All times are naive local time-of-day in minutes since midnight. No
timezone conversion happens anywhere in the core.
"""

from dataclasses import dataclass

from shootbook.errors import InvalidInterval
from shootbook.schemas.availability_schema import TimeSlot
from shootbook.schemas.booking_schema import EventDetails
from shootbook.schemas.provider_schema import Weekday
from shootbook.utils import (
    MINUTES_PER_DAY,
    DateLike,
    format_time_of_day,
    normalize_date,
    parse_time_of_day,
)

_WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)


def day_of_week(value: DateLike) -> Weekday:
    """Resolve the calendar weekday of a date."""
    return _WEEKDAYS[normalize_date(value).weekday()]


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open overlap test. Touching endpoints do not overlap."""
    return start_a < end_b and start_b < end_a


def hours_to_minutes(duration_hours: float) -> int:
    """Convert a positive duration in hours to whole minutes."""
    if duration_hours is None or duration_hours <= 0:
        raise InvalidInterval(f"Duration must be positive, got {duration_hours!r}")
    minutes = round(duration_hours * 60)
    if minutes <= 0 or minutes > MINUTES_PER_DAY:
        raise InvalidInterval(f"Duration out of range for a day: {duration_hours!r} hours")
    return minutes


@dataclass(frozen=True)
class TimeInterval:
    """Non-empty ``[start, end)`` window within one day."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end <= MINUTES_PER_DAY:
            raise InvalidInterval(
                f"Invalid interval {self.start}-{self.end}: end must be after start "
                "and both within the day"
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeInterval":
        start_min = parse_time_of_day(start)
        end_min = parse_time_of_day(end)
        if end_min <= start_min:
            raise InvalidInterval(f"Invalid interval {start}-{end}: end must be after start")
        return cls(start_min, end_min)

    @classmethod
    def for_event(cls, details: EventDetails) -> "TimeInterval":
        return cls.from_strings(details.start_time, details.end_time)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    @property
    def start_time(self) -> str:
        return format_time_of_day(self.start)

    @property
    def end_time(self) -> str:
        return format_time_of_day(self.end)

    def overlaps(self, other: "TimeInterval") -> bool:
        return intervals_overlap(self.start, self.end, other.start, other.end)

    def contains(self, other: "TimeInterval") -> bool:
        return self.start <= other.start and other.end <= self.end

    def to_slot(self) -> TimeSlot:
        return TimeSlot(self.start, self.end)

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"
