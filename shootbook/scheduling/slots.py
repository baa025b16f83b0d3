"""
Slot generator: candidate booking windows inside a day's working hours.

Candidates start at every step boundary (one hour by default), not packed
back to back, so a client can pick any hour as a start time. A slot is
offered only if it ends within working hours, does not overlap an
existing confirmed or in-progress booking, and passes the optional
capacity check.

The generator only proposes windows. Two clients can still pick the same
slot; the assignment guard settles that at confirmation time.
"""

import logging
from typing import Callable, Iterator, Optional, Sequence

from shootbook.config import settings
from shootbook.schemas.availability_schema import TimeSlot
from shootbook.scheduling.temporal import TimeInterval

logger = logging.getLogger(__name__)


class SlotGenerator:
    """
    Lazy, finite, restartable sequence of free ``TimeSlot`` values.

    Each iteration walks the day again from the start of working hours,
    so the same generator can be consumed more than once.
    """

    def __init__(
        self,
        working_hours: Optional[TimeInterval],
        duration_minutes: int,
        booked: Sequence[TimeInterval] = (),
        step_minutes: int = settings.scheduling.slot_step_minutes,
        capacity_check: Optional[Callable[[TimeInterval], bool]] = None,
    ) -> None:
        if duration_minutes <= 0:
            raise ValueError(f"duration_minutes must be > 0, got {duration_minutes}")
        if step_minutes <= 0:
            raise ValueError(f"step_minutes must be > 0, got {step_minutes}")
        self.working_hours = working_hours
        self.duration_minutes = duration_minutes
        self.booked: tuple[TimeInterval, ...] = tuple(booked)
        self.step_minutes = step_minutes
        self.capacity_check = capacity_check

    @classmethod
    def empty(cls, duration_minutes: int = 60) -> "SlotGenerator":
        """A generator for an ineligible day: yields nothing."""
        return cls(None, duration_minutes)

    def _is_free(self, candidate: TimeInterval) -> bool:
        if any(candidate.overlaps(b) for b in self.booked):
            return False
        if self.capacity_check is not None and not self.capacity_check(candidate):
            logger.debug("Slot %s rejected: no free capacity", candidate)
            return False
        return True

    def __iter__(self) -> Iterator[TimeSlot]:
        if self.working_hours is None:
            return
        start = self.working_hours.start
        while start + self.duration_minutes <= self.working_hours.end:
            candidate = TimeInterval(start, start + self.duration_minutes)
            if self._is_free(candidate):
                yield candidate.to_slot()
            start += self.step_minutes

    def first(self) -> Optional[TimeSlot]:
        """Earliest free slot, or None."""
        return next(iter(self), None)

    def to_list(self) -> list[TimeSlot]:
        return list(self)
