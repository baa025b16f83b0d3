from shootbook.scheduling.assignment_guard import AssignmentGuard
from shootbook.scheduling.availability import AvailabilityService
from shootbook.scheduling.capacity import resolve_capacity
from shootbook.scheduling.locks import ProviderLockRegistry
from shootbook.scheduling.policy import is_day_eligible
from shootbook.scheduling.slots import SlotGenerator
from shootbook.scheduling.state_machine import BookingStateMachine, BookingTrigger
from shootbook.scheduling.temporal import TimeInterval, day_of_week, intervals_overlap

__all__ = [
    "AssignmentGuard",
    "AvailabilityService",
    "BookingStateMachine",
    "BookingTrigger",
    "ProviderLockRegistry",
    "SlotGenerator",
    "TimeInterval",
    "day_of_week",
    "intervals_overlap",
    "is_day_eligible",
    "resolve_capacity",
]
