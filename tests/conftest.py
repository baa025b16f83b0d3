"""Shared test fixtures and helpers."""

from datetime import date
from typing import Optional

import pytest

from shootbook.schemas.booking_schema import (
    Booking,
    BookingStatus,
    EventDetails,
    TeamAssignment,
)
from shootbook.schemas.provider_schema import (
    AvailabilityPolicy,
    DayHours,
    Equipment,
    EquipmentCategory,
    PhotographerProfile,
    TeamMember,
    TeamRole,
    VideographerProfile,
    Weekday,
)
from shootbook.scheduling.assignment_guard import AssignmentGuard
from shootbook.scheduling.availability import AvailabilityService
from shootbook.scheduling.locks import ProviderLockRegistry
from shootbook.services.booking_service import BookingService
from shootbook.stores.booking_store import InMemoryBookingStore
from shootbook.stores.provider_directory import InMemoryProviderDirectory

PROVIDER_ID = "prov-1"
OTHER_PROVIDER_ID = "prov-2"

MONDAY = date(2024, 12, 23)
CHRISTMAS = date(2024, 12, 25)        # Wednesday, blackout
SATURDAY = date(2024, 12, 28)
SUNDAY = date(2024, 12, 22)           # closed weekday
BLACKOUT_SUNDAY = date(2024, 12, 29)  # closed weekday and blackout


def make_policy(blackouts: Optional[list[date]] = None) -> AvailabilityPolicy:
    """Mon-Fri 09:00-18:00, Sat 10:00-16:00, Sun closed."""
    weekday = DayHours(available=True, start="09:00", end="18:00")
    return AvailabilityPolicy(
        working_hours={
            Weekday.MONDAY: weekday,
            Weekday.TUESDAY: weekday,
            Weekday.WEDNESDAY: weekday,
            Weekday.THURSDAY: weekday,
            Weekday.FRIDAY: weekday,
            Weekday.SATURDAY: DayHours(available=True, start="10:00", end="16:00"),
            Weekday.SUNDAY: DayHours(available=False),
        },
        blackout_dates=blackouts if blackouts is not None else [CHRISTMAS, BLACKOUT_SUNDAY],
    )


def make_booking(
    booking_id: str,
    start: str = "09:00",
    end: str = "18:00",
    status: BookingStatus = BookingStatus.CONFIRMED,
    members: Optional[list[str]] = None,
    equipment: Optional[list[str]] = None,
    day: date = MONDAY,
    provider_id: str = PROVIDER_ID,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        id=booking_id,
        provider_id=provider_id,
        provider_kind="photographer",
        client_id="client-1",
        event_details=EventDetails(date=day, start_time=start, end_time=end),
        status=status,
        team_assignment=TeamAssignment.of(members, equipment, main_provider_id=provider_id),
    )


@pytest.fixture
def directory():
    directory = InMemoryProviderDirectory()
    directory.register_provider(PhotographerProfile(
        id=PROVIDER_ID,
        business_name="Lumen Studio",
        availability=make_policy(),
    ))
    directory.add_team_member(TeamMember(
        id="tm-1", owner_id=PROVIDER_ID, name="Ana Ruiz", role=TeamRole.PHOTOGRAPHER,
    ))
    directory.add_team_member(TeamMember(
        id="tm-2", owner_id=PROVIDER_ID, name="Ben Cole", role=TeamRole.ASSISTANT,
    ))
    directory.add_team_member(TeamMember(
        id="tm-3", owner_id=PROVIDER_ID, name="Cy Park", is_active=False,
    ))
    directory.add_equipment(Equipment(
        id="eq-1", owner_id=PROVIDER_ID, name="Mavic 3", category=EquipmentCategory.DRONE,
    ))
    directory.add_equipment(Equipment(
        id="eq-2", owner_id=PROVIDER_ID, name="Old flash", category=EquipmentCategory.LIGHTING,
        condition="needs_repair", is_available=False,
    ))

    directory.register_provider(VideographerProfile(
        id=OTHER_PROVIDER_ID,
        business_name="Motion Reel",
        availability=make_policy(blackouts=[]),
    ))
    directory.add_team_member(TeamMember(id="tm-x", owner_id=OTHER_PROVIDER_ID, name="Xia Lin"))
    return directory


@pytest.fixture
def store():
    return InMemoryBookingStore()


@pytest.fixture
def availability(directory, store):
    return AvailabilityService(directory, store)


@pytest.fixture
def locks():
    return ProviderLockRegistry()


@pytest.fixture
def guard(directory, store, locks):
    return AssignmentGuard(directory, store, locks=locks)


@pytest.fixture
def booking_service(availability, guard, store):
    return BookingService(availability, guard, store)
