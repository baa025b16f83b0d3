"""Interfaces the scheduling core expects from its collaborators."""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Protocol

from shootbook.schemas.booking_schema import Booking, BookingStatus, Cancellation, TeamAssignment
from shootbook.schemas.provider_schema import Equipment, Provider, TeamMember


@dataclass(frozen=True)
class ProviderSnapshot:
    """A provider with its team and equipment rosters resolved by id."""
    provider: Provider
    team_members: list[TeamMember] = field(default_factory=list)
    equipment: list[Equipment] = field(default_factory=list)

    @property
    def provider_id(self) -> str:
        return self.provider.id


class ProviderDirectory(Protocol):
    def get_provider(self, provider_id: str, timeout: Optional[float] = None) -> ProviderSnapshot:
        ...


class BookingStore(Protocol):
    def create_booking(self, booking: Booking, timeout: Optional[float] = None) -> Booking:
        ...

    def get_booking(self, booking_id: str, timeout: Optional[float] = None) -> Booking:
        ...

    def find_bookings_for_provider_on_date(
        self,
        provider_id: str,
        day: date,
        statuses_in: Iterable[BookingStatus],
        timeout: Optional[float] = None,
    ) -> list[Booking]:
        ...

    def update_booking_assignment(
        self,
        booking_id: str,
        status: BookingStatus,
        assignment: TeamAssignment,
        expected_status: Optional[BookingStatus] = None,
        expected_version: Optional[int] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Booking:
        ...

    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        expected_status: Optional[BookingStatus] = None,
        expected_version: Optional[int] = None,
        cancellation: Optional[Cancellation] = None,
        timeout: Optional[float] = None,
    ) -> Booking:
        ...
