"""
Offline console demo: walks through the scheduling core with in-memory stores.

Seeds one photographer with a two-person team, then runs a scenario
against the real availability façade, assignment guard and booking flow.
No database, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario blackout
    python console_demo.py --scenario race
"""

import argparse
import sys
from concurrent.futures import ThreadPoolExecutor

from shootbook.errors import AssignmentConflict, ProviderUnavailable
from shootbook.logging_context import set_request_id
from shootbook.schemas.booking_schema import TeamAssignment
from shootbook.schemas.provider_schema import (
    AvailabilityPolicy,
    DayHours,
    Equipment,
    EquipmentCategory,
    PhotographerProfile,
    TeamMember,
    TeamRole,
    Weekday,
)
from shootbook.scheduling.assignment_guard import AssignmentGuard
from shootbook.scheduling.availability import AvailabilityService
from shootbook.services.booking_service import BookingService
from shootbook.stores.booking_store import InMemoryBookingStore
from shootbook.stores.provider_directory import InMemoryProviderDirectory

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

PROVIDER_ID = "prov-lumen"
MONDAY = "2024-12-23"
CHRISTMAS = "2024-12-25"


class ConsoleSession:
    """Holds the wired-up services for one demo run."""

    def __init__(self) -> None:
        self.directory = InMemoryProviderDirectory()
        self.store = InMemoryBookingStore()
        self.availability = AvailabilityService(self.directory, self.store)
        self.guard = AssignmentGuard(self.directory, self.store)
        self.service = BookingService(self.availability, self.guard, self.store)
        self._seed()

    def _seed(self) -> None:
        weekday_hours = DayHours(available=True, start="09:00", end="18:00")
        self.directory.register_provider(PhotographerProfile(
            id=PROVIDER_ID,
            business_name="Lumen Studio",
            availability=AvailabilityPolicy(
                working_hours={
                    day: weekday_hours
                    for day in (Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
                                Weekday.THURSDAY, Weekday.FRIDAY)
                },
                blackout_dates=[CHRISTMAS],
            ),
        ))
        self.directory.add_team_member(TeamMember(
            id="tm-ana", owner_id=PROVIDER_ID, name="Ana", role=TeamRole.PHOTOGRAPHER,
        ))
        self.directory.add_team_member(TeamMember(
            id="tm-ben", owner_id=PROVIDER_ID, name="Ben", role=TeamRole.ASSISTANT,
        ))
        self.directory.add_equipment(Equipment(
            id="eq-drone", owner_id=PROVIDER_ID, name="Mavic 3", category=EquipmentCategory.DRONE,
        ))

    def say(self, text: str, colour: str = GREEN) -> None:
        print(f"{colour}{text}{RESET}")

    def log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def run_basic(self) -> None:
        self.say(f"{BOLD}Slots for a 4 hour shoot on {MONDAY}")
        for slot in self.availability.find_available_slots(PROVIDER_ID, MONDAY, 4):
            self.log(f"{slot.start_time}-{slot.end_time}")

        booking = self.service.create_booking(
            PROVIDER_ID, "client-1",
            {"date": MONDAY, "start_time": "10:00", "end_time": "14:00", "title": "Engagement"},
        )
        self.say(f"Created {booking.id} ({booking.status.value})")
        booking = self.service.confirm_booking(booking.id, TeamAssignment.of(["tm-ana"], ["eq-drone"]))
        self.say(f"Confirmed {booking.id} with Ana and the drone")

        self.say(f"{BOLD}Slots after the confirmation")
        for slot in self.availability.find_available_slots(PROVIDER_ID, MONDAY, 4):
            self.log(f"{slot.start_time}-{slot.end_time}")

    def run_blackout(self) -> None:
        verdict = self.availability.check_availability(PROVIDER_ID, CHRISTMAS, 4)
        self.say(f"{CHRISTMAS}: available={verdict.available} reason={verdict.reason.value}", YELLOW)
        try:
            self.service.create_booking(
                PROVIDER_ID, "client-2",
                {"date": CHRISTMAS, "start_time": "10:00", "end_time": "12:00"},
            )
        except ProviderUnavailable as exc:
            self.say(f"Booking refused: {exc.message}", RED)

    def run_race(self) -> None:
        first = self.service.create_booking(
            PROVIDER_ID, "client-3", {"date": MONDAY, "start_time": "10:00", "end_time": "12:00"},
        )
        second = self.service.create_booking(
            PROVIDER_ID, "client-4", {"date": MONDAY, "start_time": "10:00", "end_time": "12:00"},
        )
        self.say(f"Two pending bookings for 10:00-12:00: {first.id}, {second.id}")

        def confirm(booking_id: str) -> str:
            set_request_id()
            try:
                self.service.confirm_booking(booking_id, TeamAssignment.of(["tm-ana"]))
                return f"{booking_id}: confirmed with Ana"
            except AssignmentConflict as exc:
                return f"{booking_id}: conflict on {exc.unit_ids}"

        with ThreadPoolExecutor(max_workers=2) as pool:
            for outcome in pool.map(confirm, [first.id, second.id]):
                self.log(outcome)


SCENARIOS = {
    "basic": ConsoleSession.run_basic,
    "blackout": ConsoleSession.run_blackout,
    "race": ConsoleSession.run_race,
}


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Scheduling core console demo")
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), default="basic")
    args = parser.parse_args(argv)

    session = ConsoleSession()
    SCENARIOS[args.scenario](session)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
