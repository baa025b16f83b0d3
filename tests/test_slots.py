"""Tests for the slot generator."""

import pytest

from shootbook.scheduling.slots import SlotGenerator
from shootbook.scheduling.temporal import TimeInterval

WORKDAY = TimeInterval.from_strings("09:00", "18:00")


def _starts(generator: SlotGenerator) -> list[str]:
    return [slot.start_time for slot in generator]


class TestBasicFit:
    def test_four_hour_slots_on_empty_day(self):
        slots = SlotGenerator(WORKDAY, 240).to_list()
        assert [s.to_dict() for s in slots] == [
            {"start": "09:00", "end": "13:00"},
            {"start": "10:00", "end": "14:00"},
            {"start": "11:00", "end": "15:00"},
            {"start": "12:00", "end": "16:00"},
            {"start": "13:00", "end": "17:00"},
            {"start": "14:00", "end": "18:00"},
        ]

    def test_steps_by_hour_not_by_duration(self):
        assert _starts(SlotGenerator(WORKDAY, 180))[:3] == ["09:00", "10:00", "11:00"]

    def test_duration_longer_than_day_yields_nothing(self):
        assert SlotGenerator(TimeInterval.from_strings("10:00", "12:00"), 180).to_list() == []

    def test_exact_fit(self):
        slots = SlotGenerator(TimeInterval.from_strings("10:00", "12:00"), 120).to_list()
        assert [s.to_dict() for s in slots] == [{"start": "10:00", "end": "12:00"}]

    def test_custom_step(self):
        generator = SlotGenerator(TimeInterval.from_strings("09:00", "11:00"), 60, step_minutes=30)
        assert _starts(generator) == ["09:00", "09:30", "10:00"]


class TestBookedIntervals:
    def test_overlapping_candidates_removed(self):
        booked = [TimeInterval.from_strings("12:00", "14:00")]
        starts = _starts(SlotGenerator(WORKDAY, 120, booked))
        assert starts == ["09:00", "10:00", "14:00", "15:00", "16:00"]

    def test_touching_booking_keeps_adjacent_slots(self):
        booked = [TimeInterval.from_strings("09:00", "11:00")]
        assert _starts(SlotGenerator(WORKDAY, 120, booked))[0] == "11:00"

    def test_every_slot_is_sound(self):
        booked = [
            TimeInterval.from_strings("10:30", "11:30"),
            TimeInterval.from_strings("15:00", "16:00"),
        ]
        for slot in SlotGenerator(WORKDAY, 90, booked):
            candidate = TimeInterval(slot.start, slot.end)
            assert WORKDAY.contains(candidate)
            assert not any(candidate.overlaps(b) for b in booked)

    def test_fully_booked_day(self):
        assert SlotGenerator(WORKDAY, 60, [WORKDAY]).first() is None


class TestCapacityCheck:
    def test_capacity_check_filters(self):
        rejected = TimeInterval.from_strings("10:00", "11:00")
        generator = SlotGenerator(
            TimeInterval.from_strings("09:00", "12:00"), 60,
            capacity_check=lambda candidate: not candidate.overlaps(rejected),
        )
        assert _starts(generator) == ["09:00", "11:00"]


class TestGeneratorBehaviour:
    def test_restartable(self):
        generator = SlotGenerator(WORKDAY, 240)
        assert generator.to_list() == generator.to_list()

    def test_lazy_partial_consumption(self):
        calls = []

        def check(candidate):
            calls.append(candidate)
            return True

        generator = SlotGenerator(WORKDAY, 60, capacity_check=check)
        assert generator.first().start_time == "09:00"
        assert len(calls) == 1

    def test_empty_generator(self):
        assert SlotGenerator.empty().to_list() == []

    def test_increasing_order(self):
        starts = [s.start for s in SlotGenerator(WORKDAY, 60)]
        assert starts == sorted(starts)

    def test_rejects_non_positive_duration(self):
        with pytest.raises(ValueError):
            SlotGenerator(WORKDAY, 0)
