"""Tests for temporal primitives and time/date parsing helpers."""

from datetime import date, datetime

import pytest

from shootbook.errors import InvalidInterval
from shootbook.schemas.provider_schema import Weekday
from shootbook.scheduling.temporal import (
    TimeInterval,
    day_of_week,
    hours_to_minutes,
    intervals_overlap,
)
from shootbook.utils import format_time_of_day, normalize_date, parse_time_of_day


class TestParseTimeOfDay:
    def test_parses_morning(self):
        assert parse_time_of_day("09:00") == 540

    def test_parses_minutes(self):
        assert parse_time_of_day("13:45") == 825

    def test_single_digit_hour(self):
        assert parse_time_of_day("9:30") == 570

    def test_end_of_day_boundary(self):
        assert parse_time_of_day("24:00") == 1440

    @pytest.mark.parametrize("value", ["25:00", "24:30", "12:60", "noon", "", "9am", "12-00"])
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidInterval):
            parse_time_of_day(value)

    def test_format_pads(self):
        assert format_time_of_day(545) == "09:05"

    def test_format_rejects_out_of_range(self):
        with pytest.raises(InvalidInterval):
            format_time_of_day(1441)


class TestNormalizeDate:
    def test_datetime_drops_time(self):
        assert normalize_date(datetime(2024, 12, 25, 23, 59)) == date(2024, 12, 25)

    def test_iso_string(self):
        assert normalize_date("2024-12-25") == date(2024, 12, 25)

    def test_iso_datetime_string(self):
        assert normalize_date("2024-12-25T10:00:00") == date(2024, 12, 25)

    def test_invalid_string(self):
        with pytest.raises(InvalidInterval):
            normalize_date("25/12/2024")


class TestDayOfWeek:
    def test_monday(self):
        assert day_of_week(date(2024, 12, 23)) == Weekday.MONDAY

    def test_wednesday_from_string(self):
        assert day_of_week("2024-12-25") == Weekday.WEDNESDAY

    def test_sunday(self):
        assert day_of_week(date(2024, 12, 29)) == Weekday.SUNDAY


SAMPLE_INTERVALS = [(540, 600), (570, 660), (600, 720), (480, 1080), (720, 780), (0, 1440)]


class TestIntervalsOverlap:
    @pytest.mark.parametrize("a", SAMPLE_INTERVALS)
    @pytest.mark.parametrize("b", SAMPLE_INTERVALS)
    def test_symmetric(self, a, b):
        assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)

    def test_touching_does_not_overlap(self):
        assert not intervals_overlap(540, 600, 600, 660)
        assert not intervals_overlap(600, 660, 540, 600)

    def test_partial_overlap(self):
        assert intervals_overlap(540, 660, 600, 720)

    def test_containment_overlaps(self):
        assert intervals_overlap(480, 1080, 600, 660)

    def test_disjoint(self):
        assert not intervals_overlap(540, 600, 720, 780)


class TestTimeInterval:
    def test_from_strings(self):
        interval = TimeInterval.from_strings("10:00", "12:30")
        assert (interval.start, interval.end) == (600, 750)
        assert interval.duration_minutes == 150
        assert str(interval) == "10:00-12:30"

    def test_inverted_rejected(self):
        with pytest.raises(InvalidInterval):
            TimeInterval.from_strings("12:00", "10:00")

    def test_empty_rejected(self):
        with pytest.raises(InvalidInterval):
            TimeInterval.from_strings("10:00", "10:00")

    def test_direct_construction_validates(self):
        with pytest.raises(InvalidInterval):
            TimeInterval(600, 1500)

    def test_contains(self):
        day = TimeInterval.from_strings("09:00", "18:00")
        assert day.contains(TimeInterval.from_strings("14:00", "18:00"))
        assert not day.contains(TimeInterval.from_strings("15:00", "19:00"))

    def test_touching_intervals(self):
        a = TimeInterval.from_strings("10:00", "12:00")
        b = TimeInterval.from_strings("12:00", "14:00")
        assert not a.overlaps(b)
        assert not b.overlaps(a)


class TestHoursToMinutes:
    def test_whole_hours(self):
        assert hours_to_minutes(4) == 240

    def test_fractional_hours(self):
        assert hours_to_minutes(1.5) == 90

    @pytest.mark.parametrize("value", [0, -1, 25])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(InvalidInterval):
            hours_to_minutes(value)
