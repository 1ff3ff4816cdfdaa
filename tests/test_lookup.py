"""
Tests for picking today's entry out of a weekly schedule.
"""
from truckhours.core.clock import FixedClock
from truckhours.schemas.schedule import ScheduleDay
from truckhours.services.lookup import duplicate_weekdays, find_day, get_today, weekday_name
from tests.conftest import ny, utc


WEEK = [
    ScheduleDay(day="Tuesday", location="Dock 5"),
    ScheduleDay(day="Monday", location="Main St"),
    ScheduleDay(day="Monday", location="Second Monday entry"),
]


class TestWeekdayName:
    def test_uses_instant_zone_by_default(self):
        assert weekday_name(utc(2024, 1, 2, 3, 0)) == "Tuesday"

    def test_explicit_timezone(self):
        # 03:00 UTC Tuesday is still Monday evening in New York
        assert weekday_name(utc(2024, 1, 2, 3, 0), "America/New_York") == "Monday"


class TestGetToday:
    def test_first_match_wins(self):
        clock = FixedClock(ny(2024, 1, 1, 12, 0))
        assert get_today(WEEK, clock=clock).location == "Main St"

    def test_timezone_changes_the_day(self):
        clock = FixedClock(utc(2024, 1, 2, 3, 0))
        assert get_today(WEEK, clock=clock).day == "Tuesday"
        assert get_today(WEEK, timezone="America/New_York", clock=clock).day == "Monday"

    def test_missing_day(self):
        clock = FixedClock(ny(2024, 1, 3, 12, 0))  # Wednesday
        assert get_today(WEEK, clock=clock) is None

    def test_empty_schedule(self):
        assert get_today([], clock=FixedClock(ny(2024, 1, 1, 12, 0))) is None


class TestHelpers:
    def test_find_day(self):
        assert find_day(WEEK, "Tuesday").location == "Dock 5"
        assert find_day(WEEK, "Sunday") is None

    def test_duplicate_weekdays(self):
        assert duplicate_weekdays(WEEK) == ["Monday"]
        assert duplicate_weekdays(WEEK[:2]) == []
