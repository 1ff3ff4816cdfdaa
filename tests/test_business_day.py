"""
Tests for timezone and calendar-day helpers.
Verifies zone fallback and local midnight around DST and UTC offsets.
"""
from datetime import date, datetime, time

from truckhours.core.business_day import (
    ceil_to_interval,
    effective_timezone_name,
    local_date,
    localize,
    minutes_between,
    resolve_timezone,
    start_of_day,
    to_local,
)
from truckhours.core.clock import FixedClock, SystemClock
from tests.conftest import NEW_YORK, ny, utc


class TestTimezoneResolution:
    """Entry zone -> primary zone -> default."""

    def test_entry_zone_first(self):
        assert effective_timezone_name("America/Denver", "America/Chicago") == "America/Denver"

    def test_primary_zone_second(self):
        assert effective_timezone_name(None, "America/Chicago") == "America/Chicago"

    def test_default_last(self):
        assert effective_timezone_name(None, None) == "America/New_York"
        assert effective_timezone_name("", "") == "America/New_York"

    def test_unknown_zone_falls_back(self):
        assert resolve_timezone("Not/AZone").zone == "America/New_York"
        assert resolve_timezone(None).zone == "America/New_York"


class TestLocalCalendar:
    def test_evening_utc_is_previous_local_day(self):
        """03:00 UTC on Jan 2 is 22:00 on Jan 1 in New York."""
        assert local_date(utc(2024, 1, 2, 3, 0), NEW_YORK) == date(2024, 1, 1)

    def test_start_of_day(self):
        assert start_of_day(utc(2024, 1, 2, 3, 0), NEW_YORK) == ny(2024, 1, 1, 0, 0)

    def test_start_of_day_on_dst_change(self):
        # midnight before the spring-forward jump is still EST
        midnight = start_of_day(ny(2024, 3, 10, 12, 0), NEW_YORK)
        assert midnight.utcoffset().total_seconds() == -5 * 3600

    def test_localize_uses_offset_of_that_date(self):
        summer = localize(date(2024, 7, 1), time(11, 0), NEW_YORK)
        winter = localize(date(2024, 1, 1), time(11, 0), NEW_YORK)
        assert summer.utcoffset().total_seconds() == -4 * 3600
        assert winter.utcoffset().total_seconds() == -5 * 3600

    def test_naive_is_local_wall_clock(self):
        assert to_local(datetime(2024, 1, 1, 12, 0), NEW_YORK) == ny(2024, 1, 1, 12, 0)


class TestArithmetic:
    def test_minutes_between(self):
        assert minutes_between(ny(2024, 1, 1, 12, 0), ny(2024, 1, 1, 13, 30)) == 90.0
        assert minutes_between(ny(2024, 1, 1, 13, 30), ny(2024, 1, 1, 12, 0)) == -90.0

    def test_ceil_to_interval(self):
        assert ceil_to_interval(datetime(2024, 1, 1, 12, 3), 5) == datetime(2024, 1, 1, 12, 5)
        assert ceil_to_interval(datetime(2024, 1, 1, 12, 5), 5) == datetime(2024, 1, 1, 12, 5)
        assert ceil_to_interval(datetime(2024, 1, 1, 12, 58), 5) == datetime(2024, 1, 1, 13, 0)
        assert ceil_to_interval(datetime(2024, 1, 1, 12, 5, 59), 5) == datetime(2024, 1, 1, 12, 5)


class TestClocks:
    def test_fixed_clock(self):
        clock = FixedClock(ny(2024, 1, 1, 12, 0))
        assert clock.now() == ny(2024, 1, 1, 12, 0)
        clock.set(datetime(2024, 1, 1, 18, 0))
        assert clock.now() == utc(2024, 1, 1, 18, 0)

    def test_system_clock_is_aware(self):
        assert SystemClock().now().tzinfo is not None
        assert SystemClock("America/Chicago").now().tzinfo.zone == "America/Chicago"
