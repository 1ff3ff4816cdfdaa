"""
Time-window evaluation for a single schedule entry.

Decides whether an instant falls inside a ScheduleDay's open hours.
Structured `openTime`/`closeTime` ("HH:MM") are the source of truth; the
legacy free-text `hours` field ("11:00 AM - 2:00 PM") is only consulted
when the structured pair is missing or unparseable. Anything ambiguous is
treated as closed.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz

from truckhours.core.business_day import (
    effective_timezone_name,
    localize,
    resolve_timezone,
    to_local,
)
from truckhours.schemas.schedule import ScheduleDay

logger = logging.getLogger(__name__)

CLOCK_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
LEGACY_HOURS_PATTERN = re.compile(
    r"(\d+):(\d+)\s+(AM|PM)\s+-\s+(\d+):(\d+)\s+(AM|PM)",
    re.IGNORECASE,
)


@dataclass
class TimeWindow:
    """Concrete open/close instants for one service day."""
    opens_at: datetime
    closes_at: datetime
    tz: pytz.BaseTzInfo

    @property
    def overnight(self) -> bool:
        return self.closes_at.date() > self.opens_at.date()

    def contains(self, now: datetime) -> bool:
        """Inclusive on both ends."""
        local_now = to_local(now, self.tz)
        return self.opens_at <= local_now <= self.closes_at


def parse_clock_time(value: Optional[str]) -> Optional[time]:
    """
    Parse a 24h "HH:MM" string.

    Returns:
        time, or None when the value is missing or malformed
    """
    if not value:
        return None
    match = CLOCK_TIME_PATTERN.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return time(hour, minute)


def _to_24h(hour: int, minute: int, meridiem: str) -> Optional[time]:
    meridiem = meridiem.upper()
    if hour == 12:
        hour = 0 if meridiem == "AM" else 12
    elif meridiem == "PM":
        hour += 12
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return time(hour, minute)


def parse_legacy_hours(value: Optional[str]) -> Optional[Tuple[time, time]]:
    """
    Parse legacy "H:MM AM - H:MM PM" text into (open, close).

    Examples:
        >>> parse_legacy_hours("11:00 AM - 2:30 PM")
        (time(11, 0), time(14, 30))
        >>> parse_legacy_hours("12:00 AM - 12:00 PM")
        (time(0, 0), time(12, 0))
        >>> parse_legacy_hours("lunch") is None
        True
    """
    if not value:
        return None
    match = LEGACY_HOURS_PATTERN.search(value)
    if not match:
        return None
    start_h, start_m, start_ap, end_h, end_m, end_ap = match.groups()
    opens = _to_24h(int(start_h), int(start_m), start_ap)
    closes = _to_24h(int(end_h), int(end_m), end_ap)
    if opens is None or closes is None:
        return None
    return opens, closes


def resolve_hours(day: ScheduleDay) -> Optional[Tuple[time, time]]:
    """
    Wall-clock (open, close) for an entry, or None if it has no usable hours.

    A present-but-malformed structured pair falls through to the legacy
    text instead of failing outright.
    """
    if day.open_time and day.close_time:
        opens = parse_clock_time(day.open_time)
        closes = parse_clock_time(day.close_time)
        if opens is not None and closes is not None:
            return opens, closes
        logger.warning(
            f"Malformed openTime/closeTime ({day.open_time!r}, {day.close_time!r}) "
            f"for {day.day}, trying legacy hours"
        )

    if day.hours:
        parsed = parse_legacy_hours(day.hours)
        if parsed is not None:
            return parsed
        logger.warning(f"Could not parse hours {day.hours!r} for {day.day}")

    return None


def _window_on(service_date: date, opens: time, closes: time, tz: pytz.BaseTzInfo) -> TimeWindow:
    # close earlier than open on the clock means the window runs past midnight
    close_date = service_date + timedelta(days=1) if closes < opens else service_date
    return TimeWindow(
        opens_at=localize(service_date, opens, tz),
        closes_at=localize(close_date, closes, tz),
        tz=tz,
    )


def resolve_window(
    day: ScheduleDay,
    now: datetime,
    primary_timezone: Optional[str] = None,
) -> Optional[TimeWindow]:
    """
    The open/close window of `day` that is relevant at `now`.

    Built on the calendar date of `now` in the entry's effective timezone.
    For an overnight entry, an instant before today's opening belongs to
    the window that opened yesterday evening only while that window is
    still running; after it closes, today's upcoming window applies.

    Args:
        day: Schedule entry
        now: Instant being evaluated (naive = local wall clock)
        primary_timezone: Truck-level fallback zone

    Returns:
        TimeWindow, or None when the entry has no usable hours
    """
    hours = resolve_hours(day)
    if hours is None:
        return None

    opens, closes = hours
    tz = resolve_timezone(effective_timezone_name(day.timezone, primary_timezone))
    local_now = to_local(now, tz)

    window = _window_on(local_now.date(), opens, closes, tz)
    if closes < opens and local_now < window.opens_at:
        previous = _window_on(local_now.date() - timedelta(days=1), opens, closes, tz)
        if local_now <= previous.closes_at:
            return previous
    return window


def is_within_hours(
    day: ScheduleDay,
    now: datetime,
    primary_timezone: Optional[str] = None,
) -> bool:
    """
    True iff `now` falls inside the entry's hours (inclusive), ignoring any
    manual closure. Entries without usable hours are closed.
    """
    window = resolve_window(day, now, primary_timezone)
    if window is None:
        return False
    return window.contains(now)
