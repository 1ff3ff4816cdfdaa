"""
Display helpers for schedules: day grouping, time ranges, status text.

None of this changes open/closed semantics.
"""
import logging
from datetime import datetime, time
from typing import List, Optional

import pytz

from truckhours.core.business_day import minutes_between, to_local
from truckhours.core.clock import SystemClock
from truckhours.core.config import get_settings
from truckhours.schemas.schedule import WEEKDAYS, ScheduleDay, ScheduleStatus
from truckhours.services.closures import is_closure_stale, is_open
from truckhours.services.hours import parse_clock_time, resolve_window

logger = logging.getLogger(__name__)

WEEKDAY_INDEX = {name: i for i, name in enumerate(WEEKDAYS)}


def _is_consecutive(prev: ScheduleDay, current: ScheduleDay) -> bool:
    prev_index = WEEKDAY_INDEX.get(prev.day)
    current_index = WEEKDAY_INDEX.get(current.day)
    if prev_index is None or current_index is None:
        return False
    return current_index == prev_index + 1 or (prev_index == 6 and current_index == 0)


def _same_stop(a: ScheduleDay, b: ScheduleDay) -> bool:
    return (
        a.location == b.location
        and a.address == b.address
        and a.open_time == b.open_time
        and a.close_time == b.close_time
        and a.is_closed == b.is_closed
    )


def group_schedule_days(days: List[ScheduleDay]) -> List[List[ScheduleDay]]:
    """
    Group a week's entries into runs of consecutive weekdays at the same stop.

    Entries are ordered Monday..Sunday first (unknown names last). A run
    continues while the next entry is the following weekday and shares
    location, address, openTime, closeTime and isClosed.

    Runs never wrap around the week: because output starts at Monday, a
    Sunday entry and the following Monday are shown as separate groups even
    when they share a stop.

    Examples:
        Mon/Tue/Wed at "Main St" 11:00-14:00, Fri at "Dock 5"
        -> [[Mon, Tue, Wed], [Fri]]
    """
    ordered = sorted(days, key=lambda d: WEEKDAY_INDEX.get(d.day, len(WEEKDAYS)))

    groups: List[List[ScheduleDay]] = []
    for day in ordered:
        if groups:
            prev = groups[-1][-1]
            if _is_consecutive(prev, day) and _same_stop(prev, day):
                groups[-1].append(day)
                continue
        groups.append([day])
    return groups


def format_day_range(group: List[ScheduleDay]) -> str:
    """"Monday" or "Monday - Wednesday"."""
    if not group:
        return ""
    if len(group) == 1:
        return group[0].day
    return f"{group[0].day} - {group[-1].day}"


def format_clock_time(t: time) -> str:
    """12-hour display, e.g. time(14, 5) -> "2:05 PM"."""
    period = "PM" if t.hour >= 12 else "AM"
    hour12 = t.hour % 12 or 12
    return f"{hour12}:{t.minute:02d} {period}"


def format_time_range(
    open_time: Optional[str],
    close_time: Optional[str],
    timezone: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Format "HH:MM" 24h times as "h:mm AM - h:mm PM".

    Args:
        open_time: "HH:MM"
        close_time: "HH:MM"
        timezone: When given, its abbreviation is appended ("EDT"); an
                  unknown name is appended as-is
        now: Instant used to pick the abbreviation across DST

    Returns:
        Formatted range, or "" when either time is missing or malformed
    """
    if not open_time or not close_time:
        return ""

    opens = parse_clock_time(open_time)
    closes = parse_clock_time(close_time)
    if opens is None or closes is None:
        logger.error(f"Cannot format time range {open_time!r} - {close_time!r}")
        return ""

    text = f"{format_clock_time(opens)} - {format_clock_time(closes)}"
    if not timezone:
        return text

    try:
        tz = pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        logger.error(f"Cannot format timezone abbreviation for {timezone}")
        return f"{text} {timezone}"

    now = now or SystemClock().now()
    return f"{text} {to_local(now, tz).strftime('%Z')}"


def _duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def describe_status(
    day: Optional[ScheduleDay],
    now: datetime,
    primary_timezone: Optional[str] = None,
) -> ScheduleStatus:
    """
    Dashboard status for today's entry: open flag plus time to close/open.

    "Closing soon" / "Opening soon" kick in CLOSING_SOON_MINUTES ahead.
    """
    if day is None:
        return ScheduleStatus(is_open=False, message="No schedule for today")

    if day.is_closed and not is_closure_stale(day, now, primary_timezone):
        message = "Emergency closure" if day.closure_timestamp else "Closed today"
        return ScheduleStatus(is_open=False, message=message)

    window = resolve_window(day, now, primary_timezone)
    if window is None:
        return ScheduleStatus(is_open=False, message="Hours not set")

    soon = get_settings().CLOSING_SOON_MINUTES
    local_now = to_local(now, window.tz)

    if is_open(day, now, primary_timezone):
        remaining = int(minutes_between(local_now, window.closes_at))
        if remaining <= soon:
            return ScheduleStatus(
                is_open=True,
                closing_soon=True,
                minutes_until_close=remaining,
                message="Closing soon",
            )
        return ScheduleStatus(
            is_open=True,
            minutes_until_close=remaining,
            message=f"{_duration(remaining)} until closing",
        )

    if local_now < window.opens_at:
        until_open = int(minutes_between(local_now, window.opens_at))
        if until_open <= soon:
            return ScheduleStatus(
                is_open=False,
                opening_soon=True,
                minutes_until_open=until_open,
                message="Opening soon",
            )
        return ScheduleStatus(
            is_open=False,
            minutes_until_open=until_open,
            message=f"{_duration(until_open)} until opening",
        )

    return ScheduleStatus(is_open=False, message="Closed for today")
