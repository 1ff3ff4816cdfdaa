"""
Centralized timezone and calendar-day logic for truckhours.

Every schedule entry is evaluated on the wall clock of its own timezone:
the entry's `timezone`, else the truck's primary timezone, else the
configured default. All helpers here are pure; "now" is always passed in.

Example: a closure stamped at 2024-01-02 03:00 UTC was set on Jan 1st in
         America/New_York (22:00 EST), so it is stale at any instant on
         Jan 2nd New York time.
"""
import logging
from datetime import datetime, date, time, timedelta
from typing import Optional

import pytz

from truckhours.core.config import get_settings

logger = logging.getLogger(__name__)


def effective_timezone_name(
    entry_timezone: Optional[str] = None,
    primary_timezone: Optional[str] = None,
) -> str:
    """
    Pick the timezone name that applies to a schedule entry.

    Args:
        entry_timezone: The entry's own IANA zone, if any
        primary_timezone: The truck-level primary zone, if any

    Returns:
        The first non-empty name in entry -> primary -> DEFAULT_TIMEZONE
    """
    return entry_timezone or primary_timezone or get_settings().DEFAULT_TIMEZONE


def resolve_timezone(name: Optional[str]) -> pytz.BaseTzInfo:
    """
    Look up a pytz zone, falling back to the default zone on unknown names.

    Stored documents can carry typos; a bad zone must never crash an
    open/closed decision.
    """
    default = get_settings().DEFAULT_TIMEZONE
    if not name:
        return pytz.timezone(default)
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{name}', falling back to {default}")
        return pytz.timezone(default)


def to_local(dt: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Express an instant on the wall clock of `tz`.

    Naive datetimes are taken to already be local wall-clock time in `tz`.
    """
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def localize(day: date, t: time, tz: pytz.BaseTzInfo) -> datetime:
    """
    Build the aware instant for wall-clock `t` on calendar `day` in `tz`.

    Uses pytz localize so the UTC offset is the one in force on that date,
    not the one in force "now".

    Examples:
        >>> localize(date(2024, 7, 1), time(11, 0), pytz.timezone("America/New_York")).isoformat()
        '2024-07-01T11:00:00-04:00'
    """
    return tz.localize(datetime.combine(day, t))


def local_date(dt: datetime, tz: pytz.BaseTzInfo) -> date:
    """Calendar date of an instant on the wall clock of `tz`."""
    return to_local(dt, tz).date()


def start_of_day(dt: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Midnight at the start of the local calendar day containing `dt`.

    Examples:
        # 03:00 UTC on Jan 2 is 22:00 on Jan 1 in New York
        >>> start_of_day(datetime(2024, 1, 2, 3, 0, tzinfo=pytz.UTC), pytz.timezone("America/New_York")).isoformat()
        '2024-01-01T00:00:00-05:00'
    """
    return localize(local_date(dt, tz), time(0, 0), tz)


def minutes_between(start: datetime, end: datetime) -> float:
    """Signed minutes from `start` to `end`."""
    return (end - start).total_seconds() / 60.0


def ceil_to_interval(dt: datetime, minutes: int) -> datetime:
    """
    Round a local datetime up to the next `minutes` boundary of the hour.

    Seconds are dropped first, so 12:00:40 stays on the 12:00 boundary.

    Examples:
        >>> ceil_to_interval(datetime(2024, 1, 1, 12, 3), 5)
        datetime(2024, 1, 1, 12, 5)
        >>> ceil_to_interval(datetime(2024, 1, 1, 12, 5), 5)
        datetime(2024, 1, 1, 12, 5)
    """
    truncated = dt.replace(second=0, microsecond=0)
    remainder = truncated.minute % minutes
    if remainder == 0:
        return truncated
    return truncated + timedelta(minutes=minutes - remainder)
