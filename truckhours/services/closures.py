"""
Manual "closed today" overrides and the top-level open/closed decision.

A merchant can close for the rest of the day with one tap. The override is
stamped with the UTC instant it was set and expires at the next local
midnight of the entry's timezone. Until the sweep job clears the flag in
storage, readers treat an expired override as absent.

The read-path expiry test is controlled by Settings.CLOSURE_READ_POLICY:
- "zoned": calendar dates of the stamp and of now, both in the entry's zone
- "utc_date": raw UTC calendar dates (the platform's historical behaviour,
  which can disagree with the sweep around local midnight)
"""
import logging
from datetime import datetime
from typing import Optional

import pytz

from truckhours.core.business_day import (
    effective_timezone_name,
    local_date,
    resolve_timezone,
    to_local,
)
from truckhours.core.config import get_settings
from truckhours.schemas.schedule import ScheduleDay
from truckhours.services.hours import is_within_hours

logger = logging.getLogger(__name__)


def is_closure_stale(
    day: ScheduleDay,
    now: datetime,
    primary_timezone: Optional[str] = None,
    policy: Optional[str] = None,
) -> bool:
    """
    Whether an active-looking closure was set on an earlier day than `now`.

    Entries that are not closed, or are closed without a timestamp, are
    never stale.
    """
    if not day.is_closed or day.closure_timestamp is None:
        return False

    policy = policy or get_settings().CLOSURE_READ_POLICY
    tz = resolve_timezone(effective_timezone_name(day.timezone, primary_timezone))

    if policy == "utc_date":
        now_utc = to_local(now, tz).astimezone(pytz.UTC)
        return day.closure_timestamp.astimezone(pytz.UTC).date() != now_utc.date()

    return local_date(day.closure_timestamp, tz) != local_date(now, tz)


def is_open(
    day: Optional[ScheduleDay],
    now: datetime,
    primary_timezone: Optional[str] = None,
) -> bool:
    """
    Is the truck open for orders at `now`?

    Args:
        day: Today's schedule entry, or None when there is none
        now: Instant being evaluated
        primary_timezone: Truck-level fallback zone

    Returns:
        False with no entry, with a closure set today, or with a closure
        that has no timestamp. Otherwise the entry's hours decide; a stale
        closure is ignored.
    """
    if day is None:
        return False

    if day.is_closed:
        if day.closure_timestamp is None:
            return False
        if not is_closure_stale(day, now, primary_timezone):
            return False
        logger.debug(
            f"Ignoring stale closure for {day.day} stamped {day.closure_timestamp.isoformat()}"
        )

    return is_within_hours(day, now, primary_timezone)
