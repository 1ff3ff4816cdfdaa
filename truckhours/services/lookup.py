"""
Finding "today's" entry in a weekly schedule.
"""
from collections import Counter
from datetime import datetime
from typing import List, Optional

from truckhours.core.business_day import resolve_timezone, to_local
from truckhours.core.clock import Clock, SystemClock
from truckhours.schemas.schedule import WEEKDAYS, ScheduleDay


def weekday_name(now: datetime, timezone: Optional[str] = None) -> str:
    """
    English weekday name of `now`.

    With a timezone the instant is first moved onto that zone's wall clock;
    without one, `now`'s own zone decides.
    """
    if timezone:
        now = to_local(now, resolve_timezone(timezone))
    return WEEKDAYS[now.weekday()]


def find_day_index(days: List[ScheduleDay], name: str) -> Optional[int]:
    """Index of the first entry named `name`. First match wins on duplicates."""
    for index, day in enumerate(days):
        if day.day == name:
            return index
    return None


def find_day(days: List[ScheduleDay], name: str) -> Optional[ScheduleDay]:
    index = find_day_index(days, name)
    return days[index] if index is not None else None


def get_today(
    days: List[ScheduleDay],
    timezone: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> Optional[ScheduleDay]:
    """
    The schedule entry for the current weekday, or None.

    Args:
        days: Weekly entries, any order
        timezone: Zone whose calendar defines "today". When omitted the
                  clock's own zone is used (the host's local zone for
                  SystemClock), matching what a viewer sees.
        clock: Now-provider, defaults to SystemClock()

    Returns:
        First entry whose `day` equals today's name. Several entries for
        the same weekday are allowed; only the first is ever returned.
    """
    clock = clock or SystemClock()
    return find_day(days, weekday_name(clock.now(), timezone))


def duplicate_weekdays(days: List[ScheduleDay]) -> List[str]:
    """Weekday names that appear more than once, in week order."""
    counts = Counter(day.day for day in days)
    return [name for name in WEEKDAYS if counts.get(name, 0) > 1]
