"""
Administrative mutations of a truck's weekly schedule.

- Close/reopen for today (the merchant's emergency "close now" button)
- Nightly sweep that clears closures left over from earlier days
- Validated replacement of the whole schedule from the editor

Pure transforms return updated copies; the *_tenant / sweep helpers do the
read-modify-write against a ScheduleStore. Concurrent writes to the same
tenant are last-write-wins.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

import pytz

from truckhours.core.business_day import (
    effective_timezone_name,
    resolve_timezone,
    start_of_day,
)
from truckhours.core.clock import Clock, SystemClock
from truckhours.core.config import get_settings
from truckhours.core.exceptions import InvalidScheduleError
from truckhours.repositories.schedule_store import ScheduleStore
from truckhours.schemas.schedule import WEEKDAYS, ScheduleDay, WeeklySchedule
from truckhours.services.hours import parse_clock_time
from truckhours.services.lookup import duplicate_weekdays, find_day_index, weekday_name

logger = logging.getLogger(__name__)


def set_today_closed(
    schedule: WeeklySchedule,
    is_closed: bool,
    primary_timezone: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> WeeklySchedule:
    """
    Close or reopen today's entry.

    "Today" is the weekday in `primary_timezone`, else the schedule's own
    primary timezone, else DEFAULT_TIMEZONE. Closing stamps the entry with
    the current UTC instant; reopening removes the stamp.

    Returns:
        An updated copy, or `schedule` itself when no entry matches today
    """
    clock = clock or SystemClock()
    tz_name = primary_timezone or schedule.primary_timezone or get_settings().DEFAULT_TIMEZONE
    now = clock.now()
    today = weekday_name(now, tz_name)

    index = find_day_index(schedule.days, today)
    if index is None:
        logger.warning(f"No schedule entry for {today} ({tz_name}); closure not changed")
        return schedule

    updated = schedule.model_copy(deep=True)
    entry = updated.days[index]
    entry.is_closed = is_closed
    entry.closure_timestamp = now.astimezone(pytz.UTC) if is_closed else None

    logger.info(f"{'Closed' if is_closed else 'Reopened'} {today} at {now.isoformat()}")
    return updated


def reset_stale_closures(
    schedule: WeeklySchedule,
    now: datetime,
) -> Tuple[WeeklySchedule, bool]:
    """
    Clear closures stamped before the start of today.

    Each entry is judged against local midnight in its own effective
    timezone. Closures without a stamp are left alone.

    Returns:
        (schedule, changed). The schedule is a copy when changed.
    """
    updated = schedule.model_copy(deep=True)
    changed = False

    for entry in updated.days:
        if not entry.is_closed or entry.closure_timestamp is None:
            continue
        tz = resolve_timezone(effective_timezone_name(entry.timezone, schedule.primary_timezone))
        if entry.closure_timestamp < start_of_day(now, tz):
            entry.is_closed = False
            entry.closure_timestamp = None
            changed = True

    return (updated if changed else schedule), changed


def sweep_stale_closures(store: ScheduleStore, clock: Optional[Clock] = None) -> List:
    """
    Run reset_stale_closures over every tenant and persist the changed ones.

    A failure loading or saving one tenant is logged and skipped; the rest
    of the batch still runs.

    Returns:
        Ids of tenants whose schedule was saved
    """
    clock = clock or SystemClock()
    now = clock.now()
    tenant_ids = store.list_tenant_ids()
    updated_ids = []

    for tenant_id in tenant_ids:
        try:
            schedule = store.load(tenant_id)
            updated, changed = reset_stale_closures(schedule, now)
            if not changed:
                continue
            store.save(tenant_id, updated)
        except Exception as e:
            logger.error(f"Stale-closure reset failed for food truck {tenant_id}: {e}", exc_info=True)
            continue
        logger.info(f"Reset stale closures for food truck {tenant_id}")
        updated_ids.append(tenant_id)

    logger.info(
        f"Stale-closure sweep finished: {len(updated_ids)} of {len(tenant_ids)} food trucks updated"
    )
    return updated_ids


def toggle_tenant_closure(
    store: ScheduleStore,
    tenant_id,
    is_closed: bool,
    clock: Optional[Clock] = None,
) -> WeeklySchedule:
    """Load, close/reopen today, save. Unknown tenants raise TenantNotFoundError."""
    schedule = store.load(tenant_id)
    updated = set_today_closed(schedule, is_closed, clock=clock)
    if updated is not schedule:
        store.save(tenant_id, updated)
    return updated


def validate_schedule(schedule: WeeklySchedule) -> List[str]:
    """
    Check a schedule coming out of the editor.

    Raises:
        InvalidScheduleError: unknown weekday names, malformed HH:MM
            values, half-set hours or unknown timezones

    Returns:
        Warnings that do not block saving (duplicate weekdays)
    """
    errors = []

    if schedule.primary_timezone and schedule.primary_timezone not in pytz.all_timezones_set:
        errors.append(f"Unknown primary timezone: {schedule.primary_timezone}")

    for position, day in enumerate(schedule.days, start=1):
        label = f"Entry {position} ({day.day})"
        if day.day not in WEEKDAYS:
            errors.append(f"{label}: day must be one of {', '.join(WEEKDAYS)}")
        for field, value in (("openTime", day.open_time), ("closeTime", day.close_time)):
            if value and parse_clock_time(value) is None:
                errors.append(f"{label}: {field} {value!r} is not a valid HH:MM time")
        if bool(day.open_time) != bool(day.close_time):
            errors.append(f"{label}: openTime and closeTime must be set together")
        if day.timezone and day.timezone not in pytz.all_timezones_set:
            errors.append(f"{label}: unknown timezone {day.timezone}")

    if errors:
        raise InvalidScheduleError(errors)

    warnings = [
        f"{name} has more than one entry; only the first is used for open/closed checks"
        for name in duplicate_weekdays(schedule.days)
    ]
    for warning in warnings:
        logger.warning(warning)
    return warnings


def update_schedule(
    store: ScheduleStore,
    tenant_id,
    days: List[ScheduleDay],
    title: Optional[str] = None,
    description: Optional[str] = None,
    primary_timezone: Optional[str] = None,
) -> Tuple[WeeklySchedule, List[str]]:
    """
    Replace a tenant's weekly entries.

    Title, description and primary timezone are only changed when given.
    Closure stamps on entries that are not closed are dropped.

    Returns:
        (saved schedule, validation warnings)
    """
    current = store.load(tenant_id)
    updated = current.model_copy(deep=True)
    updated.days = [day.model_copy(deep=True) for day in days]
    if title is not None:
        updated.title = title
    if description is not None:
        updated.description = description
    if primary_timezone is not None:
        updated.primary_timezone = primary_timezone

    for entry in updated.days:
        if not entry.is_closed:
            entry.closure_timestamp = None

    warnings = validate_schedule(updated)
    store.save(tenant_id, updated)
    return updated, warnings
