"""
One-off migration of legacy free-text hours to structured times.

Old schedules only carried `hours` like "11:00 AM - 2:00 PM". This fills
`openTime`/`closeTime` from that text so the evaluator no longer needs the
fallback path.
"""
import logging
from typing import Tuple

from truckhours.repositories.schedule_store import ScheduleStore
from truckhours.schemas.schedule import WeeklySchedule
from truckhours.services.hours import parse_legacy_hours

logger = logging.getLogger(__name__)


def migrate_legacy_hours(schedule: WeeklySchedule) -> Tuple[WeeklySchedule, bool]:
    """
    Derive structured times from legacy text where they are missing.

    Entries that already have both structured times are skipped. Migrated
    entries are marked open (is_closed=False). Unparseable text is left as
    it is.

    Returns:
        (schedule, changed). The schedule is a copy when changed.
    """
    updated = schedule.model_copy(deep=True)
    changed = False

    for entry in updated.days:
        if entry.open_time and entry.close_time:
            continue
        if not entry.hours:
            continue
        parsed = parse_legacy_hours(entry.hours)
        if parsed is None:
            logger.warning(f"Could not migrate hours {entry.hours!r} for {entry.day}")
            continue
        opens, closes = parsed
        entry.open_time = opens.strftime("%H:%M")
        entry.close_time = closes.strftime("%H:%M")
        entry.is_closed = False
        entry.closure_timestamp = None
        changed = True

    return (updated if changed else schedule), changed


def migrate_all(store: ScheduleStore) -> int:
    """
    Run migrate_legacy_hours for every tenant.

    Returns:
        Number of tenants saved. Failures are logged and skipped.
    """
    updated_count = 0
    for tenant_id in store.list_tenant_ids():
        try:
            schedule, changed = migrate_legacy_hours(store.load(tenant_id))
            if not changed:
                continue
            store.save(tenant_id, schedule)
        except Exception as e:
            logger.error(f"Hours migration failed for food truck {tenant_id}: {e}", exc_info=True)
            continue
        updated_count += 1

    logger.info(f"Migration complete. Updated {updated_count} food trucks.")
    return updated_count
