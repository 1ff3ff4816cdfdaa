"""
Batch job: clear "closed today" overrides left over from earlier days.

Run from cron shortly after midnight, e.g.

    python -m truckhours.scripts.reset_stale_closures
    python -m truckhours.scripts.reset_stale_closures --migrate-hours
"""
import argparse
import logging

from truckhours.db.session import SessionLocal
from truckhours.repositories.schedule_store import SqlScheduleStore
from truckhours.services.migration import migrate_all
from truckhours.services.schedule_admin import sweep_stale_closures

logger = logging.getLogger(__name__)


def run(migrate_hours: bool = False) -> int:
    db = SessionLocal()
    try:
        store = SqlScheduleStore(db)
        if migrate_hours:
            migrate_all(store)
        updated = sweep_stale_closures(store)
        return len(updated)
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Reset stale food truck closures")
    parser.add_argument(
        "--migrate-hours",
        action="store_true",
        help="Also convert legacy free-text hours to openTime/closeTime first",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    count = run(migrate_hours=args.migrate_hours)
    print(f"Reset stale closures for {count} food trucks.")


if __name__ == "__main__":
    main()
