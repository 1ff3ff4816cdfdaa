"""
Persistence of weekly schedule documents, keyed by tenant id.

The engine itself never does I/O; batch jobs and admin actions talk to a
ScheduleStore. SqlScheduleStore keeps the schedule inside the
`food_trucks.configuration` JSON document, leaving the rest of that
document untouched.
"""
import logging
from typing import List, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from truckhours.core.exceptions import TenantNotFoundError
from truckhours.models.food_truck import FoodTruck
from truckhours.schemas.schedule import WeeklySchedule

logger = logging.getLogger(__name__)


class ScheduleStore(Protocol):
    def list_tenant_ids(self) -> List:
        """All tenant ids, in a stable order."""
        ...

    def load(self, tenant_id) -> WeeklySchedule:
        """Raises TenantNotFoundError for unknown ids."""
        ...

    def save(self, tenant_id, schedule: WeeklySchedule) -> None:
        ...


class SqlScheduleStore:
    """ScheduleStore backed by the FoodTruck table."""

    def __init__(self, db: Session):
        self.db = db

    def list_tenant_ids(self) -> List[UUID]:
        stmt = select(FoodTruck.id).order_by(FoodTruck.created_at, FoodTruck.id)
        return list(self.db.execute(stmt).scalars().all())

    def _get(self, tenant_id) -> FoodTruck:
        truck = self.db.get(FoodTruck, tenant_id)
        if truck is None:
            raise TenantNotFoundError(tenant_id)
        return truck

    def load(self, tenant_id) -> WeeklySchedule:
        truck = self._get(tenant_id)
        document = (truck.configuration or {}).get("schedule") or {}
        return WeeklySchedule.model_validate(document)

    def save(self, tenant_id, schedule: WeeklySchedule) -> None:
        truck = self._get(tenant_id)
        # Reassign the whole document so the JSON column is flagged dirty
        configuration = dict(truck.configuration or {})
        configuration["schedule"] = schedule.to_document()
        truck.configuration = configuration
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.debug(f"Saved schedule for food truck {tenant_id}")
