"""
Test configuration and fixtures.
"""
from datetime import datetime
from typing import Generator

import pytest
import pytz
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from truckhours.core.config import get_settings
from truckhours.core.exceptions import TenantNotFoundError
from truckhours.db.base import Base
from truckhours.models import FoodTruck  # noqa: F401  registers the table
from truckhours.schemas.schedule import WeeklySchedule

NEW_YORK = pytz.timezone("America/New_York")
LOS_ANGELES = pytz.timezone("America/Los_Angeles")


def ny(year, month, day, hour=0, minute=0, second=0) -> datetime:
    """Aware datetime on the New York wall clock."""
    return NEW_YORK.localize(datetime(year, month, day, hour, minute, second))


def utc(year, month, day, hour=0, minute=0) -> datetime:
    return pytz.UTC.localize(datetime(year, month, day, hour, minute))


class InMemoryScheduleStore:
    """ScheduleStore over a dict, with optional failures per tenant."""

    def __init__(self, schedules=None, fail_load=(), fail_save=()):
        self.schedules = dict(schedules or {})
        self.fail_load = set(fail_load)
        self.fail_save = set(fail_save)
        self.saved = []

    def list_tenant_ids(self):
        return list(self.schedules)

    def load(self, tenant_id) -> WeeklySchedule:
        if tenant_id in self.fail_load:
            raise RuntimeError(f"connection reset while loading {tenant_id}")
        if tenant_id not in self.schedules:
            raise TenantNotFoundError(tenant_id)
        return self.schedules[tenant_id].model_copy(deep=True)

    def save(self, tenant_id, schedule: WeeklySchedule) -> None:
        if tenant_id in self.fail_save:
            raise RuntimeError(f"write conflict for {tenant_id}")
        self.schedules[tenant_id] = schedule.model_copy(deep=True)
        self.saved.append(tenant_id)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """In-memory SQLite session with all tables created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
