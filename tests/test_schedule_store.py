"""
Tests for the SQLAlchemy-backed schedule store.
"""
import uuid

import pytest

from truckhours.core.clock import FixedClock
from truckhours.core.exceptions import TenantNotFoundError
from truckhours.models.food_truck import FoodTruck
from truckhours.repositories.schedule_store import SqlScheduleStore
from truckhours.schemas.schedule import ScheduleDay, WeeklySchedule
from truckhours.services.schedule_admin import sweep_stale_closures
from tests.conftest import ny


STORED_CONFIGURATION = {
    "primaryColor": "#FF6B35",
    "schedule": {
        "title": "Weekly Schedule",
        "primaryTimezone": "America/New_York",
        "days": [
            {
                "day": "Monday",
                "location": "Main St",
                "openTime": "11:00",
                "closeTime": "14:00",
                "isClosed": True,
                "closureTimestamp": "2024-01-01T17:00:00.000Z",
                "coordinates": {"lat": 40.7, "lng": -74.0},
            },
            {"day": "Tuesday", "hours": "11:00 AM - 2:00 PM", "isClosed": None},
        ],
    },
}


@pytest.fixture
def truck(db) -> FoodTruck:
    truck = FoodTruck(subdomain="tacos", name="Taco Truck", configuration=STORED_CONFIGURATION)
    db.add(truck)
    db.commit()
    db.refresh(truck)
    return truck


def test_load_camel_case_document(db, truck):
    schedule = SqlScheduleStore(db).load(truck.id)

    assert schedule.title == "Weekly Schedule"
    assert schedule.primary_timezone == "America/New_York"
    monday, tuesday = schedule.days
    assert monday.open_time == "11:00"
    assert monday.is_closed is True
    assert monday.closure_timestamp == ny(2024, 1, 1, 12, 0)
    assert monday.coordinates.lat == 40.7
    assert tuesday.is_closed is False


def test_save_keeps_the_rest_of_the_configuration(db, truck):
    store = SqlScheduleStore(db)
    schedule = store.load(truck.id)
    schedule.days.append(ScheduleDay(day="Friday", open_time="17:00", close_time="22:00"))
    store.save(truck.id, schedule)

    db.expire_all()
    stored = db.get(FoodTruck, truck.id).configuration
    assert stored["primaryColor"] == "#FF6B35"
    assert stored["schedule"]["days"][2] == {
        "day": "Friday",
        "openTime": "17:00",
        "closeTime": "22:00",
        "isClosed": False,
    }
    assert stored["schedule"]["days"][0]["closureTimestamp"].startswith("2024-01-01T17:00:00")


def test_empty_configuration_loads_empty_schedule(db):
    truck = FoodTruck(subdomain="empty", configuration={})
    db.add(truck)
    db.commit()
    assert SqlScheduleStore(db).load(truck.id) == WeeklySchedule()


def test_unknown_tenant(db):
    with pytest.raises(TenantNotFoundError):
        SqlScheduleStore(db).load(uuid.uuid4())


def test_sweep_against_database(db, truck):
    store = SqlScheduleStore(db)
    assert store.list_tenant_ids() == [truck.id]

    updated = sweep_stale_closures(store, clock=FixedClock(ny(2024, 1, 2, 0, 1)))
    assert updated == [truck.id]

    db.expire_all()
    monday = db.get(FoodTruck, truck.id).configuration["schedule"]["days"][0]
    assert monday["isClosed"] is False
    assert "closureTimestamp" not in monday
