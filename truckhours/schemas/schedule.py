"""
Schedule document schemas.

Field names are snake_case in Python and camelCase in the stored JSON
document, so configuration blobs written by the admin UI load unchanged.
"""
from datetime import datetime
from typing import List, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class DocumentModel(BaseModel):
    """Base for models stored inside a truck's configuration document."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """JSON-ready dict using the stored (camelCase) field names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Coordinates(DocumentModel):
    """Map pin for a stop. Display only."""
    lat: float
    lng: float


class ScheduleDay(DocumentModel):
    """One weekly recurring stop, keyed by English weekday name."""
    day: str
    location: Optional[str] = None
    address: Optional[str] = None
    open_time: Optional[str] = None  # "HH:MM", 24h
    close_time: Optional[str] = None  # "HH:MM", 24h
    hours: Optional[str] = None  # legacy "11:00 AM - 2:00 PM"
    is_closed: bool = False
    closure_timestamp: Optional[datetime] = None  # UTC, set when is_closed turned on
    timezone: Optional[str] = None  # IANA name
    coordinates: Optional[Coordinates] = None

    @field_validator("is_closed", mode="before")
    @classmethod
    def null_means_open(cls, v):
        return False if v is None else v

    @field_validator("closure_timestamp")
    @classmethod
    def closure_in_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return None
        if v.tzinfo is None:
            return pytz.UTC.localize(v)
        return v.astimezone(pytz.UTC)


class WeeklySchedule(DocumentModel):
    """A truck's full weekly schedule. `days` is unordered and may repeat a weekday."""
    title: Optional[str] = None
    description: Optional[str] = None
    primary_timezone: Optional[str] = None
    days: List[ScheduleDay] = Field(default_factory=list)


class PickupOptions(BaseModel):
    """Pickup choices offered to a customer at a given instant."""
    slots: List[datetime]
    asap_only: bool
    closes_at: datetime
    last_orderable: datetime


class ScheduleStatus(BaseModel):
    """Open/closed state plus a short human message for dashboards."""
    is_open: bool
    closing_soon: bool = False
    opening_soon: bool = False
    minutes_until_close: Optional[int] = None
    minutes_until_open: Optional[int] = None
    message: str = ""
