"""
Injectable "now" providers.

Scheduling code never calls datetime.now() directly; it asks a Clock, so
tests and batch jobs can pin the instant they evaluate.
"""
from datetime import datetime
from typing import Optional, Protocol

import pytz


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        ...


class SystemClock:
    """
    Wall clock of the host.

    With no timezone the result carries the host's local zone, which is
    what the "viewer's local day" lookups rely on. Pass a zone to pin it.
    """

    def __init__(self, timezone: Optional[str] = None):
        self.timezone = timezone

    def now(self) -> datetime:
        if self.timezone:
            return datetime.now(pytz.timezone(self.timezone))
        return datetime.now().astimezone()


class FixedClock:
    """Clock frozen at a given instant. Naive datetimes are taken as UTC."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = pytz.UTC.localize(instant)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = pytz.UTC.localize(instant)
        self.instant = instant
