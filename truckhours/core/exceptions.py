"""
Errors raised by the scheduling engine.

Pure open/closed decisions never raise on bad stored data; they fail
closed and log. These are for the edit boundary and order validation.
"""


class ScheduleError(Exception):
    """Base class for scheduling errors."""


class InvalidScheduleError(ScheduleError):
    """A schedule edit contains values that cannot be stored."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class TenantNotFoundError(ScheduleError):
    def __init__(self, tenant_id):
        self.tenant_id = tenant_id
        super().__init__(f"Food truck {tenant_id} not found")


class OrderingClosedError(ScheduleError):
    """The truck is not accepting orders right now."""


class PickupUnavailableError(ScheduleError):
    """The requested pickup time cannot be honoured."""
