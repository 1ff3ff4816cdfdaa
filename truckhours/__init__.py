"""
truckhours: open/closed scheduling engine for food-truck ordering sites.
"""
from truckhours.services.closures import is_open
from truckhours.services.display import format_time_range, group_schedule_days
from truckhours.services.hours import is_within_hours
from truckhours.services.lookup import get_today
from truckhours.services.pickup import build_pickup_options
from truckhours.services.schedule_admin import set_today_closed, sweep_stale_closures

__all__ = [
    "is_open",
    "is_within_hours",
    "get_today",
    "build_pickup_options",
    "set_today_closed",
    "sweep_stale_closures",
    "format_time_range",
    "group_schedule_days",
]
