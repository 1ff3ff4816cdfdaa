"""
Pickup-time policy for customer orders.

Customers pick "as soon as possible" or a specific slot. Slots are on a
5-minute grid, start after a preparation buffer, and stop 30 minutes
before closing. Within the last 30 minutes only ASAP is offered so the
kitchen is never promised a time it cannot honour.

This module shapes pickup choices; whether the truck is open at all is
decided by closures.is_open.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from truckhours.core.business_day import (
    ceil_to_interval,
    effective_timezone_name,
    minutes_between,
    resolve_timezone,
    to_local,
)
from truckhours.core.config import get_settings
from truckhours.core.exceptions import OrderingClosedError, PickupUnavailableError
from truckhours.schemas.schedule import PickupOptions, ScheduleDay
from truckhours.services.closures import is_open
from truckhours.services.hours import resolve_window

logger = logging.getLogger(__name__)


def build_pickup_options(
    day: Optional[ScheduleDay],
    now: datetime,
    primary_timezone: Optional[str] = None,
) -> PickupOptions:
    """
    Pickup slots and ASAP-only flag at `now`.

    Args:
        day: Today's schedule entry (None = no schedule)
        now: Current instant
        primary_timezone: Truck-level fallback zone

    Returns:
        PickupOptions with slots expressed in the entry's timezone. Without
        usable hours the window is assumed to close
        PICKUP_DEFAULT_WINDOW_MINUTES from now.
    """
    settings = get_settings()
    tz = resolve_timezone(effective_timezone_name(day.timezone if day else None, primary_timezone))
    local_now = to_local(now, tz)

    window = resolve_window(day, now, primary_timezone) if day is not None else None
    if window is None:
        closes_at = tz.normalize(local_now + timedelta(minutes=settings.PICKUP_DEFAULT_WINDOW_MINUTES))
    else:
        closes_at = window.closes_at

    last_orderable = tz.normalize(closes_at - timedelta(minutes=settings.PICKUP_LAST_ORDER_MINUTES))
    step = timedelta(minutes=settings.PICKUP_SLOT_MINUTES)

    slots = []
    if local_now < last_orderable:
        slot = tz.normalize(
            ceil_to_interval(local_now, settings.PICKUP_SLOT_MINUTES)
            + timedelta(minutes=settings.PICKUP_PREP_MINUTES)
        )
        while slot <= last_orderable and len(slots) < settings.PICKUP_MAX_SLOTS:
            slots.append(slot)
            slot = tz.normalize(slot + step)

    # TODO: confirm with product whether the lock should lift inside the
    # final 15 minutes; only the 30-minute threshold is enforced today.
    asap_only = minutes_between(local_now, closes_at) <= settings.PICKUP_LAST_ORDER_MINUTES

    return PickupOptions(
        slots=slots,
        asap_only=asap_only,
        closes_at=closes_at,
        last_orderable=last_orderable,
    )


def is_accepting_orders(
    day: Optional[ScheduleDay],
    now: datetime,
    primary_timezone: Optional[str] = None,
) -> bool:
    """
    Open, and not yet inside the final ORDER_CUTOFF_MINUTES before closing.
    """
    if not is_open(day, now, primary_timezone):
        return False
    window = resolve_window(day, now, primary_timezone)
    cutoff = window.closes_at - timedelta(minutes=get_settings().ORDER_CUTOFF_MINUTES)
    return to_local(now, window.tz) < cutoff


def validate_pickup_request(
    day: Optional[ScheduleDay],
    now: datetime,
    requested: Optional[datetime] = None,
    primary_timezone: Optional[str] = None,
) -> Optional[datetime]:
    """
    Check an order's pickup choice at submission time.

    Args:
        requested: Chosen slot, or None for ASAP

    Returns:
        The accepted pickup time, None for ASAP

    Raises:
        OrderingClosedError: the truck is not accepting orders
        PickupUnavailableError: a specific time was asked for but is not
            on offer (ASAP-only period or not one of the slots)
    """
    if not is_accepting_orders(day, now, primary_timezone):
        raise OrderingClosedError("This food truck is not accepting orders right now")

    if requested is None:
        return None

    options = build_pickup_options(day, now, primary_timezone)
    if options.asap_only:
        raise PickupUnavailableError("Only ASAP pickup is available this close to closing")

    tz = resolve_timezone(effective_timezone_name(day.timezone, primary_timezone))
    requested = to_local(requested, tz)
    if requested not in options.slots:
        logger.info(f"Rejected pickup time {requested.isoformat()} for {day.day}")
        raise PickupUnavailableError(
            f"{requested.strftime('%I:%M %p').lstrip('0')} is not an available pickup time"
        )
    return requested
