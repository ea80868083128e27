"""
Synthetic time-slot generation.

Availability is not tracked anywhere: every open day offers the same
30-minute grid between opening and closing time, minus the lunch point.
Generation is pure, so callers can regenerate slots on every render.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from salon_booking.schemas.booking_schema import BookingMode
from salon_booking.utils import format_time

logger = logging.getLogger(__name__)

OPENING_TIME = time(9, 0)
CLOSING_TIME = time(18, 0)
SLOT_STRIDE = timedelta(minutes=30)

# Only the exact instant is skipped; 12:30 remains bookable.
LUNCH_TIME = time(12, 0)


def _next_boundary(day: date, now: datetime) -> datetime:
    """First stride boundary on ``day`` at or after the time of day of ``now``."""
    midnight = datetime.combine(day, time())
    elapsed = datetime.combine(day, now.time()) - midnight
    steps = -(-elapsed // SLOT_STRIDE)
    return midnight + steps * SLOT_STRIDE


def generate_slots(
    day: Optional[date], mode: BookingMode, now: datetime
) -> list[datetime]:
    """
    Produce the ordered bookable slots for a day.

    Scheduled mode starts at opening time. Immediate mode starts at the
    next 30-minute boundary at or after ``now`` and never offers a slot
    earlier than ``now``. Both stop strictly before closing time.
    Returns an empty list when no day is given.
    """
    if day is None:
        return []

    opening = datetime.combine(day, OPENING_TIME)
    closing = datetime.combine(day, CLOSING_TIME)

    if mode == BookingMode.IMMEDIATE:
        start = max(_next_boundary(day, now), opening)
    else:
        start = opening

    slots: list[datetime] = []
    current = start
    while current < closing:
        if current.time() != LUNCH_TIME:
            if mode != BookingMode.IMMEDIATE or current >= now:
                slots.append(current)
        current += SLOT_STRIDE
    return slots


def format_slot(slot: datetime) -> str:
    """Display label for a slot button, e.g. '10:30 am'."""
    return format_time(slot)
