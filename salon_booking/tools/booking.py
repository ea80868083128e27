"""
Booking assembly and summaries.

Bookings are never stored: a confirmed Booking lives in the session
until the customer starts over or the session is dropped.
"""

import logging
from datetime import datetime
from typing import Optional

from salon_booking.schemas.booking_schema import Booking, BookingMode, Service
from salon_booking.schemas.customer_schema import ContactDetails
from salon_booking.utils import format_date, format_time

logger = logging.getLogger(__name__)


def create_booking(
    service: Service,
    mode: BookingMode,
    slot: datetime,
    contact: ContactDetails,
) -> Booking:
    """Assemble a confirmed booking from a completed selection."""
    if not service.supports(mode):
        raise ValueError(f"{service.name} cannot be booked in {mode.value} mode")
    booking = Booking(service=service, mode=mode, slot=slot, contact=contact)
    logger.info("Booking confirmed: %s at %s", service.id, slot.isoformat())
    return booking


def summarize_selection(
    service: Service, slot: datetime, contact: Optional[ContactDetails] = None
) -> dict[str, str]:
    """Ordered label -> value rows for the appointment summary panel."""
    rows = {
        "Service": service.name,
        "Date": format_date(slot),
        "Time": format_time(slot),
        "Duration": service.duration,
        "Price": service.price,
    }
    if contact is not None:
        rows.update(Name=contact.name, Email=contact.email, Phone=contact.phone)
    return rows
