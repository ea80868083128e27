"""Message templates for booking hand-offs into the chat log."""

from datetime import datetime

from salon_booking.schemas.booking_schema import Service
from salon_booking.schemas.customer_schema import ContactDetails
from salon_booking.utils import format_datetime

TERMS_AND_CONDITIONS: tuple[str, ...] = (
    "24-hour cancellation notice required",
    "Late arrivals may result in reduced service time",
    "Full payment required for no-shows",
    "Prices may vary based on hair length/thickness",
)


def build_selection_message(service: Service, slot: datetime) -> str:
    """Assistant greeting shown once a service and slot are chosen."""
    return (
        f"Great! You've selected {service.name} for {format_datetime(slot)}. "
        "Please provide your contact details to complete the booking."
    )


def build_confirmation_message(
    service: Service, slot: datetime, contact: ContactDetails
) -> str:
    """Full booking confirmation appended to the conversation on completion."""
    lines = [
        "Booking confirmed!",
        "",
        f"Service: {service.name}",
        f"Date & Time: {format_datetime(slot)}",
        f"Duration: {service.duration}",
        f"Price: {service.price}",
        "",
        "Contact Details:",
        f"Name: {contact.name}",
        f"Email: {contact.email}",
        f"Phone: {contact.phone}",
    ]
    return "\n".join(lines)
