from salon_booking.schemas.booking_schema import Booking, BookingMode, Category, Service
from salon_booking.schemas.conversation_schema import ConversationMessage, Role
from salon_booking.schemas.customer_schema import ContactDetails

__all__ = [
    "Booking",
    "BookingMode",
    "Category",
    "Service",
    "ContactDetails",
    "ConversationMessage",
    "Role",
]
