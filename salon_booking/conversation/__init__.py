from salon_booking.conversation.booking_flow import (
    BookingFlow,
    TermsNotAcceptedError,
    UnknownSelectionError,
)
from salon_booking.conversation.session import SalonSession, SessionBusyError
from salon_booking.conversation.state_machine import (
    BookingFlowError,
    BookingState,
    BookingStateMachine,
    InvalidTransitionError,
    TransitionTrigger,
)

__all__ = [
    "BookingFlow",
    "BookingFlowError",
    "BookingState",
    "BookingStateMachine",
    "InvalidTransitionError",
    "SalonSession",
    "SessionBusyError",
    "TermsNotAcceptedError",
    "TransitionTrigger",
    "UnknownSelectionError",
]
