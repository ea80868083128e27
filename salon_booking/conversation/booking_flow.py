"""
Booking selection flow: category -> service -> slot -> contact -> confirm.

The current stage is a single payload object carrying exactly the data
collected so far, so impossible combinations (a confirmation without
contact details, two stages visible at once) cannot be represented.
Every move is checked against BookingStateMachine before the payload
changes.

Usage:
    flow = BookingFlow()
    flow.select_category("hair")
    flow.select_service("haircut")
    flow.select_day(date(2026, 10, 20))
    flow.select_slot(flow.available_slots()[0])
    flow.confirm_slot()
    flow.submit_contact("Jane Doe", "jane@example.com", "07123456789")
    flow.set_terms_accepted(True)
    booking = flow.confirm()
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Callable, ClassVar, Optional, Union

from salon_booking.conversation.state_machine import (
    BookingFlowError,
    BookingState,
    BookingStateMachine,
    InvalidTransitionError,
    TransitionTrigger,
)
from salon_booking.schemas.booking_schema import Booking, BookingMode, Category, Service
from salon_booking.schemas.customer_schema import ContactDetails
from salon_booking.tools.availability import generate_slots
from salon_booking.tools.booking import create_booking
from salon_booking.tools.customer import build_contact_details, validate_contact_details
from salon_booking.tools.services import count_services, get_categories, get_category

logger = logging.getLogger(__name__)


class UnknownSelectionError(BookingFlowError):
    """Raised when a category, service, day or slot is not on offer."""


class TermsNotAcceptedError(BookingFlowError):
    """Raised when confirming before the terms are accepted."""


# ------------------------------------------------------------------ #
# Stage payloads
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class CategorySelection:
    state: ClassVar[BookingState] = BookingState.CATEGORY_SELECTION


@dataclass(frozen=True)
class ServiceSelection:
    category: Category
    state: ClassVar[BookingState] = BookingState.SERVICE_SELECTION


@dataclass(frozen=True)
class SlotSelection:
    category: Category
    service: Service
    day: Optional[date] = None
    slot: Optional[datetime] = None
    state: ClassVar[BookingState] = BookingState.SLOT_SELECTION


@dataclass(frozen=True)
class ContactCollection:
    category: Category
    service: Service
    slot: datetime
    errors: dict[str, str] = field(default_factory=dict)
    state: ClassVar[BookingState] = BookingState.CONTACT_DETAILS


@dataclass(frozen=True)
class Confirmation:
    category: Category
    service: Service
    slot: datetime
    contact: ContactDetails
    terms_accepted: bool = False
    state: ClassVar[BookingState] = BookingState.CONFIRMATION

    @property
    def can_confirm(self) -> bool:
        return self.terms_accepted


@dataclass(frozen=True)
class Completed:
    booking: Booking
    state: ClassVar[BookingState] = BookingState.COMPLETED


Stage = Union[
    CategorySelection,
    ServiceSelection,
    SlotSelection,
    ContactCollection,
    Confirmation,
    Completed,
]


class BookingFlow:
    """
    Drives one customer's booking from category choice to confirmation.

    The booking mode outlives individual stages; changing it discards
    any in-progress service selection.
    """

    def __init__(
        self,
        mode: BookingMode = BookingMode.SCHEDULED,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._sm = BookingStateMachine()
        self._stage: Stage = CategorySelection()
        self._mode = mode
        self._clock = clock

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def state(self) -> BookingState:
        return self._sm.current_state

    @property
    def mode(self) -> BookingMode:
        return self._mode

    def get_state_trace(self) -> list[str]:
        return self._sm.get_state_trace()

    def _advance(self, trigger: TransitionTrigger, stage: Stage) -> None:
        self._sm.transition(trigger)
        self._stage = stage

    def _require(self, stage_type: type, action: str):
        if not isinstance(self._stage, stage_type):
            raise InvalidTransitionError(
                f"Cannot {action} during '{self._sm.current_state.value}'"
            )
        return self._stage

    # ------------------------------------------------------------------ #
    # Mode, category, service
    # ------------------------------------------------------------------ #

    def set_mode(self, mode: BookingMode) -> None:
        """Switch booking mode, dropping any selected service."""
        stage = self._stage
        if isinstance(stage, CategorySelection):
            next_stage: Stage = CategorySelection()
        elif isinstance(stage, (ServiceSelection, SlotSelection)):
            next_stage = ServiceSelection(category=stage.category)
        else:
            next_stage = stage
        self._advance(TransitionTrigger.MODE_CHANGED, next_stage)
        self._mode = mode
        logger.debug("Booking mode set to %s", mode.value)

    def categories(self) -> list[tuple[Category, int]]:
        """Every category with its count of services for the current mode."""
        counts = count_services(self._mode)
        return [(c, counts[c.id]) for c in get_categories()]

    def select_category(self, category_id: str) -> Category:
        self._require(CategorySelection, "select a category")
        category = get_category(category_id)
        if category is None:
            raise UnknownSelectionError(f"Unknown category '{category_id}'")
        self._advance(TransitionTrigger.CATEGORY_SELECTED, ServiceSelection(category=category))
        return category

    def available_services(self) -> list[Service]:
        stage = self._require(ServiceSelection, "list services")
        return stage.category.services_for(self._mode)

    def select_service(self, service_id: str) -> Service:
        stage = self._require(ServiceSelection, "select a service")
        for service in stage.category.services_for(self._mode):
            if service.id == service_id:
                break
        else:
            raise UnknownSelectionError(
                f"Service '{service_id}' is not available for {self._mode.value} "
                f"booking in {stage.category.name}"
            )
        day = self._clock().date() if self._mode == BookingMode.IMMEDIATE else None
        self._advance(
            TransitionTrigger.SERVICE_SELECTED,
            SlotSelection(category=stage.category, service=service, day=day),
        )
        return service

    # ------------------------------------------------------------------ #
    # Date & time
    # ------------------------------------------------------------------ #

    def select_day(self, day: date) -> None:
        """Pick the appointment date. Immediate bookings are fixed to today."""
        stage = self._require(SlotSelection, "select a date")
        if self._mode == BookingMode.IMMEDIATE:
            raise UnknownSelectionError("Immediate bookings are always for today")
        if day < self._clock().date():
            raise UnknownSelectionError(f"{day.isoformat()} is in the past")
        self._stage = replace(stage, day=day, slot=None)

    def available_slots(self) -> list[datetime]:
        stage = self._require(SlotSelection, "list time slots")
        return generate_slots(stage.day, self._mode, self._clock())

    def select_slot(self, slot: datetime) -> None:
        stage = self._require(SlotSelection, "select a time")
        if slot not in self.available_slots():
            raise UnknownSelectionError(f"{slot.isoformat()} is not an available slot")
        self._stage = replace(stage, slot=slot)

    def confirm_slot(self) -> datetime:
        stage = self._require(SlotSelection, "confirm a time")
        if stage.slot is None:
            raise UnknownSelectionError("Select a time before continuing")
        self._advance(
            TransitionTrigger.SLOT_CONFIRMED,
            ContactCollection(category=stage.category, service=stage.service, slot=stage.slot),
        )
        return stage.slot

    # ------------------------------------------------------------------ #
    # Contact details & confirmation gate
    # ------------------------------------------------------------------ #

    def submit_contact(self, name: str, email: str, phone: str) -> dict[str, str]:
        """
        Validate and store contact details.

        Returns:
            Field errors. When empty, the flow has moved to confirmation.
        """
        stage = self._require(ContactCollection, "submit contact details")
        errors = validate_contact_details(name, email, phone)
        if errors:
            self._stage = replace(stage, errors=errors)
            return errors
        contact = build_contact_details(name, email, phone)
        self._advance(
            TransitionTrigger.CONTACT_SUBMITTED,
            Confirmation(
                category=stage.category,
                service=stage.service,
                slot=stage.slot,
                contact=contact,
            ),
        )
        return {}

    def set_terms_accepted(self, accepted: bool) -> None:
        stage = self._require(Confirmation, "accept the terms")
        self._stage = replace(stage, terms_accepted=accepted)

    @property
    def can_confirm(self) -> bool:
        return isinstance(self._stage, Confirmation) and self._stage.can_confirm

    def confirm(self) -> Booking:
        stage = self._require(Confirmation, "confirm the booking")
        if not stage.terms_accepted:
            raise TermsNotAcceptedError("Please accept the terms and conditions first")
        booking = create_booking(stage.service, self._mode, stage.slot, stage.contact)
        self._advance(TransitionTrigger.BOOKING_CONFIRMED, Completed(booking=booking))
        return booking

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    def cancel(self) -> None:
        """Step back one stage, discarding what the current stage collected."""
        stage = self._stage
        if isinstance(stage, ServiceSelection):
            previous: Stage = CategorySelection()
        elif isinstance(stage, SlotSelection):
            previous = ServiceSelection(category=stage.category)
        elif isinstance(stage, ContactCollection):
            if self._mode == BookingMode.IMMEDIATE:
                day = self._clock().date()
            else:
                day = stage.slot.date()
            previous = SlotSelection(category=stage.category, service=stage.service, day=day)
        elif isinstance(stage, Confirmation):
            previous = ContactCollection(
                category=stage.category, service=stage.service, slot=stage.slot
            )
        else:
            previous = stage
        self._advance(TransitionTrigger.CANCELLED, previous)

    def new_booking(self) -> None:
        self._advance(TransitionTrigger.NEW_BOOKING, CategorySelection())
