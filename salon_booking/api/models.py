"""Pydantic models for API request/response validation."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from salon_booking.conversation.booking_flow import (
    Completed,
    Confirmation,
    ContactCollection,
    ServiceSelection,
    SlotSelection,
)
from salon_booking.conversation.session import SalonSession
from salon_booking.schemas.booking_schema import BookingMode, Category, Service
from salon_booking.schemas.conversation_schema import ConversationMessage
from salon_booking.tools.availability import format_slot
from salon_booking.tools.booking import summarize_selection


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    code: Optional[str] = Field(None, description="Error code")


class CategoryView(BaseModel):
    id: str
    name: str
    icon: str
    description: str
    service_count: int

    @classmethod
    def build(cls, category: Category, mode: BookingMode) -> "CategoryView":
        return cls(
            id=category.id,
            name=category.name,
            icon=category.icon,
            description=category.description,
            service_count=len(category.services_for(mode)),
        )


class SlotView(BaseModel):
    start: datetime
    label: str

    @classmethod
    def build(cls, slot: datetime) -> "SlotView":
        return cls(start=slot, label=format_slot(slot))


class QuickPromptGroup(BaseModel):
    category: str
    prompts: list[str]


class ContactRequest(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""


class ContactValidationResponse(BaseModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class ModeRequest(BaseModel):
    mode: BookingMode


class CategoryRequest(BaseModel):
    category_id: str


class ServiceRequest(BaseModel):
    service_id: str


class DayRequest(BaseModel):
    day: date


class SlotRequest(BaseModel):
    slot: datetime


class TermsRequest(BaseModel):
    accepted: bool


class MessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(BaseModel):
    reply: Optional[ConversationMessage] = None
    messages: list[ConversationMessage]


class SessionView(BaseModel):
    """Snapshot of a session for the presentation layer."""
    session_id: str
    state: str
    mode: BookingMode
    busy: bool
    category: Optional[CategoryView] = None
    services: list[Service] = Field(default_factory=list)
    service: Optional[Service] = None
    day: Optional[date] = None
    slots: list[SlotView] = Field(default_factory=list)
    slot: Optional[datetime] = None
    errors: dict[str, str] = Field(default_factory=dict)
    summary: dict[str, str] = Field(default_factory=dict)
    terms_accepted: bool = False
    can_confirm: bool = False
    messages: list[ConversationMessage] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: SalonSession) -> "SessionView":
        flow = session.flow
        stage = flow.stage
        view = cls(
            session_id=session.session_id,
            state=flow.state.value,
            mode=flow.mode,
            busy=session.is_busy,
            can_confirm=flow.can_confirm,
            messages=session.messages,
        )
        if isinstance(stage, (ServiceSelection, SlotSelection, ContactCollection, Confirmation)):
            view.category = CategoryView.build(stage.category, flow.mode)
        if isinstance(stage, ServiceSelection):
            view.services = flow.available_services()
        if isinstance(stage, SlotSelection):
            view.service = stage.service
            view.day = stage.day
            view.slots = [SlotView.build(s) for s in flow.available_slots()]
            view.slot = stage.slot
            if stage.slot is not None:
                view.summary = summarize_selection(stage.service, stage.slot)
        if isinstance(stage, ContactCollection):
            view.service = stage.service
            view.slot = stage.slot
            view.errors = dict(stage.errors)
            view.summary = summarize_selection(stage.service, stage.slot)
        if isinstance(stage, Confirmation):
            view.service = stage.service
            view.slot = stage.slot
            view.terms_accepted = stage.terms_accepted
            view.summary = summarize_selection(stage.service, stage.slot, stage.contact)
        if isinstance(stage, Completed):
            booking = stage.booking
            view.service = booking.service
            view.slot = booking.slot
            view.summary = summarize_selection(booking.service, booking.slot, booking.contact)
        return view
