"""Shared test fixtures and helpers."""

from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from salon_booking.agents.assistant import BookingAssistant
from salon_booking.api.app import create_app
from salon_booking.api.store import SessionStore
from salon_booking.conversation.booking_flow import BookingFlow
from salon_booking.conversation.session import SalonSession
from salon_booking.conversation.state_machine import BookingStateMachine
from salon_booking.schemas.booking_schema import BookingMode
from salon_booking.schemas.conversation_schema import ConversationMessage, Role

# Tuesday morning, between two slot boundaries.
FROZEN_NOW = datetime(2026, 10, 20, 10, 10)
TOMORROW = date(2026, 10, 21)


def frozen_clock() -> datetime:
    return FROZEN_NOW


class FakeCompletions:
    """Stands in for ``client.chat.completions`` and records every call."""

    def __init__(self, reply: Optional[str] = "Happy to help!", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.reply is None:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(role="assistant", content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeChatClient:
    """Minimal AsyncOpenAI look-alike."""

    def __init__(self, **kwargs):
        self.completions = FakeCompletions(**kwargs)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def state_machine():
    return BookingStateMachine()


@pytest.fixture
def booking_flow():
    return BookingFlow(clock=frozen_clock)


@pytest.fixture
def immediate_flow():
    return BookingFlow(mode=BookingMode.IMMEDIATE, clock=frozen_clock)


@pytest.fixture
def fake_client():
    return FakeChatClient()


@pytest.fixture
def assistant(fake_client):
    return BookingAssistant(client=fake_client)


@pytest.fixture
def salon_session(assistant):
    return SalonSession(assistant=assistant, flow=BookingFlow(clock=frozen_clock))


@pytest.fixture
def api_client(fake_client):
    def factory() -> SalonSession:
        return SalonSession(
            assistant=BookingAssistant(client=fake_client),
            flow=BookingFlow(clock=frozen_clock),
        )

    app = create_app(store=SessionStore(factory=factory), clock=frozen_clock)
    return TestClient(app)


def make_message(role: Role, content: str) -> ConversationMessage:
    """Helper to create a ConversationMessage."""
    return ConversationMessage(role=role, content=content)


def advance_to_contact(flow: BookingFlow, slot_index: int = 0) -> datetime:
    """Drive a scheduled flow to contact details via Hair > Haircut tomorrow."""
    flow.select_category("hair")
    flow.select_service("haircut")
    flow.select_day(TOMORROW)
    slot = flow.available_slots()[slot_index]
    flow.select_slot(slot)
    flow.confirm_slot()
    return slot


def advance_to_confirmation(flow: BookingFlow) -> datetime:
    """Drive a scheduled flow to the confirmation gate with valid details."""
    slot = advance_to_contact(flow)
    errors = flow.submit_contact("Jane Doe", "jane@example.com", "07123 456 789")
    assert errors == {}
    return slot
