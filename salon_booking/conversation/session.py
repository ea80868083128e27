"""
Per-customer session: booking flow plus chat log.

A session allows at most one outbound chat request at a time. While a
request is in flight the session is busy and further sends are refused
rather than queued.
"""

import uuid
from typing import Optional

from salon_booking.agents.assistant import BookingAssistant
from salon_booking.conversation.booking_flow import BookingFlow
from salon_booking.logging_context import get_session_logger
from salon_booking.prompts.prompt_templates import (
    build_confirmation_message,
    build_selection_message,
)
from salon_booking.schemas.booking_schema import Booking
from salon_booking.schemas.conversation_schema import ConversationMessage, Role

logger = get_session_logger(__name__)


class SessionBusyError(Exception):
    """Raised when a message is sent while a reply is still pending."""


class SalonSession:
    """One customer's booking flow and conversation."""

    def __init__(
        self,
        assistant: Optional[BookingAssistant] = None,
        flow: Optional[BookingFlow] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.flow = flow or BookingFlow()
        self._assistant = assistant or BookingAssistant()
        self._messages: list[ConversationMessage] = []
        self._busy = False

    @property
    def messages(self) -> list[ConversationMessage]:
        return list(self._messages)

    @property
    def is_busy(self) -> bool:
        return self._busy

    def _append(self, role: Role, content: str) -> ConversationMessage:
        message = ConversationMessage(role=role, content=content)
        self._messages.append(message)
        return message

    async def send_message(self, text: str) -> Optional[ConversationMessage]:
        """
        Send a user message and append the assistant's reply.

        Returns:
            The assistant reply, or None for blank input.

        Raises:
            SessionBusyError: If a previous reply is still pending.
        """
        if not text.strip():
            return None
        if self._busy:
            raise SessionBusyError("A reply is already on its way")

        history = list(self._messages)
        self._append(Role.USER, text)
        self._busy = True
        try:
            reply = await self._assistant.get_reply(history, text)
        finally:
            self._busy = False
        return self._append(Role.ASSISTANT, reply)

    def confirm_slot(self) -> ConversationMessage:
        """Lock in the selected time and greet the customer in the chat."""
        slot = self.flow.confirm_slot()
        service = self.flow.stage.service
        return self._append(Role.ASSISTANT, build_selection_message(service, slot))

    def confirm_booking(self) -> Booking:
        """Confirm the booking and record the confirmation in the chat."""
        booking = self.flow.confirm()
        self._append(
            Role.ASSISTANT,
            build_confirmation_message(booking.service, booking.slot, booking.contact),
        )
        logger.info("Booking completed for %s", booking.service.id)
        return booking
