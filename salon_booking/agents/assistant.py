"""
Booking chat assistant - forwards a short conversation window to the
chat-completion provider.

Only the last few turns are sent with each request, behind the fixed
system prompt. Provider failures never reach the caller: they are logged
and replaced with a short apology the UI can display as a reply.
"""

from typing import Any, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from salon_booking.config import settings
from salon_booking.logging_context import get_session_logger
from salon_booking.prompts.system_prompts import BOOKING_ASSISTANT_PROMPT
from salon_booking.schemas.conversation_schema import ConversationMessage, Role

logger = get_session_logger(__name__)

# Fixed sampling parameters; not user-configurable.
MODEL = "gpt-3.5-turbo"
TEMPERATURE = 0.5
MAX_TOKENS = 150
PRESENCE_PENALTY = -0.5  # favour short, on-topic replies
FREQUENCY_PENALTY = 0.3  # discourage repetition

HISTORY_WINDOW = 3

EMPTY_REPLY_FALLBACK = "Sorry, please try again."
ERROR_FALLBACK = "Sorry, please try again later."


def build_request_messages(
    history: Sequence[ConversationMessage], new_message: str
) -> list[dict[str, str]]:
    """System prompt, the trailing history window, then the new user turn."""
    window = list(history)[-HISTORY_WINDOW:]
    messages = [{"role": "system", "content": BOOKING_ASSISTANT_PROMPT}]
    messages.extend(m.to_api() for m in window)
    messages.append({"role": Role.USER.value, "content": new_message})
    return messages


class BookingAssistant:
    """Chat assistant backed by an OpenAI-compatible completion client."""

    def __init__(self, client: Optional[Any] = None) -> None:
        self._client = client

    def _get_client(self) -> Any:
        # Built lazily so a missing API key degrades to the fallback reply.
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=settings.chat.api_key,
                timeout=settings.chat.request_timeout_sec,
            )
        return self._client

    async def get_reply(
        self, history: Sequence[ConversationMessage], new_message: str
    ) -> str:
        """
        Ask the provider for the next assistant reply.

        Returns:
            The first choice's text, or a fixed fallback string. Never raises
            for provider or transport errors.
        """
        messages = build_request_messages(history, new_message)
        try:
            response = await self._get_client().chat.completions.create(
                model=MODEL,
                messages=messages,
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
                presence_penalty=PRESENCE_PENALTY,
                frequency_penalty=FREQUENCY_PENALTY,
            )
        except OpenAIError as exc:
            logger.error("Chat completion failed: %s", exc)
            return ERROR_FALLBACK
        except Exception as exc:
            # Anything else from the client (transport, injected stub) is unexpected.
            logger.exception("Chat completion failed unexpectedly: %s", exc)
            return ERROR_FALLBACK

        if not response.choices:
            return EMPTY_REPLY_FALLBACK
        content = response.choices[0].message.content
        return content or EMPTY_REPLY_FALLBACK


_default_assistant: Optional[BookingAssistant] = None


async def get_reply(history: Sequence[ConversationMessage], new_message: str) -> str:
    """Module-level shortcut using a shared default assistant."""
    global _default_assistant
    if _default_assistant is None:
        _default_assistant = BookingAssistant()
    return await _default_assistant.get_reply(history, new_message)
