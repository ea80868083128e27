"""Chat conversation schemas."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ConversationMessage(BaseModel):
    """A single message in a session's chat log."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)

    def to_api(self) -> dict[str, str]:
        """Shape expected by the chat-completion endpoint."""
        return {"role": self.role.value, "content": self.content}
