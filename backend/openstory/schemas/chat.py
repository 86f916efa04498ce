"""Chat-related Pydantic schemas.

Field aliases match the persisted record layout and the API payloads
(``sessionId``, ``createdAt``, ``timestamp``...).
"""

import time
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system"]


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


class Message(BaseModel):
    """A single chat message. Immutable once created."""
    role: Role
    content: str
    created_at: int = Field(default_factory=now_ms, alias="timestamp")

    model_config = {"frozen": True, "populate_by_name": True}


class ConversationLog(BaseModel):
    """Ordered message history for one (session, game) pair."""
    session_id: str = Field(alias="sessionId")
    game_id: str = Field(alias="gameId")
    messages: list[Message] = Field(default_factory=list)
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")

    model_config = {"populate_by_name": True}


class SendMessageRequest(BaseModel):
    """Incoming chat message from the player."""
    message: str = ""


class ChatReply(BaseModel):
    """The stored user message and the generated assistant message."""
    user_message: Message = Field(alias="userMessage")
    assistant_message: Message = Field(alias="assistantMessage")

    model_config = {"populate_by_name": True}


class ChatHistoryResponse(BaseModel):
    chat_history: ConversationLog = Field(alias="chatHistory")

    model_config = {"populate_by_name": True}


class ApiError(BaseModel):
    error: str
    details: str | None = None
