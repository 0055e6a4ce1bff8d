"""Chat schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from models.chat_message import MessageRole

from .base import BaseModelSchema, BaseSchema


class ChatMessageResponse(BaseSchema):
    """Schema for a message embedded in a session."""

    role: MessageRole
    content: str
    timestamp: datetime


class ChatSessionCreate(BaseSchema):
    """Schema for creating a session. An empty or missing title falls back to the default."""

    title: str | None = Field(None, max_length=255, description="Optional session title")


class ChatSessionUpdate(BaseSchema):
    """Schema for renaming a session. An empty title leaves the current one untouched."""

    title: str | None = Field(None, max_length=255, description="New session title")


class ChatSessionResponse(BaseModelSchema):
    """Schema for a full session with its messages."""

    user_id: UUID
    title: str
    is_active: bool
    messages: list[ChatMessageResponse] = Field(default_factory=list)


class ChatSessionSummary(BaseModelSchema):
    """Schema for a session listing entry."""

    title: str
    message_count: int = Field(default=0, description="Number of messages in session")
    is_active: bool
    last_message: str | None = Field(None, description="Preview of the latest message")


class ChatRequest(BaseSchema):
    """Schema for sending a message."""

    session_id: UUID | None = Field(None, description="Existing session ID, null for new")
    message: str = Field(..., description="User message")


class ChatReply(BaseSchema):
    """Schema for the result of one conversational turn."""

    reply: str
    session: ChatSessionResponse
    session_id: UUID


class ChatStats(BaseSchema):
    """Schema for per-user usage statistics."""

    total_sessions: int
    active_sessions: int
    total_messages: int


# Update forward references if needed
ChatSessionResponse.model_rebuild()
ChatReply.model_rebuild()
