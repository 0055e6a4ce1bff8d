"""
Chat message model. Messages live inside a session and are never addressed on
their own.
"""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, utcnow


class MessageRole(str, enum.Enum):
    """Speaker of a message. ``model`` marks provider replies."""

    USER = "user"
    MODEL = "model"


class ChatMessage(BaseModel):
    """
    Represents one turn of a conversation.
    """

    __tablename__ = "chat_messages"

    session_id = Column(
        UUID(), ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False)
    role = Column(
        Enum(MessageRole, values_callable=lambda roles: [r.value for r in roles], name="message_role"),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    session = relationship("ChatSession", back_populates="messages")
