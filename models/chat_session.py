"""
Chat session model: a named conversation thread owned by one user.
"""

from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel

DEFAULT_SESSION_TITLE = "New Chat"


class ChatSession(BaseModel):
    """
    Represents a chat session and its ordered message history.

    Messages are eagerly loaded with the session and kept in append order
    through their ``position`` column.
    """

    __tablename__ = "chat_sessions"

    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False, default=DEFAULT_SESSION_TITLE)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    user = relationship("User", back_populates="chat_sessions")
    messages = relationship(
        "ChatMessage",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ChatMessage.position",
        collection_class=ordering_list("position"),
        lazy="selectin",
    )

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def last_message(self):
        return self.messages[-1] if self.messages else None
