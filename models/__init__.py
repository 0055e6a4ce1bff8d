"""
Models package initialization.
"""

from .base import Base, BaseModel
from .chat_message import ChatMessage, MessageRole
from .chat_session import DEFAULT_SESSION_TITLE, ChatSession
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    # Chat models
    "ChatSession",
    "ChatMessage",
    "MessageRole",
    "DEFAULT_SESSION_TITLE",
]
