"""Chat session exceptions."""

from .base import NotFoundError


class ChatSessionNotFoundError(NotFoundError):
    """Raised when a session does not exist or belongs to another user."""

    def __init__(self, message: str = "Chat session not found"):
        super().__init__(message=message, error_code="CHAT_SESSION_NOT_FOUND")
