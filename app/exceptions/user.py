# ruff: noqa: D107
"""Authentication and user exceptions."""

from .base import BaseAppException

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}


class AuthenticationError(BaseAppException):
    """Raised when no credential is presented or its user no longer exists."""

    def __init__(self, message: str = "Access denied. No token provided."):
        super().__init__(
            message=message, status_code=401, error_code="UNAUTHORIZED", headers=BEARER_HEADERS
        )


class InvalidTokenError(BaseAppException):
    """Raised when a credential is malformed, wrongly signed or expired."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, status_code=400, error_code="INVALID_TOKEN")


class InvalidCredentialsError(BaseAppException):
    """Raised when a login identifier or password does not match."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message, status_code=400, error_code="INVALID_CREDENTIALS")


class UserAlreadyExistsError(BaseAppException):
    """Raised when registering a username or email that is taken."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message=message, status_code=400, error_code="USER_ALREADY_EXISTS")
