# ruff: noqa: D107
"""Model provider exceptions."""

from typing import Any

from .base import BaseAppException


class AIServiceError(BaseAppException):
    """Base exception for model provider errors."""

    def __init__(
        self,
        message: str = "AI service error occurred",
        error_code: str = "AI_SERVICE_ERROR",
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message=message, status_code=status_code, error_code=error_code, details=details)


class AITimeoutError(AIServiceError):
    """Exception raised when the provider does not answer within the configured timeout."""

    def __init__(
        self,
        message: str = "AI service request timed out",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_TIMEOUT", details, status_code=504)


class AIConfigurationError(AIServiceError):
    """Exception raised when the provider is not properly configured."""

    def __init__(
        self,
        message: str = "AI service is not properly configured",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_CONFIGURATION_ERROR", details)


class AIEmptyResponseError(AIServiceError):
    """Exception raised when the provider returns no text."""

    def __init__(
        self,
        message: str = "Empty response from AI service",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_EMPTY_RESPONSE", details)
