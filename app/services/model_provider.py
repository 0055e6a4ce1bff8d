"""Model provider integration (Google Gemini)."""

import logging
from collections.abc import Iterable
from typing import Any

import google.generativeai as genai
from fastapi import Depends

from app.core.config import Settings, get_settings, settings as default_settings
from app.exceptions.ai import AIConfigurationError, AIEmptyResponseError, AIServiceError
from models.chat_message import ChatMessage, MessageRole


logger = logging.getLogger(__name__)

# Stored role -> provider role
PROVIDER_ROLES = {
    MessageRole.USER: "user",
    MessageRole.MODEL: "model",
}


def build_history(messages: Iterable[ChatMessage]) -> list[dict[str, Any]]:
    """Convert stored messages into the provider's role-tagged history format."""
    return [{"role": PROVIDER_ROLES[MessageRole(msg.role)], "parts": [msg.content]} for msg in messages]


class ChatProvider:
    """Interface of a hosted conversational model."""

    name = "base"

    @property
    def is_configured(self) -> bool:
        return True

    async def send(self, history: list[dict[str, Any]], message: str) -> str:
        """Continue the conversation in ``history`` with ``message`` and return the reply text."""
        raise NotImplementedError

    def status(self) -> dict[str, Any]:
        return {"provider": self.name, "configured": self.is_configured}


class GeminiChatProvider(ChatProvider):
    """Chat provider backed by Google Gemini."""

    name = "gemini"

    def __init__(self, settings: Settings | None = None):
        settings = settings or default_settings
        self.api_key = settings.gemini_api_key
        self.model_name = settings.gemini_model
        self._model = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_model(self):
        """Configure the Gemini client on first use."""
        if self._model is not None:
            return self._model

        if not self.api_key:
            raise AIConfigurationError("Gemini API key not configured")

        try:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(model_name=self.model_name)
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {str(e)}")
            raise AIConfigurationError(f"Failed to initialize AI service: {str(e)}") from e

        logger.info(f"Chat Gemini client initialized with model: {self.model_name}")
        return self._model

    async def send(self, history: list[dict[str, Any]], message: str) -> str:
        model = self._get_model()
        chat = model.start_chat(history=history)
        response = await chat.send_message_async(message)

        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the candidate was blocked or has no parts
            raise AIServiceError(f"AI response unavailable: {str(e)}") from e

        if not text:
            raise AIEmptyResponseError()
        return text

    def status(self) -> dict[str, Any]:
        return {**super().status(), "model": self.model_name}


def get_chat_provider(settings: Settings = Depends(get_settings)) -> ChatProvider:
    """FastAPI dependency returning the chat provider built from the injected settings."""
    return GeminiChatProvider(settings)
