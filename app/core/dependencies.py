# app/core/dependencies.py
import logging
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.security import TokenService
from app.database import get_db
from app.domains.chat.service import ChatService
from app.domains.user.service import UserService
from app.exceptions.user import AuthenticationError, InvalidTokenError
from app.services.model_provider import ChatProvider, get_chat_provider
from models import User

logger = logging.getLogger(__name__)

auth_token_header = APIKeyHeader(name="auth-token", auto_error=False)
security = HTTPBearer(auto_error=False)


async def get_token(
    auth_token: str | None = Depends(auth_token_header),
    bearer: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Read the bearer credential from ``auth-token``, falling back to ``Authorization: Bearer``.

    Raises:
        AuthenticationError: If no credential is present
    """
    token = auth_token or (bearer.credentials if bearer else None)
    if not token:
        raise AuthenticationError()
    return token


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(settings)


async def validate_token(
    token: str = Depends(get_token),
    token_service: TokenService = Depends(get_token_service),
) -> dict:
    """Validate and decode the access token.

    Returns:
        dict: Decoded token payload

    Raises:
        InvalidTokenError: If token is malformed, wrongly signed or expired
    """
    try:
        return token_service.decode_access_token(token)
    except InvalidTokenError as e:
        logger.warning("Token validation error: %s", e.message)
        raise


async def get_current_user(
    request: Request,
    payload: dict = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from the token payload.

    Returns:
        User: Current authenticated user

    Raises:
        InvalidTokenError: If the payload does not carry a user id
        AuthenticationError: If the user no longer exists
    """
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError as e:
        raise InvalidTokenError("Invalid token payload - missing user ID") from e

    user = await UserService(db).get_user_by_id(user_id)
    if not user:
        logger.warning("Token references unknown user %s", user_id)
        raise AuthenticationError("User not found")

    # Add user info to request state for logging
    request.state.user_id = user.id

    return user


def get_chat_service(
    db: AsyncSession = Depends(get_db),
    provider: ChatProvider = Depends(get_chat_provider),
    settings: Settings = Depends(get_settings),
) -> ChatService:
    return ChatService(db, provider=provider, settings=settings)
