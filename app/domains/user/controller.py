"""User authentication controller endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_token_service
from app.core.security import TokenService
from app.database import get_db
from app.domains.user.service import UserService
from app.exceptions.base import BaseAppException, InternalServerError
from app.schemas.user import LoginResponse, UserLoginRequest, UserRegisterRequest, UserResponse
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(register_data: UserRegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user with a username, email and password."""
    user_service = UserService(db)

    try:
        user = await user_service.register(
            username=register_data.username,
            email=str(register_data.email),
            password=register_data.password,
        )
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Registration failed: {str(e)}")
        raise InternalServerError(f"Failed to create user: {str(e)}") from e

    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLoginRequest,
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    """Authenticate with email or username and password.

    Returns a signed, time-bounded token to present in the ``auth-token``
    header of subsequent requests.
    """
    user_service = UserService(db)

    try:
        user = await user_service.authenticate(
            login_data.password, email=login_data.email, username=login_data.username
        )
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Login failed: {str(e)}")
        raise InternalServerError(f"Authentication failed: {str(e)}") from e

    token = token_service.create_access_token(user.id)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return UserResponse.model_validate(current_user)
