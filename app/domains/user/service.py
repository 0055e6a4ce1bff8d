# app/domains/user/service.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password, verify_password
from app.exceptions.user import InvalidCredentialsError, UserAlreadyExistsError
from models import User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, case-insensitively."""
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def register(self, username: str, email: str, password: str) -> User:
        """Create a new user; username and email must both be unused."""
        username = username.strip()
        email = email.strip().lower()

        result = await self.db.execute(
            select(User).where(or_(User.username == username, User.email == email))
        )
        if result.scalars().first():
            raise UserAlreadyExistsError()

        user = User(username=username, email=email, password_hash=hash_password(password))

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            await self.db.rollback()
            raise UserAlreadyExistsError() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e

        logger.info(f"Registered user {user.id} ({username})")
        return user

    async def authenticate(
        self, password: str, email: Optional[str] = None, username: Optional[str] = None
    ) -> User:
        """Check a password against the user named by email, or by username when no email is given."""
        if email:
            identifier = email.strip()
            user = await self.get_user_by_email(identifier)
        elif username:
            identifier = username.strip()
            user = await self.get_user_by_username(identifier)
        else:
            identifier, user = None, None

        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for {identifier!r}")
            raise InvalidCredentialsError()
        return user
