"""Security related functions: password hashing and signed access tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from passlib.context import CryptContext

from app.core.config import Settings, settings as default_settings
from app.exceptions.user import InvalidTokenError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a salted hash of ``password``."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored hash."""
    return pwd_context.verify(password, password_hash)


class TokenService:
    """
    Issues and verifies the bearer credentials handed out at login.

    Tokens are HS256-signed JWTs whose ``sub`` claim is the user id and whose
    ``exp`` claim bounds their lifetime. The signing key, algorithm and
    lifetime all come from the injected settings object.

    :ivar secret_key: Key used to sign and verify tokens.
    :type secret_key: str
    :ivar algorithm: JWT signing algorithm.
    :type algorithm: str
    :ivar expire_minutes: Token lifetime in minutes.
    :type expire_minutes: int
    """

    def __init__(self, settings: Settings | None = None):
        settings = settings or default_settings
        self.secret_key = settings.secret_key
        self.algorithm = settings.algorithm
        self.expire_minutes = settings.access_token_expire_minutes

    def create_access_token(self, user_id: UUID | str, expires_delta: timedelta | None = None) -> str:
        """Create a signed token asserting ``user_id``."""
        now = datetime.now(UTC)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        payload = {"sub": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry of ``token`` and return its payload.

        :param token: The JWT presented by the client.
        :return: The decoded claims.
        :raises InvalidTokenError: If the token is expired, malformed or wrongly signed.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e
