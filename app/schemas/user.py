"""User-related Pydantic schemas for request/response validation."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from .base import BaseModelSchema, BaseSchema


class UserRegisterRequest(BaseSchema):
    """Schema for user registration request."""

    username: str = Field(..., min_length=1, max_length=100, description="Unique username")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, max_length=128, description="Plain password")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate that username is not blank."""
        if not v.strip():
            raise ValueError("Username cannot be empty")
        return v.strip()


class UserLoginRequest(BaseSchema):
    """Schema for user login request; either email or username identifies the user."""

    email: Optional[str] = Field(None, description="Email address")
    username: Optional[str] = Field(None, description="Username")
    password: str = Field(..., min_length=1, description="Plain password")

    @model_validator(mode="after")
    def require_identifier(self):
        if not (self.email or self.username):
            raise ValueError("Email or username is required")
        return self


class UserResponse(BaseModelSchema):
    """Schema for user response data."""

    username: str
    email: str


class LoginResponse(BaseSchema):
    """Schema for login response."""

    token: str
    user: UserResponse
