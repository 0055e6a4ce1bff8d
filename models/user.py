"""
Provides the User model for the application's database schema.

A user is identified by a unique username and a unique email address and
authenticates with a password whose salted hash is stored in
``password_hash``. Users own chat sessions by reference.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class User(BaseModel):
    """
    Represents a registered user.

    :ivar username: Unique login name.
    :type username: str
    :ivar email: Unique email address, stored lowercased.
    :type email: str
    :ivar password_hash: Salted passlib hash of the password.
    :type password_hash: str
    """

    __tablename__ = "users"

    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    chat_sessions = relationship("ChatSession", back_populates="user", cascade="all, delete-orphan")
