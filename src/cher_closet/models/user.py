"""User domain models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import BaseModelConfig


class UserRole(str, Enum):
    """Roles recognized by the authorization gates."""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: object) -> "UserRole":
        """Map a stored role to a known role; anything unknown is a plain user."""
        try:
            return cls(value)
        except ValueError:
            return cls.USER


class User(BaseModelConfig):
    """Public view of an account."""

    id: int = Field(..., ge=1)
    username: str = Field(..., min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    role: UserRole = Field(default=UserRole.USER)
    created_at: datetime | None = Field(default=None)


class UserCreate(BaseModelConfig):
    """Account creation data with an already hashed password."""

    username: str = Field(..., min_length=3, max_length=100)
    password_hash: str = Field(..., min_length=1)
    email: str | None = Field(default=None, max_length=255)
    role: UserRole = Field(default=UserRole.USER)
