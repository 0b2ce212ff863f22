"""
User and Auth Models

The stored User carries the password hash; everything that leaves the
API uses UserPublic instead.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import EmailStr, Field, field_validator

from finance_tracker.models.base import CamelModel, utcnow


def normalize_email(value: str) -> str:
    """Emails are compared and stored trimmed and lower-cased."""
    return value.strip().lower()


class User(CamelModel):
    """A registered account as held in the credential store."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254)
    password_hash: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    def to_public(self) -> "UserPublic":
        return UserPublic(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
        )


class UserPublic(CamelModel):
    """What clients are allowed to see about a user."""

    id: UUID
    name: str
    email: str
    created_at: datetime


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class ProfileUpdate(CamelModel):
    """Partial profile edit. Absent fields are left alone."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v) if v is not None else v


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class AuthResponse(CamelModel):
    token: str
    user: UserPublic


class MessageResponse(CamelModel):
    message: str
