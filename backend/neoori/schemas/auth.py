"""Pydantic schemas for the auth endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field

from neoori.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class LogoutRequest(CamelModel):
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class AccountRead(CamelModel):
    """Public view of an account."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    avatar: str | None = None
    is_active: bool
    email_verified: bool
    created_at: datetime
    updated_at: datetime


class TokenPairRead(CamelModel):
    access_token: str
    refresh_token: str


class AuthRead(TokenPairRead):
    user: AccountRead


class AvatarRead(CamelModel):
    avatar: str
    user: AccountRead
