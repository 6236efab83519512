"""Pydantic request/response schemas for nm_gateway.

Responses are wrapped in ApiResponse at the router layer. The ``user_id``
returned here is the caller identity the marketplace records as seller or
buyer, so clients use it to query purchases and listings.
"""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from config.settings import settings
from src.nm_common.datetime_utils import isoformat_or_none
from src.nm_gateway.user.db_models import UserModel


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """At least one uppercase, one lowercase and one digit."""
        for pattern, what in (
            (r"[A-Z]", "an uppercase letter"),
            (r"[a-z]", "a lowercase letter"),
            (r"\d", "a digit"),
        ):
            if not re.search(pattern, v):
                raise ValueError(f"Password must contain at least {what}")
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    user_id: str
    username: str
    email: str

    @classmethod
    def from_user(cls, user: UserModel) -> "UserInfo":
        return cls(user_id=str(user.id), username=user.username, email=user.email)


class RegisterResponse(UserInfo):
    created_at: str | None

    @classmethod
    def from_user(cls, user: UserModel) -> "RegisterResponse":
        return cls(
            user_id=str(user.id),
            username=user.username,
            email=user.email,
            created_at=isoformat_or_none(user.created_at),
        )


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(default_factory=lambda: settings.JWT_EXPIRE_MINUTES * 60)
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = Field(default_factory=lambda: settings.JWT_EXPIRE_MINUTES * 60)
