"""Typed schemas for user IO."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

if TYPE_CHECKING:
    from rentledger.core.users.models import User

CurrencyCode = Literal["KES", "USD", "EUR", "GBP"]


class LoginRequest(BaseModel):
    # Email or username.
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = Field(default=None, min_length=3, max_length=64)
    email: Optional[EmailStr] = None
    currency: Optional[CurrencyCode] = None
    profile_photo_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if isinstance(v, str) else v


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    currency: str
    profile_photo_url: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> UserResponse:
    return UserResponse.model_validate(user)
