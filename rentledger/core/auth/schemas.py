"""Schemas for auth flows (register, password change)."""

from __future__ import annotations

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from rentledger.core.auth.password import is_strong_password

_USERNAME_REGEX = re.compile(r"^[A-Za-z0-9_.-]{3,64}$")
_PASSWORD_MESSAGE = "password must be at least 8 chars with upper and lower case letters and a number"


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: EmailStr
    password: str = Field(min_length=8)
    currency: str = Field(default="KES", max_length=3)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not _USERNAME_REGEX.match(v):
            raise ValueError("username may only contain letters, numbers, dots, dashes and underscores")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not is_strong_password(v):
            raise ValueError(_PASSWORD_MESSAGE)
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        v = (v or "KES").upper()
        if v not in ("KES", "USD", "EUR", "GBP"):
            raise ValueError("unsupported currency")
        return v


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)

    @field_validator("new_password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not is_strong_password(v):
            raise ValueError(_PASSWORD_MESSAGE)
        return v
