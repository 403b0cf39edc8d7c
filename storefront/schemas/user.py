# storefront/schemas/user.py
import re
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["user", "admin"]

# 10-15 digits, optional leading +, never longer than the 15-char column
PHONE_RE = re.compile(r"^(?=.{10,15}$)\+?\d{10,15}$")


def clean_phone(v: str) -> str:
    """Drop spaces and dashes, then enforce PHONE_RE."""
    v = re.sub(r"[\s-]", "", v)
    if not PHONE_RE.match(v):
        raise ValueError("Phone number must be 10 to 15 digits (15 characters max)")
    return v


class UserRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    email: EmailStr
    name: str
    phone_number: str | None
    role: Role
    is_root_admin: bool
    created_at: datetime


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=30)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("phone_number")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return clean_phone(v) if v else None


class RoleStatus(SQLModel):
    """
    Answer to "what may this user do in the back-office?".
    """

    is_admin: bool
    is_root_admin: bool


class AdminGrant(SQLModel):
    """
    Root-admin payload to promote an existing user by email.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class AdminRead(SQLModel):
    user_id: uuid.UUID
    email: str
    name: str
    is_root_admin: bool
