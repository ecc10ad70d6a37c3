"""
Pydantic schemas for the to-do backend.

Everything that crosses the HTTP boundary is camelCase on the wire
(``firstName``, ``dueDate``, ``userId``) and snake_case in Python.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high"]

DEFAULT_PRIORITY: Priority = "medium"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _RequestModel(_CamelModel):
    """Request bodies reject unknown keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(_RequestModel):
    # Presence is checked by AuthService so every omission reports the same error.
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(_RequestModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRecord(BaseModel):
    """A persisted user.  Carries the password hash, so never serialize it out."""

    id: str
    first_name: str
    last_name: str
    email: str
    password_hash: str
    created_at: datetime


class UserPublic(_CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserPublic":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )


class LoginResponse(BaseModel):
    token: str
    user: UserPublic


class MessageResponse(BaseModel):
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Todos
# ═══════════════════════════════════════════════════════════════════════════════


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision; BSON dates hold milliseconds."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive timestamps are taken as UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return to_millis(value.astimezone(timezone.utc))


class TodoCreate(_RequestModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    category: Optional[str] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date_is_none(cls, value):
        return _blank_to_none(value)

    @field_validator("due_date")
    @classmethod
    def due_date_is_utc(cls, value):
        return _as_utc(value)


class TodoUpdate(_RequestModel):
    """
    Partial update.  Only keys present in the body are applied; use
    ``model_dump(exclude_unset=True)`` to get them.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    category: Optional[str] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date_is_none(cls, value):
        return _blank_to_none(value)

    @field_validator("due_date")
    @classmethod
    def due_date_is_utc(cls, value):
        return _as_utc(value)


class TodoRecord(_CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    completed: bool = False
    priority: Priority = DEFAULT_PRIORITY
    due_date: Optional[datetime] = None
    category: Optional[str] = None
    owner_id: str = Field(alias="userId")
    created_at: datetime
    updated_at: datetime


class TodoStats(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
