"""Account records: the persisted profile and the form bodies that create it."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, EmailStr, Field, field_validator


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_interests(raw: str) -> List[str]:
    """Split a comma-separated interests field, dropping blanks.

    Example: parse_interests(" biology, ,art ") -> ["biology", "art"]
    """
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class UserProfile(BaseModel):
    """A stored student account. ``password_hash`` is always a bcrypt hash."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    email: str
    password_hash: str
    grade: str = ""
    interests: List[str] = Field(default_factory=list)
    goals: str = ""
    created_at: str = Field(default_factory=_utc_now_iso)
    updated_at: str = Field(default_factory=_utc_now_iso)


class RegistrationForm(BaseModel):
    name: str
    email: EmailStr
    password: str
    grade: str = ""
    interests: List[str] = Field(default_factory=list)
    goals: str = ""

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required.")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required.")
        # bcrypt only accepts the first 72 bytes of input.
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes.")
        return v

    @field_validator("interests", mode="before")
    @classmethod
    def _split_interests(cls, v):
        if isinstance(v, str):
            return parse_interests(v)
        return v

    @field_validator("grade", "goals")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()


class LoginForm(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return v.strip().lower()
