from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_PROMPT = "How should I plan my career?"


class StudentSnapshot(BaseModel):
    """The part of a stored profile the advisor is allowed to see."""

    name: str
    grade: str = ""
    interests: List[str] = Field(default_factory=list)
    goals: str = ""

    @field_validator("grade", "goals", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("interests", mode="before")
    @classmethod
    def _none_as_no_interests(cls, v):
        return [] if v is None else v

    @classmethod
    def from_profile(cls, profile: Any) -> "StudentSnapshot":
        """Accept a snapshot, a dict, or any object with matching attributes."""
        if isinstance(profile, cls):
            return profile
        if isinstance(profile, dict):
            return cls.model_validate(profile)
        return cls.model_validate(profile, from_attributes=True)


def normalize_prompt(prompt: Optional[str]) -> str:
    """Return ``prompt`` verbatim, or the default question when it is blank."""
    if prompt is None or not prompt.strip():
        return DEFAULT_PROMPT
    return prompt


class AdviceRequest(BaseModel):
    profile: StudentSnapshot
    prompt: str = DEFAULT_PROMPT

    @field_validator("prompt", mode="before")
    @classmethod
    def _default_prompt(cls, v):
        return normalize_prompt(v)


@dataclass(frozen=True)
class LiveAdviceResult:
    """Outcome of one chat-completion call: either ``content`` or ``error``."""

    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.content)

    @classmethod
    def success(cls, content: str) -> "LiveAdviceResult":
        return cls(content=content)

    @classmethod
    def failure(cls, reason: str) -> "LiveAdviceResult":
        return cls(error=reason)
