"""Cuerpos de las peticiones y sus reglas de validación.

Los validadores lanzan `ValueError` con el mensaje que verá el cliente; el
manejador de `RequestValidationError` de `app.main` lo convierte en un 400
con el formato de error común.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, List

from pydantic import Field, field_validator

from app.core.enums import MemePlatform, Mood
from app.models.base import CamelModel

MAX_JOB_TITLE_LENGTH = 100
MAX_SHARE_TEXT_LENGTH = 500
MAX_TIMESTAMP_SKEW = timedelta(hours=24)

HARMFUL_PATTERNS = [
    re.compile(r"<\s*script\b", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<\s*iframe\b", re.IGNORECASE),
]


def contains_harmful_content(text: str) -> bool:
    return any(pattern.search(text) for pattern in HARMFUL_PATTERNS)


def clean_job_title(value: Any) -> str:
    """Reglas estrictas del título que se analiza."""
    if value is None or value == "":
        raise ValueError("Job title is required")
    if not isinstance(value, str):
        raise ValueError("Job title must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Job title cannot be empty")
    if len(trimmed) > MAX_JOB_TITLE_LENGTH:
        raise ValueError(
            f"Job title is too long (max {MAX_JOB_TITLE_LENGTH} characters)"
        )
    if contains_harmful_content(trimmed):
        raise ValueError("Job title contains invalid content")
    return trimmed


def _required_title(value: Any) -> str:
    if value is None or value == "":
        raise ValueError("Job title is required")
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Job title must be a non-empty string")
    return value.strip()


def _score(value: Any, *, required: bool = False) -> float | None:
    if value is None:
        if required:
            raise ValueError("Cooked score is required")
        return None
    if isinstance(value, bool):
        raise ValueError("Cooked score must be a number between 0 and 100")
    try:
        score = float(value)
    except (TypeError, ValueError):
        raise ValueError("Cooked score must be a number between 0 and 100") from None
    if math.isnan(score) or score < 0 or score > 100:
        raise ValueError("Cooked score must be a number between 0 and 100")
    return score


class AnalyzeJobRequest(CamelModel):
    job_title: str = Field(default=None, validate_default=True)

    @field_validator("job_title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> str:
        return clean_job_title(value)


class TrackSearchRequest(CamelModel):
    job_title: str = Field(default=None, validate_default=True)
    cooked_score: float | None = None
    user_agent: str | None = None
    timestamp: datetime | None = None

    @field_validator("job_title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> str:
        return _required_title(value)

    @field_validator("cooked_score", mode="before")
    @classmethod
    def _validate_score(cls, value: Any) -> float | None:
        return _score(value)

    @field_validator("user_agent", mode="before")
    @classmethod
    def _validate_user_agent(cls, value: Any) -> str | None:
        if value is not None and not isinstance(value, str):
            raise ValueError("User agent must be a string")
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _validate_timestamp(cls, value: Any) -> datetime | None:
        if value in (None, ""):
            return None
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                raise ValueError("Invalid timestamp format") from None
        else:
            raise ValueError("Invalid timestamp format")
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        if abs(datetime.now(timezone.utc) - parsed) > MAX_TIMESTAMP_SKEW:
            raise ValueError("Timestamp is too far from current time")
        return parsed


class TrackShareRequest(CamelModel):
    platform: str = Field(default=None, validate_default=True)
    job_title: str = Field(default=None, validate_default=True)
    cooked_score: float | None = None
    share_text: str | None = None

    @field_validator("platform", mode="before")
    @classmethod
    def _validate_platform(cls, value: Any) -> str:
        if value is None or value == "":
            raise ValueError("Platform is required")
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Platform must be a non-empty string")
        return value.strip().lower()

    @field_validator("job_title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> str:
        return _required_title(value)

    @field_validator("cooked_score", mode="before")
    @classmethod
    def _validate_score(cls, value: Any) -> float | None:
        return _score(value)

    @field_validator("share_text", mode="before")
    @classmethod
    def _validate_share_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("Share text must be a string")
        if len(value) > MAX_SHARE_TEXT_LENGTH:
            raise ValueError(
                f"Share text is too long (max {MAX_SHARE_TEXT_LENGTH} characters)"
            )
        return value


class GenerateMemeRequest(CamelModel):
    job_title: str = Field(default=None, validate_default=True)
    cooked_score: float = Field(default=None, validate_default=True)
    mood: Mood = Mood.NEUTRAL
    platform: MemePlatform | None = None

    @field_validator("job_title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> str:
        return _required_title(value)

    @field_validator("cooked_score", mode="before")
    @classmethod
    def _validate_score(cls, value: Any) -> float:
        return _score(value, required=True)

    @field_validator("mood", mode="before")
    @classmethod
    def _validate_mood(cls, value: Any) -> str:
        if value is None:
            return Mood.NEUTRAL.value
        if not isinstance(value, str):
            raise ValueError("Mood must be a string")
        allowed = [m.value for m in Mood]
        if value.lower() not in allowed:
            raise ValueError(f"Invalid mood. Must be one of: {', '.join(allowed)}")
        return value.lower()

    @field_validator("platform", mode="before")
    @classmethod
    def _validate_platform(cls, value: Any) -> str | None:
        if value in (None, ""):
            return None
        allowed = [p.value for p in MemePlatform]
        if not isinstance(value, str) or value.lower() not in allowed:
            raise ValueError(f"Invalid platform. Must be one of: {', '.join(allowed)}")
        return value.lower()


class FavoriteJob(CamelModel):
    title: str
    automation_risk: int = Field(ge=0, le=100)


class SearchHistoryEntry(CamelModel):
    job_title: str
    cooked_score: float = Field(default=0, ge=0, le=100)


class PersonalizedMemeRequest(CamelModel):
    favorite_jobs: List[FavoriteJob] = Field(default_factory=list)
    search_history: List[SearchHistoryEntry] = Field(default_factory=list)
