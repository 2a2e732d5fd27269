"""Modelos de memes: los estáticos de la rotación y los generados al vuelo."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import ConfigDict, Field

from app.models.base import CamelModel


class MemeRecord(CamelModel):
    """Meme estático de la base (no cambia durante la vida del proceso)."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: str
    category: str
    viral_score: int = Field(ge=0, le=100)


class GeneratedMeme(CamelModel):
    """Meme construido por petición.

    Los campos opcionales son copias desnormalizadas del puesto o de la
    plataforma que lo originó; no hay relación real con `JobRecord`.
    """

    id: int | None = None
    title: str
    content: str
    category: str
    viral_score: int = Field(ge=0, le=100)
    job_title: str | None = None
    cooked_score: float | None = None
    automation_risk: int | None = None
    job_category: str | None = None
    platform: str | None = None
    mood: str | None = None
    is_daily: bool = False
    is_trending: bool = False
    is_personalized: bool = False
    day_of_year: int | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json_dict(self) -> dict:
        # Los campos opcionales vacíos no se envían
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
