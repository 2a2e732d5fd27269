"""Modelos de datos de un puesto de trabajo y de su análisis.

`JobRecord` es la ficha de riesgo de un puesto: las de la base estática no
se modifican nunca (modelo congelado) y las sintetizadas se construyen de
nuevo en cada petición. `JobAnalysis` es lo que devuelve
`POST /api/jobs/analyze`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from pydantic import ConfigDict, Field

from app.core.enums import AnalysisSource, CookedLevel, ReplacementStatus
from app.models.base import CamelModel


class JobRecord(CamelModel):
    """Ficha de riesgo de automatización de un puesto."""

    model_config = ConfigDict(frozen=True)

    title: str
    category: str
    automation_risk: int = Field(ge=0, le=100)
    median_salary: int = Field(ge=0)
    creativity_required: int = Field(ge=0, le=100)
    ai_replacements: ReplacementStatus
    risk_factors: List[str] = Field(default_factory=list)
    ai_tools: List[str] = Field(default_factory=list)
    time_to_automation: str


class JobSummary(CamelModel):
    """Versión reducida usada por el generador de puestos aleatorios."""

    model_config = ConfigDict(frozen=True)

    title: str
    category: str
    automation_risk: int = Field(ge=0, le=100)


class AnalysisResult(CamelModel):
    """Resultado interno del analizador: la ficha más su procedencia."""

    record: JobRecord
    source: AnalysisSource
    base_risk: int | None = None  # sólo para fichas sintetizadas
    external_risk: int | None = None  # riesgo devuelto por el LLM, si lo hubo


class JobAnalysis(CamelModel):
    """Respuesta de `POST /api/jobs/analyze`."""

    title: str
    category: str
    cooked_score: int
    cooked_level: CookedLevel
    summary: str
    automation_risk: int
    median_salary: str  # formateado, p.ej. "$42,000"
    ai_replacements: ReplacementStatus
    creativity_required: int
    risk_factors: List[str]
    ai_tools: List[str]
    time_to_automation: str
    analysis_source: AnalysisSource
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_result(cls, result: AnalysisResult, summary: str) -> "JobAnalysis":
        record = result.record
        return cls(
            title=record.title,
            category=record.category,
            cooked_score=record.automation_risk,
            cooked_level=CookedLevel.from_score(record.automation_risk),
            summary=summary,
            automation_risk=record.automation_risk,
            median_salary=format_salary(record.median_salary),
            ai_replacements=record.ai_replacements,
            creativity_required=record.creativity_required,
            risk_factors=list(record.risk_factors),
            ai_tools=list(record.ai_tools),
            time_to_automation=record.time_to_automation,
            analysis_source=result.source,
        )


def format_salary(amount: int) -> str:
    return f"${amount:,}"
