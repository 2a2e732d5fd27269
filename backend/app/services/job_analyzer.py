"""Análisis de riesgo para puestos que no están en la base estática.

Combina una heurística por palabras clave con una valoración opcional de un
LLM (OpenAI). La llamada externa devuelve siempre un `AssessmentOutcome`
explícito: si el servicio no está configurado, no responde o responde algo
que no es el JSON esperado, se usa la ficha determinista y el motivo queda en
el log con su propio tipo.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings, get_settings
from app.core.enums import AnalysisSource, ReplacementStatus
from app.core.logging_config import log_slow_operation
from app.models.base import CamelModel
from app.models.job import AnalysisResult, JobRecord

logger = logging.getLogger(__name__)

# Palabras clave por categoría; gana la primera categoría con coincidencia
JOB_CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "finance": ["accountant", "analyst", "banker", "financial", "investment", "trading", "auditor"],
    "technology": ["developer", "engineer", "programmer", "scientist", "architect", "devops", "data"],
    "healthcare": ["doctor", "nurse", "therapist", "technician", "medical", "health", "clinical"],
    "education": ["teacher", "professor", "instructor", "educator", "tutor", "academic"],
    "retail": ["cashier", "sales", "customer", "service", "representative", "clerk"],
    "media": ["designer", "writer", "editor", "content", "creative", "artist", "journalist"],
    "legal": ["lawyer", "attorney", "paralegal", "legal", "counsel", "advocate"],
    "manufacturing": ["worker", "operator", "technician", "inspector", "factory", "production"],
}

RISK_FACTOR_WEIGHTS: Dict[str, float] = {
    "data entry": 0.8,
    "repetitive tasks": 0.7,
    "rule-based decisions": 0.6,
    "document processing": 0.75,
    "customer service": 0.65,
    "basic analysis": 0.5,
    "reporting": 0.6,
    "scheduling": 0.7,
    "quality control": 0.8,
    "inventory management": 0.75,
    "basic coding": 0.4,
    "content creation": 0.6,
    "translation": 0.8,
    "bookkeeping": 0.85,
    "data collection": 0.7,
    "phone support": 0.8,
    "email handling": 0.7,
    "form processing": 0.8,
    "basic research": 0.5,
    "social media management": 0.6,
}

CATEGORY_ADJUSTMENTS: Dict[str, float] = {
    "finance": 0.1,
    "technology": -0.2,
    "healthcare": -0.3,
    "education": -0.1,
    "retail": 0.2,
    "media": 0.0,
    "legal": -0.2,
    "manufacturing": 0.3,
    "management": -0.3,
    "administrative": 0.1,
    "general": 0.0,
}

AI_TOOLS_BY_CATEGORY: Dict[str, List[str]] = {
    "finance": ["QuickBooks AI", "Xero", "Sage Intacct", "Tableau AI", "Power BI"],
    "technology": ["GitHub Copilot", "ChatGPT", "Claude", "AutoML", "DataRobot"],
    "healthcare": ["IBM Watson", "Google Health AI", "AI diagnostics", "telemedicine"],
    "education": ["Khan Academy", "Duolingo", "ChatGPT", "AI tutoring systems"],
    "retail": ["ChatGPT", "Intercom", "Zendesk AI", "Self-checkout systems"],
    "media": ["Midjourney", "DALL-E", "Canva AI", "ChatGPT", "Jasper"],
    "legal": ["LexisNexis AI", "DoNotPay", "Harvey AI", "Legal AI tools"],
    "manufacturing": ["Industrial robots", "IoT sensors", "AI vision systems"],
}

DEFAULT_RISK_FACTORS: Dict[str, List[str]] = {
    "finance": ["data processing", "reporting", "analysis"],
    "technology": ["code generation", "testing", "documentation"],
    "healthcare": ["data entry", "scheduling", "basic diagnostics"],
    "education": ["grading", "content creation", "administration"],
    "retail": ["customer service", "inventory", "transactions"],
    "media": ["content creation", "editing", "formatting"],
    "legal": ["document review", "research", "form preparation"],
    "manufacturing": ["quality control", "monitoring", "assembly"],
    "management": ["reporting", "scheduling", "communication"],
    "administrative": ["data entry", "scheduling", "documentation"],
    "general": ["repetitive tasks", "data processing", "basic analysis"],
}

BASE_SALARIES: Dict[str, int] = {
    "finance": 65000,
    "technology": 85000,
    "healthcare": 70000,
    "education": 50000,
    "retail": 35000,
    "media": 55000,
    "legal": 80000,
    "manufacturing": 45000,
    "management": 75000,
    "administrative": 45000,
    "general": 50000,
}

MIN_SALARY = 25000
MAX_SALARY = 200000
DEFAULT_RISK = 50
BASE_WEIGHT = 0.3
EXTERNAL_WEIGHT = 0.7
DEFAULT_HORIZON = "5-10 years"

SYSTEM_PROMPT = (
    "You are an expert in job market analysis and AI automation trends. "
    "Provide accurate, data-driven assessments."
)

USER_PROMPT_TEMPLATE = """Analyze the automation risk for the job title "{job_title}" in the {category} category.

Consider factors like:
- Repetitive vs creative tasks
- Data processing requirements
- Human interaction needs
- Decision-making complexity
- Current AI capabilities in this field

Return a JSON response with:
{{
  "automationRisk": number (0-100),
  "creativityRequired": number (0-100),
  "riskFactors": [array of strings],
  "aiTools": [array of relevant AI tools],
  "timeToAutomation": "string (e.g., '2-3 years')",
  "reasoning": "brief explanation"
}}"""

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def categorize_job(job_title: str) -> str:
    """Clasifica por palabras clave; si nada coincide, usa sufijos típicos."""
    title = job_title.lower()
    for category, keywords in JOB_CATEGORY_KEYWORDS.items():
        if any(keyword in title for keyword in keywords):
            return category

    if any(word in title for word in ("manager", "director", "executive")):
        return "management"
    if any(word in title for word in ("assistant", "coordinator", "specialist")):
        return "administrative"
    return "general"


def calculate_base_risk(job_title: str, category: str) -> int:
    """Riesgo heurístico en [0, 100] a partir de factores y ajuste por categoría."""
    title = job_title.lower()
    risk_score = 0.0
    factor_count = 0

    for factor, weight in RISK_FACTOR_WEIGHTS.items():
        # "data entry" también casa con "dataentry"
        if factor in title or factor.replace(" ", "", 1) in title:
            risk_score += weight
            factor_count += 1

    risk = (risk_score / factor_count) * 100 if factor_count else DEFAULT_RISK
    risk += CATEGORY_ADJUSTMENTS.get(category, 0.0) * 100
    return round_half_up(clamp(risk, 0, 100))


def time_to_automation(risk: float) -> str:
    if risk >= 80:
        return "1-3 years"
    if risk >= 60:
        return "3-5 years"
    if risk >= 40:
        return "5-10 years"
    return "10+ years"


def estimate_salary(category: str, risk: float, creativity: float) -> int:
    """Más riesgo, menos sueldo; más creatividad, más sueldo."""
    base_salary = BASE_SALARIES.get(category, BASE_SALARIES["general"])
    risk_adjustment = (100 - risk) / 100
    creativity_adjustment = creativity / 100
    salary = round_half_up(
        base_salary * (0.8 + risk_adjustment * 0.2 + creativity_adjustment * 0.3)
    )
    return int(clamp(salary, MIN_SALARY, MAX_SALARY))


class AssessmentStatus(str, Enum):
    OK = "ok"
    DISABLED = "disabled"  # no hay API key
    UNAVAILABLE = "unavailable"  # error de red / API / timeout
    MALFORMED = "malformed"  # la respuesta no es el JSON esperado


class ExternalAssessment(CamelModel):
    """Forma mínima que exigimos al JSON devuelto por el LLM."""

    automation_risk: float = Field(ge=0, le=100)
    creativity_required: Optional[float] = Field(default=None, ge=0, le=100)
    risk_factors: List[str] = Field(default_factory=list)
    ai_tools: List[str] = Field(default_factory=list)
    time_to_automation: Optional[str] = None
    reasoning: Optional[str] = None


@dataclass(frozen=True)
class AssessmentOutcome:
    status: AssessmentStatus
    assessment: ExternalAssessment | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is AssessmentStatus.OK and self.assessment is not None


def parse_assessment(raw: str | None) -> AssessmentOutcome:
    """Convierte el texto del LLM en una valoración o en un resultado MALFORMED."""
    if raw is None or not raw.strip():
        return AssessmentOutcome(AssessmentStatus.MALFORMED, reason="empty response")

    text = _CODE_FENCE.sub("", raw.strip())
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return AssessmentOutcome(AssessmentStatus.MALFORMED, reason="no JSON object found")

    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        return AssessmentOutcome(AssessmentStatus.MALFORMED, reason=f"invalid JSON: {e}")

    if not isinstance(data, dict):
        return AssessmentOutcome(AssessmentStatus.MALFORMED, reason="JSON is not an object")

    try:
        assessment = ExternalAssessment.model_validate(data)
    except PydanticValidationError as e:
        return AssessmentOutcome(
            AssessmentStatus.MALFORMED, reason=f"unexpected shape: {e.error_count()} errors"
        )
    return AssessmentOutcome(AssessmentStatus.OK, assessment=assessment)


class JobAnalyzer:
    """
    Genera la ficha de riesgo de un puesto desconocido.
    La valoración externa sólo se pide si hay `OPENAI_API_KEY`.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        api_key: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.api_key = api_key if api_key is not None else self.settings.openai_api_key
        self.model = self.settings.openai_model
        self.client = client

    @property
    def external_enabled(self) -> bool:
        return self.client is not None or bool(self.api_key)

    def _get_client(self) -> AsyncOpenAI:
        """Crea el cliente de OpenAI sólo cuando se necesita."""
        if self.client is None:
            self.client = AsyncOpenAI(
                api_key=self.api_key,
                timeout=self.settings.openai_timeout_seconds,
                max_retries=0,
            )
        return self.client

    async def analyze(self, job_title: str) -> AnalysisResult:
        """Ficha completa para `job_title` (ya validado y recortado)."""
        logger.info("Analyzing unknown job: %s", job_title)

        category = categorize_job(job_title)
        base_risk = calculate_base_risk(job_title, category)
        outcome = await self.request_assessment(job_title, category)

        result = self.combine(job_title, category, base_risk, outcome)
        logger.info(
            "Job analysis completed: %s - Risk: %s%% (category=%s, source=%s)",
            job_title,
            result.record.automation_risk,
            category,
            result.source.value,
        )
        return result

    def analyze_offline(self, job_title: str) -> AnalysisResult:
        """Sólo heurística; nunca llama al servicio externo."""
        category = categorize_job(job_title)
        base_risk = calculate_base_risk(job_title, category)
        return self.combine(
            job_title, category, base_risk, AssessmentOutcome(AssessmentStatus.DISABLED)
        )

    async def request_assessment(self, job_title: str, category: str) -> AssessmentOutcome:
        if not self.external_enabled:
            return AssessmentOutcome(AssessmentStatus.DISABLED)

        started_at = perf_counter()
        try:
            raw = await self._complete(job_title, category)
        except (openai.APIError, httpx.HTTPError) as e:
            logger.warning(
                "External assessment unavailable for %r, using fallback: %s", job_title, e
            )
            return AssessmentOutcome(AssessmentStatus.UNAVAILABLE, reason=str(e))
        finally:
            log_slow_operation(
                logger,
                "external_assessment",
                (perf_counter() - started_at) * 1000,
                model=self.model,
            )

        outcome = parse_assessment(raw)
        if not outcome.ok:
            logger.warning(
                "External assessment malformed for %r, using fallback: %s",
                job_title,
                outcome.reason,
            )
        return outcome

    async def _complete(self, job_title: str, category: str) -> str | None:
        client = self._get_client()
        response = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": USER_PROMPT_TEMPLATE.format(
                        job_title=job_title, category=category
                    ),
                },
            ],
            temperature=self.settings.openai_temperature,
            max_tokens=self.settings.openai_max_tokens,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    @staticmethod
    def combine(
        job_title: str,
        category: str,
        base_risk: int,
        outcome: AssessmentOutcome,
    ) -> AnalysisResult:
        """Mezcla 30% heurística + 70% LLM, o ficha determinista si no hay LLM."""
        if outcome.ok:
            assessment = outcome.assessment
            external_risk = round_half_up(assessment.automation_risk)
            risk = round_half_up(
                clamp(BASE_WEIGHT * base_risk + EXTERNAL_WEIGHT * assessment.automation_risk, 0, 100)
            )
            creativity = assessment.creativity_required or 50
            risk_factors = list(assessment.risk_factors)
            ai_tools = list(assessment.ai_tools)
            horizon = assessment.time_to_automation or DEFAULT_HORIZON
            source = AnalysisSource.BLENDED
        else:
            external_risk = None
            risk = base_risk
            creativity = max(20, 100 - risk)
            risk_factors = DEFAULT_RISK_FACTORS.get(category, ["general automation"])
            ai_tools = AI_TOOLS_BY_CATEGORY.get(category, ["General AI tools"])
            horizon = time_to_automation(risk)
            source = AnalysisSource.HEURISTIC

        record = JobRecord(
            title=capitalize_first(job_title),
            category=capitalize_first(category),
            automation_risk=risk,
            median_salary=estimate_salary(category, risk, creativity),
            creativity_required=round_half_up(creativity),
            ai_replacements=ReplacementStatus.from_risk(risk),
            risk_factors=list(risk_factors),
            ai_tools=list(ai_tools),
            time_to_automation=horizon,
        )
        return AnalysisResult(
            record=record, source=source, base_risk=base_risk, external_risk=external_risk
        )
