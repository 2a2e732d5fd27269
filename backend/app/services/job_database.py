"""Base estática de puestos con su ficha de riesgo de automatización.

Se carga al importar el módulo y nunca se modifica. Las claves son títulos
normalizados (minúsculas, sin espacios sobrantes).
"""

from __future__ import annotations

from typing import Dict, List, Optional

from app.core.enums import ReplacementStatus
from app.models.job import JobRecord


def normalize_title(title: str) -> str:
    """Minúsculas y espacios colapsados: 'Junior  Accountant ' -> 'junior accountant'."""
    return " ".join(title.lower().split())


def _job(
    title: str,
    category: str,
    risk: int,
    salary: int,
    creativity: int,
    replacements: ReplacementStatus,
    risk_factors: List[str],
    ai_tools: List[str],
    horizon: str,
) -> JobRecord:
    return JobRecord(
        title=title,
        category=category,
        automation_risk=risk,
        median_salary=salary,
        creativity_required=creativity,
        ai_replacements=replacements,
        risk_factors=risk_factors,
        ai_tools=ai_tools,
        time_to_automation=horizon,
    )


_JOBS: List[JobRecord] = [
    # Finance
    _job("Junior Accountant", "Finance", 88, 42000, 15, ReplacementStatus.ACTIVE,
         ["data entry", "repetitive tasks", "rule-based decisions"],
         ["QuickBooks AI", "Xero", "Sage Intacct"], "2-3 years"),
    _job("Financial Analyst", "Finance", 45, 85000, 60, ReplacementStatus.EMERGING,
         ["data analysis", "reporting", "basic modeling"],
         ["Tableau AI", "Power BI", "Alteryx"], "5-7 years"),
    _job("Investment Banker", "Finance", 25, 150000, 80, ReplacementStatus.LIMITED,
         ["relationship building", "complex negotiations"],
         ["DealRoom", "PitchBook"], "10+ years"),
    # Technology
    _job("Software Developer", "Technology", 23, 95000, 85, ReplacementStatus.MINIMAL,
         ["AI pair programming", "code generation"],
         ["GitHub Copilot", "ChatGPT", "Claude"], "10+ years"),
    _job("Data Scientist", "Technology", 35, 120000, 75, ReplacementStatus.EMERGING,
         ["automated ML", "data preprocessing"],
         ["AutoML", "DataRobot", "H2O.ai"], "7-10 years"),
    _job("Web Developer", "Technology", 40, 75000, 70, ReplacementStatus.EMERGING,
         ["website builders", "AI code generation"],
         ["Wix ADI", "Webflow", "ChatGPT"], "5-8 years"),
    # Healthcare
    _job("Nurse", "Healthcare", 18, 65000, 60, ReplacementStatus.MINIMAL,
         ["patient care", "emotional support"],
         ["AI diagnostics", "telemedicine"], "15+ years"),
    _job("Doctor", "Healthcare", 12, 200000, 90, ReplacementStatus.MINIMAL,
         ["AI diagnostics", "telemedicine"],
         ["IBM Watson", "Google Health AI"], "20+ years"),
    _job("Medical Technician", "Healthcare", 55, 45000, 30, ReplacementStatus.ACTIVE,
         ["lab automation", "imaging analysis"],
         ["Lab automation systems", "AI imaging"], "3-5 years"),
    # Education
    _job("Teacher", "Education", 45, 48000, 75, ReplacementStatus.PARTIAL,
         ["online learning", "AI tutoring"],
         ["Khan Academy", "Duolingo", "ChatGPT"], "8-12 years"),
    _job("Professor", "Education", 30, 85000, 85, ReplacementStatus.LIMITED,
         ["research", "mentoring"],
         ["AI research tools", "online platforms"], "15+ years"),
    # Retail
    _job("Cashier", "Retail", 92, 28000, 10, ReplacementStatus.EVERYWHERE,
         ["self-checkout", "mobile payments"],
         ["Self-checkout systems", "Amazon Go"], "1-2 years"),
    _job("Customer Service Representative", "Retail", 82, 35000, 25, ReplacementStatus.ACTIVE,
         ["chatbots", "AI voice systems"],
         ["ChatGPT", "Intercom", "Zendesk AI"], "2-4 years"),
    # Media
    _job("Graphic Designer", "Media", 67, 52000, 80, ReplacementStatus.EMERGING,
         ["AI image generation", "template design"],
         ["Midjourney", "DALL-E", "Canva AI"], "3-6 years"),
    _job("Content Writer", "Media", 75, 45000, 70, ReplacementStatus.ACTIVE,
         ["AI writing tools", "content generation"],
         ["ChatGPT", "Jasper", "Copy.ai"], "2-4 years"),
    _job("Video Editor", "Media", 58, 55000, 75, ReplacementStatus.EMERGING,
         ["AI video editing", "automated cuts"],
         ["Runway ML", "CapCut AI", "Adobe Firefly"], "4-7 years"),
    # Legal
    _job("Lawyer", "Legal", 34, 120000, 70, ReplacementStatus.LIMITED,
         ["document review", "legal research"],
         ["LexisNexis AI", "DoNotPay", "Harvey AI"], "8-12 years"),
    _job("Paralegal", "Legal", 65, 52000, 40, ReplacementStatus.ACTIVE,
         ["document preparation", "research"],
         ["Legal AI tools", "document automation"], "3-6 years"),
    # Manufacturing
    _job("Factory Worker", "Manufacturing", 85, 35000, 20, ReplacementStatus.ACTIVE,
         ["robotics", "automation"],
         ["Industrial robots", "IoT sensors"], "2-5 years"),
    _job("Quality Inspector", "Manufacturing", 78, 42000, 25, ReplacementStatus.ACTIVE,
         ["computer vision", "AI inspection"],
         ["AI vision systems", "IoT monitoring"], "3-5 years"),
]

JOB_DATABASE: Dict[str, JobRecord] = {normalize_title(job.title): job for job in _JOBS}


def lookup_job(title: str) -> Optional[JobRecord]:
    """Devuelve la ficha estática del puesto o None si no está en la base."""
    return JOB_DATABASE.get(normalize_title(title))


def all_jobs() -> Dict[str, JobRecord]:
    return dict(JOB_DATABASE)
