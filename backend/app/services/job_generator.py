"""Selección aleatoria de puestos para los endpoints "random" y "degen"."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Dict, List, Mapping

from app.core.enums import ReplacementStatus, RiskTier
from app.core.errors import NotFoundError, ValidationError
from app.models.job import JobRecord, JobSummary

logger = logging.getLogger(__name__)


def _summaries(category: str, rows: List[tuple]) -> Dict[str, JobSummary]:
    return {
        title.lower(): JobSummary(title=title, category=category, automation_risk=risk)
        for title, risk in rows
    }


# Base ampliada: 10 puestos por categoría, sólo título y riesgo
EXTENDED_JOB_DATABASE: Dict[str, JobSummary] = {
    **_summaries("Finance", [
        ("Junior Accountant", 88), ("Senior Accountant", 75), ("Financial Analyst", 45),
        ("Investment Banker", 25), ("Auditor", 70), ("Bookkeeper", 92),
        ("Tax Preparer", 85), ("Credit Analyst", 60), ("Treasurer", 35),
        ("Financial Advisor", 40),
    ]),
    **_summaries("Technology", [
        ("Software Developer", 23), ("Data Scientist", 35), ("Web Developer", 40),
        ("DevOps Engineer", 30), ("Product Manager", 20), ("System Administrator", 45),
        ("Database Administrator", 50), ("Network Engineer", 35),
        ("Cybersecurity Analyst", 25), ("Machine Learning Engineer", 15),
    ]),
    **_summaries("Healthcare", [
        ("Nurse", 18), ("Doctor", 12), ("Medical Technician", 55), ("Pharmacist", 30),
        ("Physical Therapist", 20), ("Radiologist", 40), ("Medical Assistant", 65),
        ("Dental Hygienist", 25), ("Respiratory Therapist", 30),
        ("Occupational Therapist", 15),
    ]),
    **_summaries("Education", [
        ("Teacher", 45), ("Professor", 30), ("Tutor", 50), ("School Administrator", 35),
        ("Librarian", 60), ("Guidance Counselor", 25), ("Special Education Teacher", 20),
        ("Curriculum Developer", 40), ("Educational Consultant", 30),
        ("Online Instructor", 55),
    ]),
    **_summaries("Retail", [
        ("Cashier", 92), ("Customer Service Representative", 82), ("Sales Associate", 70),
        ("Store Manager", 45), ("Retail Supervisor", 50), ("Inventory Specialist", 80),
        ("Loss Prevention Specialist", 60), ("Merchandiser", 65), ("Retail Buyer", 40),
        ("Customer Success Manager", 35),
    ]),
    **_summaries("Media", [
        ("Graphic Designer", 67), ("Content Writer", 75), ("Video Editor", 58),
        ("Photographer", 45), ("Journalist", 60), ("Social Media Manager", 70),
        ("Marketing Specialist", 55), ("Public Relations Specialist", 40),
        ("Copywriter", 65), ("Art Director", 35),
    ]),
    **_summaries("Legal", [
        ("Lawyer", 34), ("Paralegal", 65), ("Legal Assistant", 75), ("Court Reporter", 80),
        ("Legal Secretary", 85), ("Compliance Officer", 45), ("Contract Administrator", 60),
        ("Intellectual Property Specialist", 50), ("Litigation Support Specialist", 55),
        ("Legal Researcher", 70),
    ]),
    **_summaries("Manufacturing", [
        ("Factory Worker", 85), ("Quality Inspector", 78), ("Production Supervisor", 50),
        ("Machine Operator", 80), ("Industrial Engineer", 30),
        ("Maintenance Technician", 40), ("Welder", 60), ("Assembler", 85),
        ("Machinist", 65), ("Safety Coordinator", 45),
    ]),
    **_summaries("Administrative", [
        ("Administrative Assistant", 75), ("Executive Assistant", 60),
        ("Office Manager", 55), ("Receptionist", 80), ("Data Entry Clerk", 95),
        ("File Clerk", 90), ("Secretary", 85), ("Coordinator", 65), ("Scheduler", 70),
        ("Records Manager", 75),
    ]),
    **_summaries("Management", [
        ("Project Manager", 35), ("Operations Manager", 40),
        ("Human Resources Manager", 45), ("Marketing Manager", 30), ("Sales Manager", 35),
        ("Finance Manager", 40), ("General Manager", 25), ("Department Head", 30),
        ("Team Lead", 35), ("Supervisor", 40),
    ]),
}

DEGEN_JOB_TITLES: List[str] = [
    "Crypto Vibes Manager",
    "Chief Meme Officer",
    "Blockchain Whisperer",
    "NFT Curator",
    "Metaverse Architect",
    "TikTok Shaman",
    "AI Therapist",
    "Digital Nomad Coordinator",
    "Influencer Wrangler",
    "Productivity Guru",
    "Vibe Consultant",
    "Energy Healer",
    "Crystal Grid Designer",
    "Aura Photographer",
    "Chakra Balancer",
    "Moon Phase Coordinator",
    "Astral Projection Guide",
    "Quantum Manifestation Coach",
    "Reality Shifter",
    "Consciousness Expander",
    "Vibrational Frequency Tuner",
    "Ethereal Experience Designer",
    "Cosmic Alignment Specialist",
    "Dimensional Gateway Operator",
    "Soul Purpose Navigator",
]

JobTable = Mapping[str, JobRecord | JobSummary]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _with_key(key: str, job: JobRecord | JobSummary) -> dict:
    return {**job.to_json_dict(), "key": key, "timestamp": _now()}


def _in_tier(risk: int, tier: RiskTier) -> bool:
    return RiskTier.from_score(risk) is tier


def random_job(database: JobTable) -> dict:
    if not database:
        raise NotFoundError("No jobs available")
    key, job = random.choice(list(database.items()))
    logger.info("Random job generated: %s", job.title)
    return _with_key(key, job)


def random_job_by_category(category: str, database: JobTable) -> dict:
    matches = [
        (key, job)
        for key, job in database.items()
        if job.category.lower() == category.strip().lower()
    ]
    if not matches:
        raise NotFoundError(f"No jobs found in category: {category}")
    key, job = random.choice(matches)
    logger.info("Random job generated from category %s: %s", category, job.title)
    return _with_key(key, job)


def random_job_by_risk(risk_level: str, database: JobTable) -> dict:
    """low (<40), medium (40-69) o high (>=70)."""
    try:
        tier = RiskTier(risk_level.strip().lower())
    except ValueError:
        raise ValidationError("Invalid risk level. Use: low, medium, or high") from None

    matches = [(k, j) for k, j in database.items() if _in_tier(j.automation_risk, tier)]
    if not matches:
        raise NotFoundError(f"No jobs found with {tier.value} automation risk")
    key, job = random.choice(matches)
    logger.info("Random %s risk job generated: %s", tier.value, job.title)
    return _with_key(key, job)


def degen_job() -> dict:
    """Puesto inventado con números al azar para el "Degen AI Predictor"."""
    title = random.choice(DEGEN_JOB_TITLES)
    job = {
        "title": title,
        "category": "Degen",
        "automationRisk": random.randint(1, 100),
        "medianSalary": random.randint(50000, 249999),
        "creativityRequired": random.randint(1, 100),
        "aiReplacements": ReplacementStatus.QUANTUM.value,
        "riskFactors": ["reality distortion", "vibe interference", "dimensional shifts"],
        "aiTools": ["Quantum AI", "Vibe Detector", "Reality Shifter 3000"],
        "timeToAutomation": "Already automated in parallel universe",
        "timestamp": _now(),
    }
    logger.info("Degen job generated: %s", title)
    return job


def multiple_random_jobs(database: JobTable, count: int = 5) -> List[dict]:
    """Hasta `count` puestos distintos."""
    entries = list(database.items())
    picked = random.sample(entries, k=min(count, len(entries)))
    logger.info("Generated %d random jobs", len(picked))
    return [_with_key(key, job) for key, job in picked]


def trending_jobs(database: JobTable, count: int = 10) -> List[dict]:
    """Los más "cocinados" primero."""
    ordered = sorted(database.items(), key=lambda item: item[1].automation_risk, reverse=True)
    return [_with_key(key, job) for key, job in ordered[:count]]
