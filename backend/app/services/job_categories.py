"""Metadatos de categorías y estadísticas calculadas sobre una tabla de puestos."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping

from pydantic import ConfigDict

from app.core.errors import NotFoundError
from app.models.base import CamelModel
from app.models.job import JobRecord, JobSummary

logger = logging.getLogger(__name__)

HIGH_RISK_THRESHOLD = 70
LOW_RISK_THRESHOLD = 40


class CategoryInfo(CamelModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    icon: str
    color: str
    automation_trend: str


JOB_CATEGORIES: Dict[str, CategoryInfo] = {
    info.name: info
    for info in [
        CategoryInfo(name="Finance", description="Financial services, accounting, and investment roles",
                     icon="fas fa-chart-line", color="text-green-400", automation_trend="high"),
        CategoryInfo(name="Technology", description="Software development, IT, and technical roles",
                     icon="fas fa-code", color="text-cyan-400", automation_trend="medium"),
        CategoryInfo(name="Healthcare", description="Medical, nursing, and healthcare support roles",
                     icon="fas fa-heartbeat", color="text-pink-400", automation_trend="low"),
        CategoryInfo(name="Education", description="Teaching, academic, and educational support roles",
                     icon="fas fa-graduation-cap", color="text-blue-400", automation_trend="medium"),
        CategoryInfo(name="Retail", description="Sales, customer service, and retail operations",
                     icon="fas fa-shopping-cart", color="text-purple-400", automation_trend="high"),
        CategoryInfo(name="Media", description="Creative, design, and content creation roles",
                     icon="fas fa-video", color="text-red-400", automation_trend="medium"),
        CategoryInfo(name="Legal", description="Legal services, law enforcement, and compliance",
                     icon="fas fa-gavel", color="text-yellow-400", automation_trend="low"),
        CategoryInfo(name="Manufacturing", description="Production, assembly, and industrial roles",
                     icon="fas fa-industry", color="text-orange-400", automation_trend="high"),
        CategoryInfo(name="Administrative", description="Office support, coordination, and administrative roles",
                     icon="fas fa-briefcase", color="text-gray-400", automation_trend="high"),
        CategoryInfo(name="Management", description="Leadership, supervision, and management roles",
                     icon="fas fa-users-cog", color="text-indigo-400", automation_trend="low"),
    ]
}

JobTable = Mapping[str, JobRecord | JobSummary]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _average(values: List[int]) -> int:
    return int(sum(values) / len(values) + 0.5) if values else 0


def _percentage(count: int, total: int) -> int:
    return int(count / total * 100 + 0.5) if total else 0


def _jobs_in(category: str, database: JobTable) -> List[JobRecord | JobSummary]:
    wanted = category.strip().lower()
    return [job for job in database.values() if job.category.lower() == wanted]


def _risk_stats(risks: List[int]) -> dict:
    return {
        "totalJobs": len(risks),
        "averageRisk": _average(risks),
        "maxRisk": max(risks),
        "minRisk": min(risks),
        "highRiskJobs": sum(1 for r in risks if r >= HIGH_RISK_THRESHOLD),
        "lowRiskJobs": sum(1 for r in risks if r < LOW_RISK_THRESHOLD),
    }


def get_job_categories(database: JobTable) -> dict:
    """Todas las categorías con `totalJobs` y `averageRisk` calculados."""
    categories = {}
    for name, info in JOB_CATEGORIES.items():
        risks = [job.automation_risk for job in _jobs_in(name, database)]
        categories[name] = {
            **info.to_json_dict(),
            "totalJobs": len(risks),
            "averageRisk": _average(risks),
        }
    logger.info("Job categories retrieved with statistics")
    return {
        "categories": categories,
        "totalCategories": len(categories),
        "timestamp": _now(),
    }


def get_jobs_by_category(category: str, database: JobTable) -> dict:
    jobs = _jobs_in(category, database)
    if not jobs:
        raise NotFoundError(f"No jobs found in category: {category}")

    info = next(
        (i for name, i in JOB_CATEGORIES.items() if name.lower() == category.strip().lower()),
        None,
    )
    category_data = (
        info.to_json_dict()
        if info
        else {
            "name": category,
            "description": "General category",
            "icon": "fas fa-briefcase",
            "color": "text-gray-400",
        }
    )
    logger.info("Retrieved %d jobs from category: %s", len(jobs), category)
    return {
        "category": category_data,
        "jobs": [job.to_json_dict() for job in jobs],
        "count": len(jobs),
        "averageRisk": _average([job.automation_risk for job in jobs]),
        "timestamp": _now(),
    }


def get_category_statistics(database: JobTable) -> dict:
    """Estadísticas por categoría y globales."""
    by_category: Dict[str, List[int]] = {}
    for job in database.values():
        by_category.setdefault(job.category, []).append(job.automation_risk)

    stats = {}
    for name, risks in by_category.items():
        entry = _risk_stats(risks)
        entry["riskRange"] = entry["maxRisk"] - entry["minRisk"]
        stats[name] = entry

    all_risks = [job.automation_risk for job in database.values()]
    overall = _risk_stats(all_risks) if all_risks else {"totalJobs": 0}
    overall["totalCategories"] = len(by_category)
    return {"categories": stats, "overall": overall, "timestamp": _now()}


def get_trending_categories(database: JobTable, limit: int = 5) -> dict:
    """Ordena por `averageRisk + 0.5 * highRiskJobs`."""
    stats = get_category_statistics(database)["categories"]
    ranked = sorted(
        (
            {"name": name, **entry, "trendScore": entry["averageRisk"] + entry["highRiskJobs"] * 0.5}
            for name, entry in stats.items()
        ),
        key=lambda c: c["trendScore"],
        reverse=True,
    )[:limit]
    return {"categories": ranked, "count": len(ranked), "timestamp": _now()}


def search_categories(keyword: str, database: JobTable) -> dict:
    term = keyword.strip().lower()
    matches = []
    for name, info in JOB_CATEGORIES.items():
        if term in name.lower() or term in info.description.lower():
            risks = [job.automation_risk for job in _jobs_in(name, database)]
            matches.append(
                {**info.to_json_dict(), "totalJobs": len(risks), "averageRisk": _average(risks)}
            )
    logger.info("Found %d categories matching: %s", len(matches), keyword)
    return {
        "categories": matches,
        "count": len(matches),
        "searchTerm": keyword,
        "timestamp": _now(),
    }


def compare_categories(names: Iterable[str], database: JobTable) -> dict:
    comparison = {}
    for name in names:
        risks = [job.automation_risk for job in _jobs_in(name, database)]
        if not risks:
            continue
        comparison[name] = {
            "totalJobs": len(risks),
            "averageRisk": _average(risks),
            "maxRisk": max(risks),
            "minRisk": min(risks),
            "highRiskPercentage": _percentage(
                sum(1 for r in risks if r >= HIGH_RISK_THRESHOLD), len(risks)
            ),
            "lowRiskPercentage": _percentage(
                sum(1 for r in risks if r < LOW_RISK_THRESHOLD), len(risks)
            ),
        }
    return {"comparison": comparison, "categories": list(comparison), "timestamp": _now()}
