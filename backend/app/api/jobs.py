from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from app.core.enums import AnalysisSource
from app.core.errors import AppError
from app.models.job import AnalysisResult, JobAnalysis
from app.models.requests import AnalyzeJobRequest
from app.services.job_analyzer import JobAnalyzer
from app.services.job_categories import (
    compare_categories,
    get_category_statistics,
    get_job_categories,
    get_jobs_by_category,
    get_trending_categories,
    search_categories,
)
from app.services.job_database import JOB_DATABASE, lookup_job
from app.services.job_generator import (
    EXTENDED_JOB_DATABASE,
    degen_job,
    multiple_random_jobs,
    random_job,
    random_job_by_category,
    random_job_by_risk,
    trending_jobs,
)
from app.services.meme_generator import funny_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])

job_analyzer = JobAnalyzer()


async def resolve_job(job_title: str) -> AnalysisResult:
    """
    Busca en la base estática y, si no está, sintetiza la ficha.
    """
    record = lookup_job(job_title)
    if record is not None:
        return AnalysisResult(record=record, source=AnalysisSource.DATABASE)
    return await job_analyzer.analyze(job_title)


@router.post("/analyze", summary="Analyze the automation risk of a job title")
async def analyze_job(payload: AnalyzeJobRequest) -> dict:
    logger.info("Analyzing job: %s", payload.job_title)
    try:
        result = await resolve_job(payload.job_title)
        analysis = JobAnalysis.from_result(result, summary=funny_summary(result.record))
    except AppError:
        raise
    except Exception as e:
        logger.exception("Error analyzing job %r", payload.job_title)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to analyze job: {e}",
        )
    return analysis.to_json_dict()


@router.get("/random", summary="Random job, optionally filtered by category or risk")
async def get_random_job(
    category: Optional[str] = None,
    risk: Optional[str] = None,
) -> dict:
    if category:
        return random_job_by_category(category, EXTENDED_JOB_DATABASE)
    if risk:
        return random_job_by_risk(risk, EXTENDED_JOB_DATABASE)
    # sin filtros se devuelve la ficha completa de la base estática
    return random_job(JOB_DATABASE)


@router.get("/random/batch", summary="Several distinct random jobs")
async def get_random_jobs(count: int = Query(5, ge=1, le=100)) -> dict:
    jobs = multiple_random_jobs(EXTENDED_JOB_DATABASE, count=count)
    return {"jobs": jobs, "count": len(jobs)}


@router.get("/degen", summary="Made-up job for the Degen AI Predictor")
async def get_degen_job() -> dict:
    return degen_job()


@router.get("/trending", summary="Most automated jobs first")
async def get_trending_jobs(limit: int = Query(10, ge=1, le=100)) -> dict:
    jobs = trending_jobs(EXTENDED_JOB_DATABASE, count=limit)
    return {"jobs": jobs, "count": len(jobs)}


@router.get("/categories", summary="Job categories with statistics")
async def list_categories() -> dict:
    return get_job_categories(JOB_DATABASE)


@router.get("/categories/stats", summary="Risk statistics per category")
async def category_stats() -> dict:
    return get_category_statistics(JOB_DATABASE)


@router.get("/categories/trending", summary="Categories ranked by trend score")
async def trending_categories(limit: int = Query(5, ge=1, le=100)) -> dict:
    return get_trending_categories(JOB_DATABASE, limit=limit)


@router.get("/categories/search", summary="Search categories by keyword")
async def find_categories(q: str = Query(..., min_length=1, max_length=100)) -> dict:
    return search_categories(q, JOB_DATABASE)


@router.get("/categories/compare", summary="Compare several categories")
async def compare(names: str = Query(..., min_length=1)) -> dict:
    """`names` separados por comas: `?names=Finance,Retail`."""
    wanted = [name.strip() for name in names.split(",") if name.strip()]
    return compare_categories(wanted, JOB_DATABASE)


@router.get("/category/{category}", summary="Jobs of one category")
async def jobs_in_category(category: str) -> dict:
    return get_jobs_by_category(category, JOB_DATABASE)


@router.get("/all", summary="Whole static job table")
async def list_all_jobs() -> dict:
    return {
        "jobs": {key: job.to_json_dict() for key, job in JOB_DATABASE.items()},
        "count": len(JOB_DATABASE),
        "categories": list(dict.fromkeys(job.category for job in JOB_DATABASE.values())),
    }
