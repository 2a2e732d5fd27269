from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Query

from app.core.errors import ValidationError
from app.models.job import JobRecord
from app.models.requests import GenerateMemeRequest, PersonalizedMemeRequest, clean_job_title
from app.services.job_analyzer import JobAnalyzer
from app.services.job_database import lookup_job
from app.services.meme_generator import (
    all_memes,
    daily_meme,
    generate_custom_meme,
    generate_job_specific_meme,
    generate_personalized_meme,
    generate_platform_meme,
    generate_trending_meme,
    memes_by_category,
    random_meme,
    trending_memes,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/memes", tags=["memes"])

job_analyzer = JobAnalyzer()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/daily", summary="Meme of the day")
async def get_daily_meme() -> dict:
    meme = daily_meme()
    logger.info("Daily meme generated successfully")
    return meme.to_json_dict()


@router.get("/random", summary="Random meme from the rotation")
async def get_random_meme() -> dict:
    return {**random_meme().to_json_dict(), "timestamp": _now()}


@router.get("/category/{category}", summary="Memes of one category (slug)")
async def get_memes_by_category(category: str) -> dict:
    memes = memes_by_category(category)
    return {
        "category": category,
        "memes": [meme.to_json_dict() for meme in memes],
        "count": len(memes),
    }


@router.get("/trending", summary="Memes sorted by viral score")
async def get_trending_memes(limit: int = Query(5, ge=1, le=100)) -> dict:
    memes = trending_memes(limit)
    return {
        "memes": [meme.to_json_dict() for meme in memes],
        "count": len(memes),
        "timestamp": _now(),
    }


@router.get("/trending/generate", summary="Freshly generated trending meme")
async def get_generated_trending_meme() -> dict:
    return generate_trending_meme().to_json_dict()


@router.get("/all", summary="Whole meme rotation")
async def get_all_memes() -> dict:
    return all_memes()


@router.post("/generate", summary="Generate a meme for a job and score")
async def generate_meme(payload: GenerateMemeRequest) -> dict:
    meme = generate_custom_meme(
        payload.job_title,
        payload.cooked_score,
        mood=payload.mood.value,
        platform=payload.platform.value if payload.platform else None,
    )
    return meme.to_json_dict()


@router.post("/personalized", summary="Meme based on favourites or search history")
async def generate_personalized(payload: PersonalizedMemeRequest) -> dict:
    meme = generate_personalized_meme(payload.favorite_jobs, payload.search_history)
    return meme.to_json_dict()


@router.get("/platform/{platform}", summary="Meme tuned for a social platform")
async def get_platform_meme(platform: str, job_title: str | None = Query(None, alias="jobTitle")) -> dict:
    job = _job_for(job_title) if job_title else None
    return generate_platform_meme(platform, job).to_json_dict()


@router.get("/job/{job_title}", summary="Meme about a specific job")
async def get_job_meme(job_title: str) -> dict:
    return generate_job_specific_meme(_job_for(job_title)).to_json_dict()


def _job_for(job_title: str) -> JobRecord:
    """Ficha del puesto; los títulos desconocidos usan sólo la heurística."""
    try:
        title = clean_job_title(job_title)
    except ValueError as e:
        raise ValidationError(str(e)) from None
    record = lookup_job(title)
    if record is not None:
        return record
    return job_analyzer.analyze_offline(title).record
