from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query

from app.models.requests import TrackSearchRequest, TrackShareRequest
from app.services.analytics_store import analytics_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/track", summary="Record a job search")
async def track_search(payload: TrackSearchRequest) -> dict:
    total = analytics_store.track_search(
        payload.job_title,
        cooked_score=payload.cooked_score,
        user_agent=payload.user_agent,
        timestamp=payload.timestamp,
    )
    return {
        "success": True,
        "message": "Search tracked successfully",
        "totalSearches": total,
    }


@router.post("/share", summary="Record a share on a social platform")
async def track_share(payload: TrackShareRequest) -> dict:
    total = analytics_store.track_share(
        payload.platform,
        payload.job_title,
        cooked_score=payload.cooked_score,
        share_text=payload.share_text,
    )
    return {
        "success": True,
        "message": "Share tracked successfully",
        "totalShares": total,
    }


@router.get("/dashboard", summary="Aggregated usage dashboard")
async def dashboard(days: int = Query(7, ge=1)) -> dict:
    return {**analytics_store.dashboard(days), "timestamp": _now()}


@router.get("/job/{job_title}", summary="Analytics for one job title")
async def job_analytics(job_title: str) -> dict:
    return {**analytics_store.job_stats(job_title), "timestamp": _now()}


@router.get("/trending", summary="Most searched jobs")
async def trending(limit: int = Query(10, ge=1, le=100)) -> dict:
    jobs = analytics_store.trending(limit)
    return {"trendingJobs": jobs, "count": len(jobs), "timestamp": _now()}


@router.get("/shares", summary="Share counters and recent shares")
async def shares(platform: Optional[str] = None, days: int = Query(30, ge=1)) -> dict:
    return {**analytics_store.shares(platform, days), "timestamp": _now()}


@router.post("/reset", summary="Wipe all analytics (testing/development)")
async def reset() -> dict:
    analytics_store.reset()
    return {"success": True, "message": "Analytics data reset successfully"}
