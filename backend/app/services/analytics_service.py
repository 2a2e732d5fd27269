"""Servicio simple en memoria para las analíticas de uso.

Guarda contadores y listas mientras el proceso está vivo; al reiniciar se
pierde todo. No hay límite de crecimiento de las listas de sesiones y de
compartidos. Todas las lecturas y escrituras pasan por un `RLock`, así que
el servicio es seguro aunque los handlers se ejecuten en hilos distintos.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Set

from app.core.enums import SharePlatform
from app.core.errors import NotFoundError
from app.services.job_database import normalize_title

logger = logging.getLogger(__name__)

RECENT_SESSIONS_PER_JOB = 10
DASHBOARD_TOP_N = 10
RECENT_SHARES_N = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _round2(value: float) -> float:
    return round(value * 100) / 100


@dataclass
class JobSearchStats:
    searches: int = 0
    total_score: float = 0.0
    average_score: float = 0.0


@dataclass
class DailyStats:
    searches: int = 0
    shares: int = 0
    unique_jobs: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class SessionRecord:
    job_title: str
    cooked_score: float
    user_agent: str
    timestamp: datetime

    def to_json_dict(self) -> dict:
        return {
            "jobTitle": self.job_title,
            "cookedScore": self.cooked_score,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ShareEvent:
    platform: str
    job_title: str
    cooked_score: float
    share_text: str
    timestamp: datetime

    def to_json_dict(self) -> dict:
        return {
            "platform": self.platform,
            "jobTitle": self.job_title,
            "cookedScore": self.cooked_score,
            "shareText": self.share_text,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class PopularJob:
    title: str
    searches: int
    average_score: float

    def to_json_dict(self) -> dict:
        return {
            "title": self.title,
            "searches": self.searches,
            "averageScore": _round2(self.average_score),
        }


@dataclass
class AnalyticsState:
    """Todo el estado mutable; `reset()` lo sustituye por uno nuevo."""

    total_searches: int = 0
    total_shares: int = 0
    job_searches: Dict[str, JobSearchStats] = field(default_factory=dict)
    popular_jobs: List[PopularJob] = field(default_factory=list)
    daily_stats: Dict[str, DailyStats] = field(default_factory=dict)
    share_metrics: Dict[str, int] = field(
        default_factory=lambda: {platform.value: 0 for platform in SharePlatform}
    )
    user_sessions: List[SessionRecord] = field(default_factory=list)
    share_events: List[ShareEvent] = field(default_factory=list)


class AnalyticsService:
    """
    Analíticas de búsquedas y compartidos. MVP: almacenamiento en memoria.
    Más adelante se puede sustituir por una BD persistente.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._state = AnalyticsState()

    # ---------- ESCRITURAS ----------

    def track_search(
        self,
        job_title: str,
        cooked_score: Optional[float] = None,
        user_agent: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> int:
        """Registra una búsqueda y devuelve el total acumulado."""
        normalized = normalize_title(job_title)
        now = _utcnow()
        with self._lock:
            state = self._state
            state.total_searches += 1

            stats = state.job_searches.setdefault(normalized, JobSearchStats())
            stats.searches += 1
            if cooked_score:
                stats.total_score += cooked_score
            stats.average_score = stats.total_score / stats.searches

            daily = state.daily_stats.setdefault(now.date().isoformat(), DailyStats())
            daily.searches += 1
            daily.unique_jobs.add(normalized)

            state.user_sessions.append(
                SessionRecord(
                    job_title=normalized,
                    cooked_score=cooked_score or 0,
                    user_agent=user_agent or "unknown",
                    timestamp=timestamp or now,
                )
            )
            self._update_popular_jobs()
            total = state.total_searches

        logger.info("Job search tracked: %s (Score: %s)", job_title, cooked_score)
        return total

    def track_share(
        self,
        platform: str,
        job_title: str,
        cooked_score: Optional[float] = None,
        share_text: Optional[str] = None,
    ) -> int:
        """Registra un compartido; plataformas desconocidas sólo suman al total."""
        key = platform.strip().lower()
        now = _utcnow()
        with self._lock:
            state = self._state
            state.total_shares += 1
            if key in state.share_metrics:
                state.share_metrics[key] += 1

            state.share_events.append(
                ShareEvent(
                    platform=key,
                    job_title=job_title,
                    cooked_score=cooked_score or 0,
                    share_text=share_text or "",
                    timestamp=now,
                )
            )
            state.daily_stats.setdefault(now.date().isoformat(), DailyStats()).shares += 1
            total = state.total_shares

        logger.info("Share tracked: %s - %s", key, job_title)
        return total

    def reset(self) -> None:
        with self._lock:
            self._state = AnalyticsState()
        logger.info("Analytics data reset")

    def _update_popular_jobs(self) -> None:
        # Orden estable: a igualdad de búsquedas, el primero en aparecer va antes
        ordered = sorted(
            self._state.job_searches.items(), key=lambda item: item[1].searches, reverse=True
        )
        self._state.popular_jobs = [
            PopularJob(title=title, searches=stats.searches, average_score=stats.average_score)
            for title, stats in ordered
        ]

    # ---------- LECTURAS ----------

    @property
    def total_searches(self) -> int:
        return self._state.total_searches

    @property
    def total_shares(self) -> int:
        return self._state.total_shares

    def dashboard(self, days: int = 7) -> dict:
        with self._lock:
            state = self._state
            return {
                "overview": {
                    "totalSearches": state.total_searches,
                    "totalShares": state.total_shares,
                    "averageCookedScore": self._average_cooked_score(),
                    "uniqueJobsSearched": len(state.job_searches),
                },
                "recentStats": self._recent_stats(days),
                "trendingJobs": [job.to_json_dict() for job in state.popular_jobs[:DASHBOARD_TOP_N]],
                "shareMetrics": dict(state.share_metrics),
                "viralContent": [event.to_json_dict() for event in self._viral_content()],
                "popularJobs": [job.to_json_dict() for job in state.popular_jobs[:DASHBOARD_TOP_N]],
                "dailyStats": {
                    day: {
                        "searches": stats.searches,
                        "shares": stats.shares,
                        "uniqueJobs": len(stats.unique_jobs),
                    }
                    for day, stats in state.daily_stats.items()
                },
            }

    def job_stats(self, job_title: str) -> dict:
        """Estadísticas de un puesto; NotFoundError si nunca se buscó."""
        normalized = normalize_title(job_title)
        with self._lock:
            stats = self._state.job_searches.get(normalized)
            if stats is None:
                raise NotFoundError(f"No analytics data found for: {job_title}")

            sessions = [s for s in self._state.user_sessions if s.job_title == normalized]
            recent = list(reversed(sessions[-RECENT_SESSIONS_PER_JOB:]))
            return {
                "jobTitle": job_title,
                "searches": stats.searches,
                "averageScore": _round2(stats.average_score),
                "recentSearches": [session.to_json_dict() for session in recent],
                "rank": self.job_rank(normalized),
            }

    def job_rank(self, job_title: str) -> Optional[int]:
        """Posición (1 = más buscado) o None si no aparece."""
        normalized = normalize_title(job_title)
        with self._lock:
            for index, job in enumerate(self._state.popular_jobs):
                if job.title == normalized:
                    return index + 1
        return None

    def trending(self, limit: int = 10) -> List[dict]:
        with self._lock:
            return [job.to_json_dict() for job in self._state.popular_jobs[:limit]]

    def shares(self, platform: Optional[str] = None, days: int = 30) -> dict:
        with self._lock:
            state = self._state
            if platform:
                key = platform.strip().lower()
                metrics = {key: state.share_metrics.get(key, 0)}
            else:
                metrics = dict(state.share_metrics)

            cutoff = _utcnow() - timedelta(days=days)
            recent = [e for e in state.share_events if e.timestamp >= cutoff]
            recent = list(reversed(recent[-RECENT_SHARES_N:]))
            return {
                "shareMetrics": metrics,
                "viralContent": [event.to_json_dict() for event in recent],
                "totalShares": state.total_shares,
            }

    def daily(self, day: date) -> Optional[DailyStats]:
        with self._lock:
            return self._state.daily_stats.get(day.isoformat())

    def _recent_stats(self, days: int) -> dict:
        cutoff = _utcnow() - timedelta(days=days)
        sessions = [s for s in self._state.user_sessions if s.timestamp >= cutoff]
        average = (
            _round2(sum(s.cooked_score for s in sessions) / len(sessions)) if sessions else 0
        )
        return {
            "searches": len(sessions),
            "uniqueJobs": len({s.job_title for s in sessions}),
            "averageScore": average,
            "period": f"{days} days",
        }

    def _viral_content(self, limit: int = DASHBOARD_TOP_N) -> List[ShareEvent]:
        return sorted(self._state.share_events, key=lambda e: e.timestamp, reverse=True)[:limit]

    def _average_cooked_score(self) -> float:
        scored = [s.cooked_score for s in self._state.user_sessions if s.cooked_score > 0]
        if not scored:
            return 0
        return _round2(sum(scored) / len(scored))
