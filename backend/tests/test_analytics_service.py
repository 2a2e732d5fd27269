from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import NotFoundError
from app.services.analytics_service import AnalyticsService


def test_zero_score_counts_search_but_not_total_score():
    service = AnalyticsService()

    service.track_search("Nurse", 20)
    service.track_search("  NURSE ", 0)

    stats = service.job_stats("nurse")
    assert stats["searches"] == 2
    assert stats["averageScore"] == 10


def test_average_is_recomputed_even_without_score():
    service = AnalyticsService()

    service.track_search("Nurse", 30)
    service.track_search("Nurse")

    assert service.job_stats("Nurse")["averageScore"] == 15


def test_recent_searches_are_last_ten_newest_first():
    service = AnalyticsService()

    for score in range(1, 13):
        service.track_search("Cashier", score)

    recent = service.job_stats("cashier")["recentSearches"]
    assert [s["cookedScore"] for s in recent] == list(range(12, 2, -1))


def test_rank_follows_search_count():
    service = AnalyticsService()

    service.track_search("Nurse", 10)
    service.track_search("Cashier", 90)
    service.track_search("Cashier", 90)

    assert service.job_rank("cashier") == 1
    assert service.job_rank("nurse") == 2
    assert service.job_rank("astronaut") is None


def test_share_creates_daily_entry_when_missing():
    service = AnalyticsService()

    service.track_share("twitter", "Teacher")

    today = service.daily(datetime.now(timezone.utc).date())
    assert today is not None
    assert today.shares == 1
    assert today.searches == 0


def test_daily_unique_jobs():
    service = AnalyticsService()

    service.track_search("Teacher", 45)
    service.track_search("teacher", 45)
    service.track_search("Nurse", 18)

    daily = service.dashboard()["dailyStats"]
    assert list(daily.values()) == [{"searches": 3, "shares": 0, "uniqueJobs": 2}]


def test_unknown_platform_does_not_touch_counters():
    service = AnalyticsService()

    total = service.track_share("friendster", "Teacher", 50, "cooked")

    assert total == 1
    assert service.total_shares == 1
    assert set(service.shares()["shareMetrics"].values()) == {0}


def test_recent_stats_use_session_timestamp():
    service = AnalyticsService()
    old = datetime.now(timezone.utc) - timedelta(days=3)

    service.track_search("Teacher", 40, timestamp=old)
    service.track_search("Nurse", 20)

    assert service.dashboard(days=1)["recentStats"]["searches"] == 1
    assert service.dashboard(days=7)["recentStats"] == {
        "searches": 2,
        "uniqueJobs": 2,
        "averageScore": 30,
        "period": "7 days",
    }


def test_reset_clears_state():
    service = AnalyticsService()
    service.track_search("Teacher", 45)
    service.track_share("tiktok", "Teacher")

    service.reset()

    assert service.total_searches == 0
    assert service.total_shares == 0
    assert service.trending() == []
    with pytest.raises(NotFoundError):
        service.job_stats("Teacher")


def test_concurrent_writes_are_not_lost():
    service = AnalyticsService()

    def work(i):
        service.track_search(f"job {i % 5}", 50)
        service.track_share("clipboard", f"job {i % 5}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(work, range(400)))

    assert service.total_searches == 400
    assert service.total_shares == 400
    assert service.shares("clipboard")["shareMetrics"] == {"clipboard": 400}
    assert sum(job["searches"] for job in service.trending(10)) == 400
