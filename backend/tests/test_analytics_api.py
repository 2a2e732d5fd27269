from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.main import app


def test_track_then_read_job_stats():
    client = TestClient(app)

    response = client.post("/api/analytics/track", json={"jobTitle": "Teacher", "cookedScore": 45})
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Search tracked successfully",
        "totalSearches": 1,
    }

    stats = client.get("/api/analytics/job/teacher")
    assert stats.status_code == 200
    data = stats.json()
    assert data["searches"] == 1
    assert data["averageScore"] == 45
    assert data["rank"] == 1
    assert len(data["recentSearches"]) == 1
    assert data["recentSearches"][0]["jobTitle"] == "teacher"


def test_job_stats_unknown_job_is_404():
    client = TestClient(app)

    response = client.get("/api/analytics/job/astronaut")

    assert response.status_code == 404
    assert response.json()["message"] == "No analytics data found for: astronaut"


def test_share_unknown_platform_only_counts_total():
    client = TestClient(app)

    response = client.post("/api/analytics/share", json={"platform": "myspace", "jobTitle": "Teacher"})
    assert response.status_code == 200
    assert response.json()["totalShares"] == 1

    shares = client.get("/api/analytics/shares").json()
    assert shares["totalShares"] == 1
    assert shares["shareMetrics"] == {"twitter": 0, "tiktok": 0, "linkedin": 0, "clipboard": 0}
    assert shares["viralContent"][0]["platform"] == "myspace"


def test_share_known_platform_is_case_insensitive():
    client = TestClient(app)

    client.post("/api/analytics/share", json={"platform": "Twitter", "jobTitle": "Cashier", "cookedScore": 92})
    client.post("/api/analytics/share", json={"platform": "twitter", "jobTitle": "Cashier"})

    shares = client.get("/api/analytics/shares", params={"platform": "TWITTER"}).json()
    assert shares["shareMetrics"] == {"twitter": 2}
    assert len(shares["viralContent"]) == 2


def test_dashboard_overview_and_trending():
    client = TestClient(app)

    for title, score in [("Cashier", 92), ("cashier", 90), ("Nurse", 18), ("Doctor", 0)]:
        client.post("/api/analytics/track", json={"jobTitle": title, "cookedScore": score})
    client.post("/api/analytics/share", json={"platform": "linkedin", "jobTitle": "Nurse"})

    data = client.get("/api/analytics/dashboard").json()
    overview = data["overview"]
    assert overview["totalSearches"] == 4
    assert overview["totalShares"] == 1
    assert overview["uniqueJobsSearched"] == 3
    # sólo cuentan las puntuaciones > 0
    assert overview["averageCookedScore"] == round((92 + 90 + 18) / 3, 2)
    assert data["recentStats"]["searches"] == 4
    assert data["recentStats"]["period"] == "7 days"
    assert data["trendingJobs"][0]["title"] == "cashier"
    assert data["shareMetrics"]["linkedin"] == 1

    trending = client.get("/api/analytics/trending", params={"limit": 2}).json()
    assert trending["count"] == 2
    assert trending["trendingJobs"][0] == {"title": "cashier", "searches": 2, "averageScore": 91}


def test_reset_zeroes_everything():
    client = TestClient(app)

    client.post("/api/analytics/track", json={"jobTitle": "Teacher", "cookedScore": 45})
    client.post("/api/analytics/share", json={"platform": "tiktok", "jobTitle": "Teacher"})

    response = client.post("/api/analytics/reset")
    assert response.json() == {"success": True, "message": "Analytics data reset successfully"}

    overview = client.get("/api/analytics/dashboard").json()["overview"]
    assert overview["totalSearches"] == 0
    assert overview["totalShares"] == 0
    assert overview["uniqueJobsSearched"] == 0
    assert client.get("/api/analytics/job/teacher").status_code == 404
    assert client.get("/api/analytics/trending").json()["trendingJobs"] == []
    assert client.get("/api/analytics/shares").json()["shareMetrics"]["tiktok"] == 0


@pytest.mark.parametrize(
    "payload, message",
    [
        ({}, "Job title is required"),
        ({"jobTitle": "   "}, "Job title must be a non-empty string"),
        ({"jobTitle": "Teacher", "cookedScore": 101}, "Cooked score must be a number between 0 and 100"),
        ({"jobTitle": "Teacher", "cookedScore": -1}, "Cooked score must be a number between 0 and 100"),
        ({"jobTitle": "Teacher", "userAgent": 5}, "User agent must be a string"),
        ({"jobTitle": "Teacher", "timestamp": "yesterday"}, "Invalid timestamp format"),
        (
            {
                "jobTitle": "Teacher",
                "timestamp": (datetime.now(timezone.utc) - timedelta(days=3)).isoformat(),
            },
            "Timestamp is too far from current time",
        ),
    ],
)
def test_track_validation(payload, message):
    client = TestClient(app)

    response = client.post("/api/analytics/track", json=payload)

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Validation Error"
    assert data["message"] == message


def test_track_accepts_recent_timestamp():
    client = TestClient(app)
    timestamp = (datetime.now(timezone.utc) - timedelta(hours=2)).isoformat().replace("+00:00", "Z")

    response = client.post("/api/analytics/track", json={"jobTitle": "Teacher", "timestamp": timestamp})

    assert response.status_code == 200


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"jobTitle": "Teacher"}, "Platform is required"),
        ({"platform": "twitter"}, "Job title is required"),
        ({"platform": "twitter", "jobTitle": "Teacher", "shareText": "x" * 501}, "Share text is too long (max 500 characters)"),
    ],
)
def test_share_validation(payload, message):
    client = TestClient(app)

    response = client.post("/api/analytics/share", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == message


def test_dashboard_days_must_be_positive():
    client = TestClient(app)

    response = client.get("/api/analytics/dashboard", params={"days": 0})

    assert response.status_code == 400
