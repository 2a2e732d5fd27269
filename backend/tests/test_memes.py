from datetime import date

import pytest
from fastapi.testclient import TestClient

import app.models.meme as meme_models
from app.core.enums import RiskTier
from app.main import app
from app.services.meme_generator import (
    CUSTOM_MEME_TEMPLATES,
    MEME_DATABASE,
    daily_meme,
    day_of_year,
    generate_custom_meme,
)


def test_day_of_year_is_one_based():
    assert day_of_year(date(2024, 1, 1)) == 1
    assert day_of_year(date(2024, 12, 31)) == 366


def test_daily_meme_is_stable_within_a_day():
    today = date(2024, 3, 10)

    first = daily_meme(today)
    second = daily_meme(today)

    assert first.title == second.title
    assert first.id == second.id == day_of_year(today)
    assert first.is_daily


def test_daily_meme_changes_with_the_day_and_wraps():
    jan_1 = daily_meme(date(2024, 1, 1))
    jan_2 = daily_meme(date(2024, 1, 2))
    jan_16 = daily_meme(date(2024, 1, 16))

    assert jan_1.title == MEME_DATABASE[1].title
    assert jan_2.title == MEME_DATABASE[2].title
    assert jan_1.title != jan_2.title
    # 16 % 15 == 1
    assert jan_16.title == jan_1.title


def test_daily_endpoint_returns_same_meme_twice():
    client = TestClient(app)

    first = client.get("/api/memes/daily").json()
    second = client.get("/api/memes/daily").json()

    assert first["title"] == second["title"]
    assert first["isDaily"] is True


def test_random_meme_comes_from_rotation():
    client = TestClient(app)

    data = client.get("/api/memes/random").json()

    assert data["title"] in {meme.title for meme in MEME_DATABASE}
    assert "timestamp" in data


def test_memes_by_category_slug():
    client = TestClient(app)

    data = client.get("/api/memes/category/ai-vs-human").json()

    assert data["count"] == 1
    assert data["memes"][0]["id"] == 3


def test_memes_by_unknown_category_lists_available():
    client = TestClient(app)

    response = client.get("/api/memes/category/cats")

    assert response.status_code == 404
    data = response.json()
    assert data["message"] == "No memes found in category: cats"
    assert "AI vs Human" in data["availableCategories"]


def test_trending_memes_sorted_and_rotation_untouched():
    client = TestClient(app)
    original_order = [meme.id for meme in MEME_DATABASE]

    data = client.get("/api/memes/trending", params={"limit": 3}).json()

    assert [meme["viralScore"] for meme in data["memes"]] == [95, 94, 93]
    assert [meme.id for meme in MEME_DATABASE] == original_order


def test_all_memes_summary():
    client = TestClient(app)

    data = client.get("/api/memes/all").json()

    assert data["count"] == 15
    assert data["averageViralScore"] == 90
    assert len(data["categories"]) == len(set(data["categories"]))


def test_generate_meme_uses_score_tier():
    client = TestClient(app)

    response = client.post("/api/memes/generate", json={"jobTitle": "Cashier", "cookedScore": 85})

    assert response.status_code == 200
    data = response.json()
    assert "Cashier" in data["title"]
    assert data["category"] == "Custom Generated"
    assert data["cookedScore"] == 85
    assert data["mood"] == "neutral"
    assert 80 <= data["viralScore"] <= 99


def test_generate_meme_accepts_zero_score():
    client = TestClient(app)

    response = client.post(
        "/api/memes/generate", json={"jobTitle": "Doctor", "cookedScore": 0, "mood": "Happy"}
    )

    assert response.status_code == 200
    assert response.json()["mood"] == "happy"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"jobTitle": "Cashier"}, "Cooked score is required"),
        ({"jobTitle": "Cashier", "cookedScore": 150}, "Cooked score must be a number between 0 and 100"),
        ({"jobTitle": "Cashier", "cookedScore": "lots"}, "Cooked score must be a number between 0 and 100"),
        ({"cookedScore": 50}, "Job title is required"),
    ],
)
def test_generate_meme_validation(payload, message):
    client = TestClient(app)

    response = client.post("/api/memes/generate", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == message


def test_generate_meme_rejects_unknown_mood():
    client = TestClient(app)

    response = client.post(
        "/api/memes/generate", json={"jobTitle": "Cashier", "cookedScore": 50, "mood": "bored"}
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid mood")


@pytest.mark.parametrize(
    "score, tier",
    [(95, RiskTier.HIGH), (70, RiskTier.HIGH), (40, RiskTier.MEDIUM), (39.5, RiskTier.LOW)],
)
def test_custom_meme_templates_by_tier(score, tier):
    expected = {title.format(job="Cashier", score=score) for title, _ in CUSTOM_MEME_TEMPLATES[tier]}

    meme = generate_custom_meme("Cashier", score)

    assert meme.title in expected


def test_personalized_meme_variants():
    client = TestClient(app)

    favourite = client.post(
        "/api/memes/personalized",
        json={"favoriteJobs": [{"title": "Cashier", "automationRisk": 92}]},
    ).json()
    assert "Time to pivot!" in favourite["content"]
    assert favourite["isPersonalized"] is True

    history = client.post(
        "/api/memes/personalized",
        json={"searchHistory": [{"jobTitle": "Nurse", "cookedScore": 18}]},
    ).json()
    assert "You recently searched for 'Nurse'" in history["content"]

    generic = client.post("/api/memes/personalized", json={}).json()
    assert "worried about AI" in generic["content"]


def test_platform_memes():
    client = TestClient(app)

    tiktok = client.get("/api/memes/platform/tiktok").json()
    assert tiktok["category"].startswith("TikTok")
    assert tiktok["platform"] == "tiktok"

    fallback = client.get("/api/memes/platform/myspace").json()
    assert fallback["category"].startswith("Twitter")

    with_job = client.get("/api/memes/platform/linkedin", params={"jobTitle": "Teacher"}).json()
    assert with_job["jobTitle"] == "Teacher"
    assert with_job["automationRisk"] == 45


def test_job_specific_meme():
    client = TestClient(app)

    known = client.get("/api/memes/job/cashier").json()
    assert known["jobTitle"] == "Cashier"
    assert known["automationRisk"] == 92
    assert known["jobCategory"] == "Retail"

    unknown = client.get("/api/memes/job/dog walker").json()
    assert unknown["jobTitle"] == "Dog walker"

    too_long = client.get(f"/api/memes/job/{'x' * 101}")
    assert too_long.status_code == 400


def test_generated_trending_meme():
    client = TestClient(app)

    data = client.get("/api/memes/trending/generate").json()

    assert data["isTrending"] is True
    assert 85 <= data["viralScore"] <= 99


def test_meme_models_module_docstring():
    assert meme_models.__doc__.startswith("Modelos de memes")
