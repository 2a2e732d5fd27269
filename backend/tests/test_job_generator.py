import pytest

from app.core.errors import NotFoundError, ValidationError
from app.models.job import JobSummary
from app.services.job_categories import compare_categories, get_trending_categories, search_categories
from app.services.job_database import JOB_DATABASE, lookup_job, normalize_title
from app.services.job_generator import (
    DEGEN_JOB_TITLES,
    EXTENDED_JOB_DATABASE,
    degen_job,
    multiple_random_jobs,
    random_job,
    random_job_by_category,
    random_job_by_risk,
)


def test_static_tables_have_expected_size():
    assert len(JOB_DATABASE) == 20
    assert len(EXTENDED_JOB_DATABASE) == 100
    assert len(DEGEN_JOB_TITLES) == 25


def test_lookup_is_case_and_whitespace_insensitive():
    assert normalize_title("  Customer   Service Representative ") == "customer service representative"
    assert lookup_job("DOCTOR").median_salary == 200000
    assert lookup_job("astronaut") is None


def test_random_job_by_risk_medium_band():
    for _ in range(20):
        job = random_job_by_risk("MEDIUM", EXTENDED_JOB_DATABASE)
        assert 40 <= job["automationRisk"] < 70


def test_random_job_by_risk_invalid_level():
    with pytest.raises(ValidationError):
        random_job_by_risk("spicy", EXTENDED_JOB_DATABASE)


def test_empty_filters_raise_not_found():
    only_safe = {"nurse": JobSummary(title="Nurse", category="Healthcare", automation_risk=18)}

    with pytest.raises(NotFoundError):
        random_job_by_risk("high", only_safe)
    with pytest.raises(NotFoundError):
        random_job_by_category("Finance", only_safe)
    with pytest.raises(NotFoundError):
        random_job({})


def test_multiple_random_jobs_caps_at_table_size():
    jobs = multiple_random_jobs(JOB_DATABASE, count=50)
    assert len(jobs) == 20
    assert len({job["key"] for job in jobs}) == 20


def test_degen_job_uses_degen_titles():
    job = degen_job()
    assert job["title"] in DEGEN_JOB_TITLES
    assert 50000 <= job["medianSalary"] < 250000


def test_category_helpers():
    assert search_categories("nothing-like-this", JOB_DATABASE)["count"] == 0
    assert compare_categories(["Management"], JOB_DATABASE)["comparison"] == {}

    top = get_trending_categories(JOB_DATABASE, limit=1)["categories"][0]
    assert top["trendScore"] == top["averageRisk"] + 0.5 * top["highRiskJobs"]
