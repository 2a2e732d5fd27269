import pytest

import app.api.jobs as jobs_api
from app.services.analytics_store import analytics_store
from app.services.rate_limiter import rate_limiter


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Cada test empieza sin analíticas, sin contador de peticiones y sin LLM."""
    analytics_store.reset()
    rate_limiter.reset()
    monkeypatch.setattr(jobs_api.job_analyzer, "api_key", None)
    monkeypatch.setattr(jobs_api.job_analyzer, "client", None)
    yield
    analytics_store.reset()
    rate_limiter.reset()
