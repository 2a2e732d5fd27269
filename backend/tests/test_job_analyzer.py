import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from app.core.enums import AnalysisSource, ReplacementStatus
from app.services.job_analyzer import (
    AssessmentOutcome,
    AssessmentStatus,
    JobAnalyzer,
    calculate_base_risk,
    categorize_job,
    estimate_salary,
    parse_assessment,
    round_half_up,
    time_to_automation,
)


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content=None, error=None):
    completions = FakeCompletions(content=content, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_categorize_job_first_keyword_wins():
    assert categorize_job("Senior Data Engineer") == "technology"
    assert categorize_job("Tax Accountant") == "finance"
    assert categorize_job("Regional Manager") == "management"
    assert categorize_job("Office Coordinator") == "administrative"
    assert categorize_job("Dog Walker") == "general"


def test_base_risk_without_factors_uses_default_and_adjustment():
    # 50 por defecto + ajuste de categoría
    assert calculate_base_risk("Dog Walker", "general") == 50
    assert calculate_base_risk("Retail Cashier", "retail") == 70
    assert calculate_base_risk("Nurse", "healthcare") == 20


def test_base_risk_averages_matched_factors_and_accepts_compact_form():
    assert calculate_base_risk("bookkeeping clerk", "finance") == 95
    # (0.8 + 0.7) / 2
    assert calculate_base_risk("data entry and scheduling", "general") == 75
    assert calculate_base_risk("dataentry operator", "general") == 80


def test_base_risk_is_clamped():
    assert calculate_base_risk("quality control factory", "manufacturing") == 100
    assert calculate_base_risk("brain surgeon", "healthcare") >= 0


def test_round_half_up_matches_math_round():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-0.5) == 0


def test_time_to_automation_tiers():
    assert time_to_automation(80) == "1-3 years"
    assert time_to_automation(60) == "3-5 years"
    assert time_to_automation(40) == "5-10 years"
    assert time_to_automation(39) == "10+ years"


@pytest.mark.parametrize("category", ["finance", "technology", "retail", "general", "unknown"])
@pytest.mark.parametrize("risk", [0, 50, 100])
@pytest.mark.parametrize("creativity", [0, 100])
def test_estimate_salary_stays_in_bounds(category, risk, creativity):
    salary = estimate_salary(category, risk, creativity)
    assert 25000 <= salary <= 200000


def test_parse_assessment_handles_code_fences_and_noise():
    raw = 'Sure!\n```json\n{"automationRisk": 72, "creativityRequired": 30, "riskFactors": ["x"]}\n```'
    outcome = parse_assessment(raw)

    assert outcome.ok
    assert outcome.assessment.automation_risk == 72
    assert outcome.assessment.risk_factors == ["x"]


@pytest.mark.parametrize(
    "raw",
    [None, "", "no json here", "{not valid json}", '{"automationRisk": 150}', '{"riskFactors": []}'],
)
def test_parse_assessment_malformed(raw):
    outcome = parse_assessment(raw)
    assert outcome.status is AssessmentStatus.MALFORMED
    assert not outcome.ok


def test_analyze_without_key_is_heuristic_and_never_calls_client():
    analyzer = JobAnalyzer(api_key="")

    result = asyncio.run(analyzer.analyze("dog walker"))

    assert result.source is AnalysisSource.HEURISTIC
    assert result.external_risk is None
    record = result.record
    assert record.title == "Dog walker"
    assert record.category == "General"
    assert record.automation_risk == 50
    assert record.creativity_required == 50
    assert record.ai_replacements is ReplacementStatus.LIMITED
    assert record.time_to_automation == "5-10 years"
    assert record.risk_factors == ["repetitive tasks", "data processing", "basic analysis"]
    assert 25000 <= record.median_salary <= 200000


def test_analyze_blends_external_assessment():
    client, completions = fake_client(
        '{"automationRisk": 90, "creativityRequired": 40, "riskFactors": ["chatbots"], '
        '"aiTools": ["ChatGPT"], "timeToAutomation": "1-2 years", "reasoning": "..."}'
    )
    analyzer = JobAnalyzer(api_key="test", client=client)

    result = asyncio.run(analyzer.analyze("dog walker"))

    assert len(completions.calls) == 1
    assert result.source is AnalysisSource.BLENDED
    assert result.base_risk == 50
    assert result.external_risk == 90
    # 0.3 * 50 + 0.7 * 90 = 78
    assert result.record.automation_risk == 78
    assert result.record.creativity_required == 40
    assert result.record.ai_tools == ["ChatGPT"]
    assert result.record.time_to_automation == "1-2 years"


def test_blend_defaults_for_missing_fields():
    client, _ = fake_client('{"automationRisk": 10}')
    analyzer = JobAnalyzer(api_key="test", client=client)

    record = asyncio.run(analyzer.analyze("dog walker")).record

    assert record.creativity_required == 50
    assert record.risk_factors == []
    assert record.ai_tools == []
    assert record.time_to_automation == "5-10 years"


def test_malformed_response_falls_back_to_heuristic():
    client, _ = fake_client("I cannot answer that")
    analyzer = JobAnalyzer(api_key="test", client=client)

    outcome = asyncio.run(analyzer.request_assessment("dog walker", "general"))
    result = asyncio.run(analyzer.analyze("dog walker"))

    assert outcome.status is AssessmentStatus.MALFORMED
    assert result.source is AnalysisSource.HEURISTIC
    assert result.record.automation_risk == 50


@pytest.mark.parametrize(
    "error",
    [
        openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com")),
        openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com")),
        httpx.ConnectError("boom"),
    ],
)
def test_transport_errors_are_unavailable(error):
    client, _ = fake_client(error=error)
    analyzer = JobAnalyzer(api_key="test", client=client)

    outcome = asyncio.run(analyzer.request_assessment("dog walker", "general"))

    assert outcome.status is AssessmentStatus.UNAVAILABLE
    assert outcome.reason


def test_unexpected_errors_propagate():
    client, _ = fake_client(error=RuntimeError("bug"))
    analyzer = JobAnalyzer(api_key="test", client=client)

    with pytest.raises(RuntimeError):
        asyncio.run(analyzer.analyze("dog walker"))


def test_combine_disabled_outcome_matches_offline_analysis():
    analyzer = JobAnalyzer(api_key="")
    offline = analyzer.analyze_offline("Paralegal assistant")
    combined = JobAnalyzer.combine(
        "Paralegal assistant",
        categorize_job("Paralegal assistant"),
        calculate_base_risk("Paralegal assistant", "legal"),
        AssessmentOutcome(AssessmentStatus.DISABLED),
    )

    assert offline.record == combined.record
