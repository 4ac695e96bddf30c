"""Shared test fixtures and factory functions.

Factories return valid domain objects with sensible defaults. Override
any field via keyword arguments to create specific test scenarios
without repeating boilerplate.
"""

from collections.abc import AsyncIterator
from datetime import UTC, date, datetime

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from judicial_analytics.api.app import create_app
from judicial_analytics.core.config import Settings
from judicial_analytics.models.domain import BaselineScope, CaseRecord
from judicial_analytics.models.legacy import AIAnalyticsResult, AnalysisWindow
from judicial_analytics.models.report import Baseline, BaselineMetrics, MetricStats

REFERENCE_DATE = date(2024, 6, 30)
FIXED_NOW = datetime(2024, 6, 30, 12, 0, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Settings / App / Client
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing: console logs, no Redis, no AI keys."""
    return Settings(
        debug=True,
        redis_enabled=False,
        openai_api_key="",
        anthropic_api_key="",
        log_format="console",
        log_level="DEBUG",
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """FastAPI application wired with test settings."""
    return create_app(test_settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Domain model factories
# ---------------------------------------------------------------------------


def make_case(**overrides: object) -> CaseRecord:
    """Build a valid, decided civil CaseRecord with sensible defaults."""
    defaults: dict[str, object] = {
        "case_id": "case-1",
        "case_name": "Smith v. Acme Corp",
        "case_type": "Civil",
        "outcome": "Settled",
        "status": "closed",
        "case_value": 20_000.0,
        "filing_date": "2023-06-01",
        "decision_date": "2024-01-15",
        "summary": "Contract dispute between an individual and a corporation",
        "plain_text": "The parties reached a settlement before trial.",
    }
    defaults.update(overrides)
    return CaseRecord(**defaults)  # type: ignore[arg-type]


def make_stats(mean: float, std_dev: float, sample_size: int = 100) -> MetricStats:
    return MetricStats(mean=mean, std_dev=std_dev, sample_size=sample_size)


def make_baseline(**overrides: object) -> Baseline:
    """Build a jurisdiction Baseline with moderate peer statistics."""
    defaults: dict[str, object] = {
        "scope": BaselineScope.JURISDICTION,
        "scope_id": "CA",
        "metrics": BaselineMetrics(
            settlement_rate=make_stats(0.5, 0.1),
            motion_grant_rate=make_stats(0.5, 0.1),
            avg_case_duration_days=make_stats(200.0, 50.0),
            plaintiff_favorable_rate=make_stats(0.5, 0.1),
        ),
        "total_cases": 300,
        "judge_count": 12,
        "generated_at": FIXED_NOW,
    }
    defaults.update(overrides)
    return Baseline(**defaults)  # type: ignore[arg-type]


def make_window(**overrides: object) -> AnalysisWindow:
    defaults: dict[str, object] = {"lookback_years": 3, "start_year": 2021, "end_year": 2024}
    defaults.update(overrides)
    return AnalysisWindow(**defaults)  # type: ignore[arg-type]


def make_ai_result(**overrides: object) -> AIAnalyticsResult:
    """Build a non-fallback provider result covering a few categories."""
    defaults: dict[str, object] = {
        "civil_plaintiff_favor": 80,
        "motion_grant_rate": 40,
        "confidence_civil": 90,
        "overall_confidence": 90,
        "sample_size_civil": 10,
        "sample_size_motion": 10,
        "total_cases_analyzed": 10,
        "notable_patterns": ["Frequent referrals to mediation"],
        "ai_model": "claude-sonnet-4-20250514",
    }
    defaults.update(overrides)
    return AIAnalyticsResult(**defaults)  # type: ignore[arg-type]
