"""Integration tests for the POST /api/v1/analytics/augment endpoint.

No provider keys are configured, so the app runs without an
augmentation adapter unless a test installs one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest

from judicial_analytics.api.dependencies import get_augmentation_adapter
from judicial_analytics.services.augmentation.augment import AIAugmentationAdapter
from tests.conftest import make_ai_result

if TYPE_CHECKING:
    from fastapi import FastAPI
    from httpx import AsyncClient

pytestmark = pytest.mark.integration


def _cases(count: int) -> list[dict[str, object]]:
    return [
        {
            "case_id": str(i),
            "case_name": f"Doe v. Roe {i}",
            "case_type": "Civil",
            "outcome": "Judgment for plaintiff" if i % 2 else "Judgment for defendant",
            "status": "closed",
            "decision_date": "2024-01-15",
            "summary": "Personal injury claim",
            "plain_text": "The court entered judgment after a bench trial.",
        }
        for i in range(count)
    ]


def _body(**overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "judge_name": "Judge Ito",
        "jurisdiction": "CA",
        "reference_date": "2024-06-30",
        "cases": _cases(10),
    }
    body.update(overrides)
    return body


def _provider(result) -> AsyncMock:
    provider = AsyncMock()
    provider.name = "claude-sonnet-4-20250514"
    provider.analyze.return_value = result
    return provider


class TestAugmentEndpoint:
    async def test_statistical_analytics_without_provider(self, client: AsyncClient):
        response = await client.post("/api/v1/analytics/augment", json=_body())
        assert response.status_code == 200

        data = response.json()
        assert data["kind"] == "legacy"
        assert data["ai_model"] == "statistical_analysis_3year"
        assert data["civil_plaintiff_favor"] == 50
        assert data["civil_defendant_favor"] == 50
        assert data["sample_size_civil"] == 10
        assert data["notable_patterns"][-1] == "Analysis covers cases filed from 2021-2024"

    async def test_no_cases_gives_profile_estimates(self, client: AsyncClient):
        response = await client.post("/api/v1/analytics/augment", json=_body(cases=[]))
        assert response.status_code == 200

        data = response.json()
        assert data["ai_model"] == "statistical_estimation"
        assert data["civil_plaintiff_favor"] == 53

    async def test_provider_blend(self, app: FastAPI, client: AsyncClient):
        adapter = AIAugmentationAdapter(_provider(make_ai_result()))
        app.dependency_overrides[get_augmentation_adapter] = lambda: adapter

        response = await client.post("/api/v1/analytics/augment", json=_body())

        assert response.status_code == 200
        data = response.json()
        assert data["analysis_quality"] == "augmented_ai"
        assert data["civil_plaintiff_favor"] == 65
        assert data["civil_defendant_favor"] == 35
        assert data["data_limitations"][-1] == "AI analysis limited to 10 documents (2021-2024)"

    async def test_use_ai_false_skips_provider(self, app: FastAPI, client: AsyncClient):
        provider = _provider(make_ai_result())
        adapter = AIAugmentationAdapter(provider)
        app.dependency_overrides[get_augmentation_adapter] = lambda: adapter

        response = await client.post("/api/v1/analytics/augment", json=_body(use_ai=False))

        assert response.status_code == 200
        assert response.json()["ai_model"] == "statistical_analysis_3year"
        provider.analyze.assert_not_awaited()

    async def test_lookback_years_bounds(self, client: AsyncClient):
        response = await client.post("/api/v1/analytics/augment", json=_body(lookback_years=0))
        assert response.status_code == 422
