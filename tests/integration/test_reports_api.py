"""Integration tests for the POST /api/v1/reports/bias endpoint.

The app runs with no Redis and an empty peer source; tests that need a
baseline swap the baseline service through dependency_overrides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest

from judicial_analytics.api.dependencies import get_baseline_service
from tests.conftest import make_baseline

if TYPE_CHECKING:
    from fastapi import FastAPI
    from httpx import AsyncClient

pytestmark = pytest.mark.integration


def _case(case_id: str, outcome: str) -> dict[str, object]:
    return {
        "case_id": case_id,
        "case_name": "Smith v. Acme Corp",
        "case_type": "Civil",
        "outcome": outcome,
        "status": "closed",
        "case_value": 20000.0,
        "filing_date": "2023-06-01",
        "decision_date": "2024-01-15",
        "summary": "Contract dispute between an individual and a corporation",
    }


def _body(**overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "judge_id": "j1",
        "judge_name": "Judge Ito",
        "jurisdiction": "CA",
        "reference_date": "2024-06-30",
        "cases": [
            _case("1", "Settled"),
            _case("2", "Settled"),
            _case("3", "Judgment for defendant"),
        ],
    }
    body.update(overrides)
    return body


class TestBiasReportEndpoint:
    async def test_json_report(self, client: AsyncClient):
        response = await client.post("/api/v1/reports/bias", json=_body())
        assert response.status_code == 200

        data = response.json()
        assert data["kind"] == "structured_report"
        assert data["metadata"]["judge_name"] == "Judge Ito"
        assert data["metadata"]["total_cases"] == 3
        assert data["metadata"]["start_date"] == "2021-01-01"
        assert data["confidence_tier"]["tier"] == "limited"
        assert data["detailed_findings"]["baseline_comparison"] is None
        assert [a["category"] for a in data["flagged_anomalies"]] == [
            "Settlement Patterns",
            "Party Patterns",
        ]
        assert data["metrics_table"][0]["metric"] == "Overall Settlement Rate"

    async def test_text_report(self, client: AsyncClient):
        response = await client.post("/api/v1/reports/bias", json=_body(format="text"))
        assert response.status_code == 200

        data = response.json()
        assert data["judge_id"] == "j1"
        assert data["report"].startswith("=" * 80 + "\nJUDICIAL PATTERN ANALYSIS REPORT")
        assert "End of Report - Generated on" in data["report"]

    async def test_empty_case_list_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/reports/bias", json=_body(cases=[]))
        assert response.status_code == 422

        data = response.json()
        assert data["error"] == "contract_violation"
        assert data["request_id"]

    async def test_missing_judge_name_fails_validation(self, client: AsyncClient):
        body = _body()
        del body["judge_name"]
        response = await client.post("/api/v1/reports/bias", json=body)
        assert response.status_code == 422

    async def test_baseline_comparison_from_service(self, app: FastAPI, client: AsyncClient):
        service = AsyncMock()
        service.get_baseline.return_value = make_baseline()
        app.dependency_overrides[get_baseline_service] = lambda: service

        response = await client.post("/api/v1/reports/bias", json=_body())

        assert response.status_code == 200
        comparison = response.json()["detailed_findings"]["baseline_comparison"]
        assert comparison["scope_id"] == "CA"
        assert comparison["peer_judge_count"] == 12
        assert len(comparison["comparisons"]) == 4

    async def test_baseline_can_be_skipped(self, app: FastAPI, client: AsyncClient):
        service = AsyncMock()
        app.dependency_overrides[get_baseline_service] = lambda: service

        response = await client.post(
            "/api/v1/reports/bias", json=_body(include_baseline=False)
        )

        assert response.status_code == 200
        service.get_baseline.assert_not_awaited()
