"""Tests for the executive summary and methodology notes."""

from __future__ import annotations

from judicial_analytics.models.domain import Severity
from judicial_analytics.models.patterns import WeightDistribution
from judicial_analytics.models.report import Anomaly, JudgeHeadlineMetrics
from judicial_analytics.services.baseline.deviation import compare_to_baseline
from judicial_analytics.services.report.summary import (
    build_executive_summary,
    build_methodology_notes,
)
from judicial_analytics.services.scoring.confidence import calculate_confidence_tier
from tests.conftest import make_baseline


def _anomaly(severity: Severity, description: str) -> Anomaly:
    return Anomaly(
        category="Test",
        metric="Metric",
        severity=severity,
        judge_value=1.0,
        baseline_value=0.5,
        std_deviations=2.5,
        description=description,
    )


def _distribution() -> WeightDistribution:
    return WeightDistribution(
        total_cases=10,
        effective_cases=8.4,
        avg_weight=0.84,
        min_weight=0.5,
        max_weight=1.0,
        recent_cases_pct=40.0,
        old_cases_pct=12.5,
    )


class TestExecutiveSummary:
    def test_full_analytics_without_anomalies(self):
        confidence = calculate_confidence_tier(600)
        summary = build_executive_summary("Judge Ito", 600, confidence, [], None, True)
        assert summary.startswith(
            "Comprehensive judicial pattern analysis for Judge Ito based on 600 cases. "
        )
        assert confidence.description in summary
        assert summary.endswith(
            "No significant anomalies detected. Judicial patterns appear consistent with "
            "jurisdiction norms and typical ranges."
        )

    def test_limited_analytics_caveat(self):
        summary = build_executive_summary(
            "Judge Ito", 40, calculate_confidence_tier(40), [], None, False
        )
        assert summary.startswith(
            "Limited judicial pattern analysis for Judge Ito based on 40 cases "
            "(below recommended minimum of 500)."
        )

    def test_baseline_sentence(self):
        judge = JudgeHeadlineMetrics(
            settlement_rate=0.8,
            motion_grant_rate=0.5,
            avg_case_duration_days=200.0,
            plaintiff_favorable_rate=0.5,
        )
        comparison = compare_to_baseline(judge, make_baseline())
        summary = build_executive_summary(
            "Judge Ito", 600, calculate_confidence_tier(600), [], comparison, True
        )
        assert (
            "Comparison to CA jurisdiction peers: Performance metrics are well within "
            "jurisdictional norms. Overall deviation score: 19/100."
        ) in summary

    def test_anomaly_counts_and_top_three_findings(self):
        anomalies = [
            _anomaly(Severity.HIGH, "first"),
            _anomaly(Severity.MEDIUM, "second"),
            _anomaly(Severity.MEDIUM, "third"),
            _anomaly(Severity.LOW, "fourth"),
        ]
        summary = build_executive_summary(
            "Judge Ito", 600, calculate_confidence_tier(600), anomalies, None, True
        )
        assert "1 high-severity anomaly detected requiring attention." in summary
        assert "2 moderate deviations from typical patterns identified." in summary
        assert "Key findings: - first - second - third" in summary
        assert "fourth" not in summary


class TestMethodologyNotes:
    def test_full_analytics_notes(self):
        notes = build_methodology_notes(600, 512.4, _distribution(), True)
        assert len(notes) == 7
        assert notes[0] == (
            "Analysis based on 600 total cases with temporal weighting applied "
            "(effective case count: 512)"
        )
        assert "(40% within 1 year, 13% older than 3 years)" in notes[1]
        assert notes[4].startswith("Full analytics provided")

    def test_limited_analytics_note(self):
        notes = build_methodology_notes(10, 8.4, _distribution(), False)
        assert notes[4].startswith("Limited analytics")
