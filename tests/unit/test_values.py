"""Tests for value-bracket settlement analysis."""

from __future__ import annotations

import pytest

from judicial_analytics.services.patterns.values import (
    VALUE_BRACKETS,
    analyze_value_patterns,
    get_expected_settlement_rate,
    identify_value_anomalies,
)
from tests.conftest import make_case


def _value_cases():
    return [
        make_case(case_value=5_000.0, outcome="Settled"),
        make_case(case_value=5_000.0, outcome="Dismissed"),
        make_case(case_value=300_000.0, outcome="Settled"),
        make_case(case_value=300_000.0, outcome="Settled"),
        make_case(case_value=20_000.0, outcome="Pending"),
        make_case(case_value=0.0, outcome="Settled"),
        make_case(case_value=None, outcome="Settled"),
        make_case(case_value=float("inf"), outcome="Settled"),
    ]


def _bracket(analysis, label):
    return next(b for b in analysis.value_brackets if b.range_label == label)


class TestAnalyzeValuePatterns:
    def test_only_positive_finite_values_bracketed(self):
        analysis = analyze_value_patterns(_value_cases())
        assert analysis.total_cases_analyzed == 5
        assert len(analysis.value_brackets) == len(VALUE_BRACKETS)

    def test_outcome_counts_sum_to_case_count(self):
        analysis = analyze_value_patterns(_value_cases())
        for b in analysis.value_brackets:
            assert b.settled + b.dismissed + b.judgment + b.other == b.case_count

    def test_bracket_rates_over_classified_outcomes(self):
        analysis = analyze_value_patterns(_value_cases())
        under_10k = _bracket(analysis, "Under $10K")
        assert under_10k.case_count == 2
        assert under_10k.settlement_rate == pytest.approx(0.5)
        assert under_10k.dismissal_rate == pytest.approx(0.5)
        assert under_10k.avg_claimed_amount == 5_000
        assert under_10k.judgment_to_claim_ratio == 0.0

        pending_only = _bracket(analysis, "$10K - $25K")
        assert pending_only.other == 1
        assert pending_only.settlement_rate == 0.0
        assert pending_only.confidence == 65

        assert _bracket(analysis, "$5M+").confidence == 60

    def test_high_and_low_value_rates(self):
        analysis = analyze_value_patterns(_value_cases())
        assert analysis.overall_settlement_rate == pytest.approx(0.6)
        assert analysis.high_value_settlement_rate == 1.0
        assert analysis.low_value_settlement_rate == pytest.approx(1 / 3)
        assert analysis.settlement_value_correlation == 1.0

    def test_no_correlation_without_both_groups(self):
        analysis = analyze_value_patterns([make_case(case_value=5_000.0)])
        assert analysis.settlement_value_correlation == 0.0
        assert analysis.high_value_settlement_rate == 0.0

    def test_judgment_to_claim_ratio(self):
        cases = [
            make_case(
                case_value=60_000.0,
                claimed_amount=80_000.0,
                judgment_amount=40_000.0,
                outcome="Judgment for plaintiff",
            )
        ]
        bracket = _bracket(analyze_value_patterns(cases), "$50K - $100K")
        assert bracket.judgment == 1
        assert bracket.avg_judgment_amount == 40_000
        assert bracket.avg_claimed_amount == 80_000
        assert bracket.judgment_to_claim_ratio == 0.5


class TestIdentifyValueAnomalies:
    def test_settlement_gap_flagged(self):
        flags = identify_value_anomalies(analyze_value_patterns(_value_cases()))
        assert flags[0].pattern == "High Value Settlement Preference"
        assert flags[0].description == (
            "High-value cases settle 100% vs 33% for low-value cases"
        )

    def test_high_award_ratio_needs_ten_cases(self):
        case = make_case(
            case_value=60_000.0,
            judgment_amount=60_000.0,
            outcome="Judgment for plaintiff",
        )
        assert identify_value_anomalies(analyze_value_patterns([case] * 9)) == []

        flags = identify_value_anomalies(analyze_value_patterns([case] * 10))
        assert [f.pattern for f in flags] == ["High Judgment Awards"]
        assert flags[0].description == (
            "$50K - $100K cases: 100% of claimed amount awarded on average"
        )


@pytest.mark.parametrize(
    ("low", "high", "expected"),
    [
        (0, 10_000, 0.35),
        (10_000, 50_000, 0.45),
        (100_000, 250_000, 0.55),
        (500_000, 1_000_000, 0.65),
        (1_000_000, 5_000_000, 0.7),
        (5_000_000, None, 0.7),
    ],
)
def test_expected_settlement_rate(low, high, expected):
    assert get_expected_settlement_rate(low, high) == expected
