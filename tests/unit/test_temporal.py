"""Tests for recency-decay weighting.

Covers: weight floor and ceiling, monotonic decay with age, undated
cases, weighted rates/averages/std-dev, weight distribution and
time-period grouping.
"""

from __future__ import annotations

import pytest

from judicial_analytics.core.config import Settings
from judicial_analytics.models.domain import TimePeriod
from judicial_analytics.services.patterns.classifiers import is_settled
from judicial_analytics.services.weighting.temporal import (
    UNDATED_YEARS_OLD,
    TemporalWeightConfig,
    apply_temporal_decay,
    calculate_weight,
    calculate_weighted_average,
    calculate_weighted_rate,
    calculate_weighted_std_dev,
    filter_by_weight,
    get_effective_case_count,
    get_weight_distribution,
    group_by_time_period,
)
from tests.conftest import REFERENCE_DATE, make_case

CONFIG = TemporalWeightConfig(decay_rate=0.95, min_weight=0.5, reference_date=REFERENCE_DATE)


class TestCalculateWeight:
    def test_brand_new_case_has_full_weight(self):
        assert calculate_weight(0.0, 0.95, 0.5) == 1.0

    def test_two_year_old_case_decays(self):
        assert calculate_weight(2.0, 0.95, 0.5) == pytest.approx(0.9025)

    def test_very_old_case_hits_floor(self):
        assert calculate_weight(40.0, 0.95, 0.5) == 0.5

    def test_weight_non_increasing_in_age(self):
        weights = [calculate_weight(years, 0.95, 0.5) for years in range(0, 30)]
        assert all(a >= b for a, b in zip(weights, weights[1:], strict=False))
        assert all(0.5 <= w <= 1.0 for w in weights)


class TestApplyTemporalDecay:
    def test_preserves_order_and_cases(self):
        cases = [make_case(case_id=str(i)) for i in range(3)]
        weighted = apply_temporal_decay(cases, CONFIG)
        assert [wc.case.case_id for wc in weighted] == ["0", "1", "2"]

    def test_newer_decision_weighs_at_least_as_much(self):
        newer = make_case(decision_date="2024-05-01")
        older = make_case(decision_date="2019-05-01")
        w_new, w_old = apply_temporal_decay([newer, older], CONFIG)
        assert w_new.weight >= w_old.weight
        assert w_new.years_old < w_old.years_old

    def test_filing_date_used_when_no_decision(self):
        case = make_case(decision_date=None, filing_date="2024-06-30")
        (weighted,) = apply_temporal_decay([case], CONFIG)
        assert weighted.years_old == 0.0
        assert weighted.weight == 1.0

    def test_undated_case_gets_floor_weight(self):
        case = make_case(decision_date=None, filing_date="not a date")
        (weighted,) = apply_temporal_decay([case], CONFIG)
        assert weighted.weight == 0.5
        assert weighted.years_old == UNDATED_YEARS_OLD

    def test_future_dated_case_is_not_overweighted(self):
        case = make_case(decision_date="2025-01-01")
        (weighted,) = apply_temporal_decay([case], CONFIG)
        assert weighted.years_old == 0.0
        assert weighted.weight == 1.0

    def test_config_from_settings(self):
        settings = Settings(decay_rate=0.9, min_weight=0.3, redis_enabled=False)
        config = TemporalWeightConfig.from_settings(settings, REFERENCE_DATE)
        assert config.decay_rate == 0.9
        assert config.min_weight == 0.3
        assert config.resolved_reference_date() == REFERENCE_DATE


class TestWeightedAggregates:
    def test_weighted_rate(self):
        cases = [
            make_case(outcome="Settled", decision_date="2024-06-30"),
            make_case(outcome="Dismissed", decision_date=None, filing_date=None),
        ]
        result = calculate_weighted_rate(apply_temporal_decay(cases, CONFIG), is_settled)
        assert result.total_weight == pytest.approx(1.5)
        assert result.positive_weight == pytest.approx(1.0)
        assert result.rate == pytest.approx(2 / 3)

    def test_weighted_rate_empty(self):
        result = calculate_weighted_rate([], is_settled)
        assert result.rate == 0.0
        assert result.total_weight == 0.0

    def test_weighted_average_and_std_dev(self):
        avg = calculate_weighted_average([1.0, 3.0], [1.0, 1.0])
        assert avg.average == pytest.approx(2.0)
        assert calculate_weighted_std_dev([1.0, 3.0], [1.0, 1.0], avg.average) == pytest.approx(
            1.0
        )

    def test_mismatched_lengths_give_zeros(self):
        avg = calculate_weighted_average([1.0, 2.0], [1.0])
        assert avg.average == 0.0
        assert avg.total_weight == 0.0
        assert calculate_weighted_std_dev([1.0, 2.0], [1.0], 1.5) == 0.0

    def test_effective_case_count_and_filter(self):
        cases = [
            make_case(decision_date="2024-06-30"),
            make_case(decision_date=None, filing_date=None),
        ]
        weighted = apply_temporal_decay(cases, CONFIG)
        assert get_effective_case_count(weighted) == pytest.approx(1.5)
        assert len(filter_by_weight(weighted, 0.9)) == 1


class TestWeightDistribution:
    def test_empty(self):
        distribution = get_weight_distribution([])
        assert distribution.total_cases == 0
        assert distribution.avg_weight == 0.0

    def test_recent_and_old_shares(self):
        cases = [
            make_case(decision_date="2024-03-01"),
            make_case(decision_date="2024-01-01"),
            make_case(decision_date="2022-06-01"),
            make_case(decision_date="2015-01-01"),
        ]
        distribution = get_weight_distribution(apply_temporal_decay(cases, CONFIG))
        assert distribution.total_cases == 4
        assert distribution.recent_cases_pct == pytest.approx(50.0)
        assert distribution.old_cases_pct == pytest.approx(25.0)
        assert distribution.max_weight <= 1.0
        assert distribution.min_weight >= 0.5


class TestGroupByTimePeriod:
    def test_quarters_sorted_and_undated_skipped(self):
        cases = [
            make_case(case_id="b", decision_date="2024-05-10"),
            make_case(case_id="a", decision_date="2023-02-01"),
            make_case(case_id="c", decision_date="2024-04-01"),
            make_case(case_id="x", decision_date=None, filing_date=None),
        ]
        groups = group_by_time_period(cases, TimePeriod.QUARTER)
        assert list(groups) == ["2023-Q1", "2024-Q2"]
        assert [c.case_id for c in groups["2024-Q2"]] == ["b", "c"]

    def test_month_and_year_keys(self):
        cases = [make_case(decision_date="2024-03-15")]
        assert list(group_by_time_period(cases, TimePeriod.MONTH)) == ["2024-03"]
        assert list(group_by_time_period(cases)) == ["2024"]
