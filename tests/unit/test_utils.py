"""Tests for date parsing and the shared numeric helpers."""

from __future__ import annotations

from datetime import date

import pytest

from judicial_analytics.utils.dates import (
    case_duration_days,
    effective_date,
    parse_case_date,
    subtract_years,
    years_between,
)
from judicial_analytics.utils.stats import (
    mean,
    median,
    nearest_rank_percentile,
    population_std_dev,
    round_half_up,
    round_int,
    sample_size_confidence,
)
from tests.conftest import make_case


class TestParseCaseDate:
    @pytest.mark.parametrize(
        "raw",
        ["2024-01-15", "2024-01-15T09:30:00", "01/15/2024", "2024/01/15", "January 15, 2024"],
    )
    def test_supported_formats(self, raw):
        assert parse_case_date(raw) == date(2024, 1, 15)

    @pytest.mark.parametrize("raw", [None, "", "   ", "sometime in 2024", "2024-13-45"])
    def test_unparseable_is_none(self, raw):
        assert parse_case_date(raw) is None


class TestCaseDates:
    def test_effective_date_prefers_decision(self):
        assert effective_date(make_case()) == date(2024, 1, 15)
        assert effective_date(make_case(decision_date=None)) == date(2023, 6, 1)

    def test_duration(self):
        assert case_duration_days(make_case()) == 228

    def test_negative_and_overlong_durations_dropped(self):
        backwards = make_case(filing_date="2024-02-01", decision_date="2024-01-01")
        assert case_duration_days(backwards) is None
        long = make_case(filing_date="2000-01-01", decision_date="2024-01-01")
        assert case_duration_days(long, max_days=3650) is None

    def test_subtract_years_leap_day(self):
        assert subtract_years(date(2024, 2, 29), 1) == date(2023, 2, 28)

    def test_years_between_floors_at_zero(self):
        assert years_between(date(2024, 6, 30), date(2024, 1, 1)) == 0.0


class TestRounding:
    @pytest.mark.parametrize(("value", "expected"), [(2.5, 3), (3.5, 4), (82.5, 83), (-0.4, 0)])
    def test_round_int_half_up(self, value, expected):
        assert round_int(value) == expected

    def test_round_half_up_digits(self):
        assert round_half_up(0.125, 2) == 0.13


class TestSeriesStats:
    def test_empty_series(self):
        assert mean([]) == 0.0
        assert median([]) == 0.0
        assert nearest_rank_percentile([], 50) == 0.0
        assert population_std_dev([]) == 0.0

    def test_median_even_count(self):
        assert median([10, 20, 25, 30]) == 22.5

    def test_population_std_dev(self):
        assert population_std_dev([0.5, 1.0]) == pytest.approx(0.25)

    def test_nearest_rank(self):
        values = [10, 20, 25, 30]
        assert nearest_rank_percentile(values, 25) == 10
        assert nearest_rank_percentile(values, 75) == 25
        assert nearest_rank_percentile(values, 90) == 30


@pytest.mark.parametrize(
    ("sample_size", "confidence"),
    [(100, 95), (50, 90), (30, 85), (20, 80), (10, 75), (5, 70), (4, 65), (0, 65)],
)
def test_sample_size_confidence(sample_size, confidence):
    assert sample_size_confidence(sample_size) == confidence
