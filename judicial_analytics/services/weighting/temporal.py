"""Recency-decay weighting of case records.

Each case's influence decays continuously with age:

    weight = max(min_weight, decay_rate ** years_old)

Continuous decay avoids the discontinuities of hard year buckets while
still privileging recent behaviour. Ages are measured from the case's
effective date (decision date, else filing date) to a fixed reference
date, so a run is reproducible for the same reference date.

A case with no resolvable date gets the floor weight and is treated as
the oldest possible case for distribution statistics only.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from judicial_analytics.models.domain import CaseRecord, TimePeriod, WeightedCase
from judicial_analytics.models.patterns import WeightDistribution, WeightedAverage, WeightedRate
from judicial_analytics.utils.dates import effective_date, years_between

if TYPE_CHECKING:
    from judicial_analytics.core.config import Settings

UNDATED_YEARS_OLD = 99.0
RECENT_YEARS = 1.0
OLD_YEARS = 3.0


@dataclass(frozen=True)
class TemporalWeightConfig:
    """Decay parameters for one weighting run."""

    decay_rate: float = 0.95
    min_weight: float = 0.5
    reference_date: date | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        reference_date: date | None = None,
    ) -> TemporalWeightConfig:
        return cls(
            decay_rate=settings.decay_rate,
            min_weight=settings.min_weight,
            reference_date=reference_date,
        )

    def resolved_reference_date(self) -> date:
        return self.reference_date or date.today()


def calculate_weight(years_old: float, decay_rate: float, min_weight: float) -> float:
    """Decay weight for a case of the given age, floored at min_weight."""
    return min(1.0, max(min_weight, decay_rate**years_old))


def apply_temporal_decay(
    cases: Sequence[CaseRecord],
    config: TemporalWeightConfig | None = None,
) -> list[WeightedCase]:
    """Attach a recency weight to every case, preserving input order."""
    config = config or TemporalWeightConfig()
    reference = config.resolved_reference_date()

    weighted: list[WeightedCase] = []
    for case in cases:
        case_date = effective_date(case)
        if case_date is None:
            weighted.append(
                WeightedCase(
                    case=case,
                    weight=config.min_weight,
                    years_old=UNDATED_YEARS_OLD,
                    decay_factor=config.decay_rate,
                )
            )
            continue

        years_old = years_between(case_date, reference)
        weighted.append(
            WeightedCase(
                case=case,
                weight=calculate_weight(years_old, config.decay_rate, config.min_weight),
                years_old=years_old,
                decay_factor=config.decay_rate,
            )
        )
    return weighted


def calculate_weighted_rate(
    weighted_cases: Sequence[WeightedCase],
    predicate: Callable[[CaseRecord], bool],
) -> WeightedRate:
    """Σ(weight · indicator) / Σweight for a boolean case predicate."""
    positive_weight = 0.0
    total_weight = 0.0
    for wc in weighted_cases:
        total_weight += wc.weight
        if predicate(wc.case):
            positive_weight += wc.weight

    rate = positive_weight / total_weight if total_weight > 0 else 0.0
    return WeightedRate(rate=rate, total_weight=total_weight, positive_weight=positive_weight)


def calculate_weighted_average(
    values: Sequence[float],
    weights: Sequence[float],
) -> WeightedAverage:
    """Weighted mean; zeros for empty or mismatched input."""
    if not values or len(values) != len(weights):
        return WeightedAverage(average=0.0, total_weight=0.0)

    total_weight = sum(weights)
    weighted_sum = sum(v * w for v, w in zip(values, weights, strict=True))
    average = weighted_sum / total_weight if total_weight > 0 else 0.0
    return WeightedAverage(average=average, total_weight=total_weight)


def calculate_weighted_std_dev(
    values: Sequence[float],
    weights: Sequence[float],
    weighted_mean: float,
) -> float:
    """Weighted population standard deviation around weighted_mean."""
    if not values or len(values) != len(weights):
        return 0.0

    total_weight = sum(weights)
    if total_weight <= 0:
        return 0.0
    variance_sum = sum(w * (v - weighted_mean) ** 2 for v, w in zip(values, weights, strict=True))
    return float((variance_sum / total_weight) ** 0.5)


def get_effective_case_count(weighted_cases: Sequence[WeightedCase]) -> float:
    """Sum of weights: the discounted case count used in confidence math."""
    return sum(wc.weight for wc in weighted_cases)


def filter_by_weight(
    weighted_cases: Sequence[WeightedCase],
    min_weight: float,
) -> list[WeightedCase]:
    """Drop cases whose weight is below min_weight."""
    return [wc for wc in weighted_cases if wc.weight >= min_weight]


def get_weight_distribution(weighted_cases: Sequence[WeightedCase]) -> WeightDistribution:
    """Summarize how recency weight is spread across the case set."""
    if not weighted_cases:
        return WeightDistribution(
            total_cases=0,
            effective_cases=0.0,
            avg_weight=0.0,
            min_weight=0.0,
            max_weight=0.0,
            recent_cases_pct=0.0,
            old_cases_pct=0.0,
        )

    weights = [wc.weight for wc in weighted_cases]
    total = len(weighted_cases)
    effective = sum(weights)
    recent = sum(1 for wc in weighted_cases if wc.years_old <= RECENT_YEARS)
    old = sum(1 for wc in weighted_cases if wc.years_old > OLD_YEARS)

    return WeightDistribution(
        total_cases=total,
        effective_cases=effective,
        avg_weight=effective / total,
        min_weight=min(weights),
        max_weight=max(weights),
        recent_cases_pct=recent / total * 100,
        old_cases_pct=old / total * 100,
    )


def _period_key(value: date, period: TimePeriod) -> str:
    if period == TimePeriod.QUARTER:
        return f"{value.year}-Q{(value.month - 1) // 3 + 1}"
    if period == TimePeriod.MONTH:
        return f"{value.year}-{value.month:02d}"
    return f"{value.year}"


def group_by_time_period(
    cases: Sequence[CaseRecord],
    period: TimePeriod = TimePeriod.YEAR,
) -> dict[str, list[CaseRecord]]:
    """Group dated cases by year, quarter or month of their effective date.

    Undated cases are skipped. Keys are returned in ascending order.
    """
    groups: dict[str, list[CaseRecord]] = defaultdict(list)
    for case in cases:
        case_date = effective_date(case)
        if case_date is None:
            continue
        groups[_period_key(case_date, period)].append(case)
    return dict(sorted(groups.items()))
