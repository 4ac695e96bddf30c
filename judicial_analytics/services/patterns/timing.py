"""Time-to-decision patterns by case complexity tier."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from judicial_analytics.models.domain import CaseRecord, ComplexityTier
from judicial_analytics.models.patterns import (
    ComplexityTiming,
    ExpectedTiming,
    TimingAnalysis,
    TimingOutlier,
)
from judicial_analytics.services.patterns.classifiers import classify_complexity
from judicial_analytics.utils.dates import MAX_REALISTIC_DURATION_DAYS, case_duration_days
from judicial_analytics.utils.stats import (
    NO_DATA_CONFIDENCE,
    mean,
    median,
    nearest_rank_percentile,
    round_int,
    sample_size_confidence,
)

ComplexityClassifier = Callable[[CaseRecord], ComplexityTier]

NO_CATEGORY = "none"
OUTLIER_RATIO = 2.0

EXPECTED_TIMING: dict[ComplexityTier, ExpectedTiming] = {
    ComplexityTier.SIMPLE: ExpectedTiming(min=30, max=180, typical=90),
    ComplexityTier.MODERATE: ExpectedTiming(min=90, max=365, typical=180),
    ComplexityTier.COMPLEX: ExpectedTiming(min=180, max=730, typical=365),
    ComplexityTier.HIGHLY_COMPLEX: ExpectedTiming(min=365, max=1460, typical=730),
}


def _realistic_duration(case: CaseRecord) -> float | None:
    return case_duration_days(case, max_days=MAX_REALISTIC_DURATION_DAYS)


def _tier_timing(tier: ComplexityTier, days: list[float]) -> ComplexityTiming:
    if not days:
        return ComplexityTiming(
            complexity_tier=tier,
            case_count=0,
            avg_days=0,
            median_days=0,
            percentile_25=0,
            percentile_75=0,
            percentile_90=0,
            min_days=0,
            max_days=0,
            confidence=NO_DATA_CONFIDENCE,
        )

    ordered = sorted(days)
    return ComplexityTiming(
        complexity_tier=tier,
        case_count=len(ordered),
        avg_days=round_int(mean(ordered)),
        median_days=round_int(median(ordered)),
        percentile_25=round_int(nearest_rank_percentile(ordered, 25)),
        percentile_75=round_int(nearest_rank_percentile(ordered, 75)),
        percentile_90=round_int(nearest_rank_percentile(ordered, 90)),
        min_days=round_int(ordered[0]),
        max_days=round_int(ordered[-1]),
        confidence=sample_size_confidence(len(ordered)),
    )


def analyze_decision_timing(
    cases: Sequence[CaseRecord],
    *,
    complexity_classifier: ComplexityClassifier = classify_complexity,
) -> TimingAnalysis:
    """Duration distribution per complexity tier, always in tier order.

    Cases without two valid dates, or whose duration is negative or longer
    than ten years, are left out.
    """
    by_tier: dict[ComplexityTier, list[float]] = {tier: [] for tier in ComplexityTier}
    for case in cases:
        days = _realistic_duration(case)
        if days is None:
            continue
        by_tier[complexity_classifier(case)].append(days)

    timings = [_tier_timing(tier, days) for tier, days in by_tier.items()]
    all_days = [d for days in by_tier.values() for d in days]

    with_data = [t for t in timings if t.case_count > 0]
    # min/max keep the first tier on ties
    fastest = min(with_data, key=lambda t: t.avg_days).complexity_tier if with_data else NO_CATEGORY
    slowest = max(with_data, key=lambda t: t.avg_days).complexity_tier if with_data else NO_CATEGORY

    return TimingAnalysis(
        by_complexity=timings,
        overall_avg_days=round_int(mean(all_days)),
        overall_median_days=round_int(median(all_days)),
        fastest_category=str(fastest),
        slowest_category=str(slowest),
        total_cases_analyzed=len(all_days),
        confidence_score=sample_size_confidence(len(all_days)),
    )


def get_expected_timing(tier: ComplexityTier) -> ExpectedTiming:
    """Benchmark duration band for a complexity tier."""
    return EXPECTED_TIMING[tier]


def identify_timing_outliers(
    analysis: TimingAnalysis,
    cases: Sequence[CaseRecord],
    *,
    complexity_classifier: ComplexityClassifier = classify_complexity,
) -> list[TimingOutlier]:
    """Cases whose duration is more than twice as far from their tier's average."""
    tier_avg = {
        t.complexity_tier: t.avg_days
        for t in analysis.by_complexity
        if t.case_count > 0 and t.avg_days > 0
    }

    outliers: list[TimingOutlier] = []
    for case in cases:
        days = _realistic_duration(case)
        if days is None:
            continue
        expected = tier_avg.get(complexity_classifier(case))
        if expected is None:
            continue
        if abs(days - expected) / expected > OUTLIER_RATIO:
            outliers.append(
                TimingOutlier(
                    case=case,
                    days=round_int(days),
                    expected=expected,
                    deviation="much_slower" if days > expected else "much_faster",
                )
            )
    return outliers
