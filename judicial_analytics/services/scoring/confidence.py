"""Tiered confidence scoring and data-quality metrics.

Confidence is tiered by raw case count:

    Tier 1   1000+ cases   ~93%  Very High Confidence
    Tier 2   750-999       ~85%  High Confidence
    Tier 3   500-749       ~75%  Moderate Confidence
    limited  <500          40-69% scaled by count

An optional data-quality adjustment nudges the percentage by up to a few
points. Individual metrics are further capped by their own sample size.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from judicial_analytics.models.domain import CaseRecord, Reliability
from judicial_analytics.models.scoring import (
    ConfidenceScore,
    ConfidenceTierRequirement,
    ConfidenceTierValue,
    DataQualityMetrics,
)
from judicial_analytics.utils.dates import effective_date, subtract_years
from judicial_analytics.utils.stats import clamp, round_int

FULL_ANALYTICS_MIN_CASES = 500
MAX_CONFIDENCE = 95
MIN_ADJUSTED_CONFIDENCE = 60
QUALITY_PIVOT = 70
IDEAL_CASE_TYPES = 10

# (min_cases, tier, base percentage, label, reliability)
_TIERS: tuple[tuple[int, ConfidenceTierValue, float, str, Reliability], ...] = (
    (1000, 1, 93, "Very High Confidence", Reliability.VERY_HIGH),
    (750, 2, 85, "High Confidence", Reliability.HIGH),
    (500, 3, 75, "Moderate Confidence", Reliability.MODERATE),
)

# Metric sample size below which confidence is capped at the given value
_METRIC_CAPS: tuple[tuple[int, int], ...] = ((5, 65), (10, 70), (20, 75), (50, 80))


def _describe(tier: ConfidenceTierValue, case_count: int) -> str:
    if tier == 1:
        return (
            f"Comprehensive analysis based on {case_count} cases. Statistical patterns are "
            "highly reliable with sufficient data across multiple case types and time periods."
        )
    if tier == 2:
        return (
            f"Substantial analysis based on {case_count} cases. Statistical patterns are "
            "reliable with good data coverage across case types and time periods."
        )
    if tier == 3:
        return (
            f"Adequate analysis based on {case_count} cases (minimum threshold met). "
            "Statistical patterns are moderately reliable. Some categories may have limited data."
        )
    return (
        f"Limited analysis based on {case_count} cases (below recommended minimum of 500). "
        "Statistical patterns should be interpreted with caution. "
        "Results may not be representative."
    )


def calculate_confidence_tier(
    case_count: int,
    quality: DataQualityMetrics | None = None,
) -> ConfidenceScore:
    """Tiered confidence for a case count, optionally adjusted by data quality."""
    for min_cases, tier, base, label, reliability in _TIERS:
        if case_count >= min_cases:
            break
    else:
        min_cases = 0
        tier = "limited"
        base = min(69.0, 40 + (case_count / FULL_ANALYTICS_MIN_CASES) * 29)
        label = "Limited Confidence"
        reliability = Reliability.LOW

    percentage = base
    if quality is not None:
        adjustment = (quality.overall_quality_score - QUALITY_PIVOT) / 10
        percentage = clamp(base + adjustment, MIN_ADJUSTED_CONFIDENCE, MAX_CONFIDENCE)

    return ConfidenceScore(
        tier=tier,
        percentage=round_int(percentage),
        label=label,
        min_cases=min_cases,
        description=_describe(tier, case_count),
        reliability=reliability,
    )


def calculate_data_quality(
    cases: Sequence[CaseRecord],
    effective_cases: float | None = None,
    reference_date: date | None = None,
) -> DataQualityMetrics:
    """Recency, case-type diversity and freshness of a case set.

    Age bands are calendar years back from reference_date (today by
    default). Cases without a resolvable date count toward the total but
    score zero for recency.
    """
    reference = reference_date or date.today()
    one_year_ago = subtract_years(reference, 1)
    two_years_ago = subtract_years(reference, 2)
    three_years_ago = subtract_years(reference, 3)

    total = len(cases)
    recent = medium = older = 0
    for case in cases:
        case_date = effective_date(case)
        if case_date is None:
            continue
        if case_date >= one_year_ago:
            recent += 1
        elif case_date >= two_years_ago:
            medium += 1
        elif case_date >= three_years_ago:
            older += 1

    temporal = (recent * 100 + medium * 70 + older * 40) / total if total else 50.0
    case_types = {c.case_type for c in cases if c.case_type}
    diversity = min(100.0, len(case_types) / IDEAL_CASE_TYPES * 100)
    freshness = (recent + medium) / total * 100 if total else 0.0
    overall = temporal * 0.4 + diversity * 0.3 + freshness * 0.3

    return DataQualityMetrics(
        total_cases=total,
        effective_cases=float(total) if effective_cases is None else effective_cases,
        temporal_distribution_score=round_int(temporal),
        category_diversity_score=round_int(diversity),
        data_freshness_score=round_int(freshness),
        overall_quality_score=round_int(overall),
    )


def cap_by_sample_size(sample_size: int, percentage: int) -> int:
    for below, cap in _METRIC_CAPS:
        if sample_size < below:
            return min(percentage, cap)
    return percentage


def calculate_metric_confidence(sample_size: int, base: ConfidenceScore) -> int:
    """Report-level confidence capped by one metric's own sample size."""
    return cap_by_sample_size(sample_size, base.percentage)


def should_provide_full_analytics(case_count: int) -> bool:
    """Display gate for presentation layers. The core always computes."""
    return case_count >= FULL_ANALYTICS_MIN_CASES


def get_confidence_tier_requirements() -> list[ConfidenceTierRequirement]:
    return [
        ConfidenceTierRequirement(
            tier=1,
            range="90-95%",
            min_cases=1000,
            description="Comprehensive dataset with very high statistical reliability",
        ),
        ConfidenceTierRequirement(
            tier=2,
            range="80-89%",
            min_cases=750,
            description="Substantial dataset with high statistical reliability",
        ),
        ConfidenceTierRequirement(
            tier=3,
            range="70-79%",
            min_cases=500,
            description="Adequate dataset meeting minimum threshold for full analytics",
        ),
        ConfidenceTierRequirement(
            tier="limited",
            range="<70%",
            min_cases=0,
            description="Limited dataset - results should be interpreted with caution",
        ),
    ]


def get_confidence_recommendation(
    score: ConfidenceScore,
    quality: DataQualityMetrics,
) -> list[str]:
    """Concrete steps that would raise the confidence of a report."""
    recommendations: list[str] = []

    if score.tier == "limited":
        recommendations.append(
            f"Increase case dataset to at least 500 cases (currently {quality.total_cases}) "
            "for full analytics with moderate confidence"
        )
    if quality.data_freshness_score < 50:
        recommendations.append(
            "Add more recent cases (within last 2 years) to improve temporal relevance"
        )
    if quality.category_diversity_score < 50:
        recommendations.append(
            "Include more diverse case types to improve pattern detection reliability"
        )
    if score.tier == 3:
        recommendations.append("Add 250 more cases to reach Tier 2 (High) confidence")
    elif score.tier == 2:
        recommendations.append("Add 250 more cases to reach Tier 1 (Very High) confidence")

    return recommendations
