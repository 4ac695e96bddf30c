"""Outcome and case-type pattern extraction.

Normalizes every case's outcome into settled / dismissed / judgment /
other, then summarizes the case set three ways: by case type, overall
(with a coarse value-range settlement trend), and by decision month.

Bias indicators are composite scores derived from those summaries. They
have hard prerequisites: calling calculate_bias_indicators without cases
or without case-type patterns is a programmer error and raises
ContractViolationError. Callers that would rather branch than catch use
compute_bias_indicators, which returns a BiasIndicatorResult.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Sequence

import structlog

from judicial_analytics.core.exceptions import ContractViolationError
from judicial_analytics.models.domain import CaseRecord, OutcomeCategory
from judicial_analytics.models.patterns import (
    BiasIndicatorResult,
    BiasIndicators,
    BiasMetrics,
    CaseTypePattern,
    OutcomeAnalysis,
    OutcomeDistribution,
    TemporalPattern,
    ValueTrend,
)
from judicial_analytics.services.patterns.classifiers import case_outcome
from judicial_analytics.utils.dates import case_duration_days, parse_case_date
from judicial_analytics.utils.stats import (
    clamp,
    is_usable_amount,
    mean,
    round_half_up,
    sample_size_confidence,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

UNSPECIFIED_CASE_TYPE = "Other"

VALUE_TREND_RANGES: tuple[tuple[str, float, float], ...] = (
    ("< $10K", 0, 10_000),
    ("$10K - $50K", 10_000, 50_000),
    ("$50K - $250K", 50_000, 250_000),
    ("$250K+", 250_000, float("inf")),
)

HIGH_VALUE_PATTERN_THRESHOLD = 100_000
SPEED_REFERENCE_DAYS = 180


def _distribution(cases: Sequence[CaseRecord]) -> OutcomeDistribution:
    counts = Counter(case_outcome(c) for c in cases)
    settled = counts[OutcomeCategory.SETTLED]
    dismissed = counts[OutcomeCategory.DISMISSED]
    judgment = counts[OutcomeCategory.JUDGMENT]
    return OutcomeDistribution(
        settled=settled,
        dismissed=dismissed,
        judgment=judgment,
        other=len(cases) - settled - dismissed - judgment,
    )


def analyze_case_type_patterns(cases: Sequence[CaseRecord]) -> list[CaseTypePattern]:
    """Outcome profile per case type, most common type first."""
    groups: dict[str, list[CaseRecord]] = defaultdict(list)
    for case in cases:
        groups[case.case_type or UNSPECIFIED_CASE_TYPE].append(case)

    patterns: list[CaseTypePattern] = []
    for case_type, group in groups.items():
        distribution = _distribution(group)
        values = [
            c.case_value
            for c in group
            if c.case_value is not None and is_usable_amount(c.case_value)
        ]
        patterns.append(
            CaseTypePattern(
                case_type=case_type,
                total_cases=len(group),
                settlement_rate=distribution.settled / len(group),
                average_case_value=mean(values),
                outcome_distribution=distribution,
                confidence=sample_size_confidence(len(group)),
            )
        )

    patterns.sort(key=lambda p: p.total_cases, reverse=True)
    return patterns


def analyze_outcomes(cases: Sequence[CaseRecord]) -> OutcomeAnalysis:
    """Overall outcome rates plus settlement trend across value ranges."""
    total = len(cases)
    distribution = _distribution(cases)

    durations = [d for c in cases if (d := case_duration_days(c)) is not None]

    trends: list[ValueTrend] = []
    for label, low, high in VALUE_TREND_RANGES:
        in_range = [
            c
            for c in cases
            if is_usable_amount(c.case_value) and c.case_value and low <= c.case_value < high
        ]
        settled = sum(1 for c in in_range if case_outcome(c) == OutcomeCategory.SETTLED)
        trends.append(
            ValueTrend(
                value_range=label,
                case_count=len(in_range),
                settlement_rate=settled / len(in_range) if in_range else 0.0,
            )
        )

    return OutcomeAnalysis(
        total_cases=total,
        overall_settlement_rate=distribution.settled / total if total else 0.0,
        dismissal_rate=distribution.dismissed / total if total else 0.0,
        judgment_rate=distribution.judgment / total if total else 0.0,
        average_case_duration=mean(durations),
        case_value_trends=trends,
        confidence=sample_size_confidence(total),
    )


def analyze_temporal_patterns(cases: Sequence[CaseRecord]) -> list[TemporalPattern]:
    """Monthly case volume, settlement rate and duration, oldest first.

    Only cases with a parseable decision date participate.
    """
    groups: dict[tuple[int, int], list[CaseRecord]] = defaultdict(list)
    for case in cases:
        decided = parse_case_date(case.decision_date)
        if decided is None:
            continue
        groups[(decided.year, decided.month)].append(case)

    patterns: list[TemporalPattern] = []
    for (year, month), group in sorted(groups.items()):
        settled = sum(1 for c in group if case_outcome(c) == OutcomeCategory.SETTLED)
        durations = [d for c in group if (d := case_duration_days(c)) is not None]
        patterns.append(
            TemporalPattern(
                year=year,
                month=month,
                case_count=len(group),
                settlement_rate=settled / len(group),
                average_duration=mean(durations),
            )
        )
    return patterns


# ---------------------------------------------------------------------------
# Bias indicators
# ---------------------------------------------------------------------------


def calculate_bias_indicators(
    cases: Sequence[CaseRecord],
    case_type_patterns: Sequence[CaseTypePattern],
    outcome_analysis: OutcomeAnalysis | None,
) -> BiasIndicators:
    """Composite consistency, speed, settlement and predictability scores.

    Raises ContractViolationError if any prerequisite is missing.
    """
    if not case_type_patterns:
        raise ContractViolationError("Cannot calculate bias indicators without case type patterns")
    if outcome_analysis is None:
        raise ContractViolationError("Cannot calculate bias indicators without outcome analysis")
    if not cases:
        raise ContractViolationError(
            "Cannot calculate bias indicators without cases",
            details={"case_count": 0},
        )

    overall = outcome_analysis.overall_settlement_rate
    rates = [p.settlement_rate for p in case_type_patterns]
    variance = sum((r - overall) ** 2 for r in rates) / len(rates)

    consistency = 100 - variance * 100
    varied_outcomes = overall not in (0.0, 1.0)
    if (variance == 0 and varied_outcomes) or (variance > 0 and consistency >= 100):
        consistency = 99.9
    consistency = clamp(consistency, 0, 100)

    duration = max(1.0, outcome_analysis.average_case_duration or 1.0)
    speed = clamp(100 - (duration / SPEED_REFERENCE_DAYS) * 100, 0, 100)

    settlement_preference = (overall - 0.5) * 100

    high_value_types = sum(
        1 for p in case_type_patterns if p.average_case_value > HIGH_VALUE_PATTERN_THRESHOLD
    )
    risk_tolerance = clamp(high_value_types / max(1, len(case_type_patterns)) * 100, 0, 100)

    # Small samples dampen predictability
    if len(cases) < 50:
        predictability = consistency * 0.5
    elif len(cases) < 500:
        predictability = consistency * 0.8
    else:
        predictability = consistency
    predictability = clamp(predictability, 0, 100)

    return BiasIndicators(
        consistency_score=round_half_up(consistency, 1),
        speed_score=round_half_up(speed, 1),
        settlement_preference=round_half_up(settlement_preference, 1),
        risk_tolerance=round_half_up(risk_tolerance, 1),
        predictability_score=round_half_up(predictability, 1),
    )


def compute_bias_indicators(
    cases: Sequence[CaseRecord],
    case_type_patterns: Sequence[CaseTypePattern],
    outcome_analysis: OutcomeAnalysis | None,
) -> BiasIndicatorResult:
    """Non-raising variant of calculate_bias_indicators."""
    try:
        indicators = calculate_bias_indicators(cases, case_type_patterns, outcome_analysis)
    except ContractViolationError as exc:
        return BiasIndicatorResult(error=exc.message)
    return BiasIndicatorResult(indicators=indicators)


def analyze_bias_metrics(cases: Sequence[CaseRecord]) -> BiasMetrics | None:
    """Full outcome profile of a case pool, or None if it cannot be computed."""
    case_type_patterns = analyze_case_type_patterns(cases)
    outcome_analysis = analyze_outcomes(cases)
    result = compute_bias_indicators(cases, case_type_patterns, outcome_analysis)
    if result.indicators is None:
        logger.info("bias_metrics_skipped", reason=result.error, case_count=len(cases))
        return None

    return BiasMetrics(
        case_type_patterns=case_type_patterns,
        outcome_analysis=outcome_analysis,
        temporal_patterns=analyze_temporal_patterns(cases),
        bias_indicators=result.indicators,
    )
