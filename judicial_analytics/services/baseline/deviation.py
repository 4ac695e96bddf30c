"""Judge-versus-peer deviation analysis.

Deviation for each headline metric is a z-score-like distance,
(judge - mean) / std_dev, defined as 0 when the peers show no spread.
|σ| > 2 is significant. The overall score is an advisory 0-100 scale,
never a determination of bias.
"""

from __future__ import annotations

from judicial_analytics.models.domain import DeviationCategory, Severity
from judicial_analytics.models.report import (
    Baseline,
    DeviationAnalysis,
    DeviationInterpretation,
    JudgeHeadlineMetrics,
    MetricComparison,
    MetricStats,
)
from judicial_analytics.utils.stats import round_int

SIGNIFICANCE_THRESHOLD = 2.0
SCORE_SCALE = 25


def _deviation(value: float, stats: MetricStats) -> float:
    if stats.std_dev <= 0:
        return 0.0
    return (value - stats.mean) / stats.std_dev


def _compare(
    metric: str,
    value: float,
    stats: MetricStats,
    *,
    higher: str,
    lower: str,
    within: str,
) -> MetricComparison:
    sigma = _deviation(value, stats)
    significant = abs(sigma) > SIGNIFICANCE_THRESHOLD
    interpretation = within
    if significant:
        interpretation = (higher if sigma > 0 else lower).format(sigma=abs(sigma))
    return MetricComparison(
        metric=metric,
        judge_value=value,
        baseline_value=stats.mean,
        std_deviations=sigma,
        is_significant=significant,
        interpretation=interpretation,
    )


def compare_to_baseline(judge: JudgeHeadlineMetrics, baseline: Baseline) -> DeviationAnalysis:
    """Compare a judge's four headline metrics against a peer baseline."""
    metrics = baseline.metrics
    comparisons = [
        _compare(
            "Settlement Rate",
            judge.settlement_rate,
            metrics.settlement_rate,
            higher="Significantly higher settlement rate than jurisdiction average ({sigma:.1f}σ)",
            lower="Significantly lower settlement rate than jurisdiction average ({sigma:.1f}σ)",
            within="Settlement rate within normal range",
        ),
        _compare(
            "Motion Grant Rate",
            judge.motion_grant_rate,
            metrics.motion_grant_rate,
            higher="Significantly higher motion grant rate than peers ({sigma:.1f}σ)",
            lower="Significantly lower motion grant rate than peers ({sigma:.1f}σ)",
            within="Motion grant rate within normal range",
        ),
        _compare(
            "Case Duration",
            judge.avg_case_duration_days,
            metrics.avg_case_duration_days,
            higher="Cases significantly slower than jurisdiction average ({sigma:.1f}σ)",
            lower="Cases significantly faster than jurisdiction average ({sigma:.1f}σ)",
            within="Case duration within normal range",
        ),
        _compare(
            "Plaintiff Favorable Rate",
            judge.plaintiff_favorable_rate,
            metrics.plaintiff_favorable_rate,
            higher="Significantly more plaintiff-favorable than peers ({sigma:.1f}σ)",
            lower="Significantly less plaintiff-favorable than peers ({sigma:.1f}σ)",
            within="Plaintiff favorable rate within normal range",
        ),
    ]

    avg_abs = sum(abs(c.std_deviations) for c in comparisons) / len(comparisons)
    return DeviationAnalysis(
        scope_id=baseline.scope_id,
        scope=baseline.scope,
        peer_judge_count=baseline.judge_count,
        comparisons=comparisons,
        overall_deviation_score=max(0, min(100, round_int(avg_abs * SCORE_SCALE))),
        anomaly_count=sum(1 for c in comparisons if c.is_significant),
    )


def interpret_deviation_score(score: int) -> DeviationInterpretation:
    """Bucket an overall deviation score into a human-readable category."""
    if score <= 20:
        category = DeviationCategory.WELL_WITHIN_NORMS
        description = "Performance metrics are well within jurisdictional norms"
        severity = Severity.LOW
    elif score <= 50:
        category = DeviationCategory.MINOR_VARIANCE
        description = "Minor variance from jurisdictional averages, within acceptable range"
        severity = Severity.LOW
    elif score <= 75:
        category = DeviationCategory.NOTABLE_DEVIATION
        description = "Notable deviation from peer patterns, warrants closer review"
        severity = Severity.MEDIUM
    else:
        category = DeviationCategory.SIGNIFICANT_DEVIATION
        description = "Significant deviation from jurisdictional norms across multiple metrics"
        severity = Severity.HIGH
    return DeviationInterpretation(
        score=score,
        category=category,
        description=description,
        severity=severity,
    )
