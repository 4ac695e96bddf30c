"""Threshold-based anomaly rules.

Rules are fixed thresholds, not learned. Each firing rule yields one
Anomaly; the result is ordered high -> medium -> low, keeping rule order
within a severity.
"""

from __future__ import annotations

from judicial_analytics.models.domain import Severity
from judicial_analytics.models.patterns import (
    MotionAnalysis,
    PartyAnalysis,
    TimingAnalysis,
    ValueAnalysis,
)
from judicial_analytics.models.report import Anomaly, DeviationAnalysis
from judicial_analytics.utils.stats import round_int

SEVERITY_RANK: dict[Severity, int] = {Severity.HIGH: 3, Severity.MEDIUM: 2, Severity.LOW: 1}

HIGH_DEVIATION_SIGMA = 3.0
MOTION_HIGH_GRANT_RATE = 0.8
MOTION_LOW_GRANT_RATE = 0.2
MOTION_MIN_SAMPLES = 20
VALUE_SETTLEMENT_GAP = 0.35
SLOW_DURATION_DAYS = 400
FAST_DURATION_DAYS = 60
TYPICAL_DURATION_DAYS = 180
INDIVIDUAL_FAVOR_HIGH = 0.75
INDIVIDUAL_FAVOR_LOW = 0.25
NEUTRAL_RATE = 0.5


def _pct(rate: float) -> int:
    return round_int(rate * 100)


def baseline_anomalies(comparison: DeviationAnalysis) -> list[Anomaly]:
    return [
        Anomaly(
            category="Baseline Deviation",
            metric=c.metric,
            severity=(
                Severity.HIGH if abs(c.std_deviations) > HIGH_DEVIATION_SIGMA else Severity.MEDIUM
            ),
            judge_value=c.judge_value,
            baseline_value=c.baseline_value,
            std_deviations=c.std_deviations,
            description=c.interpretation,
        )
        for c in comparison.comparisons
        if c.is_significant
    ]


def motion_anomalies(motions: MotionAnalysis) -> list[Anomaly]:
    if motions.total_motions_analyzed < MOTION_MIN_SAMPLES:
        return []
    rate = motions.overall_grant_rate
    if rate > MOTION_HIGH_GRANT_RATE:
        return [
            Anomaly(
                category="Motion Decisions",
                metric="Overall Grant Rate",
                severity=Severity.MEDIUM,
                judge_value=rate,
                baseline_value=NEUTRAL_RATE,
                std_deviations=2.5,
                description=(
                    f"Very high motion grant rate ({_pct(rate)}%) "
                    "- significantly above typical range"
                ),
            )
        ]
    if rate < MOTION_LOW_GRANT_RATE:
        return [
            Anomaly(
                category="Motion Decisions",
                metric="Overall Grant Rate",
                severity=Severity.MEDIUM,
                judge_value=rate,
                baseline_value=NEUTRAL_RATE,
                std_deviations=-2.5,
                description=(
                    f"Very low motion grant rate ({_pct(rate)}%) "
                    "- significantly below typical range"
                ),
            )
        ]
    return []


def value_anomalies(values: ValueAnalysis) -> list[Anomaly]:
    high = values.high_value_settlement_rate
    low = values.low_value_settlement_rate
    if abs(high - low) <= VALUE_SETTLEMENT_GAP:
        return []
    return [
        Anomaly(
            category="Settlement Patterns",
            metric="Value-Based Variation",
            severity=Severity.MEDIUM,
            judge_value=high,
            baseline_value=low,
            std_deviations=2.2,
            description=(
                "Significant difference in settlement rates between "
                f"high-value ({_pct(high)}%) and low-value cases ({_pct(low)}%)"
            ),
        )
    ]


def timing_anomalies(timing: TimingAnalysis) -> list[Anomaly]:
    if timing.total_cases_analyzed == 0:
        return []
    days = timing.overall_avg_days
    if days > SLOW_DURATION_DAYS:
        return [
            Anomaly(
                category="Case Duration",
                metric="Average Duration",
                severity=Severity.HIGH,
                judge_value=days,
                baseline_value=TYPICAL_DURATION_DAYS,
                std_deviations=3.0,
                description=(
                    f"Exceptionally slow case resolution ({days} days average) "
                    "- well above typical timeframes"
                ),
            )
        ]
    if days < FAST_DURATION_DAYS:
        return [
            Anomaly(
                category="Case Duration",
                metric="Average Duration",
                severity=Severity.LOW,
                judge_value=days,
                baseline_value=TYPICAL_DURATION_DAYS,
                std_deviations=-2.5,
                description=f"Unusually fast case resolution ({days} days average)",
            )
        ]
    return []


def party_anomalies(parties: PartyAnalysis) -> list[Anomaly]:
    rate = parties.individual_vs_corporation_rate
    if rate > INDIVIDUAL_FAVOR_HIGH:
        return [
            Anomaly(
                category="Party Patterns",
                metric="Individual vs Corporation",
                severity=Severity.MEDIUM,
                judge_value=rate,
                baseline_value=NEUTRAL_RATE,
                std_deviations=2.3,
                description=(
                    f"Strong pattern favoring individuals over corporations ({_pct(rate)}%)"
                ),
            )
        ]
    if rate < INDIVIDUAL_FAVOR_LOW:
        return [
            Anomaly(
                category="Party Patterns",
                metric="Individual vs Corporation",
                severity=Severity.MEDIUM,
                judge_value=rate,
                baseline_value=NEUTRAL_RATE,
                std_deviations=-2.3,
                description=(
                    f"Strong pattern favoring corporations over individuals ({_pct(1 - rate)}%)"
                ),
            )
        ]
    return []


def detect_anomalies(
    motions: MotionAnalysis,
    timing: TimingAnalysis,
    parties: PartyAnalysis,
    values: ValueAnalysis,
    baseline_comparison: DeviationAnalysis | None = None,
) -> list[Anomaly]:
    """Run every anomaly rule and order the hits by descending severity."""
    anomalies: list[Anomaly] = []
    if baseline_comparison is not None:
        anomalies.extend(baseline_anomalies(baseline_comparison))
    anomalies.extend(motion_anomalies(motions))
    anomalies.extend(value_anomalies(values))
    anomalies.extend(timing_anomalies(timing))
    anomalies.extend(party_anomalies(parties))

    # sort() is stable, so rule order survives within a severity
    anomalies.sort(key=lambda a: SEVERITY_RANK[a.severity], reverse=True)
    return anomalies
