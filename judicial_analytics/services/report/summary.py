"""Template-composed executive summary and methodology notes."""

from __future__ import annotations

from collections.abc import Sequence

from judicial_analytics.models.domain import Severity
from judicial_analytics.models.patterns import WeightDistribution
from judicial_analytics.models.report import Anomaly, DeviationAnalysis
from judicial_analytics.models.scoring import ConfidenceScore
from judicial_analytics.services.baseline.deviation import interpret_deviation_score
from judicial_analytics.utils.stats import round_int

MAX_KEY_FINDINGS = 3


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def build_executive_summary(
    judge_name: str,
    case_count: int,
    confidence: ConfidenceScore,
    anomalies: Sequence[Anomaly],
    baseline_comparison: DeviationAnalysis | None,
    full_analytics: bool,
) -> str:
    """Compose the summary paragraph from fixed sentence templates.

    Cites the sample size, the confidence description, the peer deviation
    interpretation when a baseline was available, and up to three top
    anomaly descriptions verbatim.
    """
    sections: list[str] = []

    if full_analytics:
        sections.append(
            f"Comprehensive judicial pattern analysis for {judge_name} based on "
            f"{case_count} cases. {confidence.description}"
        )
    else:
        sections.append(
            f"Limited judicial pattern analysis for {judge_name} based on {case_count} cases "
            "(below recommended minimum of 500). Results should be interpreted with caution "
            "as they may not be fully representative."
        )

    if baseline_comparison is not None:
        score = baseline_comparison.overall_deviation_score
        interpretation = interpret_deviation_score(score)
        sections.append(
            f"Comparison to {baseline_comparison.scope_id} {baseline_comparison.scope} peers: "
            f"{interpretation.description}. Overall deviation score: {score}/100."
        )

    if anomalies:
        high = sum(1 for a in anomalies if a.severity == Severity.HIGH)
        medium = sum(1 for a in anomalies if a.severity == Severity.MEDIUM)
        if high:
            sections.append(
                f"{high} high-severity {_plural(high, 'anomaly', 'anomalies')} "
                "detected requiring attention."
            )
        if medium:
            sections.append(
                f"{medium} moderate {_plural(medium, 'deviation', 'deviations')} "
                "from typical patterns identified."
            )
        sections.append("Key findings:")
        sections.extend(f"- {a.description}" for a in anomalies[:MAX_KEY_FINDINGS])
    else:
        sections.append(
            "No significant anomalies detected. Judicial patterns appear consistent with "
            "jurisdiction norms and typical ranges."
        )

    return " ".join(sections)


def build_methodology_notes(
    total_cases: int,
    effective_cases: float,
    distribution: WeightDistribution,
    full_analytics: bool,
) -> list[str]:
    notes = [
        f"Analysis based on {total_cases} total cases with temporal weighting applied "
        f"(effective case count: {round_int(effective_cases)})",
        "Temporal decay factor: Recent cases weighted more heavily "
        f"({round_int(distribution.recent_cases_pct)}% within 1 year, "
        f"{round_int(distribution.old_cases_pct)}% older than 3 years)",
        "Case outcomes normalized by type and jurisdiction-specific factors where applicable",
        "Statistical significance determined using 2-standard-deviation threshold "
        "for anomaly detection",
    ]
    if full_analytics:
        notes.append(
            "Full analytics provided: Dataset meets 500-case minimum threshold "
            "for comprehensive pattern detection"
        )
    else:
        notes.append(
            "Limited analytics: Dataset below 500-case recommended threshold "
            "- results should be interpreted with caution"
        )
    notes.append(
        "Confidence scores reflect both sample size and data quality factors "
        "including temporal distribution and category diversity"
    )
    notes.append(
        "Baseline comparisons calculated using jurisdiction-wide averages "
        "from peer judges with similar case loads"
    )
    return notes
