"""Plain-language narrative and text export for judicial pattern reports.

Everything here is a pure function of the report: the narrative restates
its numbers in prose with the qualifiers a general audience needs, and
the text export lays the report and narrative out in fixed sections with
ASCII-only markers.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

from judicial_analytics.models.domain import Severity
from judicial_analytics.models.report import JudicialBiasReport, NarrativeSummary
from judicial_analytics.utils.stats import round_half_up, round_int

RULE_WIDTH = 80
LOW_DEVIATION_SCORE = 30
STALE_FRESHNESS_SCORE = 60
LOW_DIVERSITY_SCORE = 50

_DATA_DESCRIPTORS: dict[object, str] = {1: "comprehensive", 2: "substantial", 3: "adequate"}
_SEVERITY_MARKERS: dict[Severity, str] = {
    Severity.HIGH: "[HIGH]",
    Severity.MEDIUM: "[MEDIUM]",
    Severity.LOW: "[LOW]",
}


def _pct(rate: float) -> int:
    return round_int(rate * 100)


def _month_year(value: date) -> str:
    return value.strftime("%b %Y")


def format_date_range(start: date, end: date) -> str:
    return f"{_month_year(start)} to {_month_year(end)}"


def _high_count(report: JudicialBiasReport) -> int:
    return sum(1 for a in report.flagged_anomalies if a.severity == Severity.HIGH)


# ---------------------------------------------------------------------------
# Narrative sections
# ---------------------------------------------------------------------------


def _overview(report: JudicialBiasReport) -> str:
    metadata = report.metadata
    confidence = report.confidence_tier
    descriptor = _DATA_DESCRIPTORS.get(confidence.tier, "limited")

    if not report.flagged_anomalies:
        anomaly_level = "no significant anomalies"
    elif _high_count(report):
        anomaly_level = "several notable patterns requiring attention"
    else:
        anomaly_level = "some minor deviations from typical patterns"

    return (
        f"This analysis of {metadata.judge_name}'s judicial patterns is based on "
        f"{descriptor} data comprising {metadata.total_cases} cases spanning "
        f"{format_date_range(metadata.start_date, metadata.end_date)}. "
        f"The analysis reveals {anomaly_level}. Overall confidence in these findings is "
        f"{confidence.label.lower()} ({confidence.percentage}%)."
    )


def _key_patterns(report: JudicialBiasReport) -> list[str]:
    findings = report.detailed_findings
    patterns: list[str] = []

    settlement = findings.value_analysis.overall_settlement_rate
    if settlement > 0.65:
        patterns.append(
            f"Encourages settlement in {_pct(settlement)}% of eligible cases, which is higher "
            "than typical judicial averages. This suggests a preference for negotiated "
            "resolutions over trial."
        )
    elif settlement < 0.35:
        patterns.append(
            f"Cases settle less frequently ({_pct(settlement)}% rate) compared to typical "
            "courts, indicating a willingness to take matters to trial or judgment."
        )
    else:
        patterns.append(
            f"Settlement rate of {_pct(settlement)}% is within the normal range for "
            "judicial proceedings."
        )

    grant_rate = findings.motion_analysis.overall_grant_rate
    if grant_rate > 0.6:
        patterns.append(
            f"Grants motions at a {_pct(grant_rate)}% rate, suggesting a relatively "
            "permissive approach to procedural requests."
        )
    elif grant_rate < 0.35:
        patterns.append(
            f"Denies most motions ({_pct(1 - grant_rate)}% denial rate), demonstrating "
            "high scrutiny of procedural requests."
        )

    avg_days = findings.timing_analysis.overall_avg_days
    if avg_days < 120:
        patterns.append(
            f"Resolves cases quickly with an average of {avg_days} days from filing to "
            "decision, which is faster than typical case timelines."
        )
    elif avg_days > 240:
        patterns.append(
            f"Cases take an average of {avg_days} days to resolve, which is longer than "
            "typical judicial timelines. This may reflect case complexity or docket management."
        )

    individual = findings.party_analysis.individual_vs_corporation_rate
    if 0.6 < individual < 1:
        patterns.append(
            "In disputes between individuals and corporations, outcomes favor individuals "
            f"{_pct(individual)}% of the time."
        )
    elif 0 < individual < 0.4:
        patterns.append(
            "In disputes between individuals and corporations, outcomes favor corporations "
            f"{_pct(1 - individual)}% of the time."
        )

    high = findings.value_analysis.high_value_settlement_rate
    low = findings.value_analysis.low_value_settlement_rate
    if abs(high - low) > 0.25 and high > low:
        patterns.append(
            "Shows different approaches based on case value: high-value cases (over $250K) "
            f"settle {_pct(high)}% of the time compared to {_pct(low)}% for lower-value cases."
        )

    return patterns


def _strengths(report: JudicialBiasReport) -> list[str]:
    findings = report.detailed_findings
    strengths: list[str] = []

    avg_days = findings.timing_analysis.overall_avg_days
    if findings.timing_analysis.total_cases_analyzed and avg_days < 150:
        strengths.append(
            f"Efficient case management with average resolution time of {avg_days} days"
        )

    comparison = findings.baseline_comparison
    if comparison is None or comparison.overall_deviation_score < LOW_DEVIATION_SCORE:
        strengths.append(
            "Judicial patterns are consistent with jurisdiction norms, demonstrating "
            "predictable decision-making"
        )

    plaintiff = findings.party_analysis.plaintiff_vs_defendant_rate
    if 0.45 <= plaintiff <= 0.55:
        strengths.append(
            "Balanced outcomes between plaintiffs and defendants suggest impartial "
            "case evaluation"
        )

    pro_se = findings.party_analysis.pro_se_success_rate
    if pro_se > 0.3:
        strengths.append(
            f"Self-represented litigants achieve favorable outcomes {_pct(pro_se)}% of the "
            "time, indicating consideration for pro se parties"
        )

    if not _high_count(report):
        strengths.append("No high-severity anomalies detected in judicial pattern analysis")

    return strengths


def _concerns(report: JudicialBiasReport) -> list[str]:
    findings = report.detailed_findings
    concerns = [a.description for a in report.flagged_anomalies if a.severity == Severity.HIGH]

    if report.confidence_tier.tier == "limited":
        concerns.append(
            f"Limited dataset ({report.metadata.total_cases} cases) reduces statistical "
            "reliability of findings"
        )

    motions = findings.motion_analysis
    if motions.total_motions_analyzed and not 0.2 <= motions.overall_grant_rate <= 0.8:
        concerns.append(
            f"Motion grant rate of {_pct(motions.overall_grant_rate)}% is outside typical "
            "judicial range (35-65%)"
        )

    avg_days = findings.timing_analysis.overall_avg_days
    if avg_days > 365:
        concerns.append(
            f"Extended case duration ({avg_days} days average) may indicate docket "
            "congestion or complex caseload"
        )

    individual = findings.party_analysis.individual_vs_corporation_rate
    if individual > 0.75 or individual < 0.25:
        concerns.append(
            "Notable imbalance in individual vs. corporation outcomes may warrant "
            "further examination"
        )

    return concerns


def _context_notes(report: JudicialBiasReport) -> list[str]:
    notes = [
        "Statistical patterns reflect aggregated case outcomes and do not account for "
        "individual case merits, complexity, or legal standards applicable to each matter."
    ]

    if report.data_quality.data_freshness_score < STALE_FRESHNESS_SCORE:
        notes.append(
            "A significant portion of analyzed cases are older than 2 years, which may not "
            "fully reflect current judicial patterns."
        )

    comparison = report.detailed_findings.baseline_comparison
    if comparison is not None:
        notes.append(
            f"Comparisons are made against {comparison.scope_id} {comparison.scope} averages "
            f"based on {comparison.peer_judge_count} peer judges."
        )

    notes.append(
        "Analysis applies temporal weighting to prioritize recent cases while maintaining "
        "historical context."
    )
    notes.append(
        "Deviation from jurisdiction averages does not necessarily indicate improper bias. "
        "Judges may specialize in specific case types or handle unique dockets."
    )
    return notes


def _recommendations(report: JudicialBiasReport) -> list[str]:
    recommendations: list[str] = []
    quality = report.data_quality

    if report.confidence_tier.tier == "limited":
        recommendations.append(
            "Expand analysis to include additional cases (target: 500+ cases) for more "
            "reliable pattern detection"
        )
    if quality.data_freshness_score < STALE_FRESHNESS_SCORE:
        recommendations.append(
            "Update analysis with more recent case data to reflect current judicial patterns"
        )
    if quality.category_diversity_score < LOW_DIVERSITY_SCORE:
        recommendations.append(
            "Include more diverse case types to improve comprehensiveness of pattern analysis"
        )
    if _high_count(report):
        recommendations.append(
            "Review high-severity anomalies with subject matter experts to determine if "
            "additional context is needed"
        )

    comparison = report.detailed_findings.baseline_comparison
    if comparison is not None and comparison.anomaly_count >= 3:
        recommendations.append(
            "Consider detailed case-by-case review of significant deviations from "
            "jurisdiction norms"
        )
    return recommendations


def generate_narrative_summary(report: JudicialBiasReport) -> NarrativeSummary:
    """Plain-language sections derived from a report."""
    return NarrativeSummary(
        overview=_overview(report),
        key_patterns=_key_patterns(report),
        strengths=_strengths(report),
        concerns=_concerns(report),
        context_notes=_context_notes(report),
        recommendations=_recommendations(report),
    )


# ---------------------------------------------------------------------------
# Text export
# ---------------------------------------------------------------------------


def _number(value: float) -> str:
    return f"{round_half_up(value, 2):g}"


def _section(title: str, lines: list[str]) -> list[str]:
    return [title, "-" * RULE_WIDTH, *lines, ""]


def generate_text_report(
    report: JudicialBiasReport,
    generated_at: datetime | None = None,
) -> str:
    """Fixed-layout plain-text export of a report and its narrative."""
    generated_at = generated_at or datetime.now(UTC)
    narrative = generate_narrative_summary(report)
    metadata = report.metadata
    confidence = report.confidence_tier

    lines = [
        "=" * RULE_WIDTH,
        "JUDICIAL PATTERN ANALYSIS REPORT",
        f"Judge: {metadata.judge_name}",
        f"Jurisdiction: {metadata.jurisdiction}",
        f"Report Date: {metadata.report_date.isoformat()}",
        f"Analysis Period: {format_date_range(metadata.start_date, metadata.end_date)}",
        f"Total Cases: {metadata.total_cases}",
        f"Confidence: {confidence.label} ({confidence.percentage}%)",
        "=" * RULE_WIDTH,
        "",
    ]

    lines += _section("EXECUTIVE SUMMARY", [report.executive_summary])
    lines += _section("OVERVIEW", [narrative.overview])

    if narrative.key_patterns:
        lines += _section(
            "KEY PATTERNS IDENTIFIED",
            [f"{i}. {p}" for i, p in enumerate(narrative.key_patterns, start=1)],
        )
    if narrative.strengths:
        lines += _section("STRENGTHS", [f"[+] {s}" for s in narrative.strengths])
    if narrative.concerns:
        lines += _section("AREAS REQUIRING ATTENTION", [f"[!] {c}" for c in narrative.concerns])

    if report.flagged_anomalies:
        lines += ["FLAGGED ANOMALIES", "-" * RULE_WIDTH]
        for anomaly in report.flagged_anomalies:
            lines += [
                f"{_SEVERITY_MARKERS[anomaly.severity]} {anomaly.category}: {anomaly.metric}",
                f"   {anomaly.description}",
                f"   Judge Value: {_number(anomaly.judge_value)} | "
                f"Baseline: {_number(anomaly.baseline_value)} | "
                f"Deviation: {anomaly.std_deviations:.1f} sigma",
                "",
            ]

    lines += _section("CONTEXT & LIMITATIONS", [f"* {n}" for n in narrative.context_notes])

    if narrative.recommendations:
        lines += _section(
            "RECOMMENDATIONS",
            [f"{i}. {r}" for i, r in enumerate(narrative.recommendations, start=1)],
        )

    lines += _section("METHODOLOGY", [f"* {n}" for n in report.methodology_notes])
    lines += [
        "=" * RULE_WIDTH,
        f"End of Report - Generated on {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
        "=" * RULE_WIDTH,
    ]
    return "\n".join(lines)
