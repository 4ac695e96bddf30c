"""Judicial pattern report orchestration.

ReportBuilder.build_report runs the full pipeline for one judge:

  1. temporal weighting and data quality
  2. confidence tier
  3. the five pattern extractors
  4. optional peer baseline lookup and deviation analysis
  5. metrics table, anomaly rules, executive summary, methodology notes

Everything except the baseline lookup is a pure, synchronous computation
over the supplied cases, so a report is reproducible for the same cases,
reference date and baseline.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

import structlog

from judicial_analytics.core.exceptions import ContractViolationError
from judicial_analytics.models.domain import BaselineScope, CaseRecord, RepresentationType
from judicial_analytics.models.patterns import (
    MotionAnalysis,
    PartyAnalysis,
    TimingAnalysis,
    ValueAnalysis,
)
from judicial_analytics.models.report import (
    DetailedFindings,
    DeviationAnalysis,
    JudicialBiasReport,
    MetricComparison,
    MetricRow,
    ReportMetadata,
)
from judicial_analytics.models.scoring import ConfidenceScore
from judicial_analytics.services.baseline.deviation import compare_to_baseline
from judicial_analytics.services.baseline.service import judge_headline_metrics
from judicial_analytics.services.patterns.motions import analyze_motion_patterns
from judicial_analytics.services.patterns.outcomes import (
    analyze_case_type_patterns,
    analyze_outcomes,
    compute_bias_indicators,
)
from judicial_analytics.services.patterns.parties import analyze_party_patterns
from judicial_analytics.services.patterns.timing import analyze_decision_timing
from judicial_analytics.services.patterns.values import HIGH_VALUE_FLOOR, analyze_value_patterns
from judicial_analytics.services.report.anomalies import detect_anomalies
from judicial_analytics.services.report.summary import (
    build_executive_summary,
    build_methodology_notes,
)
from judicial_analytics.services.scoring.confidence import (
    calculate_confidence_tier,
    calculate_data_quality,
    calculate_metric_confidence,
    cap_by_sample_size,
    should_provide_full_analytics,
)
from judicial_analytics.services.weighting.temporal import (
    TemporalWeightConfig,
    apply_temporal_decay,
    get_effective_case_count,
    get_weight_distribution,
)
from judicial_analytics.utils.stats import round_int

if TYPE_CHECKING:
    from judicial_analytics.core.config import Settings
    from judicial_analytics.services.baseline.service import BaselineService

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

DEFAULT_WINDOW_YEARS = 3
TOP_MOTION_TYPES = 5
MIN_ROW_SAMPLES = 5


@dataclass(frozen=True)
class ReportOptions:
    """Per-report knobs. Dates default to today and a three-year window."""

    reference_date: date | None = None
    start_date: date | None = None
    include_baseline: bool = True
    baseline_scope: BaselineScope = BaselineScope.JURISDICTION
    baseline_scope_id: str | None = None


def _pct(rate: float) -> str:
    return f"{round_int(rate * 100)}%"


def _find(comparison: DeviationAnalysis | None, metric: str) -> MetricComparison | None:
    if comparison is None:
        return None
    return next((c for c in comparison.comparisons if c.metric == metric), None)


def _rate_label(rate: float, high: float, low: float, labels: tuple[str, str, str]) -> str:
    if rate > high:
        return labels[0]
    if rate < low:
        return labels[1]
    return labels[2]


def build_metrics_table(
    motions: MotionAnalysis,
    timing: TimingAnalysis,
    parties: PartyAnalysis,
    values: ValueAnalysis,
    baseline_comparison: DeviationAnalysis | None,
    confidence: ConfidenceScore,
) -> list[MetricRow]:
    """Flatten the pattern summaries into display rows."""
    rows: list[MetricRow] = []

    # --- Settlement ---
    settlement = _find(baseline_comparison, "Settlement Rate")
    rows.append(
        MetricRow(
            category="Settlement Patterns",
            metric="Overall Settlement Rate",
            judge_value=_pct(values.overall_settlement_rate),
            baseline_value=_pct(settlement.baseline_value) if settlement else None,
            deviation=settlement.std_deviations if settlement else None,
            interpretation=_rate_label(
                values.overall_settlement_rate,
                0.65,
                0.35,
                ("High settlement rate", "Low settlement rate", "Moderate settlement rate"),
            ),
            confidence=calculate_metric_confidence(values.total_cases_analyzed, confidence),
            sample_size=values.total_cases_analyzed,
        )
    )

    high = values.high_value_settlement_rate
    low = values.low_value_settlement_rate
    if high > 0 or low > 0:
        if high > low + 0.2:
            interpretation = "Prefers settling high-value cases"
        elif high < low - 0.2:
            interpretation = "Less likely to settle high-value cases"
        else:
            interpretation = "Consistent across value ranges"
        high_cases = sum(
            b.case_count for b in values.value_brackets if b.min_value >= HIGH_VALUE_FLOOR
        )
        rows.append(
            MetricRow(
                category="Settlement Patterns",
                metric="High Value (>$250K) Settlement Rate",
                judge_value=_pct(high),
                interpretation=interpretation,
                confidence=min(calculate_metric_confidence(high_cases, confidence), 85),
                sample_size=high_cases,
            )
        )

    # --- Motions ---
    motion = _find(baseline_comparison, "Motion Grant Rate")
    rows.append(
        MetricRow(
            category="Motion Decisions",
            metric="Overall Motion Grant Rate",
            judge_value=_pct(motions.overall_grant_rate),
            baseline_value=_pct(motion.baseline_value) if motion else None,
            deviation=motion.std_deviations if motion else None,
            interpretation=_rate_label(
                motions.overall_grant_rate,
                0.6,
                0.35,
                ("High grant rate", "Low grant rate", "Moderate grant rate"),
            ),
            confidence=cap_by_sample_size(
                motions.total_motions_analyzed, motions.confidence_score
            ),
            sample_size=motions.total_motions_analyzed,
        )
    )
    for pattern in motions.patterns_by_type[:TOP_MOTION_TYPES]:
        if pattern.sample_size < MIN_ROW_SAMPLES:
            continue
        rows.append(
            MetricRow(
                category="Motion Decisions",
                metric=f"{pattern.motion_type} Grant Rate",
                judge_value=(
                    f"{_pct(pattern.grant_rate)} ({pattern.granted}/{pattern.total_motions})"
                ),
                interpretation=f"Avg decision time: {pattern.avg_days_to_decision} days",
                confidence=cap_by_sample_size(pattern.sample_size, pattern.confidence),
                sample_size=pattern.sample_size,
            )
        )

    # --- Duration ---
    duration = _find(baseline_comparison, "Case Duration")
    if timing.overall_avg_days < 120:
        duration_label = "Fast case resolution"
    elif timing.overall_avg_days > 240:
        duration_label = "Slow case resolution"
    else:
        duration_label = "Moderate case duration"
    rows.append(
        MetricRow(
            category="Case Duration",
            metric="Overall Average Duration",
            judge_value=f"{timing.overall_avg_days} days",
            baseline_value=f"{round_int(duration.baseline_value)} days" if duration else None,
            deviation=duration.std_deviations if duration else None,
            interpretation=duration_label,
            confidence=cap_by_sample_size(
                timing.total_cases_analyzed, timing.confidence_score
            ),
            sample_size=timing.total_cases_analyzed,
        )
    )
    for tier in timing.by_complexity:
        if tier.case_count < MIN_ROW_SAMPLES:
            continue
        rows.append(
            MetricRow(
                category="Case Duration",
                metric=f"{tier.complexity_tier.replace('_', ' ')} Cases",
                judge_value=f"{tier.avg_days} days (median: {tier.median_days})",
                interpretation=(
                    f"Range: {tier.min_days}-{tier.max_days} days, "
                    f"90th percentile: {tier.percentile_90} days"
                ),
                confidence=cap_by_sample_size(tier.case_count, tier.confidence),
                sample_size=tier.case_count,
            )
        )

    # --- Parties ---
    individual_rate = parties.individual_vs_corporation_rate
    if 0 < individual_rate < 1:
        rows.append(
            MetricRow(
                category="Party Patterns",
                metric="Individual vs Corporation",
                judge_value=f"{_pct(individual_rate)} favor individuals",
                interpretation=_rate_label(
                    individual_rate,
                    0.6,
                    0.4,
                    (
                        "Tends to favor individuals over corporations",
                        "Tends to favor corporations over individuals",
                        "Balanced between individuals and corporations",
                    ),
                ),
                confidence=min(
                    calculate_metric_confidence(parties.total_cases_analyzed, confidence), 80
                ),
                sample_size=parties.total_cases_analyzed,
            )
        )

    plaintiff = _find(baseline_comparison, "Plaintiff Favorable Rate")
    rows.append(
        MetricRow(
            category="Party Patterns",
            metric="Plaintiff vs Defendant",
            judge_value=f"{_pct(parties.plaintiff_vs_defendant_rate)} favor plaintiffs",
            baseline_value=_pct(plaintiff.baseline_value) if plaintiff else None,
            deviation=plaintiff.std_deviations if plaintiff else None,
            interpretation=_rate_label(
                parties.plaintiff_vs_defendant_rate,
                0.6,
                0.4,
                ("Plaintiff-favorable", "Defendant-favorable", "Balanced"),
            ),
            confidence=cap_by_sample_size(
                parties.total_cases_analyzed, parties.confidence_score
            ),
            sample_size=parties.total_cases_analyzed,
        )
    )

    if parties.pro_se_success_rate > 0:
        pro_se_cases = next(
            (
                r.case_count
                for r in parties.representation_patterns
                if r.representation_type == RepresentationType.PRO_SE
            ),
            0,
        )
        rows.append(
            MetricRow(
                category="Party Patterns",
                metric="Pro Se Success Rate",
                judge_value=_pct(parties.pro_se_success_rate),
                interpretation=_rate_label(
                    parties.pro_se_success_rate,
                    0.4,
                    0.2,
                    (
                        "Favorable to self-represented litigants",
                        "Low success rate for self-represented litigants",
                        "Moderate pro se success rate",
                    ),
                ),
                confidence=min(calculate_metric_confidence(pro_se_cases, confidence), 75),
                sample_size=pro_se_cases,
            )
        )

    return rows


class ReportBuilder:
    """Builds JudicialBiasReports, optionally against a peer baseline."""

    def __init__(
        self,
        settings: Settings,
        baseline_service: BaselineService | None = None,
    ) -> None:
        self._settings = settings
        self._baseline_service = baseline_service

    async def build_report(
        self,
        judge_id: str,
        judge_name: str,
        jurisdiction: str,
        cases: Sequence[CaseRecord],
        options: ReportOptions | None = None,
    ) -> JudicialBiasReport:
        """Run the full analytics pipeline for one judge.

        Raises ContractViolationError for an empty case list. A missing or
        failed baseline only drops the peer comparison from the report.
        """
        if not cases:
            raise ContractViolationError(
                "Cannot build a report without cases",
                details={"judge_id": judge_id},
            )

        options = options or ReportOptions()
        end_date = options.reference_date or date.today()
        start_date = options.start_date or date(end_date.year - DEFAULT_WINDOW_YEARS, 1, 1)
        log = logger.bind(judge_id=judge_id, case_count=len(cases))

        weighted = apply_temporal_decay(
            cases, TemporalWeightConfig.from_settings(self._settings, end_date)
        )
        effective_cases = get_effective_case_count(weighted)
        distribution = get_weight_distribution(weighted)

        data_quality = calculate_data_quality(cases, effective_cases, end_date)
        confidence = calculate_confidence_tier(len(cases), data_quality)
        full_analytics = should_provide_full_analytics(len(cases))

        motions = analyze_motion_patterns(cases)
        timing = analyze_decision_timing(cases)
        parties = analyze_party_patterns(cases)
        values = analyze_value_patterns(cases)
        case_type_patterns = analyze_case_type_patterns(cases)
        outcomes = analyze_outcomes(cases)

        indicators = compute_bias_indicators(cases, case_type_patterns, outcomes)
        if not indicators.ok:
            log.warning("bias_indicators_unavailable", reason=indicators.error)

        baseline_comparison = None
        if options.include_baseline and self._baseline_service is not None:
            scope_id = options.baseline_scope_id or jurisdiction
            baseline = await self._baseline_service.get_baseline(
                options.baseline_scope, scope_id, reference_date=end_date
            )
            if baseline is not None:
                baseline_comparison = compare_to_baseline(judge_headline_metrics(cases), baseline)
            else:
                log.info("report_without_baseline", scope=options.baseline_scope, scope_id=scope_id)

        metrics_table = build_metrics_table(
            motions, timing, parties, values, baseline_comparison, confidence
        )
        anomalies = detect_anomalies(motions, timing, parties, values, baseline_comparison)

        report = JudicialBiasReport(
            metadata=ReportMetadata(
                judge_id=judge_id,
                judge_name=judge_name,
                jurisdiction=jurisdiction,
                report_date=end_date,
                start_date=start_date,
                end_date=end_date,
                total_cases=len(cases),
                effective_cases=round_int(effective_cases),
                analysis_method="comprehensive" if full_analytics else "limited",
            ),
            confidence_tier=confidence,
            data_quality=data_quality,
            metrics_table=metrics_table,
            flagged_anomalies=anomalies,
            detailed_findings=DetailedFindings(
                motion_analysis=motions,
                timing_analysis=timing,
                party_analysis=parties,
                value_analysis=values,
                outcome_analysis=outcomes,
                case_type_patterns=case_type_patterns,
                bias_indicators=indicators.indicators,
                baseline_comparison=baseline_comparison,
            ),
            executive_summary=build_executive_summary(
                judge_name,
                len(cases),
                confidence,
                anomalies,
                baseline_comparison,
                full_analytics,
            ),
            methodology_notes=build_methodology_notes(
                len(cases), effective_cases, distribution, full_analytics
            ),
        )

        log.info(
            "report_built",
            confidence_tier=confidence.tier,
            anomaly_count=len(anomalies),
            has_baseline=baseline_comparison is not None,
        )
        return report
