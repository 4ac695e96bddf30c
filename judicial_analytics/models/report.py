"""Baseline, deviation and report models.

JudicialBiasReport is the sole externally consumed artifact of the
structured analytics path. It is tagged with kind="structured_report" so
it can travel alongside the legacy percentage analytics in a
discriminated union without ever being confused with it.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from judicial_analytics.models.domain import BaselineScope, DeviationCategory, Severity
from judicial_analytics.models.patterns import (
    BiasIndicators,
    BiasMetrics,
    CaseTypePattern,
    MotionAnalysis,
    OutcomeAnalysis,
    PartyAnalysis,
    TimingAnalysis,
    ValueAnalysis,
)
from judicial_analytics.models.scoring import ConfidenceScore, DataQualityMetrics

# ---------------------------------------------------------------------------
# Baselines
# ---------------------------------------------------------------------------


class MetricStats(BaseModel):
    """Population mean and standard deviation of one metric across peers."""

    model_config = ConfigDict(frozen=True)

    mean: float
    std_dev: float = Field(..., ge=0.0)
    sample_size: int = Field(..., description="Peer cases contributing to the metric")


class BaselineMetrics(BaseModel):
    """The four headline metrics every baseline carries."""

    model_config = ConfigDict(frozen=True)

    settlement_rate: MetricStats
    motion_grant_rate: MetricStats
    avg_case_duration_days: MetricStats
    plaintiff_favorable_rate: MetricStats


class Baseline(BaseModel):
    """Peer-group norms for a jurisdiction or a court."""

    model_config = ConfigDict(frozen=True)

    scope: BaselineScope
    scope_id: str
    metrics: BaselineMetrics
    total_cases: int
    judge_count: int
    generated_at: datetime
    bias_metrics: BiasMetrics | None = None


class JudgeHeadlineMetrics(BaseModel):
    """One judge's values for the four baseline metrics."""

    model_config = ConfigDict(frozen=True)

    settlement_rate: float
    motion_grant_rate: float
    avg_case_duration_days: float
    plaintiff_favorable_rate: float


# ---------------------------------------------------------------------------
# Deviation
# ---------------------------------------------------------------------------


class MetricComparison(BaseModel):
    """A judge's metric compared against the peer baseline."""

    model_config = ConfigDict(frozen=True)

    metric: str
    judge_value: float
    baseline_value: float
    std_deviations: float
    is_significant: bool
    interpretation: str


class DeviationAnalysis(BaseModel):
    """All metric comparisons plus an advisory 0-100 deviation score."""

    model_config = ConfigDict(frozen=True)

    scope_id: str
    scope: BaselineScope = BaselineScope.JURISDICTION
    peer_judge_count: int = 0
    comparisons: list[MetricComparison]
    overall_deviation_score: int = Field(..., ge=0, le=100)
    anomaly_count: int


class DeviationInterpretation(BaseModel):
    """Human-readable bucket for an overall deviation score."""

    model_config = ConfigDict(frozen=True)

    score: int
    category: DeviationCategory
    description: str
    severity: Severity


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class Anomaly(BaseModel):
    """A flagged statistical deviation. Never a determination of bias."""

    model_config = ConfigDict(frozen=True)

    category: str
    metric: str
    severity: Severity
    judge_value: float
    baseline_value: float
    std_deviations: float
    description: str


class MetricRow(BaseModel):
    """One row of the report's metrics table."""

    model_config = ConfigDict(frozen=True)

    category: str
    metric: str
    judge_value: str
    baseline_value: str | None = None
    deviation: float | None = None
    interpretation: str
    confidence: int
    sample_size: int


class ReportMetadata(BaseModel):
    """Identity and scope of a generated report."""

    model_config = ConfigDict(frozen=True)

    judge_id: str
    judge_name: str
    jurisdiction: str
    report_date: date
    start_date: date
    end_date: date
    total_cases: int
    effective_cases: int
    analysis_method: Literal["comprehensive", "limited"]


class DetailedFindings(BaseModel):
    """All pattern summaries behind the metrics table."""

    model_config = ConfigDict(frozen=True)

    motion_analysis: MotionAnalysis
    timing_analysis: TimingAnalysis
    party_analysis: PartyAnalysis
    value_analysis: ValueAnalysis
    outcome_analysis: OutcomeAnalysis
    case_type_patterns: list[CaseTypePattern]
    bias_indicators: BiasIndicators | None = None
    baseline_comparison: DeviationAnalysis | None = None


class JudicialBiasReport(BaseModel):
    """Complete structured pattern report for one judge."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["structured_report"] = "structured_report"
    metadata: ReportMetadata
    confidence_tier: ConfidenceScore
    data_quality: DataQualityMetrics
    metrics_table: list[MetricRow]
    flagged_anomalies: list[Anomaly]
    detailed_findings: DetailedFindings
    executive_summary: str
    methodology_notes: list[str]


class NarrativeSummary(BaseModel):
    """Plain-language sections derived from a report."""

    model_config = ConfigDict(frozen=True)

    overview: str
    key_patterns: list[str]
    strengths: list[str]
    concerns: list[str]
    context_notes: list[str]
    recommendations: list[str]
