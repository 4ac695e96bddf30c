"""Pattern summary models produced by the extractors.

Each extractor turns a case list into one of these category-bucketed
summaries. Counts, rates, durations, sample size and a per-bucket
confidence are always present; a category with no data is emitted as a
placeholder row (zero counts, low confidence) rather than omitted, so
consumers can tell "no data" apart from "zero rate".
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from judicial_analytics.models.domain import (
    CaseRecord,
    ComplexityTier,
    PartyType,
    RepresentationType,
    Severity,
)

# ---------------------------------------------------------------------------
# Temporal weighting aggregates
# ---------------------------------------------------------------------------


class WeightedRate(BaseModel):
    """Recency-weighted share of cases matching a predicate."""

    model_config = ConfigDict(frozen=True)

    rate: float = Field(..., ge=0.0, le=1.0)
    total_weight: float
    positive_weight: float


class WeightedAverage(BaseModel):
    """Recency-weighted mean of a numeric series."""

    model_config = ConfigDict(frozen=True)

    average: float
    total_weight: float


class WeightDistribution(BaseModel):
    """Summary of how weight is spread across the case set."""

    model_config = ConfigDict(frozen=True)

    total_cases: int
    effective_cases: float
    avg_weight: float
    min_weight: float
    max_weight: float
    recent_cases_pct: float = Field(..., description="Share of cases at most 1 year old, 0-100")
    old_cases_pct: float = Field(..., description="Share of cases older than 3 years, 0-100")


# ---------------------------------------------------------------------------
# Outcome / case-type patterns
# ---------------------------------------------------------------------------


class OutcomeDistribution(BaseModel):
    """Counts per normalized outcome; always sums to the group total."""

    model_config = ConfigDict(frozen=True)

    settled: int = 0
    dismissed: int = 0
    judgment: int = 0
    other: int = 0


class CaseTypePattern(BaseModel):
    """Outcome profile for one case type."""

    model_config = ConfigDict(frozen=True)

    case_type: str
    total_cases: int
    settlement_rate: float = Field(..., ge=0.0, le=1.0)
    average_case_value: float
    outcome_distribution: OutcomeDistribution
    confidence: int


class ValueTrend(BaseModel):
    """Settlement rate within one coarse value range."""

    model_config = ConfigDict(frozen=True)

    value_range: str
    case_count: int
    settlement_rate: float = Field(..., ge=0.0, le=1.0)


class OutcomeAnalysis(BaseModel):
    """Overall outcome rates across the whole case set."""

    model_config = ConfigDict(frozen=True)

    total_cases: int
    overall_settlement_rate: float = Field(..., ge=0.0, le=1.0)
    dismissal_rate: float = Field(..., ge=0.0, le=1.0)
    judgment_rate: float = Field(..., ge=0.0, le=1.0)
    average_case_duration: float
    case_value_trends: list[ValueTrend]
    confidence: int


class TemporalPattern(BaseModel):
    """Case volume and settlement behaviour for one decision month."""

    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    case_count: int
    settlement_rate: float = Field(..., ge=0.0, le=1.0)
    average_duration: float


class BiasIndicators(BaseModel):
    """Composite behavioural indicators, each rounded to one decimal."""

    model_config = ConfigDict(frozen=True)

    consistency_score: float
    speed_score: float
    settlement_preference: float
    risk_tolerance: float
    predictability_score: float


class BiasIndicatorResult(BaseModel):
    """Either computed indicators or the reason they could not be computed."""

    model_config = ConfigDict(frozen=True)

    indicators: BiasIndicators | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.indicators is not None


class BiasMetrics(BaseModel):
    """Full outcome profile of a case pool, used for court-scope baselines."""

    model_config = ConfigDict(frozen=True)

    case_type_patterns: list[CaseTypePattern]
    outcome_analysis: OutcomeAnalysis
    temporal_patterns: list[TemporalPattern]
    bias_indicators: BiasIndicators


# ---------------------------------------------------------------------------
# Motion patterns
# ---------------------------------------------------------------------------


class MotionTypePattern(BaseModel):
    """Grant/deny behaviour for one canonical motion type."""

    model_config = ConfigDict(frozen=True)

    motion_type: str
    total_motions: int
    granted: int
    denied: int
    grant_rate: float = Field(..., ge=0.0, le=1.0)
    deny_rate: float = Field(..., ge=0.0, le=1.0)
    avg_days_to_decision: int
    median_days_to_decision: int
    sample_size: int = Field(..., description="Motions with a known ruling")
    confidence: int


class MotionAnalysis(BaseModel):
    """Motion patterns by type plus overall grant behaviour."""

    model_config = ConfigDict(frozen=True)

    patterns_by_type: list[MotionTypePattern]
    overall_grant_rate: float = Field(..., ge=0.0, le=1.0)
    overall_deny_rate: float = Field(..., ge=0.0, le=1.0)
    avg_decision_time: int
    total_motions_analyzed: int
    confidence_score: int


# ---------------------------------------------------------------------------
# Timing patterns
# ---------------------------------------------------------------------------


class ComplexityTiming(BaseModel):
    """Filing-to-decision duration distribution for one complexity tier."""

    model_config = ConfigDict(frozen=True)

    complexity_tier: ComplexityTier
    case_count: int
    avg_days: int
    median_days: int
    percentile_25: int
    percentile_75: int
    percentile_90: int
    min_days: int
    max_days: int
    confidence: int


class TimingAnalysis(BaseModel):
    """Decision timing across all complexity tiers."""

    model_config = ConfigDict(frozen=True)

    by_complexity: list[ComplexityTiming]
    overall_avg_days: int
    overall_median_days: int
    fastest_category: str
    slowest_category: str
    total_cases_analyzed: int
    confidence_score: int


class ExpectedTiming(BaseModel):
    """Typical duration band for a complexity tier, in days."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int
    typical: int


class TimingOutlier(BaseModel):
    """A case resolved far faster or slower than its tier average."""

    model_config = ConfigDict(frozen=True)

    case: CaseRecord
    days: int
    expected: int
    deviation: Literal["much_slower", "much_faster"]


# ---------------------------------------------------------------------------
# Party patterns
# ---------------------------------------------------------------------------


class PartyPattern(BaseModel):
    """Outcome favorability for one party type."""

    model_config = ConfigDict(frozen=True)

    party_type: PartyType
    case_count: int
    favorable_outcomes: int
    unfavorable_outcomes: int
    favorable_rate: float = Field(..., ge=0.0, le=1.0)
    avg_outcome_value: int
    avg_case_duration_days: int
    confidence: int


class RepresentationPattern(BaseModel):
    """Outcome favorability for one representation type."""

    model_config = ConfigDict(frozen=True)

    representation_type: RepresentationType
    case_count: int
    favorable_outcomes: int
    unfavorable_outcomes: int
    favorable_rate: float = Field(..., ge=0.0, le=1.0)
    confidence: int


class PartyAnalysis(BaseModel):
    """Party and representation patterns with headline ratios."""

    model_config = ConfigDict(frozen=True)

    party_patterns: list[PartyPattern]
    representation_patterns: list[RepresentationPattern]
    individual_vs_corporation_rate: float = Field(..., ge=0.0, le=1.0)
    individual_vs_corporation_cases: int
    plaintiff_vs_defendant_rate: float = Field(..., ge=0.0, le=1.0)
    plaintiff_vs_defendant_cases: int
    pro_se_success_rate: float = Field(..., ge=0.0, le=1.0)
    total_cases_analyzed: int
    confidence_score: int


# ---------------------------------------------------------------------------
# Value patterns
# ---------------------------------------------------------------------------


class ValueBracket(BaseModel):
    """Outcome behaviour for cases within one value range.

    settled + dismissed + judgment + other always equals case_count.
    max_value is None for the open-ended top bracket.
    """

    model_config = ConfigDict(frozen=True)

    range_label: str
    min_value: float
    max_value: float | None
    case_count: int
    settled: int
    dismissed: int
    judgment: int
    other: int
    settlement_rate: float = Field(..., ge=0.0, le=1.0)
    dismissal_rate: float = Field(..., ge=0.0, le=1.0)
    judgment_rate: float = Field(..., ge=0.0, le=1.0)
    avg_judgment_amount: int
    avg_claimed_amount: int
    judgment_to_claim_ratio: float
    avg_case_duration_days: int
    confidence: int


class ValueAnalysis(BaseModel):
    """Settlement and judgment behaviour across value brackets."""

    model_config = ConfigDict(frozen=True)

    value_brackets: list[ValueBracket]
    overall_settlement_rate: float = Field(..., ge=0.0, le=1.0)
    high_value_settlement_rate: float = Field(..., ge=0.0, le=1.0)
    low_value_settlement_rate: float = Field(..., ge=0.0, le=1.0)
    settlement_value_correlation: float = Field(..., ge=-1.0, le=1.0)
    total_cases_analyzed: int
    confidence_score: int


class PatternFlag(BaseModel):
    """A notable party or value pattern surfaced by a flagger."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    severity: Severity
    description: str
