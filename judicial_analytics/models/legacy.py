"""Legacy percentage analytics and AI provider output.

The legacy shape predates the structured report: ten 0-100 percentage
metrics, each with its own confidence and sample size, plus free-text
pattern and limitation notes. It is the only shape the AI augmentation
path blends, so it is modelled as its own tagged variant rather than
folded into JudicialBiasReport.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from judicial_analytics.models.report import JudicialBiasReport

FALLBACK_MODEL = "fallback"

Percent = Annotated[int, Field(ge=0, le=100)]


class AnalysisWindow(BaseModel):
    """Lookback window the analytics were computed over."""

    model_config = ConfigDict(frozen=True)

    lookback_years: int = Field(..., ge=1)
    start_year: int
    end_year: int


class LegacyCaseAnalytics(BaseModel):
    """Percentage-based per-category analytics for one judge."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["legacy"] = "legacy"

    civil_plaintiff_favor: Percent
    civil_defendant_favor: Percent
    family_custody_mother: Percent
    family_custody_father: Percent
    family_alimony_favorable: Percent
    contract_enforcement_rate: Percent
    contract_dismissal_rate: Percent
    criminal_sentencing_severity: Percent
    criminal_plea_acceptance: Percent
    bail_release_rate: Percent
    appeal_reversal_rate: Percent
    settlement_encouragement_rate: Percent
    motion_grant_rate: Percent

    confidence_civil: Percent
    confidence_custody: Percent
    confidence_alimony: Percent
    confidence_contracts: Percent
    confidence_sentencing: Percent
    confidence_plea: Percent
    confidence_bail: Percent
    confidence_reversal: Percent
    confidence_settlement: Percent
    confidence_motion: Percent
    overall_confidence: Percent

    sample_size_civil: int = 0
    sample_size_custody: int = 0
    sample_size_alimony: int = 0
    sample_size_contracts: int = 0
    sample_size_sentencing: int = 0
    sample_size_plea: int = 0
    sample_size_bail: int = 0
    sample_size_reversal: int = 0
    sample_size_settlement: int = 0
    sample_size_motion: int = 0

    total_cases_analyzed: int
    analysis_quality: str
    notable_patterns: list[str] = Field(default_factory=list)
    data_limitations: list[str] = Field(default_factory=list)
    ai_model: str
    generated_at: datetime
    last_updated: datetime


class AnalyzableDocument(BaseModel):
    """A case document trimmed down to what an AI provider reads."""

    model_config = ConfigDict(frozen=True)

    case_name: str
    case_category: str
    case_outcome: str
    decision_date: str | None = None
    plain_text: str


class AIAnalyticsResult(BaseModel):
    """An external provider's independent read of case documents.

    Every metric is optional: a provider that cannot estimate a category
    leaves it null and the blend keeps the base value. ai_model equal to
    FALLBACK_MODEL marks the provider's failure sentinel.
    """

    model_config = ConfigDict(frozen=True)

    civil_plaintiff_favor: Percent | None = None
    family_custody_mother: Percent | None = None
    family_alimony_favorable: Percent | None = None
    contract_enforcement_rate: Percent | None = None
    criminal_sentencing_severity: Percent | None = None
    criminal_plea_acceptance: Percent | None = None
    bail_release_rate: Percent | None = None
    appeal_reversal_rate: Percent | None = None
    settlement_encouragement_rate: Percent | None = None
    motion_grant_rate: Percent | None = None

    confidence_civil: Percent | None = None
    confidence_custody: Percent | None = None
    confidence_alimony: Percent | None = None
    confidence_contracts: Percent | None = None
    confidence_sentencing: Percent | None = None
    confidence_plea: Percent | None = None
    confidence_bail: Percent | None = None
    confidence_reversal: Percent | None = None
    confidence_settlement: Percent | None = None
    confidence_motion: Percent | None = None
    overall_confidence: Percent | None = None

    sample_size_civil: int | None = None
    sample_size_custody: int | None = None
    sample_size_alimony: int | None = None
    sample_size_contracts: int | None = None
    sample_size_sentencing: int | None = None
    sample_size_plea: int | None = None
    sample_size_bail: int | None = None
    sample_size_reversal: int | None = None
    sample_size_settlement: int | None = None
    sample_size_motion: int | None = None

    total_cases_analyzed: int | None = None
    notable_patterns: list[str] = Field(default_factory=list)
    data_limitations: list[str] = Field(default_factory=list)
    ai_model: str = FALLBACK_MODEL

    @property
    def is_fallback(self) -> bool:
        return self.ai_model == FALLBACK_MODEL


AnalyticsResult = Annotated[
    JudicialBiasReport | LegacyCaseAnalytics,
    Field(discriminator="kind"),
]
