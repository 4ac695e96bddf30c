"""Core domain models and enumerations.

These are the canonical data shapes for the analytics pipeline. Every
service produces or consumes these types, never raw dicts. Case records
are frozen: they are externally sourced and must not be mutated by any
extractor.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class OutcomeCategory(StrEnum):
    """Normalized disposition of a case."""

    SETTLED = "settled"
    DISMISSED = "dismissed"
    JUDGMENT = "judgment"
    OTHER = "other"


class ComplexityTier(StrEnum):
    """Case complexity tiers used for timing analysis, simplest first."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    HIGHLY_COMPLEX = "highly_complex"


class PartyType(StrEnum):
    """Litigant category inferred from case text."""

    INDIVIDUAL = "individual"
    CORPORATION = "corporation"
    SMALL_BUSINESS = "small_business"
    GOVERNMENT = "government"
    NON_PROFIT = "non_profit"
    INSURANCE_COMPANY = "insurance_company"
    UNKNOWN = "unknown"


class RepresentationType(StrEnum):
    """How a litigant was represented."""

    PRO_SE = "pro_se"
    PRIVATE_COUNSEL = "private_counsel"
    PUBLIC_DEFENDER = "public_defender"
    UNKNOWN = "unknown"


class Severity(StrEnum):
    """Anomaly and deviation severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Reliability(StrEnum):
    """Reliability band attached to a confidence tier."""

    VERY_HIGH = "very_high"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class BaselineScope(StrEnum):
    """Peer group a baseline is computed over."""

    JURISDICTION = "jurisdiction"
    COURT = "court"


class TimePeriod(StrEnum):
    """Granularity for temporal grouping."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"


class DeviationCategory(StrEnum):
    """Bucket for an overall deviation score."""

    WELL_WITHIN_NORMS = "well_within_norms"
    MINOR_VARIANCE = "minor_variance"
    NOTABLE_DEVIATION = "notable_deviation"
    SIGNIFICANT_DEVIATION = "significant_deviation"


# ---------------------------------------------------------------------------
# Case records
# ---------------------------------------------------------------------------


class CaseRecord(BaseModel):
    """One adjudicated or pending matter, as supplied by the source of record.

    Dates are kept as the raw strings the source provides. Parsing happens
    inside the analytics so that an unparseable date degrades a single
    aggregate instead of rejecting the whole case set.
    """

    model_config = ConfigDict(frozen=True)

    case_id: str | None = None
    case_name: str | None = None
    case_type: str | None = None
    outcome: str | None = None
    status: str | None = None
    case_value: float | None = None
    filing_date: str | None = None
    decision_date: str | None = None
    summary: str | None = None
    motion_type: str | None = None
    judgment_amount: float | None = None
    claimed_amount: float | None = None
    plaintiff_type: str | None = None
    defendant_type: str | None = None
    plain_text: str | None = Field(default=None, description="Joined opinion text, if available")
    analyzable: bool = True


class WeightedCase(BaseModel):
    """A case paired with its recency-decay weight for one analysis run."""

    model_config = ConfigDict(frozen=True)

    case: CaseRecord
    weight: float = Field(..., ge=0.0, le=1.0)
    years_old: float = Field(..., ge=0.0)
    decay_factor: float
