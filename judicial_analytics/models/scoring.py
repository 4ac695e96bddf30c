"""Confidence and data-quality models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from judicial_analytics.models.domain import Reliability

ConfidenceTierValue = Literal[1, 2, 3, "limited"]


class ConfidenceScore(BaseModel):
    """Tiered reliability score derived from case count and data quality."""

    model_config = ConfigDict(frozen=True)

    tier: ConfidenceTierValue
    percentage: int = Field(..., ge=0, le=95)
    label: str
    min_cases: int
    description: str
    reliability: Reliability


class DataQualityMetrics(BaseModel):
    """Recency, diversity and freshness signals for a case set, 0-100."""

    model_config = ConfigDict(frozen=True)

    total_cases: int
    effective_cases: float = Field(..., description="Sum of temporal decay weights")
    temporal_distribution_score: int
    category_diversity_score: int
    data_freshness_score: int
    overall_quality_score: int


class ConfidenceTierRequirement(BaseModel):
    """Display description of one confidence tier."""

    model_config = ConfigDict(frozen=True)

    tier: ConfidenceTierValue
    range: str
    min_cases: int
    description: str
