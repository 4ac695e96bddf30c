"""API request schemas.

Every inbound request body is validated through one of these models.
No raw dicts ever reach the service layer.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from judicial_analytics.models.domain import BaselineScope, CaseRecord

# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class BiasReportRequest(BaseModel):
    """Build a judicial pattern report over a pre-fetched case set."""

    model_config = ConfigDict(frozen=True)

    judge_id: str = Field(..., min_length=1)
    judge_name: str = Field(..., min_length=1)
    jurisdiction: str = Field(..., min_length=1)
    cases: list[CaseRecord] = Field(
        ...,
        description="The judge's case records, in source order",
    )
    reference_date: date | None = Field(
        default=None,
        description="Report date and temporal-weighting anchor; today if omitted",
    )
    start_date: date | None = None
    include_baseline: bool = True
    baseline_scope: BaselineScope = BaselineScope.JURISDICTION
    baseline_scope_id: str | None = Field(
        default=None,
        description="Peer group id; defaults to the jurisdiction",
    )
    format: Literal["json", "text"] = "json"


# ---------------------------------------------------------------------------
# Legacy analytics
# ---------------------------------------------------------------------------


class AugmentAnalyticsRequest(BaseModel):
    """Generate legacy percentage analytics, optionally AI-augmented."""

    model_config = ConfigDict(frozen=True)

    judge_name: str = Field(..., min_length=1)
    jurisdiction: str | None = None
    cases: list[CaseRecord] = Field(default_factory=list)
    lookback_years: int = Field(default=3, ge=1, le=10)
    reference_date: date | None = None
    use_ai: bool = Field(
        default=True,
        description="Blend in provider analytics when a provider is configured",
    )
