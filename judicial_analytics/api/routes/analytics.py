"""Legacy analytics endpoints.

POST /analytics/augment: keyword-driven percentage analytics for a
judge, blended with an AI provider's read of the case documents when a
provider is configured and the caller asks for it.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from judicial_analytics.api.dependencies import get_legacy_generator
from judicial_analytics.models.legacy import LegacyCaseAnalytics
from judicial_analytics.models.requests import AugmentAnalyticsRequest  # noqa: TC001
from judicial_analytics.services.augmentation.legacy import (
    LegacyAnalyticsGenerator,
    analysis_window,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post(
    "/augment",
    response_model=LegacyCaseAnalytics,
    summary="Generate legacy percentage analytics",
)
async def augment_analytics(
    request: AugmentAnalyticsRequest,
    generator: LegacyAnalyticsGenerator = Depends(get_legacy_generator),
) -> LegacyCaseAnalytics:
    """Statistical analytics, AI-augmented when possible, never empty-handed."""
    if not request.use_ai:
        generator = LegacyAnalyticsGenerator()
    window = analysis_window(request.lookback_years, request.reference_date)
    analytics = await generator.generate(
        request.judge_name,
        request.jurisdiction,
        request.cases,
        window,
    )
    logger.info(
        "legacy_analytics_served",
        judge_name=request.judge_name,
        analysis_quality=analytics.analysis_quality,
        ai_model=analytics.ai_model,
    )
    return analytics
