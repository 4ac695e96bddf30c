"""Judicial pattern report endpoints.

POST /reports/bias: build a report over the supplied case set, as the
structured JSON report or its plain-text export.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from prometheus_client import Counter

from judicial_analytics.api.dependencies import get_report_builder
from judicial_analytics.models.report import JudicialBiasReport
from judicial_analytics.models.requests import BiasReportRequest  # noqa: TC001
from judicial_analytics.models.responses import ErrorResponse, TextReportResponse
from judicial_analytics.services.narrative.generator import generate_text_report
from judicial_analytics.services.report.builder import ReportBuilder, ReportOptions

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

router = APIRouter(prefix="/reports", tags=["reports"])

REPORTS_BUILT = Counter(
    "analytics_reports_built_total",
    "Judicial pattern reports built",
    ["analysis_method", "with_baseline"],
)


@router.post(
    "/bias",
    response_model=JudicialBiasReport | TextReportResponse,
    summary="Build a judicial pattern report",
    responses={422: {"model": ErrorResponse}},
)
async def build_bias_report(
    request: BiasReportRequest,
    builder: ReportBuilder = Depends(get_report_builder),
) -> JudicialBiasReport | TextReportResponse:
    """Run the analytics pipeline for one judge's cases."""
    report = await builder.build_report(
        request.judge_id,
        request.judge_name,
        request.jurisdiction,
        request.cases,
        ReportOptions(
            reference_date=request.reference_date,
            start_date=request.start_date,
            include_baseline=request.include_baseline,
            baseline_scope=request.baseline_scope,
            baseline_scope_id=request.baseline_scope_id,
        ),
    )

    REPORTS_BUILT.labels(
        analysis_method=report.metadata.analysis_method,
        with_baseline=str(report.detailed_findings.baseline_comparison is not None).lower(),
    ).inc()

    if request.format == "text":
        return TextReportResponse(judge_id=request.judge_id, report=generate_text_report(report))
    return report
