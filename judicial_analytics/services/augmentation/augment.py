"""AI augmentation of legacy percentage analytics.

The adapter asks a primary provider, then an optional secondary one, for
an independent read of the judge's case documents and blends it into the
statistical analytics. Blending is sample-size weighted per metric:

    blended = (base_n * base_value + ai_n * ai_value) / (base_n + ai_n)

falling back to the unweighted mean when both weights are zero.
Complementary metrics are recomputed from their blended primaries, never
blended on their own. When neither provider yields usable output the base
analytics are returned unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime

import structlog

from judicial_analytics.models.domain import CaseRecord
from judicial_analytics.models.legacy import (
    AIAnalyticsResult,
    AnalysisWindow,
    AnalyzableDocument,
    LegacyCaseAnalytics,
)
from judicial_analytics.services.augmentation.legacy import COMPLEMENTS
from judicial_analytics.services.augmentation.provider import AnalyticsProvider
from judicial_analytics.utils.stats import round_int

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

DEFAULT_MAX_DOCUMENTS = 60
AUGMENTED_QUALITY = "augmented_ai"

# (percentage field, sample-size field, confidence field)
BLENDED_METRICS: tuple[tuple[str, str, str], ...] = (
    ("civil_plaintiff_favor", "sample_size_civil", "confidence_civil"),
    ("family_custody_mother", "sample_size_custody", "confidence_custody"),
    ("family_alimony_favorable", "sample_size_alimony", "confidence_alimony"),
    ("contract_enforcement_rate", "sample_size_contracts", "confidence_contracts"),
    ("criminal_sentencing_severity", "sample_size_sentencing", "confidence_sentencing"),
    ("criminal_plea_acceptance", "sample_size_plea", "confidence_plea"),
    ("bail_release_rate", "sample_size_bail", "confidence_bail"),
    ("appeal_reversal_rate", "sample_size_reversal", "confidence_reversal"),
    ("settlement_encouragement_rate", "sample_size_settlement", "confidence_settlement"),
    ("motion_grant_rate", "sample_size_motion", "confidence_motion"),
)


def select_analyzable_documents(
    cases: Sequence[CaseRecord],
    limit: int = DEFAULT_MAX_DOCUMENTS,
) -> list[AnalyzableDocument]:
    """The first `limit` analyzable cases that carry opinion text."""
    documents: list[AnalyzableDocument] = []
    for case in cases:
        if len(documents) >= limit:
            break
        if not case.analyzable or not case.plain_text:
            continue
        documents.append(
            AnalyzableDocument(
                case_name=case.case_name or "Unknown Case",
                case_category=case.case_type or "Unknown",
                case_outcome=case.outcome or case.status or "Unknown",
                decision_date=case.decision_date or case.filing_date,
                plain_text=case.plain_text,
            )
        )
    return documents


def blend_value(
    base_value: float,
    base_weight: float,
    ai_value: float | None,
    ai_weight: float,
) -> int:
    """Sample-size-weighted blend of two percentages, rounded half up.

    A missing AI value keeps the base value. Negative weights count as 0.
    """
    if ai_value is None:
        return round_int(base_value)
    base_weight = max(0.0, base_weight)
    ai_weight = max(0.0, ai_weight)
    total = base_weight + ai_weight
    if not total:
        return round_int((base_value + ai_value) / 2)
    return round_int((base_weight * base_value + ai_weight * ai_value) / total)


def _union_notes(*groups: Iterable[str]) -> list[str]:
    notes: list[str] = []
    for group in groups:
        for note in group:
            if note and note not in notes:
                notes.append(note)
    return notes


def blend_analytics(
    base: LegacyCaseAnalytics,
    ai: AIAnalyticsResult,
    *,
    document_count: int,
    window: AnalysisWindow,
    now: datetime,
) -> LegacyCaseAnalytics:
    """Merge an AI read into base analytics. See the module docstring."""
    ai_total = ai.total_cases_analyzed
    blended: dict[str, int] = {}

    for metric, sample_key, _ in BLENDED_METRICS:
        ai_sample = getattr(ai, sample_key)
        blended[metric] = blend_value(
            getattr(base, metric),
            getattr(base, sample_key),
            getattr(ai, metric),
            float(ai_sample if ai_sample is not None else (ai_total or 0)),
        )
    for complement, primary in COMPLEMENTS.items():
        blended[complement] = 100 - blended[primary]

    update: dict[str, object] = dict(blended)

    base_conf_weight = float(base.total_cases_analyzed)
    ai_conf_weight = float(ai_total if ai_total is not None else document_count)
    confidence_keys = [c for _, _, c in BLENDED_METRICS] + ["overall_confidence"]
    for key in confidence_keys:
        update[key] = blend_value(
            getattr(base, key), base_conf_weight, getattr(ai, key), ai_conf_weight
        )

    ai_pattern = (
        f"AI-enhanced review of {document_count} case documents "
        f"within {window.lookback_years}-year window"
    )
    ai_limitation = (
        f"AI analysis limited to {document_count} documents "
        f"({window.start_year}-{window.end_year})"
    )
    update["notable_patterns"] = _union_notes(
        base.notable_patterns, ai.notable_patterns, [ai_pattern]
    )
    update["data_limitations"] = _union_notes(
        base.data_limitations, ai.data_limitations, [ai_limitation]
    )
    update["analysis_quality"] = AUGMENTED_QUALITY
    update["ai_model"] = ai.ai_model
    update["generated_at"] = now
    update["last_updated"] = now

    # validated rebuild; model_copy would skip the percentage bounds
    return LegacyCaseAnalytics.model_validate(base.model_dump() | update)


class AIAugmentationAdapter:
    """Blends provider output into legacy analytics with a fallback chain."""

    def __init__(
        self,
        primary: AnalyticsProvider,
        secondary: AnalyticsProvider | None = None,
        *,
        max_documents: int = DEFAULT_MAX_DOCUMENTS,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._max_documents = max_documents
        self._clock = clock

    async def enhance(
        self,
        judge_name: str,
        cases: Sequence[CaseRecord],
        base: LegacyCaseAnalytics,
        window: AnalysisWindow,
    ) -> LegacyCaseAnalytics:
        """Return base analytics blended with the first usable AI read."""
        documents = select_analyzable_documents(cases, self._max_documents)
        if not documents:
            logger.info("augmentation_skipped_no_documents", judge_name=judge_name)
            return base

        result = await self._ask(self._primary, judge_name, documents, window)
        if (result is None or result.is_fallback) and self._secondary is not None:
            logger.info(
                "augmentation_trying_secondary",
                primary=self._primary.name,
                secondary=self._secondary.name,
            )
            result = await self._ask(self._secondary, judge_name, documents, window)

        if result is None or result.is_fallback:
            logger.info("augmentation_unavailable", judge_name=judge_name)
            return base

        blended = blend_analytics(
            base,
            result,
            document_count=len(documents),
            window=window,
            now=self._clock(),
        )
        logger.info(
            "augmentation_blended",
            judge_name=judge_name,
            ai_model=result.ai_model,
            document_count=len(documents),
        )
        return blended

    @staticmethod
    async def _ask(
        provider: AnalyticsProvider,
        judge_name: str,
        documents: Sequence[AnalyzableDocument],
        window: AnalysisWindow,
    ) -> AIAnalyticsResult | None:
        try:
            return await provider.analyze(judge_name, documents, window)
        except Exception:
            logger.exception("ai_provider_raised", provider=provider.name)
            return None
