"""Tests for document selection, sample-size blending and the adapter chain."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from judicial_analytics.models.legacy import AIAnalyticsResult
from judicial_analytics.services.augmentation.augment import (
    AUGMENTED_QUALITY,
    AIAugmentationAdapter,
    blend_analytics,
    blend_value,
    select_analyzable_documents,
)
from judicial_analytics.services.augmentation.legacy import analyze_judicial_patterns
from tests.conftest import FIXED_NOW, make_ai_result, make_case, make_window

WINDOW = make_window()


def _docket():
    """Ten civil cases: five plaintiff judgments, five settlements."""
    return [
        make_case(
            case_id=str(i),
            outcome="Judgment for plaintiff" if i < 5 else "Settled",
        )
        for i in range(10)
    ]


def _base():
    return analyze_judicial_patterns(_docket(), WINDOW, now=FIXED_NOW)


def _provider(name: str, result: AIAnalyticsResult | None = None) -> AsyncMock:
    provider = AsyncMock()
    provider.name = name
    provider.analyze.return_value = result
    return provider


class TestSelectAnalyzableDocuments:
    def test_skips_unanalyzable_and_textless_cases(self):
        cases = [
            make_case(case_id="1"),
            make_case(case_id="2", analyzable=False),
            make_case(case_id="3", plain_text=None),
            make_case(case_id="4", plain_text=""),
            make_case(case_id="5", case_name=None, case_type=None, outcome=None),
        ]
        documents = select_analyzable_documents(cases)
        assert len(documents) == 2
        assert documents[0].case_name == "Smith v. Acme Corp"
        assert documents[0].decision_date == "2024-01-15"
        assert documents[1].case_name == "Unknown Case"
        assert documents[1].case_category == "Unknown"
        assert documents[1].case_outcome == "closed"

    def test_limit(self):
        cases = [make_case(case_id=str(i)) for i in range(10)]
        assert len(select_analyzable_documents(cases, limit=4)) == 4


class TestBlendValue:
    def test_sample_size_weighted(self):
        assert blend_value(50, 10, 80, 10) == 65
        assert blend_value(50, 30, 90, 10) == 60

    def test_missing_ai_value_keeps_base(self):
        assert blend_value(42, 10, None, 100) == 42

    def test_zero_weights_use_unweighted_mean(self):
        assert blend_value(50, 0, 81, 0) == 66

    def test_negative_weight_counts_as_zero(self):
        assert blend_value(50, -5, 80, 10) == 80


class TestBlendAnalytics:
    def test_weighted_primaries_and_recomputed_complements(self):
        base = _base()
        assert base.civil_plaintiff_favor == 50
        assert base.sample_size_civil == 10

        blended = blend_analytics(
            base, make_ai_result(), document_count=10, window=WINDOW, now=FIXED_NOW
        )

        assert blended.civil_plaintiff_favor == 65
        assert blended.civil_defendant_favor == 35
        # base had no motion cases, so the AI read carries the metric alone
        assert blended.motion_grant_rate == 40
        assert blended.contract_enforcement_rate == base.contract_enforcement_rate
        assert blended.contract_dismissal_rate == 100 - base.contract_enforcement_rate
        assert blended.family_custody_father == 100 - blended.family_custody_mother

    def test_confidences_blend_by_case_totals(self):
        base = _base()
        blended = blend_analytics(
            base, make_ai_result(), document_count=10, window=WINDOW, now=FIXED_NOW
        )
        assert base.confidence_civil == 75
        assert blended.confidence_civil == 83
        assert base.overall_confidence == 65
        assert blended.overall_confidence == 78
        assert blended.confidence_motion == base.confidence_motion

    def test_notes_and_provenance(self):
        blended = blend_analytics(
            _base(), make_ai_result(), document_count=7, window=WINDOW, now=FIXED_NOW
        )
        assert "Frequent referrals to mediation" in blended.notable_patterns
        assert blended.notable_patterns[-1] == (
            "AI-enhanced review of 7 case documents within 3-year window"
        )
        assert blended.data_limitations[-1] == "AI analysis limited to 7 documents (2021-2024)"
        assert blended.analysis_quality == AUGMENTED_QUALITY
        assert blended.ai_model == "claude-sonnet-4-20250514"
        assert blended.generated_at == FIXED_NOW

    def test_notes_are_not_duplicated(self):
        base = _base()
        ai = make_ai_result(notable_patterns=list(base.notable_patterns))
        blended = blend_analytics(base, ai, document_count=10, window=WINDOW, now=FIXED_NOW)
        assert len(blended.notable_patterns) == len(base.notable_patterns) + 1


class TestAIAugmentationAdapter:
    async def test_primary_result_is_blended(self):
        primary = _provider("primary", make_ai_result())
        adapter = AIAugmentationAdapter(primary, clock=lambda: FIXED_NOW)

        result = await adapter.enhance("Judge Ito", _docket(), _base(), WINDOW)

        assert result.analysis_quality == AUGMENTED_QUALITY
        assert result.civil_plaintiff_favor == 65
        assert result.last_updated == FIXED_NOW
        primary.analyze.assert_awaited_once()

    async def test_fallback_without_secondary_returns_base_unchanged(self):
        base = _base()
        primary = _provider("primary", AIAnalyticsResult())

        result = await AIAugmentationAdapter(primary).enhance(
            "Judge Ito", _docket(), base, WINDOW
        )

        assert result is base

    async def test_secondary_used_after_primary_fallback(self):
        primary = _provider("primary", AIAnalyticsResult())
        secondary = _provider("secondary", make_ai_result(ai_model="gpt-4o"))

        result = await AIAugmentationAdapter(primary, secondary).enhance(
            "Judge Ito", _docket(), _base(), WINDOW
        )

        assert result.ai_model == "gpt-4o"
        secondary.analyze.assert_awaited_once()

    async def test_raising_primary_falls_through(self):
        primary = _provider("primary")
        primary.analyze.side_effect = RuntimeError("boom")
        secondary = _provider("secondary", make_ai_result(ai_model="gpt-4o"))

        result = await AIAugmentationAdapter(primary, secondary).enhance(
            "Judge Ito", _docket(), _base(), WINDOW
        )

        assert result.ai_model == "gpt-4o"

    async def test_both_providers_unusable(self):
        base = _base()
        primary = _provider("primary", AIAnalyticsResult())
        secondary = _provider("secondary", AIAnalyticsResult())

        result = await AIAugmentationAdapter(primary, secondary).enhance(
            "Judge Ito", _docket(), base, WINDOW
        )

        assert result is base

    async def test_no_documents_skips_providers(self):
        base = _base()
        primary = _provider("primary", make_ai_result())
        cases = [make_case(plain_text=None)]

        result = await AIAugmentationAdapter(primary).enhance("Judge Ito", cases, base, WINDOW)

        assert result is base
        primary.analyze.assert_not_awaited()

    async def test_max_documents_caps_what_providers_read(self):
        primary = _provider("primary", make_ai_result())
        adapter = AIAugmentationAdapter(primary, max_documents=3)

        await adapter.enhance("Judge Ito", _docket(), _base(), WINDOW)

        _, documents, _ = primary.analyze.await_args.args
        assert len(documents) == 3


@pytest.mark.parametrize("overall", [0, 100])
def test_blend_stays_within_bounds(overall):
    blended = blend_analytics(
        _base(),
        make_ai_result(overall_confidence=overall, civil_plaintiff_favor=overall),
        document_count=10,
        window=WINDOW,
        now=FIXED_NOW,
    )
    assert 0 <= blended.overall_confidence <= 100
    assert 0 <= blended.civil_plaintiff_favor <= 100
