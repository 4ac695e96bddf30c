"""Tests for provider output parsing and the LLM-backed analytics provider.

Every provider-side failure must collapse into the fallback sentinel
instead of raising.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from judicial_analytics.core.config import Settings
from judicial_analytics.core.exceptions import (
    LLMProviderError,
    ProviderValidationError,
    RateLimitError,
)
from judicial_analytics.models.legacy import AnalyzableDocument
from judicial_analytics.services.augmentation.llm_client import LLMClient, LLMResponse
from judicial_analytics.services.augmentation.provider import (
    LLMAnalyticsProvider,
    fallback_result,
    parse_provider_output,
)
from tests.conftest import make_window

MODEL = "claude-sonnet-4-20250514"

VALID_PAYLOAD = {
    "civil_plaintiff_favor": 62,
    "motion_grant_rate": None,
    "confidence_civil": 70,
    "overall_confidence": 68,
    "sample_size_civil": 12,
    "total_cases_analyzed": 15,
    "notable_patterns": ["Prefers early case management conferences"],
    "data_limitations": [],
}

DOCUMENTS = [
    AnalyzableDocument(
        case_name="Smith v. Acme Corp",
        case_category="Civil",
        case_outcome="Settled",
        decision_date="2024-01-15",
        plain_text="The parties reached a settlement before trial.",
    )
]


def _response(content: str) -> LLMResponse:
    return LLMResponse(content=content, prompt_tokens=900, completion_tokens=120, model=MODEL)


def _provider(llm: AsyncMock, **settings_overrides: object) -> LLMAnalyticsProvider:
    settings = Settings(redis_enabled=False, **settings_overrides)  # type: ignore[arg-type]
    return LLMAnalyticsProvider(llm, settings, model=MODEL)


class TestParseProviderOutput:
    def test_valid_json(self):
        result = parse_provider_output(json.dumps(VALID_PAYLOAD), model=MODEL)
        assert result.civil_plaintiff_favor == 62
        assert result.motion_grant_rate is None
        assert result.ai_model == MODEL
        assert not result.is_fallback

    def test_code_fences_stripped(self):
        raw = "```json\n" + json.dumps(VALID_PAYLOAD) + "\n```"
        assert parse_provider_output(raw, model=MODEL).total_cases_analyzed == 15

    def test_provider_cannot_claim_another_model(self):
        payload = {**VALID_PAYLOAD, "ai_model": "fallback"}
        result = parse_provider_output(json.dumps(payload), model=MODEL)
        assert result.ai_model == MODEL

    def test_invalid_json(self):
        with pytest.raises(ProviderValidationError, match="Invalid JSON"):
            parse_provider_output("Here are the analytics you asked for", model=MODEL)

    def test_non_object_payload(self):
        with pytest.raises(ProviderValidationError, match="Expected JSON object"):
            parse_provider_output("[1, 2, 3]", model=MODEL)

    def test_out_of_range_percentage(self):
        payload = {**VALID_PAYLOAD, "civil_plaintiff_favor": 140}
        with pytest.raises(ProviderValidationError, match="Schema validation failed"):
            parse_provider_output(json.dumps(payload), model=MODEL)


class TestFallbackResult:
    def test_sentinel(self):
        result = fallback_result()
        assert result.is_fallback
        assert result.civil_plaintiff_favor is None


class TestLLMAnalyticsProvider:
    async def test_success(self):
        llm = AsyncMock()
        llm.complete.return_value = _response(json.dumps(VALID_PAYLOAD))

        result = await _provider(llm).analyze("Judge Ito", DOCUMENTS, make_window())

        assert result.civil_plaintiff_favor == 62
        assert not result.is_fallback
        kwargs = llm.complete.await_args.kwargs
        assert kwargs["model"] == MODEL
        assert "Judge Ito" in kwargs["user_prompt"]

    async def test_provider_error_gives_fallback(self):
        llm = AsyncMock()
        llm.complete.side_effect = LLMProviderError("Anthropic API error: overloaded")

        result = await _provider(llm).analyze("Judge Ito", DOCUMENTS, make_window())

        assert result.is_fallback

    async def test_rate_limit_gives_fallback(self):
        llm = AsyncMock()
        llm.complete.side_effect = RateLimitError("Anthropic rate limit", retry_after=60.0)

        result = await _provider(llm).analyze("Judge Ito", DOCUMENTS, make_window())

        assert result.is_fallback

    async def test_invalid_output_gives_fallback(self):
        llm = AsyncMock()
        llm.complete.return_value = _response("not json at all")

        result = await _provider(llm).analyze("Judge Ito", DOCUMENTS, make_window())

        assert result.is_fallback

    async def test_timeout_gives_fallback(self):
        async def slow_complete(**_: object) -> LLMResponse:
            await asyncio.sleep(1)
            return _response(json.dumps(VALID_PAYLOAD))

        llm = AsyncMock()
        llm.complete.side_effect = slow_complete

        provider = _provider(llm, ai_timeout_seconds=0.01)
        result = await provider.analyze("Judge Ito", DOCUMENTS, make_window())

        assert result.is_fallback

    def test_name_is_model(self):
        assert _provider(AsyncMock()).name == MODEL


class TestLLMClientRouting:
    def test_is_anthropic_model(self):
        assert LLMClient.is_anthropic_model("claude-sonnet-4-20250514")
        assert not LLMClient.is_anthropic_model("gpt-4o")

    def test_is_configured_by_provider_key(self):
        client = LLMClient(
            Settings(redis_enabled=False, anthropic_api_key="sk-ant", openai_api_key="")
        )
        assert client.is_configured("claude-sonnet-4-20250514")
        assert not client.is_configured("gpt-4o")
