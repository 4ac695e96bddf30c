"""AI analytics providers.

A provider reads analyzable case documents and returns an
AIAnalyticsResult. Providers never raise for provider-side trouble:
timeouts, API errors, rate limits and invalid output all collapse into
the fallback sentinel (ai_model == "fallback"), which the augmentation
adapter treats as "try the next provider".

Provider output flows through:
    fence strip → JSON parse → Pydantic validation
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from pydantic import ValidationError

from judicial_analytics.core.exceptions import AnalyticsError, ProviderValidationError
from judicial_analytics.models.legacy import (
    AIAnalyticsResult,
    AnalysisWindow,
    AnalyzableDocument,
)
from judicial_analytics.services.augmentation.prompts import build_analytics_prompt

if TYPE_CHECKING:
    from judicial_analytics.core.config import Settings
    from judicial_analytics.services.augmentation.llm_client import LLMClient

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class AnalyticsProvider(Protocol):
    """Anything that can produce an independent AI read of case documents."""

    name: str

    async def analyze(
        self,
        judge_name: str,
        documents: Sequence[AnalyzableDocument],
        window: AnalysisWindow,
    ) -> AIAnalyticsResult: ...


def fallback_result() -> AIAnalyticsResult:
    """The sentinel a provider returns when it could not produce analytics."""
    return AIAnalyticsResult()


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_provider_output(raw: str, *, model: str) -> AIAnalyticsResult:
    """Parse and validate raw provider output.

    Raises ProviderValidationError for non-JSON output, a non-object
    payload, or fields outside their allowed ranges.
    """
    try:
        data: dict[str, Any] = json.loads(_strip_fences(raw))
    except (json.JSONDecodeError, TypeError) as exc:
        raise ProviderValidationError(
            f"Invalid JSON: {exc}",
            details={"raw_output": raw[:500]},
        ) from exc

    if not isinstance(data, dict):
        raise ProviderValidationError(
            f"Expected JSON object, got {type(data).__name__}",
            details={"raw_output": raw[:500]},
        )

    data["ai_model"] = model
    try:
        return AIAnalyticsResult.model_validate(data)
    except ValidationError as exc:
        raise ProviderValidationError(
            f"Schema validation failed: {exc.error_count()} errors",
            details={"fields": str(exc)},
        ) from exc


class LLMAnalyticsProvider:
    """AnalyticsProvider backed by one OpenAI or Anthropic model."""

    def __init__(self, llm_client: LLMClient, settings: Settings, *, model: str) -> None:
        self._llm = llm_client
        self._settings = settings
        self._model = model
        self.name = model

    async def analyze(
        self,
        judge_name: str,
        documents: Sequence[AnalyzableDocument],
        window: AnalysisWindow,
    ) -> AIAnalyticsResult:
        system_prompt, user_prompt = build_analytics_prompt(
            judge_name,
            documents,
            window,
            max_chars_per_document=self._settings.ai_max_chars_per_document,
        )
        log = logger.bind(model=self._model, document_count=len(documents))

        try:
            response = await asyncio.wait_for(
                self._llm.complete(
                    model=self._model,
                    system_prompt=system_prompt,
                    user_prompt=user_prompt,
                ),
                timeout=self._settings.ai_timeout_seconds,
            )
        except TimeoutError:
            log.warning("ai_provider_timeout", timeout=self._settings.ai_timeout_seconds)
            return fallback_result()
        except AnalyticsError as exc:
            log.warning("ai_provider_failed", error=exc.message)
            return fallback_result()

        try:
            result = parse_provider_output(response.content, model=response.model)
        except ProviderValidationError as exc:
            log.warning("ai_provider_output_invalid", error=exc.message)
            return fallback_result()

        log.info(
            "ai_provider_completed",
            prompt_tokens=response.prompt_tokens,
            completion_tokens=response.completion_tokens,
        )
        return result
