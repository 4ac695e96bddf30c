"""Custom exception hierarchy for judicial analytics.

Every service-layer error inherits from AnalyticsError, giving the API
layer a single base class to catch and translate into structured JSON
responses. Data-quality problems (bad dates, missing text, non-finite
values) are never raised: they are absorbed into low-confidence output.
Only contract violations and external dependency failures surface here.
"""

from __future__ import annotations

from typing import Any


class AnalyticsError(Exception):
    """Base exception for all analytics errors."""

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)


class ContractViolationError(AnalyticsError):
    """Raised when a computation is called without its prerequisites.

    A programmer error, not a data-quality issue: e.g. bias indicators
    requested for zero cases, or a report requested with no case records.
    """


class BaselineUnavailableError(AnalyticsError):
    """Raised when a peer baseline cannot be fetched or computed."""


class CacheError(AnalyticsError):
    """Raised when a baseline cache backend read or write fails."""


class AugmentationError(AnalyticsError):
    """Raised when AI-enhanced analytics cannot be produced."""


class LLMProviderError(AugmentationError):
    """Raised when an LLM provider returns an error or times out."""


class ProviderValidationError(AugmentationError):
    """Raised when provider output fails schema or business-rule validation."""


class RateLimitError(AnalyticsError):
    """Raised when an external rate limit is hit."""

    def __init__(
        self,
        message: str,
        *,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.retry_after = retry_after
