"""Application configuration via environment variables.

All settings are loaded from environment variables (or .env file) using
Pydantic BaseSettings. Analytics tunables (decay rate, baseline TTL, peer
inclusion thresholds, AI document limits) live here alongside the
infrastructure settings so a deployment can retune them without a code change.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the judicial analytics service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- API ---
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    debug: bool = False

    # --- Redis (baseline fast cache) ---
    redis_url: str = "redis://localhost:6379/0"
    redis_enabled: bool = True
    redis_timeout_seconds: float = 2.0

    # --- Temporal weighting ---
    decay_rate: float = 0.95
    min_weight: float = 0.5

    # --- Baselines ---
    baseline_ttl_seconds: int = 3600
    baseline_min_cases_per_judge: int = 10
    baseline_lookback_years: int = 3
    baseline_timeout_seconds: float = 10.0

    # --- OpenAI ---
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"

    # --- Anthropic ---
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"

    # --- AI augmentation ---
    augmentation_model: str = "claude-sonnet-4-20250514"
    ai_max_documents: int = 60
    ai_max_chars_per_document: int = 4000
    ai_timeout_seconds: float = 60.0

    # --- Logging ---
    log_level: str = "INFO"
    log_format: str = "json"
