"""Baseline cache port and its two adapters.

BaselineService depends only on the BaselineCache protocol. The process-
local InMemoryTTLCache is the default; RedisBaselineCache is the shared
fast cache when Redis is configured. Backend failures surface as
CacheError so the service can log them and carry on.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

import structlog
from pydantic import ValidationError

from judicial_analytics.core.exceptions import CacheError
from judicial_analytics.models.domain import BaselineScope
from judicial_analytics.models.report import Baseline

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

KEY_PREFIX = "analytics:baseline"


def baseline_cache_key(scope: BaselineScope, scope_id: str) -> str:
    return f"{KEY_PREFIX}:{scope}:{scope_id}"


class BaselineCache(Protocol):
    """get/set-with-TTL storage for computed baselines."""

    async def get(self, key: str) -> Baseline | None: ...

    async def set(self, key: str, value: Baseline, ttl_seconds: int) -> None: ...


class InMemoryTTLCache:
    """Process-local TTL map. Expired entries are evicted on read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, Baseline]] = {}

    async def get(self, key: str) -> Baseline | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Baseline, ttl_seconds: int) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisBaselineCache:
    """Baselines stored as JSON strings in Redis with a server-side TTL."""

    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    async def get(self, key: str) -> Baseline | None:
        try:
            raw = await self._redis.get(key)
        except Exception as exc:
            raise CacheError("Redis read failed", details={"key": key, "error": str(exc)}) from exc
        if raw is None:
            return None
        try:
            return Baseline.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("baseline_cache_entry_invalid", key=key, error=str(exc))
            return None

    async def set(self, key: str, value: Baseline, ttl_seconds: int) -> None:
        try:
            await self._redis.set(key, value.model_dump_json(), ex=ttl_seconds)
        except Exception as exc:
            raise CacheError("Redis write failed", details={"key": key, "error": str(exc)}) from exc
