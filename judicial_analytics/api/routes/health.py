"""Health check and Prometheus metrics endpoints.

/health probes Redis (the only infrastructure dependency) with a PING
and reports per-probe latency. Redis being disabled is reported as
not_configured, which leaves the service healthy: baselines then live in
the process-local cache only.
"""

import time

import structlog
from fastapi import APIRouter, Depends
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from judicial_analytics.api.dependencies import get_settings_from_app
from judicial_analytics.core.config import Settings
from judicial_analytics.models.responses import DependencyHealth, HealthResponse

router = APIRouter(tags=["observability"])
logger: structlog.stdlib.BoundLogger = structlog.get_logger()

_APP_VERSION = "0.1.0"
_start_time: float = time.time()


async def _probe_redis(settings: Settings) -> DependencyHealth:
    """Attempt a PING against Redis."""
    if not settings.redis_enabled:
        return DependencyHealth(name="redis", status="not_configured", details="redis disabled")

    start = time.perf_counter()
    try:
        import redis.asyncio as aioredis

        client = aioredis.from_url(
            settings.redis_url, socket_connect_timeout=settings.redis_timeout_seconds
        )
        try:
            # redis-py stubs expose ping() as Awaitable[bool] | bool;
            # the async client always returns a coroutine at runtime.
            await client.ping()  # type: ignore[misc]
        finally:
            await client.aclose()
        latency = (time.perf_counter() - start) * 1000
        return DependencyHealth(name="redis", status="healthy", latency_ms=round(latency, 2))
    except Exception as exc:
        latency = (time.perf_counter() - start) * 1000
        logger.warning("redis_probe_failed", error=str(exc))
        return DependencyHealth(
            name="redis",
            status="unhealthy",
            latency_ms=round(latency, 2),
            details=str(exc)[:200],
        )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings_from_app),
) -> HealthResponse:
    """Check API and Redis health."""
    dependencies = [await _probe_redis(settings)]

    if any(d.status == "unhealthy" for d in dependencies):
        # Redis backs only the fast cache
        status = "degraded"
    else:
        status = "healthy"

    return HealthResponse(
        status=status,
        version=_APP_VERSION,
        uptime_seconds=round(time.time() - _start_time, 2),
        dependencies=dependencies,
    )


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
