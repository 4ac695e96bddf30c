"""FastAPI application factory and lifespan management.

create_app() builds the fully configured application: logging,
middleware, exception handlers, routes, and the shared services the
routes depend on (baseline service with its caches, LLM client and
augmentation adapter). Services are created eagerly and hold no open
connections until first use; the lifespan closes them on shutdown.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from judicial_analytics.api.dependencies import get_settings
from judicial_analytics.api.middleware import RequestTracingMiddleware, register_exception_handlers
from judicial_analytics.api.routes import api_router
from judicial_analytics.core.config import Settings
from judicial_analytics.core.logging import setup_logging
from judicial_analytics.services.augmentation.augment import AIAugmentationAdapter
from judicial_analytics.services.augmentation.llm_client import LLMClient
from judicial_analytics.services.augmentation.provider import LLMAnalyticsProvider
from judicial_analytics.services.baseline.cache import InMemoryTTLCache, RedisBaselineCache
from judicial_analytics.services.baseline.service import (
    BaselineService,
    PeerCaseSource,
    StaticPeerCaseSource,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown."""
    settings: Settings = app.state.settings
    logger.info(
        "application_starting",
        version="0.1.0",
        debug=settings.debug,
        redis_enabled=settings.redis_enabled,
        augmentation_enabled=app.state.augmentation_adapter is not None,
    )
    yield
    logger.info("application_shutting_down")
    if app.state.redis is not None:
        await app.state.redis.aclose()


def build_augmentation_adapter(
    settings: Settings,
    llm_client: LLMClient,
) -> AIAugmentationAdapter | None:
    """Primary provider from augmentation_model, OpenAI as the secondary.

    Providers without an API key are skipped; None when neither has one.
    """
    models = [settings.augmentation_model]
    if settings.openai_model != settings.augmentation_model:
        models.append(settings.openai_model)

    providers = [
        LLMAnalyticsProvider(llm_client, settings, model=model)
        for model in models
        if llm_client.is_configured(model)
    ]
    if not providers:
        return None
    secondary = providers[1] if len(providers) > 1 else None
    return AIAugmentationAdapter(
        providers[0],
        secondary,
        max_documents=settings.ai_max_documents,
    )


def create_app(
    settings: Settings | None = None,
    *,
    peer_source: PeerCaseSource | None = None,
) -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    app = FastAPI(
        title="Judicial Pattern Analytics",
        description="Statistically qualified descriptive analytics over judicial case outcomes",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings

    app.state.redis = None
    fast_cache = None
    if settings.redis_enabled:
        import redis.asyncio as aioredis

        app.state.redis = aioredis.from_url(
            settings.redis_url,
            socket_connect_timeout=settings.redis_timeout_seconds,
            socket_timeout=settings.redis_timeout_seconds,
        )
        fast_cache = RedisBaselineCache(app.state.redis)

    app.state.baseline_service = BaselineService(
        settings,
        peer_source if peer_source is not None else StaticPeerCaseSource(),
        fast_cache=fast_cache,
        local_cache=InMemoryTTLCache(),
    )
    app.state.llm_client = LLMClient(settings)
    app.state.augmentation_adapter = build_augmentation_adapter(settings, app.state.llm_client)

    app.add_middleware(RequestTracingMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.api_prefix)

    return app
