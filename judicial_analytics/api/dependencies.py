"""FastAPI dependency injection providers.

Every service the routes use is resolved from app.state through a
Depends() callable defined here, so tests can swap any of them with
app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends, Request

from judicial_analytics.core.config import Settings
from judicial_analytics.services.augmentation.augment import AIAugmentationAdapter
from judicial_analytics.services.augmentation.legacy import LegacyAnalyticsGenerator
from judicial_analytics.services.baseline.service import BaselineService
from judicial_analytics.services.report.builder import ReportBuilder


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()


def get_settings_from_app(request: Request) -> Settings:
    """Retrieve settings stored on the running app instance.

    Preferred over the cached version inside route handlers since it
    respects the settings the app was actually built with.
    """
    settings: Settings = request.app.state.settings
    return settings


def get_baseline_service(request: Request) -> BaselineService:
    service: BaselineService = request.app.state.baseline_service
    return service


def get_augmentation_adapter(request: Request) -> AIAugmentationAdapter | None:
    adapter: AIAugmentationAdapter | None = request.app.state.augmentation_adapter
    return adapter


def get_report_builder(
    settings: Settings = Depends(get_settings_from_app),
    baseline_service: BaselineService = Depends(get_baseline_service),
) -> ReportBuilder:
    """Provide a ReportBuilder wired to the shared baseline service."""
    return ReportBuilder(settings, baseline_service)


def get_legacy_generator(
    adapter: AIAugmentationAdapter | None = Depends(get_augmentation_adapter),
) -> LegacyAnalyticsGenerator:
    return LegacyAnalyticsGenerator(adapter)
