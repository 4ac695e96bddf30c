"""API route aggregation.

All sub-routers are collected into a single api_router that the
app factory mounts under the configured prefix.
"""

from fastapi import APIRouter

from judicial_analytics.api.routes import analytics, health, reports

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(reports.router)
api_router.include_router(analytics.router)
