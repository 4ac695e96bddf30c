"""Request tracing middleware and structured exception handlers.

Each request is tagged with an ID (X-Request-ID or a fresh UUID) bound to
structlog contextvars, so every log line a report build emits carries it.
Request counts and latencies go to Prometheus. AnalyticsError subclasses
become structured JSON errors; stack traces never reach the client.
"""

import time
import uuid
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from judicial_analytics.core.exceptions import (
    AnalyticsError,
    ContractViolationError,
    RateLimitError,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

REQUEST_COUNT = Counter(
    "analytics_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "analytics_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)


def _endpoint_label(request: Request) -> str:
    """Route template when matched, so path parameters don't explode cardinality."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else request.url.path


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, bind structured log context, and record metrics."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        logger.info("request_started", method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_seconds=round(time.perf_counter() - start, 4),
            )
            response = JSONResponse(
                status_code=500,
                content=_payload(
                    "internal_server_error", "An unexpected error occurred.", {}, request_id
                ),
            )

        duration = time.perf_counter() - start
        endpoint = _endpoint_label(request)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(duration)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_seconds=round(duration, 4),
        )
        return response


# ---------------------------------------------------------------------------
# Exception → JSON response handlers
# ---------------------------------------------------------------------------


def _request_id() -> str | None:
    ctx: dict[str, str] = structlog.contextvars.get_contextvars()
    return ctx.get("request_id")


def _payload(
    error: str,
    message: str,
    details: dict[str, Any],
    request_id: str | None = None,
) -> dict[str, Any]:
    return {
        "error": error,
        "message": message,
        "details": details,
        "request_id": request_id if request_id is not None else _request_id(),
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Attach structured error handlers to the app."""

    @app.exception_handler(ContractViolationError)
    async def _contract(request: Request, exc: ContractViolationError) -> JSONResponse:
        logger.warning("contract_violation", message=exc.message, details=exc.details)
        return JSONResponse(
            status_code=422,
            content=_payload("contract_violation", exc.message, exc.details),
        )

    @app.exception_handler(RateLimitError)
    async def _rate_limit(request: Request, exc: RateLimitError) -> JSONResponse:
        headers: dict[str, str] = {}
        if exc.retry_after is not None:
            headers["Retry-After"] = str(int(exc.retry_after))
        return JSONResponse(
            status_code=429,
            content=_payload("rate_limit_exceeded", exc.message, exc.details),
            headers=headers,
        )

    @app.exception_handler(AnalyticsError)
    async def _analytics(request: Request, exc: AnalyticsError) -> JSONResponse:
        logger.error(
            "analytics_error",
            error_type=type(exc).__name__,
            message=exc.message,
            details=exc.details,
        )
        return JSONResponse(
            status_code=500,
            content=_payload(type(exc).__name__, exc.message, exc.details),
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", error_type=type(exc).__name__)
        return JSONResponse(
            status_code=500,
            content=_payload("internal_server_error", "An unexpected error occurred.", {}),
        )
