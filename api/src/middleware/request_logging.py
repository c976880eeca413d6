"""
Request logging, HTTP metrics and security header middleware.
"""

import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from shared.logging import bind_context, clear_context
from shared.metrics import HttpMetrics

logger = structlog.get_logger(__name__)

UNLOGGED_PATHS = ("/health", "/ready", "/metrics")
UNMATCHED_ENDPOINT = "unmatched"


def route_template(request: Request) -> str:
    """Metric label for a request: the matched route path, never the raw URL."""
    partial = UNMATCHED_ENDPOINT
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match is Match.FULL:
            return getattr(route, "path", UNMATCHED_ENDPOINT)
        if match is Match.PARTIAL and partial == UNMATCHED_ENDPOINT:
            partial = getattr(route, "path", UNMATCHED_ENDPOINT)
    return partial


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging, correlation ids and HTTP metrics."""

    def __init__(self, app, metrics: HttpMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        endpoint = route_template(request)
        quiet = path.endswith(UNLOGGED_PATHS)

        clear_context()
        bind_context(correlation_id=correlation_id)

        self.metrics.requests_in_progress.labels(method=method, endpoint=endpoint).inc()
        start_time = time.perf_counter()

        if not quiet:
            logger.info("request_started", method=method, path=path, client_ip=client_ip)

        try:
            response = await call_next(request)

            duration = time.perf_counter() - start_time
            self.metrics.requests_total.labels(
                method=method,
                endpoint=endpoint,
                status=response.status_code
            ).inc()
            self.metrics.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

            if not quiet:
                logger.info(
                    "request_completed",
                    method=method,
                    path=path,
                    status_code=response.status_code,
                    duration=f"{duration:.3f}s",
                )

            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise

        finally:
            self.metrics.requests_in_progress.labels(method=method, endpoint=endpoint).dec()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to responses."""

    def __init__(self, app, require_https: bool = False, hsts_max_age: int = 31536000):
        super().__init__(app)
        self.require_https = require_https
        self.hsts_max_age = hsts_max_age

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if self.require_https:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.hsts_max_age}; includeSubDomains"
            )

        return response
