"""
FastAPI application entry point for the Physical Name Generator API.

This module provides the main FastAPI application with:
- Name conversion endpoints under the configured context root
- Dictionary management endpoints
- Health and readiness endpoints
- Request logging, Prometheus metrics and optional OpenTelemetry tracing
- CORS, security headers and CSRF verification
- Graceful startup and shutdown
"""

import time
import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry

from api.src.config import get_settings, Settings
from api.src.middleware.csrf import CsrfProtection, CsrfValidationError
from api.src.middleware.request_logging import RequestLoggingMiddleware, SecurityHeadersMiddleware
from api.src.routers import generate, pname
from api.src.services.dictionary_service import DictionaryService
from engine.src.errors import PnameError
from shared.logging import configure_logging
from shared.metrics import get_metrics_handler, setup_metrics
from shared.models import HealthStatus, ServiceInfo
from shared.tracing import configure_tracing

logger = structlog.get_logger(__name__)


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - OpenTelemetry tracing setup
    - Initial dictionary load
    - Graceful shutdown
    """
    settings: Settings = app.state.settings
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        context_root=settings.context_root or "/",
    )

    try:
        if settings.tracing_enabled:
            logger.info("initializing_tracing", otlp_endpoint=settings.tracing_otlp_endpoint)
            configure_tracing(
                service_name=settings.app_name,
                service_version=settings.app_version,
                otlp_endpoint=settings.tracing_otlp_endpoint,
                sampling_rate=settings.tracing_sample_rate,
            )

        app.state.dictionary_service.reload()
        app.state.started_at = time.time()

        logger.info("application_started", app_name=settings.app_name)

        yield

    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    finally:
        logger.info("application_shutting_down")
        if settings.tracing_enabled:
            provider = trace.get_tracer_provider()
            if hasattr(provider, "shutdown"):
                provider.shutdown()
        logger.info("application_shutdown_complete")


# ============================================================================
# Exception Handlers
# ============================================================================

async def pname_exception_handler(request: Request, exc: PnameError):
    """Handle conversion and dictionary errors as bad requests."""
    logger.warning(
        "conversion_rejected",
        path=request.url.path,
        error_code=exc.error_code,
        detail=exc.message,
    )
    metrics = getattr(request.app.state, "conversion_metrics", None)
    if metrics is not None:
        metrics.conversion_failures.labels(error_type=exc.error_code).inc()
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


async def csrf_exception_handler(request: Request, exc: CsrfValidationError):
    """Handle CSRF rejections."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


def _jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _jsonable_errors(exc)}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# Application Factory
# ============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Every application gets its own Prometheus registry and dictionary holder
    so several instances can coexist (e.g. in tests).

    Args:
        settings: Settings to use; the cached environment settings when None

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Converts logical names into physical names rendered in one of "
            "six identifier casing conventions."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    registry = CollectorRegistry()
    http_metrics, conversion_metrics = setup_metrics(registry)

    app.state.settings = settings
    app.state.registry = registry
    app.state.conversion_metrics = conversion_metrics
    app.state.csrf = CsrfProtection(settings)
    app.state.started_at = time.time()
    app.state.dictionary_service = DictionaryService(
        path=settings.dictionary_path,
        fmt=settings.dictionary_format,
        delimiter=settings.dictionary_delimiter,
        encoding=settings.dictionary_encoding,
        metrics=conversion_metrics,
    )

    # ------------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------------

    if settings.cors_enabled:
        logger.info("configuring_cors", origins=settings.cors_origins)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=settings.cors_allow_methods,
            allow_headers=settings.cors_allow_headers,
        )

    app.add_middleware(RequestLoggingMiddleware, metrics=http_metrics)

    if settings.security_headers_enabled:
        app.add_middleware(
            SecurityHeadersMiddleware,
            require_https=settings.security_require_https,
            hsts_max_age=settings.security_hsts_max_age,
        )

    if settings.tracing_enabled:
        FastAPIInstrumentor.instrument_app(app)

    # ------------------------------------------------------------------------
    # Exception handlers
    # ------------------------------------------------------------------------

    app.add_exception_handler(PnameError, pname_exception_handler)
    app.add_exception_handler(CsrfValidationError, csrf_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # ------------------------------------------------------------------------
    # Routers
    # ------------------------------------------------------------------------

    app.include_router(pname.router, prefix=settings.context_root)
    app.include_router(generate.router, prefix=settings.context_root)

    # ------------------------------------------------------------------------
    # Health, readiness and metrics
    # ------------------------------------------------------------------------

    @app.get("/health", tags=["Health"], response_model=ServiceInfo)
    async def health_check(request: Request) -> ServiceInfo:
        """
        Health check endpoint.

        Returns basic health status without checking components.
        """
        return ServiceInfo(
            service_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            status=HealthStatus.HEALTHY,
            uptime_seconds=round(time.time() - request.app.state.started_at, 3),
        )

    @app.get("/ready", tags=["Health"], response_model=ServiceInfo)
    async def readiness_check(request: Request):
        """
        Readiness check endpoint.

        The service is ready once the configured dictionary (if any) is loaded.
        """
        service: DictionaryService = request.app.state.dictionary_service
        if service.path and not service.has_dictionary():
            dictionary_status = HealthStatus.DEGRADED
        else:
            dictionary_status = HealthStatus.HEALTHY

        info = ServiceInfo(
            service_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
            status=dictionary_status,
            uptime_seconds=round(time.time() - request.app.state.started_at, 3),
            dependencies={"dictionary": dictionary_status},
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=info.model_dump(mode="json"))

    if settings.metrics_enabled:
        metrics_handler = get_metrics_handler(registry)

        @app.get("/metrics", tags=["Monitoring"], response_class=PlainTextResponse)
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=metrics_handler(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()


# ============================================================================
# Application Entry Point
# ============================================================================

def run() -> None:
    """Run the application with Uvicorn."""
    settings = get_settings()
    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "api.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()
