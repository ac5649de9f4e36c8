"""Application middleware: rate limiting, CORS, logging, error rendering."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from compliance_core.config import Settings
from compliance_core.errors import ComplianceError
from compliance_core.models.base import utcnow

logger = structlog.get_logger()


def get_limiter(settings: Settings) -> Limiter:
    """Create a rate limiter instance."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit_default],
    )


def configure_cors(app: FastAPI, settings: Settings) -> None:
    """Add CORS middleware to the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-RateLimit-Remaining"],
    )


def configure_rate_limiting(app: FastAPI, settings: Settings) -> None:
    """Add rate limiting to the application."""
    limiter = get_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)


async def logging_middleware(request: Request, call_next) -> Response:
    """Structured logging middleware: logs every request."""
    start_time = time.monotonic()
    response = await call_next(request)
    duration_ms = round((time.monotonic() - start_time) * 1000, 2)

    logger.info(
        "http_request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
        client_ip=request.client.host if request.client else "unknown",
    )

    return response


def configure_request_logging(app: FastAPI) -> None:
    app.middleware("http")(logging_middleware)


async def compliance_error_handler(request: Request, exc: ComplianceError) -> JSONResponse:
    """Render a ComplianceError with the HTTP status of its kind."""
    logger.info(
        "compliance_error",
        path=request.url.path,
        kind=exc.kind.value,
        code=exc.code,
        status_code=exc.status_code,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.code,
            "message": exc.message,
            "kind": exc.kind.value,
            "statusCode": exc.status_code,
            "timestamp": utcnow().isoformat(),
        },
    )


def configure_error_handling(app: FastAPI) -> None:
    app.add_exception_handler(ComplianceError, compliance_error_handler)


def configure_structured_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown handlers."""
    settings = app.state.settings
    configure_structured_logging(settings)

    logger.info(
        "application_starting",
        version=settings.app_version,
        environment=settings.environment,
        repository=type(app.state.repository).__name__,
    )

    yield

    logger.info("application_shutting_down")
