"""Compliance Analysis Core: FastAPI application factory."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from compliance_core.config import Settings, get_settings
from compliance_core.middleware import (
    configure_cors,
    configure_error_handling,
    configure_rate_limiting,
    configure_request_logging,
    lifespan,
)
from compliance_core.routers import assessments, health, vendors
from compliance_core.sql_store import SqlStore
from compliance_core.store import data_store


def build_repository(settings: Settings) -> Any:
    """Pick the repository for the configured storage backend."""
    if settings.storage_backend == "sql":
        return SqlStore.from_url(settings.database_url)
    return data_store


def create_app(settings: Settings | None = None, repository: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``repository`` must satisfy the assessment, vendor, subscription and
    credits interfaces; it defaults to the configured backend.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Risk/gap analysis and vendor matching for compliance assessments",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Store settings and repository on app state
    app.state.settings = settings
    app.state.repository = repository if repository is not None else build_repository(settings)

    # Middleware
    configure_cors(app, settings)
    configure_rate_limiting(app, settings)
    configure_request_logging(app)
    configure_error_handling(app)

    # Routers
    app.include_router(health.router)
    app.include_router(assessments.router, prefix=settings.api_prefix)
    app.include_router(vendors.router, prefix=settings.api_prefix)

    return app


# Default app instance for uvicorn
app = create_app()
