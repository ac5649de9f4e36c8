"""Schemas for the liveness and readiness probes."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ServiceHealth(BaseModel):
    """Result of one dependency check (the app itself or the repository)."""

    service: str
    status: Literal["healthy", "unhealthy"]
    latency_ms: float | None = Field(default=None, ge=0.0)
    details: str | None = None


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    environment: str
    services: list[ServiceHealth]
