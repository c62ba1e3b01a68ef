# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import time
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field
from sqlalchemy import text

from src import __version__
from src.core.config import get_settings
from src.infrastructure.database.connection import get_engine, is_database_initialized

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class ComponentsHealth(BaseModel):
    """All components health status."""
    database: ComponentHealth | None = None
    ml_connector: ComponentHealth | None = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    ml_active: bool = Field(description="Whether the ML connector is configured")
    components: ComponentsHealth = Field(default_factory=ComponentsHealth)


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")
    checks: dict[str, Any] = Field(description="Individual check results")


async def check_database() -> ComponentHealth:
    """Check PostgreSQL database connection."""
    if not is_database_initialized():
        return ComponentHealth(status="disabled", message="Database not initialized")

    try:
        engine = get_engine()
        start = time.time()

        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        latency = (time.time() - start) * 1000
        return ComponentHealth(status="healthy", latency_ms=round(latency, 2))
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        return ComponentHealth(status="unhealthy", message=str(e))


def check_ml_connector(request: Request) -> ComponentHealth:
    """Report the configured ML connector mode.

    The connector is not called here; a failing connector only degrades
    recommendations to the heuristic.
    """
    engine = getattr(request.app.state, "adaptive_engine", None)
    if engine is None:
        return ComponentHealth(status="unavailable", message="Adaptive engine not initialized")
    if engine.is_ml_active():
        return ComponentHealth(status="configured", message=engine.settings.ml_endpoint)
    return ComponentHealth(status="disabled", message="Heuristic mode")


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check if the API is healthy with component details.

    The database is optional: a disabled database does not make the
    service unhealthy, since recommendations do not depend on it.

    Returns:
        HealthResponse with detailed status.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    uptime = int(time.time() - _server_start_time)

    db_health = await check_database()
    ml_health = check_ml_connector(request)

    if db_health.status == "unhealthy" or ml_health.status == "unavailable":
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthResponse(
        status=overall_status,
        timestamp=now,
        version=__version__,
        environment=settings.environment,
        uptime_seconds=uptime,
        ml_active=ml_health.status == "configured",
        components=ComponentsHealth(database=db_health, ml_connector=ml_health),
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Check if the API is ready to accept traffic.

    Returns:
        ReadinessResponse with individual check results.
    """
    checks: dict[str, Any] = {}

    ready = getattr(request.app.state, "adaptive_engine", None) is not None
    checks["adaptive_engine"] = {"status": "ready" if ready else "unavailable"}

    db_health = await check_database()
    checks["database"] = {"status": db_health.status, "latency_ms": db_health.latency_ms}

    return ReadinessResponse(ready=ready, checks=checks)
