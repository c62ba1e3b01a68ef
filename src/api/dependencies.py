# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Build and release the adaptive engine and its collaborators
- Get the adaptive engine for a request
- Get the child profile repository, when a database is available

Example:
    @router.post("/recommendations")
    async def get_recommendations(
        engine: Engine,
        profiles: Profiles,
    ):
        ...
"""

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status

from src.core.config import Settings
from src.domains.adaptive import (
    AdaptiveEngine,
    ChildProfileRepository,
    DatabaseRecommendationSink,
)
from src.infrastructure.database.connection import (
    check_database_connection,
    close_database,
    init_database,
    is_database_initialized,
)

logger = logging.getLogger(__name__)


async def init_services(app: FastAPI, settings: Settings) -> None:
    """Initialize the database and the adaptive engine on app.state.

    A database failure is logged and the engine is still built, without
    persistence or stored profiles.

    Args:
        app: FastAPI application.
        settings: Application settings.
    """
    if settings.database.enabled:
        try:
            await init_database(settings)
            logger.info("Database connection initialized")
        except Exception as e:
            logger.warning("Failed to initialize database connection: %s", str(e))

        if is_database_initialized() and not await check_database_connection():
            logger.warning("Database is not reachable yet, recommendation writes will fail until it is")

    sink = None
    profiles = None
    if is_database_initialized():
        profiles = ChildProfileRepository()
        if settings.adaptive.persist_recommendations:
            sink = DatabaseRecommendationSink()

    app.state.adaptive_engine = AdaptiveEngine(settings.adaptive, sink=sink)
    app.state.child_profiles = profiles

    logger.info(
        "Adaptive engine ready (ml_active=%s, persistence=%s)",
        app.state.adaptive_engine.is_ml_active(),
        sink is not None,
    )


async def close_services(app: FastAPI) -> None:
    """Release the adaptive engine and the database pool."""
    engine: AdaptiveEngine | None = getattr(app.state, "adaptive_engine", None)
    if engine is not None:
        await engine.close()
        app.state.adaptive_engine = None

    await close_database()


def get_adaptive_engine(request: Request) -> AdaptiveEngine:
    """Get the adaptive engine built at startup.

    Args:
        request: HTTP request.

    Returns:
        AdaptiveEngine.

    Raises:
        HTTPException: If the engine has not been initialized.
    """
    engine = getattr(request.app.state, "adaptive_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Adaptive engine not initialized",
        )
    return engine


def get_child_profile_repository(request: Request) -> ChildProfileRepository | None:
    """Get the child profile repository, or None without a database."""
    return getattr(request.app.state, "child_profiles", None)


# Type aliases for cleaner dependency injection
Engine = Annotated[AdaptiveEngine, Depends(get_adaptive_engine)]
Profiles = Annotated[ChildProfileRepository | None, Depends(get_child_profile_repository)]
