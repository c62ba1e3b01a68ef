# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Storage collaborators of the adaptive engine.

- RecommendationSink: receives every served recommendation for audit.
- DatabaseRecommendationSink: writes them to adaptive_recommendations.
- ChildProfileRepository: reads stored sensory preferences of a child.

The engine treats the sink as best-effort and works without it.
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.adaptive.models import (
    AdaptiveContext,
    AdaptiveRecommendation,
    RecommendationSource,
    SensoryPreference,
)
from src.infrastructure.database.connection import get_session
from src.infrastructure.database.models import AdaptiveRecommendationLog, ChildProfile

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class RecommendationSink(Protocol):
    """Anything able to store a served recommendation."""

    async def record(
        self,
        context: AdaptiveContext,
        recommendation: AdaptiveRecommendation,
        source: RecommendationSource,
        latency_ms: float,
    ) -> None:
        """Store one served recommendation."""
        ...


def build_log_payload(
    context: AdaptiveContext,
    recommendation: AdaptiveRecommendation,
    source: RecommendationSource,
    latency_ms: float,
) -> dict[str, Any]:
    """Build the row stored for a served recommendation."""
    return {
        "child_id": context.child_id,
        "source": source.value,
        "requested_context": context.model_dump(mode="json", by_alias=True),
        "recommendation": recommendation.model_dump(mode="json", by_alias=True, exclude_none=True),
        "latency_ms": round(latency_ms, 3),
    }


class DatabaseRecommendationSink:
    """Recommendation sink backed by the adaptive_recommendations table."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    async def record(
        self,
        context: AdaptiveContext,
        recommendation: AdaptiveRecommendation,
        source: RecommendationSource,
        latency_ms: float,
    ) -> None:
        payload = build_log_payload(context, recommendation, source, latency_ms)
        async with self._session_factory() as session:
            session.add(AdaptiveRecommendationLog(**payload))


class ChildProfileRepository:
    """Read access to stored child accessibility profiles."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self._session_factory = session_factory

    async def get_sensory_preferences(self, child_id: str) -> list[SensoryPreference] | None:
        """Get the stored sensory preferences of a child.

        Unknown tags in storage are skipped.

        Args:
            child_id: Child identifier.

        Returns:
            Stored preferences, or None when the child has no profile.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                select(ChildProfile.sensory_preferences).where(ChildProfile.child_id == child_id)
            )
            stored = result.scalar_one_or_none()

        if stored is None:
            return None

        preferences = []
        for tag in stored:
            try:
                preferences.append(SensoryPreference(tag))
            except ValueError:
                logger.warning("Ignoring unknown sensory preference %r for child %s", tag, child_id)
        return preferences
