# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive engine service.

The engine decides the next difficulty level and a weighted list of
activities for a child. It first tries the external ML connector when it
is enabled, and falls back to the explainable heuristic otherwise or when
the connector fails. Every served recommendation is handed to an optional
sink for audit.

Flow:
    1. ML connector (if enabled and configured)
    2. Heuristic (if ML is inactive or failed)
    3. Best-effort persistence
    4. Result with the source that produced it

The engine holds only read-only configuration and its collaborators, so
one instance can serve concurrent requests.

Example:
    engine = AdaptiveEngine(settings.adaptive, sink=DatabaseRecommendationSink())
    result = await engine.get_recommendations(context)
    print(result.source, result.recommendation.next_difficulty)
"""

import logging
import time

from src.core.config.settings import AdaptiveSettings
from src.domains.adaptive import metrics
from src.domains.adaptive.heuristics import generate_heuristic_recommendation
from src.domains.adaptive.ml_client import MLConnectorClient, MLConnectorError
from src.domains.adaptive.models import (
    AdaptiveContext,
    AdaptiveEngineResult,
    AdaptiveRecommendation,
    MlAdaptiveResponse,
    RecommendationSource,
)
from src.domains.adaptive.persistence import RecommendationSink

logger = logging.getLogger(__name__)

ML_DEFAULT_RATIONALE = "ML connector active"


class AdaptiveEngine:
    """Recommendation engine combining the ML connector and the heuristic.

    Attributes:
        settings: Adaptive settings (ML flag, endpoint, key, timeout).
    """

    def __init__(
        self,
        settings: AdaptiveSettings,
        ml_client: MLConnectorClient | None = None,
        sink: RecommendationSink | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Adaptive settings.
            ml_client: Connector client. Built from settings when ML is
                active and none is given.
            sink: Optional store for served recommendations.
        """
        self.settings = settings
        if ml_client is None and settings.ml_active:
            ml_client = MLConnectorClient(settings)
        self._ml_client = ml_client
        self._sink = sink

    def is_ml_active(self) -> bool:
        """Check if the ML connector is enabled and has an endpoint.

        This reports the configured mode. A given result may still come
        from the heuristic when the connector fails.
        """
        return self.settings.ml_active

    async def get_recommendations(self, context: AdaptiveContext) -> AdaptiveEngineResult:
        """Produce a recommendation for a context.

        ML connector failures and persistence failures are logged and never
        raised.

        Args:
            context: Adaptive context, validated by the caller.

        Returns:
            The recommendation and the source that produced it.
        """
        start = time.perf_counter()

        recommendation: AdaptiveRecommendation | None = None
        source = RecommendationSource.HEURISTIC

        if self.is_ml_active() and self._ml_client is not None:
            recommendation = await self._try_ml(context)
            if recommendation is not None:
                source = RecommendationSource.ML

        if recommendation is None:
            recommendation = self.generate_heuristic_recommendation(context)

        latency_ms = (time.perf_counter() - start) * 1000

        metrics.RECOMMENDATIONS_TOTAL.labels(source=source.value).inc()
        metrics.RECOMMENDATION_DURATION.labels(source=source.value).observe(latency_ms / 1000)

        await self._persist(context, recommendation, source, latency_ms)

        logger.info(
            "Adaptive recommendation for child %s: %s -> %s (source=%s, %.1f ms)",
            context.child_id,
            context.current_difficulty.value,
            recommendation.next_difficulty.value,
            source.value,
            latency_ms,
        )

        return AdaptiveEngineResult(recommendation=recommendation, source=source)

    def generate_heuristic_recommendation(self, context: AdaptiveContext) -> AdaptiveRecommendation:
        """Compute the heuristic recommendation for a context."""
        return generate_heuristic_recommendation(context)

    @staticmethod
    def normalize_ml_response(response: MlAdaptiveResponse, child_id: str) -> AdaptiveRecommendation:
        """Map a connector response onto an AdaptiveRecommendation.

        The recommendation list is kept as sent, without reordering or
        reweighting.

        Args:
            response: Validated connector response.
            child_id: Child the recommendation is for.

        Returns:
            Recommendation built from the connector answer.
        """
        return AdaptiveRecommendation(
            child_id=child_id,
            next_difficulty=response.next_difficulty,
            recommendations=list(response.recommendations),
            rationale=list(response.explanation) if response.explanation else [ML_DEFAULT_RATIONALE],
        )

    async def _try_ml(self, context: AdaptiveContext) -> AdaptiveRecommendation | None:
        """Call the ML connector, returning None when it fails."""
        assert self._ml_client is not None

        try:
            response = await self._ml_client.fetch_recommendation(context)
        except MLConnectorError as e:
            logger.warning(
                "ML connector failed, falling back to heuristic: %s",
                e.message,
                extra={"child_id": context.child_id, "details": e.details},
            )
            metrics.ML_FALLBACKS_TOTAL.labels(error_type=type(e).__name__).inc()
            return None
        except Exception as e:
            logger.exception("Unexpected ML connector error, falling back to heuristic")
            metrics.ML_FALLBACKS_TOTAL.labels(error_type=type(e).__name__).inc()
            return None

        return self.normalize_ml_response(response, context.child_id)

    async def _persist(
        self,
        context: AdaptiveContext,
        recommendation: AdaptiveRecommendation,
        source: RecommendationSource,
        latency_ms: float,
    ) -> None:
        """Hand the result to the sink. Failures are logged and swallowed."""
        if self._sink is None:
            return

        try:
            await self._sink.record(context, recommendation, source, latency_ms)
        except Exception as e:
            metrics.PERSISTENCE_FAILURES_TOTAL.inc()
            logger.warning(
                "Failed to persist adaptive recommendation for child %s: %s",
                context.child_id,
                str(e),
            )

    async def close(self) -> None:
        """Release the connector HTTP client."""
        if self._ml_client is not None:
            await self._ml_client.close()
