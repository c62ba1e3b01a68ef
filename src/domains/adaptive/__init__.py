# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive recommendation domain.

Provides the AdaptiveEngine, which decides a child's next difficulty level
and a weighted list of activities from an external ML connector or from
an explainable heuristic.

Example:
    from src.domains.adaptive import AdaptiveEngine, AdaptiveContext

    engine = AdaptiveEngine(settings.adaptive)
    result = await engine.get_recommendations(context)
"""

from src.domains.adaptive.heuristics import (
    adjust_difficulty,
    adjust_difficulty_for_session,
    generate_heuristic_recommendation,
)
from src.domains.adaptive.ml_client import (
    MLConnectorClient,
    MLConnectorError,
    MLConnectorPayloadError,
    MLConnectorResponseError,
    MLConnectorUnavailableError,
)
from src.domains.adaptive.models import (
    ActivityCategory,
    ActivityRecommendation,
    AdaptiveContext,
    AdaptiveEngineResult,
    AdaptiveRecommendation,
    DifficultyLevel,
    MlAdaptiveResponse,
    PerformanceSignal,
    Personalization,
    RecommendationSource,
    SensoryPreference,
)
from src.domains.adaptive.persistence import (
    ChildProfileRepository,
    DatabaseRecommendationSink,
    RecommendationSink,
)
from src.domains.adaptive.service import AdaptiveEngine

__all__ = [
    # Engine
    "AdaptiveEngine",
    # Heuristics
    "adjust_difficulty",
    "adjust_difficulty_for_session",
    "generate_heuristic_recommendation",
    # ML connector
    "MLConnectorClient",
    "MLConnectorError",
    "MLConnectorPayloadError",
    "MLConnectorResponseError",
    "MLConnectorUnavailableError",
    # Models
    "ActivityCategory",
    "ActivityRecommendation",
    "AdaptiveContext",
    "AdaptiveEngineResult",
    "AdaptiveRecommendation",
    "DifficultyLevel",
    "MlAdaptiveResponse",
    "PerformanceSignal",
    "Personalization",
    "RecommendationSource",
    "SensoryPreference",
    # Persistence
    "ChildProfileRepository",
    "DatabaseRecommendationSink",
    "RecommendationSink",
]
