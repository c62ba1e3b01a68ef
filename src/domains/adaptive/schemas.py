# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive API schemas.

Request schemas tighten the domain models at the HTTP boundary (UUID
identifiers, at least one performance signal, known emotional states).
Response schemas wrap engine results in the {status, data} envelope.
"""

from typing import Annotated, Literal
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from src.domains.adaptive.models import (
    AdaptiveContext,
    AdaptiveModel,
    AdaptiveRecommendation,
    PerformanceSignal,
    RecommendationSource,
)

EmotionalState = Literal["calm", "engaged", "frustrated", "anxious", "neutral"]


def _validate_uuid(value: str) -> str:
    """Check that a string is a UUID and return it normalized."""
    try:
        return str(UUID(value))
    except ValueError as e:
        raise ValueError("must be a valid UUID") from e


UUIDString = Annotated[str, AfterValidator(_validate_uuid)]


class PerformanceSignalRequest(PerformanceSignal):
    """Performance signal as accepted by the API."""

    emotional_state: EmotionalState | None = None


class AdaptiveContextRequest(AdaptiveContext):
    """Request body for POST /api/adaptive/recommendations."""

    child_id: UUIDString
    current_activity_id: UUIDString | None = None
    recent_performance: list[PerformanceSignalRequest] = Field(min_length=1)


class AdaptiveRecommendationData(AdaptiveModel):
    """Payload of a successful recommendation response.

    Attributes:
        recommendation: The recommendation served.
        source: Path that produced this recommendation.
        ml_active: Whether the ML connector is configured. May be true
            while source is "heuristic" when the connector failed.
    """

    recommendation: AdaptiveRecommendation
    source: RecommendationSource
    ml_active: bool


class AdaptiveRecommendationResponse(BaseModel):
    """Envelope of a successful recommendation response."""

    status: Literal["success"] = "success"
    data: AdaptiveRecommendationData


class ErrorResponse(BaseModel):
    """Envelope of an error response."""

    status: Literal["error"] = "error"
    message: str
    errors: list[dict[str, str]] | None = None
