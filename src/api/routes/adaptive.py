# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Adaptive recommendation endpoints.

Endpoints:
    POST /api/adaptive/recommendations - Next difficulty and weighted activities
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.api.dependencies import Engine, Profiles
from src.api.middleware.rate_limit import adaptive_limit, limiter
from src.domains.adaptive import ChildProfileRepository
from src.domains.adaptive.schemas import (
    AdaptiveContextRequest,
    AdaptiveRecommendationData,
    AdaptiveRecommendationResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

RECOMMENDATION_ERROR_MESSAGE = "Unable to generate an adaptive recommendation"


async def _with_stored_preferences(
    context: AdaptiveContextRequest,
    profiles: ChildProfileRepository | None,
) -> AdaptiveContextRequest:
    """Fill sensory preferences from the child profile when not sent.

    An explicit value, including an empty list, is kept as sent. Profile
    lookup failures are logged and the request proceeds without them.
    """
    if profiles is None or "sensory_preferences" in context.model_fields_set:
        return context

    try:
        stored = await profiles.get_sensory_preferences(context.child_id)
    except Exception as e:
        logger.warning(
            "Failed to load sensory preferences for child %s: %s",
            context.child_id,
            str(e),
        )
        return context

    if stored is None:
        return context
    return context.model_copy(update={"sensory_preferences": stored})


@router.post(
    "/recommendations",
    response_model=AdaptiveRecommendationResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
    summary="Get adaptive recommendations",
    responses={
        400: {"model": ErrorResponse, "description": "Validation failed"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Recommendation failed"},
    },
)
@limiter.limit(adaptive_limit)
async def get_recommendations(
    request: Request,
    context: AdaptiveContextRequest,
    engine: Engine,
    profiles: Profiles,
) -> AdaptiveRecommendationResponse | JSONResponse:
    """Get the next difficulty and weighted activities for a child.

    The recommendation comes from the ML connector when it is active and
    answers correctly, and from the heuristic otherwise.

    Args:
        request: HTTP request (used by the rate limiter).
        context: Validated adaptive context.
        engine: Adaptive engine.
        profiles: Child profile repository, if a database is available.

    Returns:
        Success envelope with the recommendation, or a 500 error envelope.
    """
    context = await _with_stored_preferences(context, profiles)

    try:
        result = await engine.get_recommendations(context)
    except Exception:
        logger.exception("Adaptive recommendation failed for child %s", context.child_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(message=RECOMMENDATION_ERROR_MESSAGE).model_dump(exclude_none=True),
        )

    return AdaptiveRecommendationResponse(
        data=AdaptiveRecommendationData(
            recommendation=result.recommendation,
            source=result.source,
            ml_active=engine.is_ml_active(),
        ),
    )
