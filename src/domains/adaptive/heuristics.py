# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Explainable rule-based adaptation.

The heuristic adjusts difficulty from the most recent performance signal
and the child's sensory preferences, then builds a fixed set of four
weighted activity recommendations:

- Target skill at the adapted difficulty (main focus)
- Emotional regulation micro-breaks
- Social skills consolidation
- Academic variety at a stable load

Every function in this module is pure: the same context always yields
the same recommendation.
"""

from src.domains.adaptive.models import (
    ActivityCategory,
    ActivityRecommendation,
    AdaptiveContext,
    AdaptiveRecommendation,
    DifficultyLevel,
    PerformanceSignal,
    SensoryPreference,
)

# Difficulty thresholds
ESCALATION_SUCCESS_RATE = 0.85
ESCALATION_MAX_ATTEMPTS = 2
DEESCALATION_SUCCESS_RATE = 0.55

# Session-completion thresholds
SESSION_ESCALATION_SUCCESS_RATE = 0.85
SESSION_RESET_SUCCESS_RATE = 0.5

# Base weights
TARGET_WEIGHT = 0.55
REGULATION_WEIGHT = 0.1
REGULATION_NEEDED_WEIGHT = 0.2
SOCIAL_WEIGHT = 0.15
ACADEMIC_WEIGHT = 0.1

# Weight modifiers
SHORT_SESSION_FACTOR = 0.9
LOW_STIMULATION_ADVANCED_FACTOR = 0.8

FRUSTRATION_WARNING = "Observed signs of frustration. Plan a sensory break."


def adjust_difficulty(
    current: DifficultyLevel,
    performance: PerformanceSignal | None,
    sensory_preferences: list[SensoryPreference] | None = None,
) -> DifficultyLevel:
    """Decide the next difficulty level.

    Rules are evaluated in order and the first match wins: escalation,
    then de-escalation, then the low-stimulation comfort override.

    Args:
        current: Difficulty of the current activity.
        performance: Most recent performance signal, if any.
        sensory_preferences: Sensory comfort tags of the child.

    Returns:
        The adjusted difficulty level.
    """
    if performance is None:
        return current

    low_stimulation = SensoryPreference.LOW_STIMULATION in (sensory_preferences or [])

    if (
        performance.success_rate > ESCALATION_SUCCESS_RATE
        and performance.attempts_count <= ESCALATION_MAX_ATTEMPTS
        and not performance.is_frustrated
        and not low_stimulation
    ):
        return current.step_up()

    if performance.success_rate < DEESCALATION_SUCCESS_RATE or performance.is_frustrated:
        return current.step_down()

    if low_stimulation and current == DifficultyLevel.ADVANCED:
        return DifficultyLevel.INTERMEDIATE

    return current


def describe_difficulty_change(current: DifficultyLevel, next_level: DifficultyLevel) -> str:
    """Describe a difficulty transition in one short phrase."""
    if current == next_level:
        return "Difficulty stabilization"
    if next_level == DifficultyLevel.ADVANCED:
        return "Progression to ADVANCED after high success"
    if next_level == DifficultyLevel.INTERMEDIATE and current == DifficultyLevel.BEGINNER:
        return "Gradual increase to sustain engagement"
    return "Temporary decrease to reduce cognitive load"


def build_recommendations(
    context: AdaptiveContext,
    next_difficulty: DifficultyLevel,
) -> list[ActivityRecommendation]:
    """Build the four weighted recommendations for a context.

    Args:
        context: Adaptive context of the request.
        next_difficulty: Difficulty chosen for the target category.

    Returns:
        Recommendations sorted by descending weight. Ties keep their
        original relative order.
    """
    personalization = context.personalization
    regulation_needed = personalization is not None and personalization.regulation_needed
    short_sessions = personalization is not None and personalization.short_sessions_preferred

    entries = [
        (
            context.target_category,
            next_difficulty,
            TARGET_WEIGHT,
            "Continue on target skill at adapted difficulty",
            context.current_activity_id,
        ),
        (
            ActivityCategory.EMOTIONAL_REGULATION,
            DifficultyLevel.BEGINNER,
            REGULATION_NEEDED_WEIGHT if regulation_needed else REGULATION_WEIGHT,
            "Co-regulation micro-breaks to limit overload",
            None,
        ),
        (
            ActivityCategory.SOCIAL_SKILLS,
            DifficultyLevel.BEGINNER,
            SOCIAL_WEIGHT,
            "Consolidation via social generalization",
            None,
        ),
        (
            ActivityCategory.ACADEMIC,
            DifficultyLevel.INTERMEDIATE,
            ACADEMIC_WEIGHT,
            "Vary cognitive demand without raising load",
            None,
        ),
    ]

    recommendations = []
    for category, difficulty, weight, reason, activity_id in entries:
        if short_sessions:
            weight *= SHORT_SESSION_FACTOR
        if context.prefers_low_stimulation and difficulty == DifficultyLevel.ADVANCED:
            weight *= LOW_STIMULATION_ADVANCED_FACTOR
        recommendations.append(
            ActivityRecommendation(
                category=category,
                difficulty=difficulty,
                weight=weight,
                reason=reason,
                suggested_activity_id=activity_id,
            )
        )

    # sorted() is stable, so equal weights keep list order
    return sorted(recommendations, key=lambda rec: rec.weight, reverse=True)


def build_rationale(
    context: AdaptiveContext,
    next_difficulty: DifficultyLevel,
) -> list[str]:
    """Build the explanation lines for a heuristic recommendation."""
    latest = context.latest_performance
    success_rate = latest.success_rate if latest is not None else "N/A"
    attempts = latest.attempts_count if latest is not None else 0

    rationale = [
        f"Recent success rate: {success_rate} ({attempts} attempts)",
        "Heuristic applied: "
        + describe_difficulty_change(context.current_difficulty, next_difficulty),
    ]

    if context.sensory_preferences:
        tags = ", ".join(pref.value for pref in context.sensory_preferences)
        rationale.append(f"Sensory preferences considered: {tags}")

    return rationale


def generate_heuristic_recommendation(context: AdaptiveContext) -> AdaptiveRecommendation:
    """Compute the full heuristic recommendation for a context.

    Args:
        context: Adaptive context of the request.

    Returns:
        Recommendation with the adjusted difficulty, four weighted
        activities, rationale lines and, when the child is frustrated,
        an escalation warning.
    """
    latest = context.latest_performance
    next_difficulty = adjust_difficulty(
        context.current_difficulty,
        latest,
        context.sensory_preferences,
    )

    escalation_warnings = None
    if latest is not None and latest.is_frustrated:
        escalation_warnings = [FRUSTRATION_WARNING]

    return AdaptiveRecommendation(
        child_id=context.child_id,
        next_difficulty=next_difficulty,
        recommendations=build_recommendations(context, next_difficulty),
        rationale=build_rationale(context, next_difficulty),
        escalation_warnings=escalation_warnings,
    )


def adjust_difficulty_for_session(
    current: DifficultyLevel,
    success_rate: float,
    support_level: str | None,
    hints_used: int = 0,
) -> DifficultyLevel:
    """Difficulty rule applied when an activity session is completed.

    Unlike adjust_difficulty, this rule reads the support level and the
    number of hints, and a struggling child is sent straight back to
    BEGINNER instead of one level down.

    Args:
        current: Difficulty of the completed activity.
        success_rate: Share of successful answers in the session (0-1).
        support_level: Adult support given ("none", "minimal", "moderate", "full").
        hints_used: Number of hints requested during the session.

    Returns:
        Difficulty to use for the next session.
    """
    if (
        success_rate >= SESSION_ESCALATION_SUCCESS_RATE
        and support_level == "none"
        and hints_used == 0
        and current != DifficultyLevel.ADVANCED
    ):
        return current.step_up()

    if success_rate < SESSION_RESET_SUCCESS_RATE or support_level in ("moderate", "full"):
        return DifficultyLevel.BEGINNER

    return current
