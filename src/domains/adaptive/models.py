# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the adaptive domain.

This module defines Pydantic models and enums for:
- Activity categories, difficulty levels and sensory preferences
- The adaptive context sent by callers
- Recommendations produced by the heuristic or the ML connector

Field names are snake_case in Python and camelCase on the wire
(childId, currentDifficulty, ...). Models accept both forms on input.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ActivityCategory(str, Enum):
    """Skill areas an activity can target."""

    SOCIAL_SKILLS = "SOCIAL_SKILLS"
    COMMUNICATION = "COMMUNICATION"
    ACADEMIC = "ACADEMIC"
    AUTONOMY = "AUTONOMY"
    EMOTIONAL_REGULATION = "EMOTIONAL_REGULATION"


class DifficultyLevel(str, Enum):
    """Activity difficulty levels, ordered from easiest to hardest."""

    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"

    @property
    def rank(self) -> int:
        """Position of the level on the ascending scale (0-based)."""
        return _DIFFICULTY_ORDER.index(self)

    def step_up(self) -> "DifficultyLevel":
        """Next harder level, capped at ADVANCED."""
        return _DIFFICULTY_ORDER[min(self.rank + 1, len(_DIFFICULTY_ORDER) - 1)]

    def step_down(self) -> "DifficultyLevel":
        """Next easier level, floored at BEGINNER."""
        return _DIFFICULTY_ORDER[max(self.rank - 1, 0)]


_DIFFICULTY_ORDER: tuple[DifficultyLevel, ...] = (
    DifficultyLevel.BEGINNER,
    DifficultyLevel.INTERMEDIATE,
    DifficultyLevel.ADVANCED,
)


class SensoryPreference(str, Enum):
    """Child-specific sensory comfort tags stored on the profile."""

    LOW_STIMULATION = "LOW_STIMULATION"
    MEDIUM_STIMULATION = "MEDIUM_STIMULATION"
    HIGH_CONTRAST = "HIGH_CONTRAST"
    MONOCHROME = "MONOCHROME"


class RecommendationSource(str, Enum):
    """Which path produced a recommendation."""

    HEURISTIC = "heuristic"
    ML = "ml"


SupportLevel = Literal["none", "minimal", "moderate", "full"]


class AdaptiveModel(BaseModel):
    """Base model using camelCase aliases on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Personalization(AdaptiveModel):
    """Optional personalization flags attached to a context.

    Attributes:
        prefers_low_stimuli: Child prefers calm, low-stimulus activities.
        regulation_needed: Emotional co-regulation breaks should be favored.
        short_sessions_preferred: Child does better with shorter sessions.
    """

    model_config = ConfigDict(frozen=True)

    prefers_low_stimuli: bool = False
    regulation_needed: bool = False
    short_sessions_preferred: bool = False


class PerformanceSignal(AdaptiveModel):
    """A single recent outcome used to drive difficulty adjustment.

    Attributes:
        success_rate: Share of successful answers (0-1).
        attempts_count: Number of attempts needed.
        average_time_per_question: Mean seconds per question, if measured.
        emotional_state: Observed emotional tag (e.g. "calm", "frustrated").
        support_level: Amount of adult support given.
    """

    model_config = ConfigDict(frozen=True)

    success_rate: float = Field(ge=0.0, le=1.0)
    attempts_count: int = Field(ge=0)
    average_time_per_question: float | None = Field(default=None, gt=0)
    emotional_state: str | None = None
    support_level: SupportLevel | None = None

    @property
    def is_frustrated(self) -> bool:
        """Check if the signal reports frustration."""
        return self.emotional_state == "frustrated"


class AdaptiveContext(AdaptiveModel):
    """Input to the adaptive engine, built per request by the caller.

    Attributes:
        child_id: Child identifier.
        target_category: Skill category currently being worked on.
        current_difficulty: Difficulty of the current activity.
        current_activity_id: Activity in progress, if any.
        recent_performance: Performance signals, most recent first.
        personalization: Optional personalization flags.
        sensory_preferences: Sensory comfort tags of the child.
    """

    model_config = ConfigDict(frozen=True)

    child_id: str
    target_category: ActivityCategory
    current_difficulty: DifficultyLevel
    current_activity_id: str | None = None
    recent_performance: list[PerformanceSignal] = Field(default_factory=list)
    personalization: Personalization | None = None
    sensory_preferences: list[SensoryPreference] = Field(default_factory=list)

    @property
    def latest_performance(self) -> PerformanceSignal | None:
        """Most recent performance signal, if any."""
        return self.recent_performance[0] if self.recent_performance else None

    @property
    def prefers_low_stimulation(self) -> bool:
        """Check if the sensory preferences include LOW_STIMULATION."""
        return SensoryPreference.LOW_STIMULATION in self.sensory_preferences

    def to_connector_payload(self) -> dict:
        """Build the JSON body sent to the ML connector."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            include={
                "child_id",
                "current_difficulty",
                "target_category",
                "recent_performance",
                "personalization",
                "sensory_preferences",
            },
        )


class ActivityRecommendation(AdaptiveModel):
    """A recommended activity category with its relative priority."""

    category: ActivityCategory
    difficulty: DifficultyLevel
    weight: float = Field(ge=0.0)
    reason: str
    suggested_activity_id: str | None = None


class AdaptiveRecommendation(AdaptiveModel):
    """Recommendation returned to callers.

    Attributes:
        child_id: Child identifier.
        next_difficulty: Difficulty to use for the next activity.
        recommendations: Activities sorted by descending weight.
        rationale: Human-readable explanation lines.
        escalation_warnings: Present only when something needs adult attention.
    """

    child_id: str
    next_difficulty: DifficultyLevel
    recommendations: list[ActivityRecommendation]
    rationale: list[str]
    escalation_warnings: list[str] | None = None


class MlAdaptiveResponse(AdaptiveModel):
    """Body expected from the ML connector on a 2xx response."""

    model_config = ConfigDict(extra="ignore")

    next_difficulty: DifficultyLevel
    recommendations: list[ActivityRecommendation]
    explanation: list[str] | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class AdaptiveEngineResult(AdaptiveModel):
    """Recommendation together with the path that produced it."""

    recommendation: AdaptiveRecommendation
    source: RecommendationSource
