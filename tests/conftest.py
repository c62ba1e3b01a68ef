# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from typing import Any

import pytest

from src.domains.adaptive.models import (
    AdaptiveContext,
    ActivityCategory,
    DifficultyLevel,
    PerformanceSignal,
    SensoryPreference,
)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DATABASE_ENABLED": "false",
        "ADAPTIVE_ML_ENABLED": "false",
        "RATE_LIMIT_STORAGE_URI": "memory://",
    }


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_child_id() -> str:
    """Provide a sample child ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def sample_activity_id() -> str:
    """Provide a sample activity ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440002"


@pytest.fixture
def make_context(sample_child_id: str):
    """Build an AdaptiveContext with one performance signal.

    Keyword arguments override the defaults; signal fields go in
    ``performance``.
    """

    def _make(
        performance: dict[str, Any] | None = None,
        sensory_preferences: list[SensoryPreference] | None = None,
        **overrides: Any,
    ) -> AdaptiveContext:
        signal = {"success_rate": 0.7, "attempts_count": 3}
        signal.update(performance or {})
        data: dict[str, Any] = {
            "child_id": sample_child_id,
            "target_category": ActivityCategory.ACADEMIC,
            "current_difficulty": DifficultyLevel.BEGINNER,
            "recent_performance": [PerformanceSignal(**signal)],
        }
        if sensory_preferences is not None:
            data["sensory_preferences"] = sensory_preferences
        data.update(overrides)
        return AdaptiveContext(**data)

    return _make


@pytest.fixture
def sample_request_body(sample_child_id: str, sample_activity_id: str) -> dict[str, Any]:
    """Provide a valid recommendation request body (camelCase)."""
    return {
        "childId": sample_child_id,
        "targetCategory": "ACADEMIC",
        "currentDifficulty": "BEGINNER",
        "currentActivityId": sample_activity_id,
        "recentPerformance": [
            {"successRate": 0.9, "attemptsCount": 1, "emotionalState": "calm"},
        ],
    }
