# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the adaptive storage collaborators."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domains.adaptive.heuristics import generate_heuristic_recommendation
from src.domains.adaptive.models import RecommendationSource, SensoryPreference
from src.domains.adaptive.persistence import (
    ChildProfileRepository,
    DatabaseRecommendationSink,
    build_log_payload,
)
from src.infrastructure.database.models import AdaptiveRecommendationLog


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def session_factory(mock_db):
    """Session factory yielding the mock session."""

    @asynccontextmanager
    async def factory():
        yield mock_db

    return factory


class TestBuildLogPayload:
    """Tests for build_log_payload."""

    def test_payload_shape(self, make_context) -> None:
        """Test the stored row fields."""
        context = make_context(
            performance={"success_rate": 0.3, "emotional_state": "frustrated"},
            sensory_preferences=[SensoryPreference.LOW_STIMULATION],
        )
        recommendation = generate_heuristic_recommendation(context)

        payload = build_log_payload(context, recommendation, RecommendationSource.HEURISTIC, 12.34567)

        assert payload["child_id"] == context.child_id
        assert payload["source"] == "heuristic"
        assert payload["latency_ms"] == 12.346
        assert payload["requested_context"]["childId"] == context.child_id
        assert payload["requested_context"]["sensoryPreferences"] == ["LOW_STIMULATION"]
        assert payload["recommendation"]["nextDifficulty"] == "BEGINNER"
        assert payload["recommendation"]["escalationWarnings"]

    def test_recommendation_omits_absent_fields(self, make_context) -> None:
        """Test that absent warnings are not stored as null."""
        context = make_context()
        recommendation = generate_heuristic_recommendation(context)

        payload = build_log_payload(context, recommendation, RecommendationSource.ML, 1.0)

        assert payload["source"] == "ml"
        assert "escalationWarnings" not in payload["recommendation"]


class TestDatabaseRecommendationSink:
    """Tests for DatabaseRecommendationSink."""

    @pytest.mark.asyncio
    async def test_record_adds_log_row(self, make_context, session_factory, mock_db) -> None:
        """Test that one log row is added to the session."""
        sink = DatabaseRecommendationSink(session_factory=session_factory)
        context = make_context()
        recommendation = generate_heuristic_recommendation(context)

        await sink.record(context, recommendation, RecommendationSource.HEURISTIC, 5.0)

        mock_db.add.assert_called_once()
        row = mock_db.add.call_args.args[0]
        assert isinstance(row, AdaptiveRecommendationLog)
        assert row.child_id == context.child_id
        assert row.source == "heuristic"
        assert row.latency_ms == 5.0

    @pytest.mark.asyncio
    async def test_record_propagates_errors(self, make_context) -> None:
        """Test that storage errors reach the caller, which decides to swallow them."""

        @asynccontextmanager
        async def failing_factory():
            raise RuntimeError("database down")
            yield  # pragma: no cover

        sink = DatabaseRecommendationSink(session_factory=failing_factory)
        context = make_context()

        with pytest.raises(RuntimeError):
            await sink.record(
                context,
                generate_heuristic_recommendation(context),
                RecommendationSource.HEURISTIC,
                1.0,
            )


class TestChildProfileRepository:
    """Tests for ChildProfileRepository."""

    @pytest.mark.asyncio
    async def test_returns_stored_preferences(self, session_factory, mock_db, sample_child_id: str) -> None:
        """Test that stored tags are returned as enums."""
        result = MagicMock()
        result.scalar_one_or_none.return_value = ["LOW_STIMULATION", "MONOCHROME"]
        mock_db.execute.return_value = result
        repository = ChildProfileRepository(session_factory=session_factory)

        preferences = await repository.get_sensory_preferences(sample_child_id)

        assert preferences == [SensoryPreference.LOW_STIMULATION, SensoryPreference.MONOCHROME]
        mock_db.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_returns_none_without_profile(self, session_factory, mock_db, sample_child_id: str) -> None:
        """Test that a missing profile gives None."""
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db.execute.return_value = result
        repository = ChildProfileRepository(session_factory=session_factory)

        assert await repository.get_sensory_preferences(sample_child_id) is None

    @pytest.mark.asyncio
    async def test_skips_unknown_tags(self, session_factory, mock_db, sample_child_id: str) -> None:
        """Test that unknown stored tags are ignored."""
        result = MagicMock()
        result.scalar_one_or_none.return_value = ["LOW_STIMULATION", "ULTRA_BRIGHT"]
        mock_db.execute.return_value = result
        repository = ChildProfileRepository(session_factory=session_factory)

        preferences = await repository.get_sensory_preferences(sample_child_id)

        assert preferences == [SensoryPreference.LOW_STIMULATION]
