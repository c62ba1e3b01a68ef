# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Tables:
- adaptive_recommendations: One row per recommendation served
- child_profiles: Sensory preferences per child
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, Float, String, func
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all models."""

    pass


class AdaptiveRecommendationLog(Base):
    """Recommendation served by the adaptive engine, kept for audit."""

    __tablename__ = "adaptive_recommendations"

    id: Mapped[str] = mapped_column(
        postgresql.UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    child_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    requested_context: Mapped[dict[str, Any]] = mapped_column(postgresql.JSONB, nullable=False)
    recommendation: Mapped[dict[str, Any]] = mapped_column(postgresql.JSONB, nullable=False)
    latency_ms: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class ChildProfile(Base):
    """Accessibility profile of a child."""

    __tablename__ = "child_profiles"

    child_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    sensory_preferences: Mapped[list[str]] = mapped_column(
        postgresql.JSONB,
        nullable=False,
        default=list,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
