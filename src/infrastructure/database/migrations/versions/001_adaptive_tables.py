# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Create adaptive recommendation tables.

This migration creates:
- adaptive_recommendations: Audit log of every recommendation served
- child_profiles: Sensory preferences per child

Revision ID: 001_adaptive_tables
Revises:
Create Date: 2025-06-02
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_adaptive_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create adaptive_recommendations and child_profiles tables."""

    # =========================================================================
    # Create adaptive_recommendations table
    # =========================================================================
    op.create_table(
        "adaptive_recommendations",
        sa.Column("id", postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column("child_id", sa.String(64), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("requested_context", postgresql.JSONB(), nullable=False),
        sa.Column("recommendation", postgresql.JSONB(), nullable=False),
        sa.Column("latency_ms", sa.Float(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_adaptive_recommendations_child_id",
        "adaptive_recommendations",
        ["child_id"],
    )

    # =========================================================================
    # Create child_profiles table
    # =========================================================================
    op.create_table(
        "child_profiles",
        sa.Column("child_id", sa.String(64), primary_key=True),
        sa.Column(
            "sensory_preferences",
            postgresql.JSONB(),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )


def downgrade() -> None:
    """Drop adaptive tables in reverse order."""
    op.drop_table("child_profiles")
    op.drop_index("ix_adaptive_recommendations_child_id", table_name="adaptive_recommendations")
    op.drop_table("adaptive_recommendations")
