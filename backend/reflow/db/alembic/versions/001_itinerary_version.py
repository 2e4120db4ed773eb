"""Itinerary version table

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates itinerary_version: one immutable row per (trip_id, version).
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

json_document = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create itinerary_version table."""
    op.create_table(
        "itinerary_version",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("trip_id", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("data", json_document, nullable=False),
        sa.Column("locks", json_document, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("trip_id", "version", name="uq_itinerary_version_trip_version"),
    )
    op.create_index("idx_itinerary_version_trip", "itinerary_version", ["trip_id", "version"])


def downgrade() -> None:
    """Drop itinerary_version table."""
    op.drop_index("idx_itinerary_version_trip", table_name="itinerary_version")
    op.drop_table("itinerary_version")
