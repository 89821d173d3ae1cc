"""Initial schema - time segments and day markers

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Time segments: one row per contiguous stretch of work
    op.create_table(
        "time_segments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("seg_start", sa.String(5), nullable=False),
        sa.Column("seg_end", sa.String(5), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_time_segments"),
    )
    op.create_index("ix_time_segments_date", "time_segments", ["date"])

    # Day markers: days explicitly ended with Stop
    op.create_table(
        "day_markers",
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("date", name="pk_day_markers"),
    )


def downgrade() -> None:
    op.drop_table("day_markers")
    op.drop_index("ix_time_segments_date", table_name="time_segments")
    op.drop_table("time_segments")
