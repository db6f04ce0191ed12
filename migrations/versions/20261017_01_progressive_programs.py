"""Progressive programs and their scheduled days."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261017_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "progressive_programs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("exercise_key", sa.String(length=20), nullable=False),
        sa.Column("method", sa.String(length=20), nullable=False),
        sa.Column("test_max", sa.Integer(), nullable=False),
        sa.Column("schedule", sa.JSON(), nullable=False),
        sa.Column("state", sa.JSON(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index(
        "ix_progressive_programs_owner_id",
        "progressive_programs",
        ["owner_id"],
        unique=False,
    )
    op.create_index(
        "ix_progressive_programs_owner_active",
        "progressive_programs",
        ["owner_id", "active"],
        unique=False,
    )

    op.create_table(
        "progressive_program_days",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "program_id",
            sa.String(length=36),
            sa.ForeignKey("progressive_programs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("day_type", sa.String(length=10), nullable=False),
        sa.Column("plan", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(length=10), nullable=False, server_default="planned"),
        sa.Column("result", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint("program_id", "date", name="uq_progressive_program_days_program_date"),
    )
    op.create_index(
        "ix_progressive_program_days_program_id",
        "progressive_program_days",
        ["program_id"],
        unique=False,
    )
    op.create_index(
        "ix_progressive_program_days_date",
        "progressive_program_days",
        ["date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_progressive_program_days_date", table_name="progressive_program_days")
    op.drop_index("ix_progressive_program_days_program_id", table_name="progressive_program_days")
    op.drop_table("progressive_program_days")
    op.drop_index("ix_progressive_programs_owner_active", table_name="progressive_programs")
    op.drop_index("ix_progressive_programs_owner_id", table_name="progressive_programs")
    op.drop_table("progressive_programs")
