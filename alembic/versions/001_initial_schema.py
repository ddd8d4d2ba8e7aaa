"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-11-03

Creates all tables for the Funnel.vc marketplace:
- users: Identity references provisioned by the identity service
- founder_profiles: One startup profile per founder
- vc_profiles: One investor profile per VC, with a public slug
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# Revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create initial database schema."""

    # ==========================================================================
    # Create users table
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="founder"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_email", "users", ["email"])

    # ==========================================================================
    # Create founder_profiles table
    # ==========================================================================
    op.create_table(
        "founder_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("startup_name", sa.Text(), nullable=False),
        sa.Column("sector", sa.Text(), nullable=False),
        sa.Column("ask_amount", sa.Integer(), nullable=False),
        sa.Column("deck_link", sa.Text(), nullable=False),
        sa.Column("deck_text", sa.Text(), nullable=True),
        sa.Column("deck_pages", sa.Integer(), nullable=True),
        sa.Column("general_analysis", postgresql.JSONB(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("ask_amount > 0", name="ck_founder_profiles_ask_positive"),
    )

    # ==========================================================================
    # Create vc_profiles table
    # ==========================================================================
    op.create_table(
        "vc_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("firm_name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False, unique=True),
        sa.Column("thesis", sa.Text(), nullable=False),
        # JSON text, not JSONB: legacy rows may hold values that do not parse
        sa.Column("sectors", sa.Text(), nullable=False),
        sa.Column("min_check", sa.Integer(), nullable=False),
        sa.Column("max_check", sa.Integer(), nullable=False),
        sa.Column("monday_board_id", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("min_check <= max_check", name="ck_vc_profiles_check_range"),
    )
    op.create_index("ix_vc_profiles_check_range", "vc_profiles", ["min_check", "max_check"])


def downgrade() -> None:
    """Drop all tables."""

    # Drop tables in reverse order of creation (due to foreign keys)
    op.drop_index("ix_vc_profiles_check_range", table_name="vc_profiles")
    op.drop_table("vc_profiles")
    op.drop_table("founder_profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
