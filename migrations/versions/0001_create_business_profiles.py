"""create business profiles table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_business_profiles"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "business_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False, unique=True),
        sa.Column("business_type", sa.String(length=30), nullable=False),
        sa.Column("vat_status", sa.String(length=20), nullable=False),
        sa.Column("industry", sa.String(length=40), nullable=True),
        sa.Column("municipality", sa.String(length=120), nullable=True),
        sa.Column("employee_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("business_profiles")
