"""create task templates table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_create_task_templates"
down_revision = "0001_create_business_profiles"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "task_templates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("template_code", sa.String(length=60), nullable=False, unique=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.String(length=30), nullable=False),
        sa.Column("default_priority", sa.String(length=10), nullable=False, server_default="medium"),
        sa.Column("recurrence_rule", sa.String(length=120), nullable=False),
        sa.Column("lead_time_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reminder_days", sa.Text(), nullable=False, server_default=""),
        sa.Column("applies_to_vat_status", sa.Text(), nullable=False, server_default=""),
        sa.Column("applies_to_business_types", sa.Text(), nullable=False, server_default=""),
        sa.Column("applies_to_industries", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_task_templates_category", "task_templates", ["category"], unique=False)
    op.create_index("ix_task_templates_is_active", "task_templates", ["is_active"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_task_templates_is_active", table_name="task_templates")
    op.drop_index("ix_task_templates_category", table_name="task_templates")
    op.drop_table("task_templates")
