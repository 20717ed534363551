"""create projects, stage_configs and project_history

Revision ID: 3f1d2c7a9b10
Revises:
Create Date: 2026-10-19 09:12:44.118203

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1d2c7a9b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("external_code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("house_type", sa.String(length=20), nullable=False),
        sa.Column("stage", sa.String(length=100), nullable=False),
        sa.Column("percent_complete", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("original_target", sa.DateTime(timezone=True), nullable=False),
        sa.Column("target_finish", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actual_finish", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delay_days", sa.Integer(), nullable=False),
        sa.Column("client_delay_days", sa.Integer(), nullable=False),
        sa.Column("is_delayed", sa.Boolean(), nullable=False),
        sa.Column("delay_reason", sa.Text(), nullable=True),
        sa.Column("assigned_to_id", sa.String(length=255), nullable=True),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("client_requirements", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("created_by_id", sa.String(length=255), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_projects_external_code"), "projects", ["external_code"], unique=True)

    op.create_table(
        "stage_configs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("house_type", sa.String(length=20), nullable=False),
        sa.Column("stage_name", sa.String(length=100), nullable=False),
        sa.Column("percent", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("house_type", "stage_name", name="uq_house_type_stage"),
    )
    op.create_index(op.f("ix_stage_configs_house_type"), "stage_configs", ["house_type"], unique=False)

    op.create_table(
        "project_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("changed_by", sa.String(length=255), nullable=False),
        sa.Column("changed_by_id", sa.String(length=255), nullable=True),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["project_id"],
            ["projects.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_project_history_project_id"), "project_history", ["project_id"], unique=False)
    op.create_index(op.f("ix_project_history_created_at"), "project_history", ["created_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_project_history_created_at"), table_name="project_history")
    op.drop_index(op.f("ix_project_history_project_id"), table_name="project_history")
    op.drop_table("project_history")
    op.drop_index(op.f("ix_stage_configs_house_type"), table_name="stage_configs")
    op.drop_table("stage_configs")
    op.drop_index(op.f("ix_projects_external_code"), table_name="projects")
    op.drop_table("projects")
