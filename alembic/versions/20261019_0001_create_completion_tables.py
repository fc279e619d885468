"""create completion tracking tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

_QUOTA_COLUMNS = (
    ("art_cpp", "Ordered art CPP tasks"),
    ("art_icon", "Ordered art icon tasks"),
    ("art_banner", "Ordered art banner tasks"),
    ("art_asset", "Ordered untagged art tasks"),
    ("playable", "Ordered playable tasks"),
    ("video", "Ordered video tasks"),
    ("concept", "Ordered concept tasks"),
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "completed_tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("task_id", sa.String(length=64), nullable=False,
                  comment="Source tracker task id"),
        sa.Column("task_name", sa.String(length=500), nullable=False),
        sa.Column("assignee_id", sa.String(length=255), nullable=False, server_default="",
                  comment="Assignee email; empty when none could be resolved"),
        sa.Column("team", sa.String(length=32), nullable=False,
                  comment="Playable, Art, Video, Concept"),
        sa.Column("task_type", sa.String(length=64), nullable=False,
                  comment="playable, video, concept, art_<tag>, art_asset"),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("tools", postgresql.ARRAY(sa.Integer()), nullable=False,
                  server_default=sa.text("'{}'")),
        sa.Column("project", sa.String(length=255), nullable=False),
        sa.Column("done_date", sa.DateTime(timezone=True), nullable=False,
                  comment="Monday 09:00 bucket of the ingestion week"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("task_id", name="uq_completed_tasks_task_id"),
    )
    op.create_index("ix_completed_tasks_assignee_id", "completed_tasks", ["assignee_id"], unique=False)
    op.create_index("ix_completed_tasks_team", "completed_tasks", ["team"], unique=False)
    op.create_index("ix_completed_tasks_done_date", "completed_tasks", ["done_date"], unique=False)
    op.create_index(
        "ix_completed_tasks_project_task_type_done_date",
        "completed_tasks",
        ["project", "task_type", "done_date"],
        unique=False,
    )

    op.create_table(
        "weekly_orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project", sa.String(length=255), nullable=False),
        sa.Column("start_week", sa.DateTime(timezone=True), nullable=False),
        sa.Column("goal", sa.Text(), nullable=True),
        sa.Column("strategy", sa.Text(), nullable=True),
        *[
            sa.Column(name, sa.Integer(), nullable=False, server_default="0", comment=comment)
            for name, comment in _QUOTA_COLUMNS
        ],
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project", "start_week", name="uq_weekly_orders_project_start_week"),
    )
    op.create_index("ix_weekly_orders_start_week", "weekly_orders", ["start_week"], unique=False)

    op.create_table(
        "project_details",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project", sa.String(length=255), nullable=False),
        sa.Column("art", sa.String(length=255), nullable=True, comment="Art owner email"),
        sa.Column("playable", sa.String(length=255), nullable=True, comment="Playable owner email"),
        sa.Column("video", sa.String(length=255), nullable=True, comment="Video owner email"),
        sa.Column("concept", sa.String(length=255), nullable=True, comment="Concept owner email"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("project"),
    )

    op.create_table(
        "project_issues",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project", sa.String(length=255), nullable=False),
        sa.Column("start_week", sa.DateTime(timezone=True), nullable=False),
        sa.Column("task_type", sa.String(length=64), nullable=False),
        sa.Column("team", sa.String(length=32), nullable=True),
        sa.Column("order_count", sa.Integer(), nullable=False),
        sa.Column("completed_count", sa.Integer(), nullable=False),
        sa.Column("assignees", postgresql.ARRAY(sa.String(length=255)), nullable=False,
                  server_default=sa.text("'{}'")),
        sa.Column("difference", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(length=16), nullable=False, comment="OVER, UNDER, MATCH"),
        sa.Column("comment", sa.Text(), nullable=True, comment="Free-text reviewer note"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "project",
            "start_week",
            "task_type",
            name="uq_project_issues_project_week_type",
        ),
    )
    op.create_index("ix_project_issues_start_week", "project_issues", ["start_week"], unique=False)

    op.create_table(
        "staff_members",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("team", sa.String(length=32), nullable=False),
        sa.Column("role", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_staff_members_team", "staff_members", ["team"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_staff_members_team", table_name="staff_members")
    op.drop_table("staff_members")
    op.drop_index("ix_project_issues_start_week", table_name="project_issues")
    op.drop_table("project_issues")
    op.drop_table("project_details")
    op.drop_index("ix_weekly_orders_start_week", table_name="weekly_orders")
    op.drop_table("weekly_orders")
    op.drop_index("ix_completed_tasks_project_task_type_done_date", table_name="completed_tasks")
    op.drop_index("ix_completed_tasks_done_date", table_name="completed_tasks")
    op.drop_index("ix_completed_tasks_team", table_name="completed_tasks")
    op.drop_index("ix_completed_tasks_assignee_id", table_name="completed_tasks")
    op.drop_table("completed_tasks")
