"""
db/models/completed_task.py

Canonical completed task, one row per source tracker task.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin

_UPSERT_CONSTRAINT = "uq_completed_tasks_task_id"


class CompletedTask(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """
    A tracker task that passed classification.

    Rows are written once and never updated. The unique ``task_id`` makes a
    re-run over an overlapping window a no-op for tasks already stored.
    ``done_date`` is the run's Monday-09:00 bucket, not the raw completion
    instant.
    """

    __tablename__ = "completed_tasks"

    task_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Source tracker task id",
    )
    task_name: Mapped[str] = mapped_column(String(500), nullable=False)
    assignee_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        server_default="",
        comment="Assignee email; empty when none could be resolved",
    )
    team: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Playable, Art, Video, Concept",
    )
    task_type: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="playable, video, concept, art_<tag>, art_asset",
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    tools: Mapped[list[int]] = mapped_column(
        ARRAY(Integer),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )
    project: Mapped[str] = mapped_column(String(255), nullable=False)
    done_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Monday 09:00 bucket of the ingestion week",
    )

    __table_args__ = (
        UniqueConstraint("task_id", name=_UPSERT_CONSTRAINT),
        Index("ix_completed_tasks_assignee_id", "assignee_id"),
        Index("ix_completed_tasks_team", "team"),
        Index("ix_completed_tasks_done_date", "done_date"),
        Index(
            "ix_completed_tasks_project_task_type_done_date",
            "project",
            "task_type",
            "done_date",
        ),
    )
