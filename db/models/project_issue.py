"""
db/models/project_issue.py

Persisted quota-versus-actual report row.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin

_UPSERT_CONSTRAINT = "uq_project_issues_project_week_type"


class ProjectIssue(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """
    One reconciliation row per project, week and task type.

    Re-running reconciliation for the same week refreshes the counts in place.
    """

    __tablename__ = "project_issues"

    project: Mapped[str] = mapped_column(String(255), nullable=False)
    start_week: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    task_type: Mapped[str] = mapped_column(String(64), nullable=False)
    team: Mapped[str | None] = mapped_column(String(32), nullable=True)
    order_count: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_count: Mapped[int] = mapped_column(Integer, nullable=False)
    assignees: Mapped[list[str]] = mapped_column(
        ARRAY(String(255)),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )
    difference: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str] = mapped_column(String(16), nullable=False, comment="OVER, UNDER, MATCH")
    comment: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Free-text reviewer note")

    __table_args__ = (
        UniqueConstraint("project", "start_week", "task_type", name=_UPSERT_CONSTRAINT),
        Index("ix_project_issues_start_week", "start_week"),
    )
