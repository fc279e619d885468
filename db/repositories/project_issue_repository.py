"""
db/repositories/project_issue_repository.py

Persistence for reconciliation report rows.

The caller controls commit/rollback; this repository never commits on its own.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.reconciliation import ProjectIssueResult
from db.models.project_issue import _UPSERT_CONSTRAINT, ProjectIssue
from db.repositories.errors import PersistenceError


class ProjectIssueRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def upsert_issues(self, issues: Sequence[ProjectIssueResult]) -> int:
        """
        Write report rows; an existing ``(project, start_week, task_type)``
        row gets its counts refreshed. The reviewer ``comment`` is kept.
        """

        if not issues:
            return 0

        payloads: list[dict[str, Any]] = [
            {
                "project": issue.project,
                "start_week": issue.start_week,
                "task_type": issue.task_type,
                "team": issue.team,
                "order_count": issue.order_count,
                "completed_count": issue.completed_count,
                "assignees": list(issue.assignees),
                "difference": issue.difference,
                "note": issue.note,
            }
            for issue in issues
        ]
        stmt = insert(ProjectIssue).values(payloads)
        stmt = stmt.on_conflict_do_update(
            constraint=_UPSERT_CONSTRAINT,
            set_={
                "team": stmt.excluded.team,
                "order_count": stmt.excluded.order_count,
                "completed_count": stmt.excluded.completed_count,
                "assignees": stmt.excluded.assignees,
                "difference": stmt.excluded.difference,
                "note": stmt.excluded.note,
            },
        )
        try:
            self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to upsert project issues: {exc}") from exc
        return len(payloads)

    def list_in_window(self, start: datetime, end: datetime) -> list[ProjectIssue]:
        stmt = (
            select(ProjectIssue)
            .where(ProjectIssue.start_week >= start, ProjectIssue.start_week <= end)
            .order_by(ProjectIssue.project, ProjectIssue.task_type)
        )
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to query project issues: {exc}") from exc
