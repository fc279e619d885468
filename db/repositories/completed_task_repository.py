"""
db/repositories/completed_task_repository.py

Persistence layer for CompletedTask records.

The caller controls commit/rollback; this repository never commits on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.completion import CompletedTaskInput
from db.models.completed_task import _UPSERT_CONSTRAINT, CompletedTask
from db.repositories.errors import CompletedTaskPersistenceError, PersistenceError

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 500


class CompletedTaskRepository:
    """
    Repository for writing and querying CompletedTask rows.

    Insert semantics: a task whose ``task_id`` is already stored is skipped
    (``ON CONFLICT DO NOTHING``), so completed tasks are never mutated and a
    repeated sync over the same window does not create duplicates.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def bulk_insert_tasks(
        self,
        tasks: Sequence[CompletedTaskInput],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Insert tasks in chunks and return how many rows were actually new.
        """

        if not tasks:
            return 0

        size = max(1, batch_size)
        inserted = 0
        try:
            for start in range(0, len(tasks), size):
                chunk = tasks[start : start + size]
                payloads: list[dict[str, Any]] = [
                    {
                        "task_id": task.task_id,
                        "task_name": task.task_name,
                        "assignee_id": task.assignee_id,
                        "team": task.team,
                        "task_type": task.task_type,
                        "level": task.level,
                        "tools": list(task.tools),
                        "project": task.project,
                        "done_date": task.done_date,
                    }
                    for task in chunk
                ]
                stmt = (
                    insert(CompletedTask)
                    .values(payloads)
                    .on_conflict_do_nothing(constraint=_UPSERT_CONSTRAINT)
                    .returning(CompletedTask.task_id)
                )
                inserted += len(self._session.execute(stmt).all())
        except SQLAlchemyError as exc:
            raise CompletedTaskPersistenceError(
                f"Failed to insert completed tasks: {exc}"
            ) from exc

        logger.debug("Inserted completed tasks requested=%s inserted=%s", len(tasks), inserted)
        return inserted

    def find_by_assignees(
        self,
        assignee_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> list[CompletedTask]:
        return self._find(CompletedTask.assignee_id.in_(list(assignee_ids)), start, end)

    def find_by_teams(
        self,
        teams: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> list[CompletedTask]:
        return self._find(CompletedTask.team.in_(list(teams)), start, end)

    def _find(self, condition: Any, start: datetime, end: datetime) -> list[CompletedTask]:
        stmt = select(CompletedTask).where(
            CompletedTask.done_date >= start,
            CompletedTask.done_date <= end,
        )
        if condition is not None:
            stmt = stmt.where(condition)
        stmt = stmt.order_by(CompletedTask.done_date, CompletedTask.project, CompletedTask.task_name)
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to query completed tasks: {exc}") from exc
