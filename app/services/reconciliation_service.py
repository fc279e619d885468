"""
app/services/reconciliation_service.py

Quota-versus-actual reconciliation.

Two entry points produce the same ``ProjectIssueResult`` rows:

- ``ReconciliationEngine.reconcile`` joins in-memory orders and completed
  tasks (used by tests and by callers that already hold both sets);
- ``ReconciliationService.get_project_issues`` lets PostgreSQL do the join in
  one statement via ``ReconciliationRepository``.

Both hand their joined rows to ``build_issues``, which owns the report rules.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from functools import lru_cache

from sqlalchemy.orm import Session

from app.domain.completion import CompletedTaskInput
from app.domain.reconciliation import (
    ORDER_TASK_TYPES,
    OrderCompletionRow,
    ProjectDetailInput,
    ProjectIssueResult,
    WeeklyOrderInput,
    status_note,
)
from app.domain.teams import team_for_task_type
from db.repositories.project_detail_repository import ProjectDetailRepository
from db.repositories.project_issue_repository import ProjectIssueRepository
from db.repositories.reconciliation_repository import ReconciliationRepository

logger = logging.getLogger(__name__)


def build_issues(
    rows: Iterable[OrderCompletionRow],
    project_details: Mapping[str, ProjectDetailInput] | None = None,
) -> list[ProjectIssueResult]:
    """
    Turn joined order lines into report rows.

    Lines with no stated quota (``order_count <= 0``) produce nothing. When no
    completed task matched, the project's fallback owner for the team is
    reported as the assignee.
    """

    details = project_details or {}
    issues: list[ProjectIssueResult] = []
    for row in rows:
        if row.order_count <= 0:
            continue

        team = team_for_task_type(row.task_type)
        assignees = sorted({assignee for assignee in row.assignees if assignee})
        if not assignees and team is not None:
            detail = details.get(row.project)
            fallback = detail.fallback_for(team.name) if detail is not None else None
            if fallback:
                assignees = [fallback]

        difference = row.completed_count - row.order_count
        issues.append(
            ProjectIssueResult(
                project=row.project,
                start_week=row.start_week,
                task_type=row.task_type,
                team=team.name if team is not None else None,
                order_count=row.order_count,
                completed_count=row.completed_count,
                assignees=assignees,
                difference=difference,
                note=status_note(difference),
            )
        )

    issues.sort(key=lambda issue: (issue.project, issue.start_week, issue.task_type))
    return issues


class ReconciliationEngine:
    """
    Pure in-memory reconciliation; no I/O.
    """

    def __init__(self, task_types: Sequence[str] = ORDER_TASK_TYPES) -> None:
        self._task_types = tuple(task_types)

    def join_orders(
        self,
        orders: Iterable[WeeklyOrderInput],
        completed_tasks: Iterable[CompletedTaskInput],
        window_start: datetime,
        window_end: datetime,
    ) -> list[OrderCompletionRow]:
        in_window: dict[tuple[str, str], list[CompletedTaskInput]] = {}
        for task in completed_tasks:
            if window_start <= task.done_date <= window_end:
                in_window.setdefault((task.project, task.task_type), []).append(task)

        rows: list[OrderCompletionRow] = []
        for order in orders:
            if not window_start <= order.start_week <= window_end:
                continue
            for task_type in self._task_types:
                matching = in_window.get((order.project, task_type), [])
                rows.append(
                    OrderCompletionRow(
                        project=order.project,
                        start_week=order.start_week,
                        task_type=task_type,
                        order_count=order.order_count(task_type),
                        completed_count=len(matching),
                        assignees=sorted({task.assignee_id for task in matching if task.assignee_id}),
                    )
                )
        return rows

    def reconcile(
        self,
        orders: Iterable[WeeklyOrderInput],
        completed_tasks: Iterable[CompletedTaskInput],
        window_start: datetime,
        window_end: datetime,
        project_details: Mapping[str, ProjectDetailInput] | None = None,
    ) -> list[ProjectIssueResult]:
        rows = self.join_orders(orders, completed_tasks, window_start, window_end)
        return build_issues(rows, project_details)


class ReconciliationService:
    """
    Store-backed reconciliation for one window.
    """

    def get_project_issues(
        self,
        *,
        db: Session,
        start: datetime,
        end: datetime,
        project: str | None = None,
    ) -> list[ProjectIssueResult]:
        rows = ReconciliationRepository(db).fetch_order_completion_rows(start, end, project=project)
        details = ProjectDetailRepository(db).get_by_projects([row.project for row in rows])
        issues = build_issues(rows, details)
        logger.info(
            "Reconciled window start=%s end=%s order_lines=%s issues=%s",
            start.isoformat(),
            end.isoformat(),
            len(rows),
            len(issues),
        )
        return issues

    def save_project_issues(
        self,
        *,
        db: Session,
        start: datetime,
        end: datetime,
    ) -> int:
        """
        Reconcile the window and upsert the report. The caller commits.
        """

        issues = self.get_project_issues(db=db, start=start, end=end)
        return ProjectIssueRepository(db).upsert_issues(issues)


@lru_cache(maxsize=1)
def get_reconciliation_service() -> ReconciliationService:
    return ReconciliationService()
