"""
db/repositories/reconciliation_repository.py

Single-statement join of weekly orders against completed tasks.

Query design
------------
Each ``weekly_orders`` row is unpivoted into one line per task type with
``UNION ALL``, then ``LEFT OUTER JOIN``ed to ``completed_tasks`` on project,
task type and the bucket-date window, and grouped::

    SELECT o.project, o.start_week, o.task_type, o.order_count,
           count(t.id)                                        AS completed_count,
           array_remove(array_agg(DISTINCT NULLIF(t.assignee_id, '')), NULL)
                                                              AS assignees
    FROM   (<unpivoted orders in window>) o
    LEFT   JOIN completed_tasks t
           ON  t.project = o.project AND t.task_type = o.task_type
           AND t.done_date BETWEEN :start AND :end
    GROUP  BY o.project, o.start_week, o.task_type, o.order_count

Difference, status note and assignee fallback are applied in Python by
``app.services.reconciliation_service.build_issues``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import String, and_, cast, distinct, func, literal, null, select, union_all
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.reconciliation import ORDER_TASK_TYPES, OrderCompletionRow
from db.models.completed_task import CompletedTask
from db.models.weekly_order import WeeklyOrder
from db.repositories.errors import ReconciliationQueryError

logger = logging.getLogger(__name__)


class ReconciliationRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch_order_completion_rows(
        self,
        start: datetime,
        end: datetime,
        *,
        project: str | None = None,
    ) -> list[OrderCompletionRow]:
        order_lines = self._unpivoted_orders(start, end, project).subquery("order_lines")

        assignees = func.array_remove(
            func.array_agg(distinct(func.nullif(CompletedTask.assignee_id, ""))),
            null(),
            type_=ARRAY(String),
        )
        stmt = (
            select(
                order_lines.c.project,
                order_lines.c.start_week,
                order_lines.c.task_type,
                order_lines.c.order_count,
                func.count(CompletedTask.id).label("completed_count"),
                assignees.label("assignees"),
            )
            .select_from(order_lines)
            .outerjoin(
                CompletedTask,
                and_(
                    CompletedTask.project == order_lines.c.project,
                    CompletedTask.task_type == order_lines.c.task_type,
                    CompletedTask.done_date >= start,
                    CompletedTask.done_date <= end,
                ),
            )
            .group_by(
                order_lines.c.project,
                order_lines.c.start_week,
                order_lines.c.task_type,
                order_lines.c.order_count,
            )
            .order_by(order_lines.c.project, order_lines.c.start_week, order_lines.c.task_type)
        )

        try:
            result = self._session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise ReconciliationQueryError(f"Failed to aggregate orders and completions: {exc}") from exc

        rows = [
            OrderCompletionRow(
                project=row.project,
                start_week=row.start_week,
                task_type=row.task_type,
                order_count=int(row.order_count or 0),
                completed_count=int(row.completed_count or 0),
                assignees=sorted(row.assignees or []),
            )
            for row in result
        ]
        logger.debug(
            "Reconciliation rows fetched start=%s end=%s project=%r rows=%s",
            start,
            end,
            project,
            len(rows),
        )
        return rows

    @staticmethod
    def _unpivoted_orders(start: datetime, end: datetime, project: str | None):
        selects = []
        for task_type in ORDER_TASK_TYPES:
            stmt = select(
                WeeklyOrder.project.label("project"),
                WeeklyOrder.start_week.label("start_week"),
                cast(literal(task_type), String(64)).label("task_type"),
                getattr(WeeklyOrder, task_type).label("order_count"),
            ).where(
                WeeklyOrder.start_week >= start,
                WeeklyOrder.start_week <= end,
            )
            if project:
                stmt = stmt.where(WeeklyOrder.project == project)
            selects.append(stmt)
        return union_all(*selects)
