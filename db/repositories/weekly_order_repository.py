"""
db/repositories/weekly_order_repository.py

Read access to weekly quotas plus the upsert used by the order endpoint.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.reconciliation import ORDER_TASK_TYPES, WeeklyOrderInput
from db.models.weekly_order import _UPSERT_CONSTRAINT, WeeklyOrder
from db.repositories.errors import PersistenceError


def to_order_input(row: WeeklyOrder) -> WeeklyOrderInput:
    return WeeklyOrderInput(
        project=row.project,
        start_week=row.start_week,
        quotas={task_type: int(getattr(row, task_type) or 0) for task_type in ORDER_TASK_TYPES},
        goal=row.goal,
        strategy=row.strategy,
    )


class WeeklyOrderRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_in_window(
        self,
        start: datetime,
        end: datetime,
        *,
        project: str | None = None,
    ) -> list[WeeklyOrderInput]:
        """
        Orders whose ``start_week`` falls within ``[start, end]``.
        """

        stmt = select(WeeklyOrder).where(
            WeeklyOrder.start_week >= start,
            WeeklyOrder.start_week <= end,
        )
        if project:
            stmt = stmt.where(WeeklyOrder.project == project)
        stmt = stmt.order_by(WeeklyOrder.project, WeeklyOrder.start_week)
        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to query weekly orders: {exc}") from exc
        return [to_order_input(row) for row in rows]

    def upsert_order(self, order: WeeklyOrderInput) -> WeeklyOrderInput:
        """
        Insert an order, or replace the quotas of the existing
        ``(project, start_week)`` row.
        """

        quotas: dict[str, Any] = {
            task_type: max(0, order.order_count(task_type)) for task_type in ORDER_TASK_TYPES
        }
        values = {
            "project": order.project,
            "start_week": order.start_week,
            "goal": order.goal,
            "strategy": order.strategy,
            **quotas,
        }
        stmt = (
            insert(WeeklyOrder)
            .values(**values)
            .on_conflict_do_update(
                constraint=_UPSERT_CONSTRAINT,
                set_={"goal": order.goal, "strategy": order.strategy, **quotas},
            )
            .returning(WeeklyOrder)
        )
        try:
            row: WeeklyOrder = self._session.scalars(stmt).one()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to upsert weekly order: {exc}") from exc
        return to_order_input(row)
