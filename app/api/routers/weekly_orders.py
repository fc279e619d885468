"""
app/api/routers/weekly_orders.py

Weekly quota entry. One order per ``(project, start_week)``; posting again
replaces the quotas.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_weekly_order_repository
from app.domain.reconciliation import ORDER_TASK_TYPES, WeeklyOrderInput
from app.schemas.reconciliation import WeeklyOrderRequest, WeeklyOrderResponse
from db.repositories.errors import PersistenceError
from db.repositories.weekly_order_repository import WeeklyOrderRepository
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weekly-orders", tags=["weekly-orders"])


def _to_response(order: WeeklyOrderInput) -> WeeklyOrderResponse:
    return WeeklyOrderResponse(
        project=order.project,
        start_week=order.start_week,
        goal=order.goal,
        strategy=order.strategy,
        **{task_type: order.order_count(task_type) for task_type in ORDER_TASK_TYPES},
    )


@router.post(
    "",
    response_model=WeeklyOrderResponse,
    status_code=status.HTTP_200_OK,
)
def upsert_weekly_order(
    body: WeeklyOrderRequest,
    db: Session = Depends(get_db),
    repository: WeeklyOrderRepository = Depends(get_weekly_order_repository),
) -> WeeklyOrderResponse:
    order = WeeklyOrderInput(
        project=body.project.strip(),
        start_week=body.start_week,
        quotas={task_type: getattr(body, task_type) for task_type in ORDER_TASK_TYPES},
        goal=body.goal,
        strategy=body.strategy,
    )
    try:
        saved = repository.upsert_order(order)
        db.commit()
    except PersistenceError as exc:
        db.rollback()
        logger.exception("Weekly order upsert failed project=%r: %s", order.project, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save weekly order.",
        ) from exc

    logger.info(
        "Weekly order saved project=%r start_week=%s",
        saved.project,
        saved.start_week.isoformat(),
    )
    return _to_response(saved)


@router.get("", response_model=list[WeeklyOrderResponse])
def list_weekly_orders(
    start: datetime = Query(...),
    end: datetime = Query(...),
    project: str | None = Query(None),
    repository: WeeklyOrderRepository = Depends(get_weekly_order_repository),
) -> list[WeeklyOrderResponse]:
    """
    Orders whose ``start_week`` falls in ``[start, end]``.
    """
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be earlier than start.",
        )
    try:
        orders = repository.list_in_window(start, end, project=project)
    except PersistenceError as exc:
        logger.exception("Weekly order query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to query weekly orders.",
        ) from exc
    return [_to_response(order) for order in orders]
