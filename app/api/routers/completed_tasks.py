"""
app/api/routers/completed_tasks.py

Completed-task query endpoint used by the performance dashboard.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_completed_task_repository
from app.schemas.completion import CompletedTaskQueryRequest, CompletedTaskResponse
from db.repositories.completed_task_repository import CompletedTaskRepository
from db.repositories.errors import PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/completed-tasks", tags=["completed-tasks"])


@router.post(
    "/query",
    response_model=list[CompletedTaskResponse],
    status_code=status.HTTP_200_OK,
)
def query_completed_tasks(
    body: CompletedTaskQueryRequest,
    repository: CompletedTaskRepository = Depends(get_completed_task_repository),
) -> list[CompletedTaskResponse]:
    """
    Completed tasks in ``[start_date, end_date]`` for the given assignees,
    or for the given teams when ``is_team`` is true.
    """
    identifiers = [value.strip() for value in body.identifiers if value.strip()]
    if not identifiers:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one non-empty identifier is required.",
        )

    try:
        if body.is_team:
            rows = repository.find_by_teams(identifiers, body.start_date, body.end_date)
        else:
            rows = repository.find_by_assignees(identifiers, body.start_date, body.end_date)
    except PersistenceError as exc:
        logger.exception("Completed task query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to query completed tasks.",
        ) from exc

    return [CompletedTaskResponse.model_validate(row) for row in rows]
