"""
app/api/routers/project_issues.py

Live quota-versus-actual report for a date range.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_project_issue_repository
from app.schemas.reconciliation import ProjectIssueResponse, SavedProjectIssueResponse
from app.services.reconciliation_service import ReconciliationService, get_reconciliation_service
from db.repositories.errors import PersistenceError
from db.repositories.project_issue_repository import ProjectIssueRepository
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/project-issues", tags=["project-issues"])


@router.get("", response_model=list[ProjectIssueResponse])
def get_project_issues(
    start: datetime = Query(...),
    end: datetime = Query(...),
    project: str | None = Query(None),
    db: Session = Depends(get_db),
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> list[ProjectIssueResponse]:
    """
    Orders whose ``start_week`` falls in ``[start, end]`` compared with the
    completed tasks bucketed in the same range. Lines with no quota are omitted.
    """
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be earlier than start.",
        )
    try:
        issues = service.get_project_issues(db=db, start=start, end=end, project=project)
    except PersistenceError as exc:
        logger.exception("Project issue query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build project issues.",
        ) from exc
    return [ProjectIssueResponse.model_validate(issue) for issue in issues]


@router.get("/saved", response_model=list[SavedProjectIssueResponse])
def get_saved_project_issues(
    start: datetime = Query(...),
    end: datetime = Query(...),
    repository: ProjectIssueRepository = Depends(get_project_issue_repository),
) -> list[SavedProjectIssueResponse]:
    """
    Report rows written by past sync runs, with reviewer comments.
    """
    try:
        rows = repository.list_in_window(start, end)
    except PersistenceError as exc:
        logger.exception("Saved project issue query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to query saved project issues.",
        ) from exc
    return [SavedProjectIssueResponse.model_validate(row) for row in rows]
