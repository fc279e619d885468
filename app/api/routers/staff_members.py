"""
app/api/routers/staff_members.py

Staff directory endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_staff_member_repository
from app.schemas.staff import StaffMemberQueryRequest, StaffMemberResponse
from db.repositories.errors import PersistenceError
from db.repositories.staff_member_repository import StaffMemberRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staff-members", tags=["staff"])


@router.post("", response_model=list[StaffMemberResponse])
def list_staff_members(
    body: StaffMemberQueryRequest,
    repository: StaffMemberRepository = Depends(get_staff_member_repository),
) -> list[StaffMemberResponse]:
    try:
        members = repository.list_by_teams(body.teams)
    except PersistenceError as exc:
        logger.exception("Staff member query failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to query staff members.",
        ) from exc
    return [StaffMemberResponse.model_validate(member) for member in members]
