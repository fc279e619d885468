"""
app/api/routers/sync.py

On-demand trigger for the weekly sync, for backfills and manual re-runs.
Runs synchronously; the response carries the per-team summary.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas.sync import SyncRunRequest, SyncRunResponse
from app.services.weekly_sync_service import WeeklySyncService, get_weekly_sync_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post(
    "/run",
    response_model=list[SyncRunResponse],
    status_code=status.HTTP_200_OK,
)
def run_sync(
    body: SyncRunRequest,
    service: WeeklySyncService = Depends(get_weekly_sync_service),
) -> list[SyncRunResponse]:
    """
    Run the sync for the requested team groups (all groups when empty).

    Per-team failures are reported inside the payload; the status stays 200.
    Raises HTTP 400 for an unknown group name.
    """
    try:
        summaries = service.run_groups(body.groups or None)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return [SyncRunResponse.model_validate(summary) for summary in summaries]
