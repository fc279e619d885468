"""
app/schemas/sync.py

Schemas for the on-demand sync endpoint.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SyncRunRequest(BaseModel):
    """
    Team groups to run; every group when omitted.
    """

    groups: list[str] = []


class TeamSyncSummaryResponse(BaseModel):
    team: str
    fetched_ok: bool
    tasks_classified: int = Field(..., ge=0)
    tasks_inserted: int = Field(..., ge=0)
    tasks_rejected: int = Field(..., ge=0)
    duplicates_dropped: int = Field(..., ge=0)
    error: str | None = None

    model_config = {"from_attributes": True}


class SyncRunResponse(BaseModel):
    group: str
    window_start: datetime
    window_end: datetime
    bucket: datetime
    teams: list[TeamSyncSummaryResponse]
    issues_written: int = Field(..., ge=0)

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str
    scheduler_enabled: bool
