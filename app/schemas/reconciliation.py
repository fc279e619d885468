"""
app/schemas/reconciliation.py

Schemas for weekly orders and the project issue report.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class WeeklyOrderRequest(BaseModel):
    project: str = Field(..., min_length=1)
    start_week: datetime
    art_cpp: int = Field(0, ge=0)
    art_icon: int = Field(0, ge=0)
    art_banner: int = Field(0, ge=0)
    art_asset: int = Field(0, ge=0)
    playable: int = Field(0, ge=0)
    video: int = Field(0, ge=0)
    concept: int = Field(0, ge=0)
    goal: str | None = None
    strategy: str | None = None


class WeeklyOrderResponse(WeeklyOrderRequest):
    pass


class ProjectIssueResponse(BaseModel):
    """
    One quota line compared against what was delivered.
    """

    project: str
    start_week: datetime
    task_type: str
    team: str | None
    order_count: int
    completed_count: int
    assignees: list[str]
    difference: int
    note: str

    model_config = {"from_attributes": True}


class SavedProjectIssueResponse(ProjectIssueResponse):
    comment: str | None = None
