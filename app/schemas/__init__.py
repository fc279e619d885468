"""
app/schemas package marker.
"""

from app.schemas.completion import CompletedTaskQueryRequest, CompletedTaskResponse
from app.schemas.reconciliation import (
    ProjectIssueResponse,
    SavedProjectIssueResponse,
    WeeklyOrderRequest,
    WeeklyOrderResponse,
)
from app.schemas.staff import StaffMemberQueryRequest, StaffMemberResponse
from app.schemas.sync import (
    HealthResponse,
    SyncRunRequest,
    SyncRunResponse,
    TeamSyncSummaryResponse,
)

__all__ = [
    "CompletedTaskQueryRequest",
    "CompletedTaskResponse",
    "HealthResponse",
    "ProjectIssueResponse",
    "SavedProjectIssueResponse",
    "StaffMemberQueryRequest",
    "StaffMemberResponse",
    "SyncRunRequest",
    "SyncRunResponse",
    "TeamSyncSummaryResponse",
    "WeeklyOrderRequest",
    "WeeklyOrderResponse",
]
