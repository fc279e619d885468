"""
app/domain package marker.
"""

from app.domain.completion import BranchResult, CompletedTaskInput, SyncRunSummary, TaskRejection, TeamSyncSummary
from app.domain.reconciliation import (
    OrderCompletionRow,
    ProjectDetailInput,
    ProjectIssueResult,
    WeeklyOrderInput,
)
from app.domain.teams import AssigneePolicy, TaskSource, TeamGroup, TeamProfile
from app.domain.tracker import CustomField, RawTask, TaskFilter

__all__ = [
    "AssigneePolicy",
    "BranchResult",
    "CompletedTaskInput",
    "CustomField",
    "OrderCompletionRow",
    "ProjectDetailInput",
    "ProjectIssueResult",
    "RawTask",
    "SyncRunSummary",
    "TaskFilter",
    "TaskRejection",
    "TaskSource",
    "TeamGroup",
    "TeamProfile",
    "TeamSyncSummary",
    "WeeklyOrderInput",
]
