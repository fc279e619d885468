"""
Repository layer exports.
"""

from db.repositories.completed_task_repository import CompletedTaskRepository
from db.repositories.errors import (
    CompletedTaskPersistenceError,
    PersistenceError,
    ReconciliationQueryError,
)
from db.repositories.project_detail_repository import ProjectDetailRepository
from db.repositories.project_issue_repository import ProjectIssueRepository
from db.repositories.reconciliation_repository import ReconciliationRepository
from db.repositories.staff_member_repository import StaffMemberRepository
from db.repositories.weekly_order_repository import WeeklyOrderRepository

__all__ = [
    "CompletedTaskRepository",
    "ProjectDetailRepository",
    "ProjectIssueRepository",
    "ReconciliationRepository",
    "StaffMemberRepository",
    "WeeklyOrderRepository",
    "PersistenceError",
    "CompletedTaskPersistenceError",
    "ReconciliationQueryError",
]
