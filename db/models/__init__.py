"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.completed_task import CompletedTask
from db.models.project_detail import ProjectDetail
from db.models.project_issue import ProjectIssue
from db.models.staff_member import StaffMember
from db.models.weekly_order import WeeklyOrder

__all__ = [
    "CompletedTask",
    "ProjectDetail",
    "ProjectIssue",
    "StaffMember",
    "WeeklyOrder",
]
