"""
app/api/dependencies.py

Shared FastAPI dependencies: request-scoped repositories built on ``get_db``.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from db.repositories.completed_task_repository import CompletedTaskRepository
from db.repositories.project_issue_repository import ProjectIssueRepository
from db.repositories.staff_member_repository import StaffMemberRepository
from db.repositories.weekly_order_repository import WeeklyOrderRepository
from db.session import get_db


def get_completed_task_repository(db: Session = Depends(get_db)) -> CompletedTaskRepository:
    return CompletedTaskRepository(db)


def get_project_issue_repository(db: Session = Depends(get_db)) -> ProjectIssueRepository:
    return ProjectIssueRepository(db)


def get_staff_member_repository(db: Session = Depends(get_db)) -> StaffMemberRepository:
    return StaffMemberRepository(db)


def get_weekly_order_repository(db: Session = Depends(get_db)) -> WeeklyOrderRepository:
    return WeeklyOrderRepository(db)
