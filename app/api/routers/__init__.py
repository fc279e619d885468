"""
app/api/routers package marker.
"""

from app.api.routers.completed_tasks import router as completed_tasks_router
from app.api.routers.project_issues import router as project_issues_router
from app.api.routers.staff_members import router as staff_members_router
from app.api.routers.sync import router as sync_router
from app.api.routers.weekly_orders import router as weekly_orders_router

__all__ = [
    "completed_tasks_router",
    "project_issues_router",
    "staff_members_router",
    "sync_router",
    "weekly_orders_router",
]
