"""
app/services package marker.
"""

from app.services.reconciliation_service import (
    ReconciliationEngine,
    ReconciliationService,
    get_reconciliation_service,
)
from app.services.task_classifier import TaskClassifier, dedupe_tasks
from app.services.weekly_sync_service import (
    WeeklySyncService,
    get_weekly_sync_service,
)

__all__ = [
    "ReconciliationEngine",
    "ReconciliationService",
    "get_reconciliation_service",
    "TaskClassifier",
    "dedupe_tasks",
    "WeeklySyncService",
    "get_weekly_sync_service",
]
