"""
app/domain/completion.py

Domain models for classified completed tasks and sync outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CompletedTaskInput:
    """
    Canonical completed task prepared for persistence.
    """

    task_id: str
    task_name: str
    assignee_id: str
    team: str
    task_type: str
    level: int
    tools: list[int]
    project: str
    done_date: datetime


@dataclass(frozen=True)
class TaskRejection:
    """
    Why one raw task did not become a completed task.
    """

    task_id: str
    task_name: str
    reason: str
    detail: str | None = None


@dataclass(frozen=True)
class BranchResult:
    """
    Outcome of one team branch of a sync run, before persistence.
    """

    team: str
    tasks: list[CompletedTaskInput] = field(default_factory=list)
    rejected: int = 0
    duplicates: int = 0
    error: str | None = None


@dataclass(frozen=True)
class TeamSyncSummary:
    """
    Per-team summary of one sync run.
    """

    team: str
    fetched_ok: bool
    tasks_classified: int
    tasks_inserted: int
    tasks_rejected: int
    duplicates_dropped: int
    error: str | None = None


@dataclass(frozen=True)
class SyncRunSummary:
    group: str
    window_start: datetime
    window_end: datetime
    bucket: datetime
    teams: list[TeamSyncSummary] = field(default_factory=list)
    issues_written: int = 0
