"""
app/domain/reconciliation.py

Domain models for quota-versus-actual reconciliation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

NOTE_OVER = "OVER"
NOTE_UNDER = "UNDER"
NOTE_MATCH = "MATCH"

# WeeklyOrder quota columns, in report order.
ORDER_TASK_TYPES: tuple[str, ...] = (
    "art_cpp",
    "art_icon",
    "art_banner",
    "art_asset",
    "playable",
    "video",
    "concept",
)


@dataclass(frozen=True)
class WeeklyOrderInput:
    """
    Quota record for one project and one week.
    """

    project: str
    start_week: datetime
    quotas: dict[str, int] = field(default_factory=dict)
    goal: str | None = None
    strategy: str | None = None

    def order_count(self, task_type: str) -> int:
        return int(self.quotas.get(task_type) or 0)


@dataclass(frozen=True)
class ProjectDetailInput:
    """
    Fallback owner per team for one project, keyed by team name.
    """

    project: str
    assignees_by_team: dict[str, str] = field(default_factory=dict)

    def fallback_for(self, team: str) -> str | None:
        value = (self.assignees_by_team.get(team) or "").strip()
        return value or None


@dataclass(frozen=True)
class OrderCompletionRow:
    """
    One unpivoted order line joined with its matching completed tasks.
    """

    project: str
    start_week: datetime
    task_type: str
    order_count: int
    completed_count: int
    assignees: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectIssueResult:
    project: str
    start_week: datetime
    task_type: str
    team: str | None
    order_count: int
    completed_count: int
    assignees: list[str]
    difference: int
    note: str


def status_note(difference: int) -> str:
    """
    OVER / UNDER / MATCH from the sign of ``difference``.
    """

    if difference > 0:
        return NOTE_OVER
    if difference < 0:
        return NOTE_UNDER
    return NOTE_MATCH
