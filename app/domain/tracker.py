"""
app/domain/tracker.py

Typed views of the task-tracker payloads consumed by the sync pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

# Closed set of shapes a custom-field value takes once decoded from JSON.
FieldValue = Union[int, float, str, list[str], None]


@dataclass(frozen=True)
class FieldOption:
    """
    One selectable option of a dropdown or labels custom field.
    """

    id: str
    label: str
    order_index: int | None = None


@dataclass(frozen=True)
class CustomField:
    """
    A named custom field attached to a tracker task.
    """

    id: str
    name: str
    type: str
    value: FieldValue
    options: tuple[FieldOption, ...] = ()


@dataclass(frozen=True)
class Assignee:
    email: str | None
    username: str | None = None


@dataclass(frozen=True)
class RawTask:
    """
    Task exactly as fetched from the tracker, before classification.
    """

    id: str
    name: str
    date_done: str | None
    assignees: tuple[Assignee, ...] = ()
    custom_fields: tuple[CustomField, ...] = ()


@dataclass(frozen=True)
class TaskListRef:
    id: str
    name: str


@dataclass(frozen=True)
class TaskPage:
    tasks: list[RawTask]
    is_last_page: bool


@dataclass(frozen=True)
class TaskFilter:
    """
    Query parameters sent with every page request of one list fetch.
    """

    completed_only: bool = True
    tag: str = ""
    include_subtasks: bool = True
    done_after_ms: int | None = None
    done_before_ms: int | None = None

    def to_params(self) -> list[tuple[str, Any]]:
        params: list[tuple[str, Any]] = [
            ("include_closed", "true"),
            ("archived", "false"),
        ]
        if self.completed_only:
            params.append(("statuses[]", "COMPLETED"))
        if self.include_subtasks:
            params.append(("subtasks", "true"))
        tag = self.tag.strip()
        if tag:
            params.append(("tags[]", tag))
        if self.done_after_ms is not None:
            params.append(("date_done_gt", self.done_after_ms))
        if self.done_before_ms is not None:
            params.append(("date_done_lt", self.done_before_ms))
        return params


@dataclass(frozen=True)
class SpaceFetchResult:
    """
    Raw tasks collected across every list of one space.
    """

    space_id: str
    tasks: list[RawTask] = field(default_factory=list)
    lists_fetched: int = 0
