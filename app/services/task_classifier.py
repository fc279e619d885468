"""
app/services/task_classifier.py

Turns raw tracker tasks into canonical completed tasks.

Each raw task is checked in a fixed order and the first failing check
produces a ``TaskRejection``; rejections are logged and never raised, so one
bad task cannot stop a batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from app import failure_codes
from app.domain.completion import CompletedTaskInput, TaskRejection
from app.domain.teams import PROJECT_FIELD, AssigneePolicy, TaskSource, derive_task_type
from app.domain.tracker import Assignee, RawTask
from app.logging_utils import count_reasons, log_event
from app.normalizers.custom_fields import (
    CoercionError,
    ValidationRejection,
    coerce_epoch_millis,
    coerce_level,
    coerce_project,
    coerce_tool_indexes,
    index_fields,
    millis_to_datetime,
)
from app.services.time_window import CompletionWindow

logger = logging.getLogger(__name__)

MIN_LEVEL = 1


def select_assignee(assignees: Sequence[Assignee], policy: AssigneePolicy) -> str:
    """
    Pick the owner email. ``PREFER_SECOND`` takes the second entry when there
    are several; ``FIRST`` always takes the first. No assignee gives ``""``.
    """

    if not assignees:
        return ""
    index = 1 if policy is AssigneePolicy.PREFER_SECOND and len(assignees) > 1 else 0
    return (assignees[index].email or "").strip()


def dedupe_key(name: str) -> str:
    return " ".join(name.split()).casefold()


def dedupe_tasks(tasks: Iterable[CompletedTaskInput]) -> list[CompletedTaskInput]:
    """
    Drop later tasks whose normalized display name was already seen.

    Tasks with a blank name are never treated as duplicates of each other.
    """

    seen: set[str] = set()
    unique: list[CompletedTaskInput] = []
    for task in tasks:
        key = dedupe_key(task.task_name)
        if not key:
            unique.append(task)
            continue
        if key in seen:
            continue
        seen.add(key)
        unique.append(task)
    return unique


class TaskClassifier:
    """
    Stateless per-run classifier bound to one completion window and bucket date.
    """

    def __init__(
        self,
        *,
        window: CompletionWindow,
        bucket: datetime,
        min_level: int = MIN_LEVEL,
    ) -> None:
        self._window = window
        self._bucket = bucket
        self._min_level = max(1, min_level)

    @property
    def window(self) -> CompletionWindow:
        return self._window

    @property
    def bucket(self) -> datetime:
        return self._bucket

    def classify(self, raw_task: RawTask, source: TaskSource) -> CompletedTaskInput | TaskRejection:
        fields = index_fields(raw_task)
        team = source.team

        def reject(reason: str, detail: str | None = None) -> TaskRejection:
            rejection = TaskRejection(
                task_id=raw_task.id,
                task_name=raw_task.name,
                reason=reason,
                detail=detail,
            )
            log_event(
                logger,
                logging.INFO,
                "task_rejected",
                source=source.label,
                task_id=raw_task.id,
                task_name=raw_task.name,
                reason=reason,
                detail=detail,
            )
            return rejection

        if source.done_date_field:
            date_field = fields.get(source.done_date_field)
            done_raw = date_field.value if date_field is not None else None
        else:
            done_raw = raw_task.date_done
        if done_raw is None or done_raw == "":
            return reject(failure_codes.MISSING_COMPLETION_DATE)

        try:
            done_ms = coerce_epoch_millis(done_raw, field_name=source.done_date_field or "date_done")
        except CoercionError as exc:
            return reject(failure_codes.COERCION_FAILED, str(exc))
        done_at = millis_to_datetime(done_ms)
        if not self._window.contains(done_at):
            return reject(failure_codes.OUTSIDE_WINDOW, done_at.isoformat())

        level_field = fields.get(team.difficulty_field)
        if level_field is None or level_field.value is None:
            return reject(failure_codes.MISSING_DIFFICULTY, team.difficulty_field)

        project_field = fields.get(PROJECT_FIELD)
        if project_field is None or project_field.value is None:
            return reject(failure_codes.MISSING_PROJECT, PROJECT_FIELD)

        try:
            project = coerce_project(project_field)
        except ValidationRejection as exc:
            return reject(exc.reason, str(exc))
        except CoercionError as exc:
            return reject(failure_codes.COERCION_FAILED, str(exc))

        try:
            level = coerce_level(level_field.value, field_name=level_field.name)
        except CoercionError as exc:
            return reject(failure_codes.COERCION_FAILED, str(exc))
        if level < self._min_level:
            return reject(failure_codes.LEVEL_BELOW_MINIMUM, str(level))

        tools: list[int] = []
        tool_field = fields.get(team.tool_field)
        if tool_field is not None:
            try:
                tools = coerce_tool_indexes(tool_field)
            except CoercionError as exc:
                logger.warning(
                    "Ignoring unreadable tool field source=%s task_id=%s error=%s",
                    source.label,
                    raw_task.id,
                    exc,
                )

        return CompletedTaskInput(
            task_id=raw_task.id,
            task_name=raw_task.name,
            assignee_id=select_assignee(raw_task.assignees, source.assignee_policy),
            team=team.name,
            task_type=derive_task_type(team, source.tag),
            level=level,
            tools=tools,
            project=project,
            done_date=self._bucket,
        )

    def classify_many(
        self,
        raw_tasks: Iterable[RawTask],
        source: TaskSource,
    ) -> tuple[list[CompletedTaskInput], list[TaskRejection]]:
        accepted: list[CompletedTaskInput] = []
        rejected: list[TaskRejection] = []
        for raw_task in raw_tasks:
            outcome = self.classify(raw_task, source)
            if isinstance(outcome, TaskRejection):
                rejected.append(outcome)
            else:
                accepted.append(outcome)

        log_event(
            logger,
            logging.INFO,
            "source_classified",
            source=source.label,
            accepted=len(accepted),
            rejected=len(rejected),
            reasons=count_reasons(rejection.reason for rejection in rejected),
        )
        return accepted, rejected
