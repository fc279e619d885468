"""
tests/test_task_classifier.py

Pytest unit tests for TaskClassifier, assignee selection and deduplication.

Coverage
--------
- Accepted task: team, task type, project, level, tools, bucket date
- Each rejection reason, in check order
- Level below one is never produced
- Custom completion-date field for concept sources
- Assignee policies
- Name-based dedupe keeps the first occurrence
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app import failure_codes
from app.domain.completion import CompletedTaskInput, TaskRejection
from app.domain.teams import (
    CONCEPT_DONE_DATE_FIELD,
    TEAM_ART,
    TEAM_CONCEPT,
    TEAM_PLAYABLE,
    AssigneePolicy,
    TaskSource,
)
from app.domain.tracker import Assignee, CustomField, FieldOption, RawTask
from app.services.task_classifier import TaskClassifier, dedupe_key, dedupe_tasks, select_assignee
from app.services.time_window import CompletionWindow

ICT = timezone(timedelta(hours=7), "ICT")
WINDOW = CompletionWindow(
    start=datetime(2026, 10, 13, tzinfo=ICT),
    end=datetime(2026, 10, 19, 23, 59, tzinfo=ICT),
)
BUCKET = datetime(2026, 10, 19, 9, 0, tzinfo=ICT)
INSIDE_MS = str(int(datetime(2026, 10, 15, 10, 0, tzinfo=ICT).timestamp() * 1000))
BEFORE_MS = str(int(datetime(2026, 10, 12, 23, 0, tzinfo=ICT).timestamp() * 1000))

PLAYABLE_SOURCE = TaskSource(team=TEAM_PLAYABLE, space_id="sp-pla")
ART_CPP_SOURCE = TaskSource(team=TEAM_ART, space_id="sp-concept", tag="cpp")
CONCEPT_SOURCE = TaskSource(
    team=TEAM_CONCEPT,
    space_id="sp-concept",
    tag="concept done",
    completed_only=False,
    done_date_field=CONCEPT_DONE_DATE_FIELD,
    assignee_policy=AssigneePolicy.FIRST,
)


def _project(index=0) -> CustomField:
    return CustomField(
        id="gn",
        name="Game Name",
        type="drop_down",
        value=index,
        options=(FieldOption(id="p0", label="P07 Space Miner"), FieldOption(id="p1", label="P08 Farm")),
    )


def _task(
    *,
    task_id: str = "t1",
    name: str = "Build level 3",
    date_done: str | None = INSIDE_MS,
    label: str = "PLA",
    level=2,
    project: CustomField | None = None,
    extra: tuple[CustomField, ...] = (),
    assignees: tuple[Assignee, ...] = (Assignee(email="dev@studio.io"),),
    include_level: bool = True,
    include_project: bool = True,
) -> RawTask:
    fields: list[CustomField] = []
    if include_level:
        fields.append(CustomField(id="lv", name=f"{label} Difficult", type="number", value=level))
    if include_project:
        fields.append(project or _project())
    fields.extend(extra)
    return RawTask(
        id=task_id,
        name=name,
        date_done=date_done,
        assignees=assignees,
        custom_fields=tuple(fields),
    )


@pytest.fixture()
def classifier() -> TaskClassifier:
    return TaskClassifier(window=WINDOW, bucket=BUCKET)


class TestAccepted:
    def test_builds_completed_task(self, classifier: TaskClassifier) -> None:
        tools = CustomField(
            id="tl",
            name="Tool/CTST PLA",
            type="labels",
            value=["x"],
            options=(FieldOption(id="x", label="4 Cocos"),),
        )
        result = classifier.classify(_task(extra=(tools,)), PLAYABLE_SOURCE)

        assert isinstance(result, CompletedTaskInput)
        assert result.team == "Playable"
        assert result.task_type == "playable"
        assert result.project == "Space Miner"
        assert result.level == 2
        assert result.tools == [4]
        assert result.assignee_id == "dev@studio.io"
        assert result.done_date == BUCKET

    def test_art_tag_becomes_task_type(self, classifier: TaskClassifier) -> None:
        result = classifier.classify(_task(label="Art"), ART_CPP_SOURCE)
        assert isinstance(result, CompletedTaskInput)
        assert result.task_type == "art_cpp"
        assert result.team == "Art"

    def test_unreadable_tools_do_not_reject(self, classifier: TaskClassifier) -> None:
        tools = CustomField(id="tl", name="Tool/CTST PLA", type="labels", value="oops")
        result = classifier.classify(_task(extra=(tools,)), PLAYABLE_SOURCE)
        assert isinstance(result, CompletedTaskInput)
        assert result.tools == []

    def test_no_assignee_gives_empty_owner(self, classifier: TaskClassifier) -> None:
        result = classifier.classify(_task(assignees=()), PLAYABLE_SOURCE)
        assert isinstance(result, CompletedTaskInput)
        assert result.assignee_id == ""

    def test_concept_reads_custom_date_field(self, classifier: TaskClassifier) -> None:
        done_field = CustomField(id="dd", name=CONCEPT_DONE_DATE_FIELD, type="date", value=INSIDE_MS)
        task = _task(label="Concept", date_done=None, extra=(done_field,))
        result = classifier.classify(task, CONCEPT_SOURCE)
        assert isinstance(result, CompletedTaskInput)
        assert result.task_type == "concept"


class TestRejected:
    def _reason(self, classifier: TaskClassifier, task: RawTask, source: TaskSource = PLAYABLE_SOURCE) -> str:
        result = classifier.classify(task, source)
        assert isinstance(result, TaskRejection)
        return result.reason

    def test_missing_completion_date(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(date_done=None)) == failure_codes.MISSING_COMPLETION_DATE

    def test_concept_ignores_native_date_done(self, classifier: TaskClassifier) -> None:
        task = _task(label="Concept", date_done=INSIDE_MS)
        assert self._reason(classifier, task, CONCEPT_SOURCE) == failure_codes.MISSING_COMPLETION_DATE

    def test_unparseable_date(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(date_done="yesterday")) == failure_codes.COERCION_FAILED

    @pytest.mark.parametrize("date_done", ["\u00b2", "\u0663\u0663\u0663"])
    def test_unicode_digit_date_is_rejected_not_raised(self, classifier: TaskClassifier, date_done: str) -> None:
        assert self._reason(classifier, _task(date_done=date_done)) == failure_codes.COERCION_FAILED

    def test_malformed_project_index_is_rejected_not_raised(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(project=_project("--3"))) == failure_codes.COERCION_FAILED

    def test_outside_window(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(date_done=BEFORE_MS)) == failure_codes.OUTSIDE_WINDOW

    def test_missing_difficulty(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(include_level=False)) == failure_codes.MISSING_DIFFICULTY

    def test_null_difficulty(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(level=None)) == failure_codes.MISSING_DIFFICULTY

    def test_missing_project(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(include_project=False)) == failure_codes.MISSING_PROJECT

    def test_project_out_of_range(self, classifier: TaskClassifier) -> None:
        reason = self._reason(classifier, _task(project=_project(9)))
        assert reason == failure_codes.PROJECT_OPTION_OUT_OF_RANGE

    def test_bad_difficulty_shape(self, classifier: TaskClassifier) -> None:
        assert self._reason(classifier, _task(level="hard")) == failure_codes.COERCION_FAILED

    @pytest.mark.parametrize("level", [0, -3, "0", 0.9])
    def test_level_below_one_is_never_produced(self, classifier: TaskClassifier, level) -> None:
        assert self._reason(classifier, _task(level=level)) == failure_codes.LEVEL_BELOW_MINIMUM

    def test_window_is_checked_before_fields(self, classifier: TaskClassifier) -> None:
        task = _task(date_done=BEFORE_MS, include_level=False, include_project=False)
        assert self._reason(classifier, task) == failure_codes.OUTSIDE_WINDOW


class TestClassifyMany:
    def test_splits_accepted_and_rejected(self, classifier: TaskClassifier) -> None:
        accepted, rejected = classifier.classify_many(
            [_task(task_id="a"), _task(task_id="b", level=0), _task(task_id="c", name="Other")],
            PLAYABLE_SOURCE,
        )
        assert [task.task_id for task in accepted] == ["a", "c"]
        assert [rejection.task_id for rejection in rejected] == ["b"]


class TestSelectAssignee:
    def test_prefer_second_with_two(self) -> None:
        assignees = (Assignee(email="lead@studio.io"), Assignee(email="dev@studio.io"))
        assert select_assignee(assignees, AssigneePolicy.PREFER_SECOND) == "dev@studio.io"

    def test_prefer_second_with_one(self) -> None:
        assert select_assignee((Assignee(email="solo@studio.io"),), AssigneePolicy.PREFER_SECOND) == "solo@studio.io"

    def test_first_policy(self) -> None:
        assignees = (Assignee(email="lead@studio.io"), Assignee(email="dev@studio.io"))
        assert select_assignee(assignees, AssigneePolicy.FIRST) == "lead@studio.io"

    def test_missing_email(self) -> None:
        assert select_assignee((Assignee(email=None),), AssigneePolicy.FIRST) == ""


class TestDedupe:
    def _completed(self, task_id: str, name: str) -> CompletedTaskInput:
        return CompletedTaskInput(
            task_id=task_id,
            task_name=name,
            assignee_id="dev@studio.io",
            team="Playable",
            task_type="playable",
            level=1,
            tools=[],
            project="Space Miner",
            done_date=BUCKET,
        )

    def test_whitespace_and_case_collapse(self) -> None:
        assert dedupe_key("Fix Bug") == dedupe_key("fix   bug")

    def test_keeps_first_occurrence(self) -> None:
        tasks = [self._completed("1", "Fix Bug"), self._completed("2", "fix   bug"), self._completed("3", "Other")]
        assert [task.task_id for task in dedupe_tasks(tasks)] == ["1", "3"]

    def test_blank_names_are_kept(self) -> None:
        tasks = [self._completed("1", ""), self._completed("2", "  ")]
        assert len(dedupe_tasks(tasks)) == 2


class TestRejectionCatalogue:
    def test_every_reason_the_classifier_emits_is_catalogued(self, classifier: TaskClassifier) -> None:
        tasks = [
            _task(task_id="1", date_done=None),
            _task(task_id="2", date_done=BEFORE_MS),
            _task(task_id="3", level=0),
            _task(task_id="4", include_project=False),
        ]
        _, rejected = classifier.classify_many(tasks, PLAYABLE_SOURCE)
        assert {rejection.reason for rejection in rejected} <= set(failure_codes.REJECTION_REASONS)
        assert len(rejected) == 4
