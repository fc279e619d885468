"""
tests/test_api_routes.py

FastAPI route tests with dependency overrides. No database, no tracker.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.dependencies import (
    get_completed_task_repository,
    get_project_issue_repository,
    get_staff_member_repository,
    get_weekly_order_repository,
)
from app.api.routers import (
    completed_tasks_router,
    project_issues_router,
    staff_members_router,
    sync_router,
    weekly_orders_router,
)
from app.domain.completion import SyncRunSummary, TeamSyncSummary
from app.domain.reconciliation import ProjectIssueResult, WeeklyOrderInput
from app.services.reconciliation_service import get_reconciliation_service
from app.services.weekly_sync_service import get_weekly_sync_service, parse_team_group
from db.repositories.errors import PersistenceError
from db.session import get_db

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


class _FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class _FakeCompletedTaskRepository:
    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []

    def _row(self, assignee: str, team: str) -> SimpleNamespace:
        return SimpleNamespace(
            id=uuid.uuid4(),
            task_id="t1",
            task_name="Fix Bug",
            assignee_id=assignee,
            team=team,
            task_type="playable",
            level=2,
            tools=[3],
            project="Foo",
            done_date=NOW,
        )

    def find_by_assignees(self, identifiers, start, end):
        self.calls.append(("assignees", list(identifiers)))
        return [self._row(identifiers[0], "Playable")]

    def find_by_teams(self, identifiers, start, end):
        self.calls.append(("teams", list(identifiers)))
        return [self._row("dev@studio.io", identifiers[0])]


class _FakeStaffRepository:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.teams: list[str] | None = None

    def list_by_teams(self, teams):
        self.teams = list(teams)
        if self.fail:
            raise PersistenceError("db down")
        return [SimpleNamespace(email="dev@studio.io", name="Dev", team="Art", role="artist")]


class _FakeOrderRepository:
    def upsert_order(self, order):
        return order

    def list_in_window(self, start, end, *, project=None):
        return [WeeklyOrderInput(project=project or "Foo", start_week=start, quotas={"video": 2})]


class _FakeIssueRepository:
    def list_in_window(self, start, end):
        return [
            SimpleNamespace(
                project="Foo",
                start_week=start,
                task_type="video",
                team="Video",
                order_count=2,
                completed_count=2,
                assignees=["v@studio.io"],
                difference=0,
                note="MATCH",
                comment="on track",
            )
        ]


class _FakeReconciliationService:
    def get_project_issues(self, *, db, start, end, project=None):
        return [
            ProjectIssueResult(
                project="Foo",
                start_week=start,
                task_type="playable",
                team="Playable",
                order_count=3,
                completed_count=2,
                assignees=["dev@studio.io"],
                difference=-1,
                note="UNDER",
            )
        ]


class _FakeSyncService:
    def __init__(self) -> None:
        self.groups = None

    def run_groups(self, groups=None):
        self.groups = groups
        selected = [parse_team_group(group) for group in groups] if groups else []
        return [
            SyncRunSummary(
                group=group.value,
                window_start=NOW,
                window_end=NOW,
                bucket=NOW,
                teams=[
                    TeamSyncSummary(
                        team="Art",
                        fetched_ok=True,
                        tasks_classified=2,
                        tasks_inserted=2,
                        tasks_rejected=1,
                        duplicates_dropped=0,
                    )
                ],
                issues_written=5,
            )
            for group in selected
        ]


@pytest.fixture()
def context():
    session = _FakeSession()
    tasks = _FakeCompletedTaskRepository()
    staff = _FakeStaffRepository()
    sync = _FakeSyncService()

    application = FastAPI()
    for router in (
        completed_tasks_router,
        staff_members_router,
        weekly_orders_router,
        project_issues_router,
        sync_router,
    ):
        application.include_router(router)

    application.dependency_overrides[get_db] = lambda: session
    application.dependency_overrides[get_completed_task_repository] = lambda: tasks
    application.dependency_overrides[get_staff_member_repository] = lambda: staff
    application.dependency_overrides[get_weekly_order_repository] = lambda: _FakeOrderRepository()
    application.dependency_overrides[get_project_issue_repository] = lambda: _FakeIssueRepository()
    application.dependency_overrides[get_reconciliation_service] = lambda: _FakeReconciliationService()
    application.dependency_overrides[get_weekly_sync_service] = lambda: sync

    return SimpleNamespace(
        client=TestClient(application),
        session=session,
        tasks=tasks,
        staff=staff,
        sync=sync,
    )


class TestCompletedTasks:
    def test_query_by_assignee(self, context) -> None:
        response = context.client.post(
            "/completed-tasks/query",
            json={
                "identifiers": ["dev@studio.io"],
                "start_date": "2026-10-13T00:00:00+07:00",
                "end_date": "2026-10-19T23:59:00+07:00",
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body[0]["assignee_id"] == "dev@studio.io"
        assert context.tasks.calls == [("assignees", ["dev@studio.io"])]

    def test_query_by_team(self, context) -> None:
        response = context.client.post(
            "/completed-tasks/query",
            json={
                "identifiers": ["Art"],
                "start_date": "2026-10-13T00:00:00+07:00",
                "end_date": "2026-10-19T23:59:00+07:00",
                "is_team": True,
            },
        )
        assert response.status_code == 200
        assert context.tasks.calls == [("teams", ["Art"])]

    def test_inverted_range_is_rejected(self, context) -> None:
        response = context.client.post(
            "/completed-tasks/query",
            json={
                "identifiers": ["dev@studio.io"],
                "start_date": "2026-10-19T00:00:00Z",
                "end_date": "2026-10-13T00:00:00Z",
            },
        )
        assert response.status_code == 422

    def test_blank_identifiers_are_rejected(self, context) -> None:
        response = context.client.post(
            "/completed-tasks/query",
            json={
                "identifiers": ["  "],
                "start_date": "2026-10-13T00:00:00Z",
                "end_date": "2026-10-19T00:00:00Z",
            },
        )
        assert response.status_code == 400


class TestStaffMembers:
    def test_lists_members(self, context) -> None:
        response = context.client.post("/staff-members", json={"teams": ["Art"]})
        assert response.status_code == 200
        assert response.json() == [{"email": "dev@studio.io", "name": "Dev", "team": "Art", "role": "artist"}]
        assert context.staff.teams == ["Art"]

    def test_persistence_error_maps_to_500(self, context) -> None:
        context.staff.fail = True
        response = context.client.post("/staff-members", json={})
        assert response.status_code == 500


class TestWeeklyOrders:
    def test_upsert_commits_and_echoes(self, context) -> None:
        response = context.client.post(
            "/weekly-orders",
            json={"project": " Foo ", "start_week": "2026-10-13T00:00:00+07:00", "playable": 3},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["project"] == "Foo"
        assert body["playable"] == 3
        assert body["video"] == 0
        assert context.session.commits == 1

    def test_negative_quota_is_rejected(self, context) -> None:
        response = context.client.post(
            "/weekly-orders",
            json={"project": "Foo", "start_week": "2026-10-13T00:00:00Z", "video": -1},
        )
        assert response.status_code == 422

    def test_lists_orders_in_range(self, context) -> None:
        response = context.client.get(
            "/weekly-orders",
            params={"start": "2026-10-13T00:00:00Z", "end": "2026-10-19T00:00:00Z", "project": "Bar"},
        )
        assert response.status_code == 200
        (order,) = response.json()
        assert order["project"] == "Bar"
        assert order["video"] == 2
        assert order["playable"] == 0


class TestProjectIssues:
    def test_returns_report(self, context) -> None:
        response = context.client.get(
            "/project-issues",
            params={"start": "2026-10-13T00:00:00Z", "end": "2026-10-19T23:59:00Z"},
        )
        assert response.status_code == 200
        (issue,) = response.json()
        assert issue["difference"] == -1
        assert issue["note"] == "UNDER"

    def test_inverted_range_is_400(self, context) -> None:
        response = context.client.get(
            "/project-issues",
            params={"start": "2026-10-19T00:00:00Z", "end": "2026-10-13T00:00:00Z"},
        )
        assert response.status_code == 400


    def test_saved_report_includes_comment(self, context) -> None:
        response = context.client.get(
            "/project-issues/saved",
            params={"start": "2026-10-13T00:00:00Z", "end": "2026-10-19T23:59:00Z"},
        )
        assert response.status_code == 200
        (issue,) = response.json()
        assert issue["comment"] == "on track"
        assert issue["note"] == "MATCH"


class TestSync:
    def test_runs_requested_group(self, context) -> None:
        response = context.client.post("/sync/run", json={"groups": ["creative"]})
        assert response.status_code == 200
        (summary,) = response.json()
        assert summary["group"] == "creative"
        assert summary["teams"][0]["tasks_inserted"] == 2
        assert summary["issues_written"] == 5

    def test_unknown_group_is_400(self, context) -> None:
        response = context.client.post("/sync/run", json={"groups": ["marketing"]})
        assert response.status_code == 400
