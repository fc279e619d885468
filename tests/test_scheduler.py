"""
tests/test_scheduler.py

Tests for the weekly APScheduler wiring. The scheduler is built but never started.
"""

from __future__ import annotations

from datetime import datetime, timezone

from app.config import SchedulerSettings
from app.domain.completion import SyncRunSummary, TeamSyncSummary
from app.domain.teams import TeamGroup
from app.scheduler.jobs import build_scheduler, run_group_sync


class _FakePipeline:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.groups: list[TeamGroup] = []

    def run(self, group: TeamGroup) -> SyncRunSummary:
        self.groups.append(group)
        if self.fail:
            raise RuntimeError("boom")
        now = datetime(2026, 10, 19, tzinfo=timezone.utc)
        return SyncRunSummary(
            group=group.value,
            window_start=now,
            window_end=now,
            bucket=now,
            teams=[
                TeamSyncSummary(
                    team="Art",
                    fetched_ok=False,
                    tasks_classified=0,
                    tasks_inserted=0,
                    tasks_rejected=0,
                    duplicates_dropped=0,
                    error="transport_error: down",
                )
            ],
        )


class TestBuildScheduler:
    def test_registers_both_group_jobs(self) -> None:
        pipeline = _FakePipeline()
        scheduler = build_scheduler(pipeline=pipeline, settings=SchedulerSettings())
        jobs = {job.id: job for job in scheduler.get_jobs()}

        assert set(jobs) == {"creative_sync", "production_sync"}
        assert jobs["creative_sync"].args == (TeamGroup.CREATIVE, pipeline)
        assert jobs["production_sync"].args == (TeamGroup.PRODUCTION, pipeline)

    def test_cron_fields_follow_settings(self) -> None:
        settings = SchedulerSettings(production_day_of_week="sun", production_hour=22, production_minute=15)
        scheduler = build_scheduler(pipeline=_FakePipeline(), settings=settings)
        trigger = scheduler.get_job("production_sync").trigger
        fields = {field.name: str(field) for field in trigger.fields}

        assert fields["day_of_week"] == "sun"
        assert fields["hour"] == "22"
        assert fields["minute"] == "15"


class TestRunGroupSync:
    def test_runs_pipeline_for_group(self) -> None:
        pipeline = _FakePipeline()
        run_group_sync(TeamGroup.PRODUCTION, pipeline)  # type: ignore[arg-type]
        assert pipeline.groups == [TeamGroup.PRODUCTION]

    def test_pipeline_failure_is_contained(self) -> None:
        pipeline = _FakePipeline(fail=True)
        run_group_sync(TeamGroup.CREATIVE, pipeline)  # type: ignore[arg-type]
        assert pipeline.groups == [TeamGroup.CREATIVE]
