"""
app/services/weekly_sync_service.py

Weekly completion sync: fetch, classify, dedupe, persist, reconcile.

Flow for one team group
-----------------------
1. Compute the completion window and the Monday-09:00 bucket once.
2. Run one branch per team on a thread pool. A branch owns its own
   connector and walks every ``TaskSource`` of the team sequentially.
   Branches share nothing mutable.
3. Wait for every branch (the executor join), then write each team's batch
   with one bulk insert and one commit. A failed team is logged and skipped;
   teams already committed stay committed.
4. Reconcile the window widened to include the bucket, since every task is
   stored under the bucket date, and upsert the issue report.

A team that failed to fetch simply contributes no completed tasks, so its
quotas surface as UNDER in the report.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import lru_cache

from sqlalchemy.orm import Session

from app import failure_codes
from app.config import (
    SyncSettings,
    TrackerSpaceSettings,
    get_sync_settings,
    get_tracker_http_settings,
    get_tracker_space_settings,
)
from app.connectors.base import DecodeError, TrackerConnectorError
from app.connectors.clickup_connector import ClickUpConnector
from app.domain.completion import BranchResult, SyncRunSummary, TeamSyncSummary
from app.domain.teams import (
    CONCEPT_DONE_DATE_FIELD,
    TAG_BANNER,
    TAG_CONCEPT_DONE,
    TAG_CPP,
    TAG_ICON,
    TAG_PLAYABLE,
    TAG_VIDEO,
    ALL_TEAMS,
    TEAM_ART,
    TEAM_CONCEPT,
    TEAM_PLAYABLE,
    TEAM_VIDEO,
    AssigneePolicy,
    TaskSource,
    TeamGroup,
    TeamProfile,
)
from app.domain.tracker import TaskFilter
from app.logging_utils import log_event
from app.services.reconciliation_service import ReconciliationService, get_reconciliation_service
from app.services.task_classifier import TaskClassifier, dedupe_tasks
from app.services.time_window import (
    CompletionWindow,
    current_window,
    reconciliation_window,
    representative_bucket,
)
from db.repositories.completed_task_repository import CompletedTaskRepository
from db.repositories.errors import PersistenceError

logger = logging.getLogger(__name__)

GROUP_TEAMS: dict[TeamGroup, tuple[TeamProfile, ...]] = {
    TeamGroup.CREATIVE: (TEAM_CONCEPT, TEAM_ART),
    TeamGroup.PRODUCTION: (TEAM_PLAYABLE, TEAM_VIDEO),
}


def build_team_sources(spaces: TrackerSpaceSettings) -> dict[str, list[TaskSource]]:
    """
    Every space/tag combination each team's completions are pulled from.

    Teams own a space of their own; work they do for the concept space is
    routed there by tag. Sources whose space id is not configured are left out.
    """

    concept = spaces.concept_space_id
    candidates: dict[str, list[tuple[str | None, dict]]] = {
        TEAM_PLAYABLE.name: [
            (spaces.playable_space_id, {}),
            (concept, {"tag": TAG_PLAYABLE}),
        ],
        TEAM_ART.name: [
            (spaces.art_space_id, {}),
            (concept, {"tag": TAG_CPP}),
            (concept, {"tag": TAG_ICON}),
            (concept, {"tag": TAG_BANNER}),
        ],
        TEAM_VIDEO.name: [
            (spaces.video_space_id, {}),
            (concept, {"tag": TAG_VIDEO}),
        ],
        TEAM_CONCEPT.name: [
            (
                concept,
                {
                    "tag": TAG_CONCEPT_DONE,
                    "completed_only": False,
                    "done_date_field": CONCEPT_DONE_DATE_FIELD,
                    "assignee_policy": AssigneePolicy.FIRST,
                },
            ),
        ],
    }
    teams = {team.name: team for team in ALL_TEAMS}

    sources: dict[str, list[TaskSource]] = {}
    for team_name, entries in candidates.items():
        team_sources: list[TaskSource] = []
        for space_id, options in entries:
            if not space_id:
                logger.warning(
                    "Skipping task source with no space configured team=%s tag=%r",
                    team_name,
                    options.get("tag", ""),
                )
                continue
            team_sources.append(TaskSource(team=teams[team_name], space_id=space_id, **options))
        sources[team_name] = team_sources
    return sources


def build_task_filter(source: TaskSource, window: CompletionWindow) -> TaskFilter:
    """
    Server-side filter for one source. Date bounds are only sent when the
    completion instant is the task's own ``date_done``; the classifier
    re-checks the window either way.
    """

    if source.done_date_field:
        return TaskFilter(completed_only=source.completed_only, tag=source.tag, include_subtasks=True)
    return TaskFilter(
        completed_only=source.completed_only,
        tag=source.tag,
        include_subtasks=True,
        done_after_ms=window.start_ms - 1,
        done_before_ms=window.end_ms + 1,
    )


def parse_team_group(value: TeamGroup | str) -> TeamGroup:
    if isinstance(value, TeamGroup):
        return value
    normalized = value.strip().lower()
    try:
        return TeamGroup(normalized)
    except ValueError as exc:
        allowed = ", ".join(group.value for group in TeamGroup)
        raise ValueError(f"Unsupported team group '{value}'. Allowed groups: {allowed}.") from exc


class WeeklySyncService:
    """
    Pipeline entry point shared by the scheduler and the on-demand endpoint.
    """

    def __init__(
        self,
        *,
        connector_factory: Callable[[], ClickUpConnector],
        session_factory: Callable[[], Session],
        team_sources: Mapping[str, Sequence[TaskSource]],
        settings: SyncSettings,
        reconciliation_service: ReconciliationService | None = None,
        repository_factory: Callable[[Session], CompletedTaskRepository] = CompletedTaskRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._connector_factory = connector_factory
        self._session_factory = session_factory
        self._team_sources = {team: list(sources) for team, sources in team_sources.items()}
        self._settings = settings
        self._reconciliation_service = reconciliation_service or get_reconciliation_service()
        self._repository_factory = repository_factory
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def run(self, group: TeamGroup | str, *, reference: datetime | None = None) -> SyncRunSummary:
        team_group = parse_team_group(group)
        now = reference or self._clock()
        window = current_window(now)
        bucket = representative_bucket(now)
        classifier = TaskClassifier(window=window, bucket=bucket)
        teams = GROUP_TEAMS[team_group]

        logger.info(
            "Weekly sync starting group=%s window_start=%s window_end=%s bucket=%s",
            team_group.value,
            window.start.isoformat(),
            window.end.isoformat(),
            bucket.isoformat(),
        )

        workers = max(1, min(self._settings.max_workers, len(teams)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sync") as executor:
            futures = [executor.submit(self._run_branch, team, classifier) for team in teams]
            branches = [future.result() for future in futures]

        team_summaries, issues_written = self._persist(branches, reconciliation_window(window, bucket))
        summary = SyncRunSummary(
            group=team_group.value,
            window_start=window.start,
            window_end=window.end,
            bucket=bucket,
            teams=team_summaries,
            issues_written=issues_written,
        )
        logger.info(
            "Weekly sync complete group=%s inserted=%s issues=%s failed_teams=%s",
            team_group.value,
            sum(team.tasks_inserted for team in team_summaries),
            issues_written,
            [team.team for team in team_summaries if team.error],
        )
        return summary

    def run_groups(
        self,
        groups: Sequence[TeamGroup | str] | None = None,
        *,
        reference: datetime | None = None,
    ) -> list[SyncRunSummary]:
        selected = [parse_team_group(group) for group in groups] if groups else list(TeamGroup)
        return [self.run(group, reference=reference) for group in selected]

    def _run_branch(self, team: TeamProfile, classifier: TaskClassifier) -> BranchResult:
        sources = self._team_sources.get(team.name, [])
        if not sources:
            logger.warning("No task sources configured team=%s", team.name)
            return BranchResult(team=team.name)

        connector = self._connector_factory()
        accepted = []
        rejected = 0
        try:
            for source in sources:
                fetched = connector.fetch_space(source.space_id, build_task_filter(source, classifier.window))
                tasks, rejections = classifier.classify_many(fetched.tasks, source)
                accepted.extend(tasks)
                rejected += len(rejections)
        except TrackerConnectorError as exc:
            if isinstance(exc, DecodeError):
                code = failure_codes.DECODE_ERROR
            else:
                code = failure_codes.TRANSPORT_ERROR
            logger.exception("Team branch aborted team=%s code=%s error=%s", team.name, code, exc)
            return BranchResult(team=team.name, rejected=rejected, error=f"{code}: {exc}")
        except Exception as exc:
            logger.exception("Unhandled failure in team branch team=%s error=%s", team.name, exc)
            return BranchResult(team=team.name, rejected=rejected, error=str(exc))

        unique = dedupe_tasks(accepted)
        log_event(
            logger,
            logging.INFO,
            "branch_classified",
            team=team.name,
            sources=len(sources),
            accepted=len(accepted),
            unique=len(unique),
            rejected=rejected,
        )
        return BranchResult(
            team=team.name,
            tasks=unique,
            rejected=rejected,
            duplicates=len(accepted) - len(unique),
        )

    def _persist(
        self,
        branches: Sequence[BranchResult],
        report_window: CompletionWindow,
    ) -> tuple[list[TeamSyncSummary], int]:
        summaries: list[TeamSyncSummary] = []
        issues_written = 0
        session = self._session_factory()
        try:
            repository = self._repository_factory(session)
            for branch in branches:
                if branch.error is not None:
                    summaries.append(
                        TeamSyncSummary(
                            team=branch.team,
                            fetched_ok=False,
                            tasks_classified=0,
                            tasks_inserted=0,
                            tasks_rejected=branch.rejected,
                            duplicates_dropped=0,
                            error=branch.error,
                        )
                    )
                    continue

                inserted = 0
                error: str | None = None
                if branch.tasks:
                    try:
                        inserted = repository.bulk_insert_tasks(
                            branch.tasks,
                            batch_size=self._settings.batch_size,
                        )
                        session.commit()
                    except PersistenceError as exc:
                        session.rollback()
                        logger.exception(
                            "Failed to persist completed tasks team=%s error=%s",
                            branch.team,
                            exc,
                        )
                        error = f"{failure_codes.PERSISTENCE_ERROR}: {exc}"

                summaries.append(
                    TeamSyncSummary(
                        team=branch.team,
                        fetched_ok=True,
                        tasks_classified=len(branch.tasks),
                        tasks_inserted=inserted,
                        tasks_rejected=branch.rejected,
                        duplicates_dropped=branch.duplicates,
                        error=error,
                    )
                )

            if self._settings.persist_issues:
                try:
                    issues_written = self._reconciliation_service.save_project_issues(
                        db=session,
                        start=report_window.start,
                        end=report_window.end,
                    )
                    session.commit()
                except PersistenceError as exc:
                    session.rollback()
                    logger.exception("Failed to persist project issues error=%s", exc)
        finally:
            session.close()

        return summaries, issues_written


def _build_connector() -> ClickUpConnector:
    return ClickUpConnector(http_settings=get_tracker_http_settings())


@lru_cache(maxsize=1)
def get_weekly_sync_service() -> WeeklySyncService:
    """
    Build and cache the weekly sync service.
    """

    from db.session import SessionLocal

    return WeeklySyncService(
        connector_factory=_build_connector,
        session_factory=SessionLocal,
        team_sources=build_team_sources(get_tracker_space_settings()),
        settings=get_sync_settings(),
    )
