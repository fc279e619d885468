"""
app/scheduler/jobs.py

APScheduler-based weekly trigger for the completion sync.

Schedule (anchor timezone, Asia/Ho_Chi_Minh)
--------------------------------------------
  creative_sync    : Concept + Art, Monday 23:30 by default
  production_sync  : Playable + Video, Monday 23:59 by default

Both times are overridable through ``SCHEDULER_*`` env vars. Running just
before the Tuesday anchor means the window covers the whole working week.

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.config import SchedulerSettings, get_scheduler_settings
from app.domain.teams import TeamGroup
from app.services.time_window import resolve_timezone
from app.services.weekly_sync_service import WeeklySyncService, get_weekly_sync_service

logger = logging.getLogger(__name__)


def run_group_sync(group: TeamGroup, pipeline: WeeklySyncService | None = None) -> None:
    """
    Run one weekly sync for ``group``. Failures are logged, never raised,
    so the scheduler keeps firing on later weeks.
    """
    logger.info("Scheduler: %s_sync starting", group.value)
    service = pipeline or get_weekly_sync_service()
    try:
        summary = service.run(group)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Scheduler: %s_sync failed: %s", group.value, exc)
        return

    for team in summary.teams:
        if team.error:
            logger.warning(
                "Scheduler: %s_sync team=%s failed: %s",
                group.value,
                team.team,
                team.error,
            )
    logger.info(
        "Scheduler: %s_sync complete inserted=%s issues=%s",
        group.value,
        sum(team.tasks_inserted for team in summary.teams),
        summary.issues_written,
    )


def build_scheduler(
    pipeline: WeeklySyncService | None = None,
    settings: SchedulerSettings | None = None,
) -> BackgroundScheduler:
    """
    Build and register both weekly jobs.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    The caller must call ``.start()`` and ``.shutdown(wait=True)`` at the
    appropriate lifecycle points.
    """
    config = settings or get_scheduler_settings()
    scheduler = BackgroundScheduler(timezone=resolve_timezone())

    scheduler.add_job(
        run_group_sync,
        trigger="cron",
        day_of_week=config.creative_day_of_week,
        hour=config.creative_hour,
        minute=config.creative_minute,
        args=[TeamGroup.CREATIVE, pipeline],
        id="creative_sync",
        name="Weekly creative team sync",
        replace_existing=True,
        misfire_grace_time=3600,
        max_instances=1,
    )
    scheduler.add_job(
        run_group_sync,
        trigger="cron",
        day_of_week=config.production_day_of_week,
        hour=config.production_hour,
        minute=config.production_minute,
        args=[TeamGroup.PRODUCTION, pipeline],
        id="production_sync",
        name="Weekly production team sync",
        replace_existing=True,
        misfire_grace_time=3600,
        max_instances=1,
    )

    return scheduler
