from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.schemas.sync import HealthResponse


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - No empty-string values are accepted.
    - SQLite and local database fallbacks are not permitted.
    - CLICKUP_TOKEN is required.
    - At least one CLICKUP_SPACE_ID_* must be set, or the sync has nothing to read.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    local_database_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if not database_url and not cloud_database_url and not local_database_url:
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL or "
            "LOCAL_DATABASE_URL. SQLite fallbacks are not permitted."
        )

    # --- Tracker token --------------------------------------------------
    if not os.getenv("CLICKUP_TOKEN", "").strip():
        errors.append(
            "CLICKUP_TOKEN is not set. Provide the tracker API token. "
            "Empty strings are not permitted."
        )

    # --- Tracker spaces -------------------------------------------------
    space_vars = (
        "CLICKUP_SPACE_ID_PLA",
        "CLICKUP_SPACE_ID_ART",
        "CLICKUP_SPACE_ID_VIDEO",
        "CLICKUP_SPACE_ID_CONCEPT",
    )
    if not any(os.getenv(name, "").strip() for name in space_vars):
        errors.append(
            "No tracker space configured. Set at least one of: " + ", ".join(space_vars) + "."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.config import redact_database_url, resolve_database_url
    from db.session import session_scope

    target = redact_database_url(resolve_database_url())
    try:
        with session_scope() as db:
            db.execute(text("SELECT 1"))
    except Exception as exc:
        raise RuntimeError(f"Database unavailable at {target}.") from exc


def _check_schema() -> None:
    """
    Compare Base.metadata table names against the live DB schema.

    Every table registered on Base.metadata must exist in the database.
    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch: %d table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema, start the scheduler on boot; shut it down on exit."""
    from app.config import get_scheduler_settings

    log = logging.getLogger(__name__)
    _check_db()
    log.info("Database connectivity confirmed")
    _check_schema()
    log.info("Database schema validated")

    if not get_scheduler_settings().enabled:
        log.info("Scheduler disabled by SCHEDULER_ENABLED")
        yield
        return

    from app.scheduler.jobs import build_scheduler

    scheduler = build_scheduler()
    scheduler.start()
    log.info("Scheduler started with %d jobs", len(scheduler.get_jobs()))
    try:
        yield
    finally:
        scheduler.shutdown(wait=True)
        log.info("Scheduler shut down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Creative Output Tracker API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import (
        completed_tasks_router,
        project_issues_router,
        staff_members_router,
        sync_router,
        weekly_orders_router,
    )

    application.include_router(completed_tasks_router)
    application.include_router(staff_members_router)
    application.include_router(weekly_orders_router)
    application.include_router(project_issues_router)
    application.include_router(sync_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        from app.config import get_scheduler_settings

        return HealthResponse(status="ok", scheduler_enabled=get_scheduler_settings().enabled)

    return application


app = create_app()
