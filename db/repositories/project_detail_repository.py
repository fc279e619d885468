"""
db/repositories/project_detail_repository.py

Lookup of per-project fallback owners.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.reconciliation import ProjectDetailInput
from app.domain.teams import TEAM_ART, TEAM_CONCEPT, TEAM_PLAYABLE, TEAM_VIDEO
from db.models.project_detail import ProjectDetail
from db.repositories.errors import PersistenceError


class ProjectDetailRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_projects(self, projects: Sequence[str]) -> dict[str, ProjectDetailInput]:
        if not projects:
            return {}

        stmt = select(ProjectDetail).where(ProjectDetail.project.in_(list(set(projects))))
        try:
            rows = self._session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to query project details: {exc}") from exc

        return {
            row.project: ProjectDetailInput(
                project=row.project,
                assignees_by_team={
                    TEAM_ART.name: row.art or "",
                    TEAM_PLAYABLE.name: row.playable or "",
                    TEAM_VIDEO.name: row.video or "",
                    TEAM_CONCEPT.name: row.concept or "",
                },
            )
            for row in rows
        }
