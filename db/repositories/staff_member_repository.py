"""
db/repositories/staff_member_repository.py

Read access to the staff directory.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.staff_member import StaffMember
from db.repositories.errors import PersistenceError


class StaffMemberRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_by_teams(self, teams: Sequence[str]) -> list[StaffMember]:
        """
        Active members of the given teams; every active member when ``teams`` is empty.
        """

        stmt = select(StaffMember).where(StaffMember.is_active.is_(True))
        cleaned = [team.strip() for team in teams if team and team.strip()]
        if cleaned:
            stmt = stmt.where(StaffMember.team.in_(cleaned))
        stmt = stmt.order_by(StaffMember.team, StaffMember.name)
        try:
            return list(self._session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to query staff members: {exc}") from exc
