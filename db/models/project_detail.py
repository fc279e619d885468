"""
db/models/project_detail.py

Per-project owner table used as the assignee fallback in issue reports.
"""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ProjectDetail(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "project_details"

    project: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    art: Mapped[str | None] = mapped_column(String(255), nullable=True, comment="Art owner email")
    playable: Mapped[str | None] = mapped_column(String(255), nullable=True, comment="Playable owner email")
    video: Mapped[str | None] = mapped_column(String(255), nullable=True, comment="Video owner email")
    concept: Mapped[str | None] = mapped_column(String(255), nullable=True, comment="Concept owner email")
