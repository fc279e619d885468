"""
db/models/weekly_order.py

Weekly per-project quota of completed work, one integer per task type.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

_UPSERT_CONSTRAINT = "uq_weekly_orders_project_start_week"


def _quota_column(comment: str) -> Mapped[int]:
    return mapped_column(Integer, nullable=False, default=0, server_default="0", comment=comment)


class WeeklyOrder(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "weekly_orders"

    project: Mapped[str] = mapped_column(String(255), nullable=False)
    start_week: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    goal: Mapped[str | None] = mapped_column(Text, nullable=True)
    strategy: Mapped[str | None] = mapped_column(Text, nullable=True)

    art_cpp: Mapped[int] = _quota_column("Ordered art CPP tasks")
    art_icon: Mapped[int] = _quota_column("Ordered art icon tasks")
    art_banner: Mapped[int] = _quota_column("Ordered art banner tasks")
    art_asset: Mapped[int] = _quota_column("Ordered untagged art tasks")
    playable: Mapped[int] = _quota_column("Ordered playable tasks")
    video: Mapped[int] = _quota_column("Ordered video tasks")
    concept: Mapped[int] = _quota_column("Ordered concept tasks")

    __table_args__ = (
        UniqueConstraint("project", "start_week", name=_UPSERT_CONSTRAINT),
        Index("ix_weekly_orders_start_week", "start_week"),
    )
