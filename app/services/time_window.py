"""
app/services/time_window.py

Ingestion window math anchored to a fixed weekday in the studio timezone.

All instants are computed in ``Asia/Ho_Chi_Minh``. When the host has no tz
database the fixed ICT offset (UTC+7) is used instead; that zone has no DST,
so both give identical results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

ANCHOR_TIMEZONE_NAME = "Asia/Ho_Chi_Minh"
ANCHOR_FALLBACK_OFFSET = timedelta(hours=7)
ANCHOR_FALLBACK_NAME = "ICT"

MONDAY = 0
TUESDAY = 1
ANCHOR_WEEKDAY = TUESDAY
MIN_ELAPSED = timedelta(days=5)
BUCKET_HOUR = 9


@dataclass(frozen=True)
class CompletionWindow:
    """
    Inclusive ``[start, end]`` range of completion instants for one sync run.
    """

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    @property
    def start_ms(self) -> int:
        return int(self.start.timestamp() * 1000)

    @property
    def end_ms(self) -> int:
        return int(self.end.timestamp() * 1000)


def resolve_timezone(name: str = ANCHOR_TIMEZONE_NAME) -> tzinfo:
    """
    Load the anchor timezone, falling back to its fixed standard offset.
    """

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        logger.warning(
            "Timezone data unavailable name=%s error=%s; using fixed offset %s",
            name,
            exc,
            ANCHOR_FALLBACK_OFFSET,
        )
        return timezone(ANCHOR_FALLBACK_OFFSET, ANCHOR_FALLBACK_NAME)


def _localize(reference: datetime | None, tz: tzinfo) -> datetime:
    if reference is None:
        return datetime.now(tz=tz)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    return reference.astimezone(tz)


def current_window(
    reference: datetime | None = None,
    *,
    anchor_weekday: int = ANCHOR_WEEKDAY,
    tz: tzinfo | None = None,
    min_elapsed: timedelta = MIN_ELAPSED,
) -> CompletionWindow:
    """
    Window from the latest ``anchor_weekday`` 00:00 local up to ``reference``.

    If less than ``min_elapsed`` has passed since that anchor, the window
    starts one week earlier so a job firing early in the week still covers a
    full week of completions.

    ``anchor_weekday`` follows ``datetime.weekday()``: Monday is 0.
    """

    zone = tz or resolve_timezone()
    local_now = _localize(reference, zone)

    days_since_anchor = (local_now.weekday() - anchor_weekday) % 7
    anchor_date = local_now.date() - timedelta(days=days_since_anchor)
    start = datetime.combine(anchor_date, time(0, 0), tzinfo=zone)

    if local_now - start < min_elapsed:
        start = datetime.combine(anchor_date - timedelta(days=7), time(0, 0), tzinfo=zone)

    return CompletionWindow(start=start, end=local_now)


def representative_bucket(reference: datetime | None = None, *, tz: tzinfo | None = None) -> datetime:
    """
    Monday 09:00 local of the reference week; stamped on every task of a run.
    """

    zone = tz or resolve_timezone()
    local_now = _localize(reference, zone)
    monday = local_now.date() - timedelta(days=local_now.weekday() - MONDAY)
    return datetime.combine(monday, time(BUCKET_HOUR, 0), tzinfo=zone)


def reconciliation_window(window: CompletionWindow, bucket: datetime) -> CompletionWindow:
    """
    Smallest range covering both the ingestion window and the run's bucket.

    Tasks are stored under ``bucket``, which sits before ``window.start`` late
    in the week and after ``window.end`` on Monday morning.
    """

    return CompletionWindow(start=min(window.start, bucket), end=max(window.end, bucket))
