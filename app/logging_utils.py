"""
app/logging_utils.py

Structured logging helpers for sync workflows. Events are single JSON lines
so per-task rejections and per-branch outcomes can be grepped by ``event``.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Iterable
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True, ensure_ascii=False))


def count_reasons(reasons: Iterable[str]) -> dict[str, int]:
    """
    Reason -> occurrences, most frequent first.
    """

    return dict(Counter(reasons).most_common())
