"""
Repository-layer exceptions for completion and reconciliation storage.
"""

from __future__ import annotations


class PersistenceError(Exception):
    """Raised when a store read or write fails."""


class CompletedTaskPersistenceError(PersistenceError):
    """Raised when writing completed tasks fails."""


class ReconciliationQueryError(PersistenceError):
    """Raised when the order/completion aggregation query fails."""
