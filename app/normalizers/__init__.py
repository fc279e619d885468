"""
app/normalizers package marker.
"""

from app.normalizers.custom_fields import (
    CoercionError,
    EmptyProjectName,
    ProjectOptionOutOfRange,
    ValidationRejection,
    coerce_epoch_millis,
    coerce_level,
    coerce_project,
    coerce_tool_indexes,
    index_fields,
    millis_to_datetime,
)

__all__ = [
    "CoercionError",
    "EmptyProjectName",
    "ProjectOptionOutOfRange",
    "ValidationRejection",
    "coerce_epoch_millis",
    "coerce_level",
    "coerce_project",
    "coerce_tool_indexes",
    "index_fields",
    "millis_to_datetime",
]
