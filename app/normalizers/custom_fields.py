"""
app/normalizers/custom_fields.py

Custom-field indexing and typed coercion for tracker tasks.

Tracker custom fields arrive as untyped JSON. Each coercion below accepts the
closed set of shapes in ``FieldValue`` and either returns the typed result or
raises ``CoercionError``. Nothing here substitutes a zero value for a shape
it does not understand.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from app.domain.tracker import CustomField, FieldValue, RawTask

_LEADING_DIGITS = re.compile(r"^\d+")
_ASCII_INTEGER = re.compile(r"-?[0-9]+")
_ASCII_DIGITS = re.compile(r"[0-9]+")


class CoercionError(ValueError):
    """
    Raised when a field value cannot be converted to its expected shape.
    """

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


class ValidationRejection(Exception):
    """
    Raised when a value is well-typed but unusable for a completed task.
    """

    reason: str = "validation_rejected"


class ProjectOptionOutOfRange(ValidationRejection):
    reason = "project_option_out_of_range"


class EmptyProjectName(ValidationRejection):
    reason = "empty_project_name"


def index_fields(raw_task: RawTask) -> dict[str, CustomField]:
    """
    Build the name-indexed field map for one task. Last field wins on a name clash.
    """

    return {field.name: field for field in raw_task.custom_fields}


def coerce_level(value: FieldValue | Decimal, *, field_name: str = "difficulty") -> int:
    """
    Coerce a difficulty value to ``int``, truncating fractional input toward zero.
    """

    if value is None:
        raise CoercionError(field_name, "value is null")
    if isinstance(value, bool):
        raise CoercionError(field_name, "boolean is not a difficulty")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CoercionError(field_name, f"non-finite number {value!r}")
        return int(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise CoercionError(field_name, f"non-finite number {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise CoercionError(field_name, "empty string")
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = Decimal(text)
        except InvalidOperation as exc:
            raise CoercionError(field_name, f"not numeric {value!r}") from exc
        if not parsed.is_finite():
            raise CoercionError(field_name, f"non-finite number {value!r}")
        return int(parsed)
    raise CoercionError(field_name, f"unsupported shape {type(value).__name__}")


def parse_tool_index(label: str) -> int | None:
    """
    Leading run of digits of an option label, e.g. ``"12 Spine"`` -> ``12``.
    """

    match = _LEADING_DIGITS.match(label)
    if match is None:
        return None
    return int(match.group(0))


def coerce_tool_indexes(field: CustomField) -> list[int]:
    """
    Resolve selected option ids to tool indexes, keeping first-seen order.
    """

    value = field.value
    if value is None:
        return []
    if not isinstance(value, list):
        raise CoercionError(field.name, f"expected a list of option ids, got {type(value).__name__}")

    labels_by_id = {option.id: option.label for option in field.options}
    indexes: list[int] = []
    for option_id in value:
        label = labels_by_id.get(option_id)
        if label is None:
            continue
        index = parse_tool_index(label)
        if index is not None and index not in indexes:
            indexes.append(index)
    return indexes


def _coerce_option_index(field: CustomField) -> int:
    value = field.value
    if value is None:
        raise CoercionError(field.name, "value is null")
    if isinstance(value, bool):
        raise CoercionError(field.name, "boolean is not an option index")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _ASCII_INTEGER.fullmatch(value.strip()):
        return int(value.strip())
    raise CoercionError(field.name, f"expected an option index, got {value!r}")


def coerce_project(field: CustomField) -> str:
    """
    Resolve the selected project option and drop the first token of its label.

    ``"P12 Space Miner"`` becomes ``"Space Miner"``. A single-token label is
    kept as-is.
    """

    index = _coerce_option_index(field)
    if index < 0 or index >= len(field.options):
        raise ProjectOptionOutOfRange(
            f"{field.name}: option index {index} outside 0..{len(field.options) - 1}"
        )

    label = field.options[index].label.strip()
    parts = label.split(maxsplit=1)
    project = parts[1].strip() if len(parts) == 2 else label
    if not project:
        raise EmptyProjectName(f"{field.name}: option {index} has an empty label")
    return project


def coerce_epoch_millis(value: FieldValue, *, field_name: str = "date") -> int:
    """
    Coerce an epoch-millisecond timestamp given as number or digit string.
    """

    if value is None:
        raise CoercionError(field_name, "value is null")
    if isinstance(value, bool):
        raise CoercionError(field_name, "boolean is not a timestamp")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if _ASCII_DIGITS.fullmatch(text):
            return int(text)
    raise CoercionError(field_name, f"expected epoch milliseconds, got {value!r}")


def millis_to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
