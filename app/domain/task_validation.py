"""
Name: Task Field Validation

Responsibilities:
  - Structural validation of task creation and update payloads
  - Normalize values (trim strings, parse dates/ids, dedupe tags)
  - Accumulate every violation instead of stopping at the first one

Collaborators:
  - domain.task_lifecycle (NewTask, TaskPatch)
  - domain.entities (TaskStatus, TaskPriority)

Constraints:
  - Independent of permissions and storage
  - Error field names use the public (JSON) names, e.g. "assignedTo"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, TypeVar
from uuid import UUID

from .entities import TaskPriority, TaskStatus
from .task_lifecycle import NewTask, TaskPatch

TITLE_MAX_CHARS = 100
DESCRIPTION_MAX_CHARS = 500
TAG_MAX_CHARS = 50
MAX_TAGS = 20

_E = TypeVar("_E", bound=Enum)

# Internal field name -> public field name
_PUBLIC_NAMES: Mapping[str, str] = {
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "due_date": "dueDate",
    "assigned_to": "assignedTo",
    "tags": "tags",
}

_REQUIRED_ON_CREATE = ("title", "description", "assigned_to", "due_date")

_MSG_TITLE = f"Title must be 1-{TITLE_MAX_CHARS} characters"
_MSG_DESCRIPTION = f"Description must be 1-{DESCRIPTION_MAX_CHARS} characters"
_MSG_STATUS = "Invalid status"
_MSG_PRIORITY = "Invalid priority"
_MSG_DUE_DATE = "Valid due date required"
_MSG_ASSIGNED_TO = "Valid assignedTo ID required"
_MSG_TAGS = "Tags must be an array of strings"


@dataclass(frozen=True)
class FieldError:
    """R: One violation on one field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class _Collector:
    """R: Accumulates FieldErrors while parsing."""

    def __init__(self) -> None:
        self.errors: list[FieldError] = []

    def add(self, name: str, message: str) -> None:
        self.errors.append(FieldError(_PUBLIC_NAMES.get(name, name), message))


# =============================================================================
# Field parsers: return the normalized value or None after recording an error
# =============================================================================


def _parse_text(
    value: Any, *, name: str, max_chars: int, message: str, out: _Collector
) -> str | None:
    if not isinstance(value, str):
        out.add(name, message)
        return None
    text = value.strip()
    if not 1 <= len(text) <= max_chars:
        out.add(name, message)
        return None
    return text


def _parse_enum(
    value: Any, enum_cls: type[_E], *, name: str, message: str, out: _Collector
) -> _E | None:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    out.add(name, message)
    return None


def parse_due_date(value: Any) -> date | None:
    """R: ISO-8601 date or datetime (date part kept); None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _parse_due_date(value: Any, *, out: _Collector) -> date | None:
    parsed = parse_due_date(value)
    if parsed is None:
        out.add("due_date", _MSG_DUE_DATE)
    return parsed


def _parse_user_id(value: Any, *, out: _Collector) -> UUID | None:
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value.strip())
        except ValueError:
            pass
    out.add("assigned_to", _MSG_ASSIGNED_TO)
    return None


def _parse_tags(value: Any, *, out: _Collector) -> tuple[str, ...] | None:
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(tag, str) for tag in value
    ):
        out.add("tags", _MSG_TAGS)
        return None

    tags: list[str] = []
    for raw in value:
        tag = raw.strip()
        if tag and tag not in tags:
            tags.append(tag)

    ok = True
    if any(len(tag) > TAG_MAX_CHARS for tag in tags):
        out.add("tags", f"Each tag must be at most {TAG_MAX_CHARS} characters")
        ok = False
    if len(tags) > MAX_TAGS:
        out.add("tags", f"At most {MAX_TAGS} tags are allowed")
        ok = False
    return tuple(tags) if ok else None


def _parse_field(name: str, value: Any, out: _Collector) -> Any:
    if name == "title":
        return _parse_text(
            value, name=name, max_chars=TITLE_MAX_CHARS, message=_MSG_TITLE, out=out
        )
    if name == "description":
        return _parse_text(
            value,
            name=name,
            max_chars=DESCRIPTION_MAX_CHARS,
            message=_MSG_DESCRIPTION,
            out=out,
        )
    if name == "status":
        return _parse_enum(value, TaskStatus, name=name, message=_MSG_STATUS, out=out)
    if name == "priority":
        return _parse_enum(
            value, TaskPriority, name=name, message=_MSG_PRIORITY, out=out
        )
    if name == "due_date":
        return _parse_due_date(value, out=out)
    if name == "assigned_to":
        return _parse_user_id(value, out=out)
    if name == "tags":
        return _parse_tags(value, out=out)
    raise KeyError(name)


# =============================================================================
# Public API
# =============================================================================


def validate_new_task(
    data: Mapping[str, Any],
) -> tuple[NewTask | None, list[FieldError]]:
    """
    Validate a creation payload.

    Keys are internal names (title, description, assigned_to, due_date,
    priority, tags). Any status key is ignored: new tasks start pending.
    """
    out = _Collector()
    values: dict[str, Any] = {}

    for name in _REQUIRED_ON_CREATE:
        raw = data.get(name)
        if raw is None:
            out.add(name, _required_message(name))
            continue
        values[name] = _parse_field(name, raw, out)

    for name in ("priority", "tags"):
        raw = data.get(name)
        if raw is not None:
            values[name] = _parse_field(name, raw, out)

    if out.errors:
        return None, out.errors

    return (
        NewTask(
            title=values["title"],
            description=values["description"],
            assigned_to=values["assigned_to"],
            due_date=values["due_date"],
            priority=values.get("priority") or TaskPriority.MEDIUM,
            tags=values.get("tags") or (),
        ),
        [],
    )


def validate_task_patch(
    data: Mapping[str, Any],
) -> tuple[TaskPatch | None, list[FieldError]]:
    """
    Validate a partial update.

    Only keys present in `data` are considered; an explicit None for a field
    is a violation because every patchable field is mandatory on a task.
    """
    out = _Collector()
    values: dict[str, Any] = {}

    for name in _PUBLIC_NAMES:
        if name not in data:
            continue
        raw = data[name]
        if raw is None:
            out.add(name, f"{_PUBLIC_NAMES[name]} cannot be null")
            continue
        values[name] = _parse_field(name, raw, out)

    if out.errors:
        return None, out.errors
    return TaskPatch(**values), []


def _required_message(name: str) -> str:
    return {
        "title": "Title is required",
        "description": "Description is required",
        "assigned_to": "Task must be assigned to a user",
        "due_date": "Due date is required",
    }[name]
