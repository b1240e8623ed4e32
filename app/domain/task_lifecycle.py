"""
Name: Task Lifecycle

Responsibilities:
  - Build new Task records (status forced to pending, defaults applied)
  - Turn validated patches into the column changes to persist
  - Keep completed_at consistent with status transitions

Collaborators:
  - domain.entities (Task, TaskStatus, TaskPriority)
  - domain.task_validation (produces NewTask / TaskPatch)
  - application.usecases.tasks (create/update orchestration)

Constraints:
  - Pure: the clock is passed in, records are never mutated in place
  - created_by and created_at are never touched by a patch
  - completed_at changes only on a transition into or out of completed
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from uuid import UUID

from .entities import Task, TaskPriority, TaskStatus


@dataclass(frozen=True)
class NewTask:
    """R: Validated creation input (status is not part of it on purpose)."""

    title: str
    description: str
    assigned_to: UUID
    due_date: date
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskPatch:
    """
    R: Validated partial update.

    None means "field not supplied"; every patchable field is mandatory on
    the task, so None is never a value to write.
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    assigned_to: UUID | None = None
    tags: tuple[str, ...] | None = None

    @property
    def touches_assignee(self) -> bool:
        return self.assigned_to is not None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


def create_task_record(
    data: NewTask, *, task_id: UUID, created_by: UUID, now: datetime
) -> Task:
    """R: New task owned by `created_by`, always starting as pending."""
    return Task(
        id=task_id,
        title=data.title,
        description=data.description,
        assigned_to=data.assigned_to,
        created_by=created_by,
        due_date=data.due_date,
        status=TaskStatus.PENDING,
        priority=data.priority,
        completed_at=None,
        tags=list(data.tags),
        created_at=now,
        updated_at=now,
    )


def next_completed_at(
    current: TaskStatus,
    new: TaskStatus,
    completed_at: datetime | None,
    now: datetime,
) -> datetime | None:
    """
    R: completed_at after a status write.

    - into completed from another status: now
    - out of completed into another status: cleared
    - anything else (including same-status writes): unchanged
    """
    if new == TaskStatus.COMPLETED and current != TaskStatus.COMPLETED:
        return now
    if current == TaskStatus.COMPLETED and new != TaskStatus.COMPLETED:
        return None
    return completed_at


def patch_changes(task: Task, patch: TaskPatch, *, now: datetime) -> dict[str, object]:
    """
    R: Column -> new value for the fields a patch writes.

    Only supplied fields appear; completed_at joins them when status is
    written, and updated_at whenever anything is. Storage writes exactly
    these keys, so a concurrent patch to other fields is kept.
    """
    if patch.is_empty():
        return {}

    changes: dict[str, object] = {}
    for name in ("title", "description", "priority", "due_date", "assigned_to"):
        value = getattr(patch, name)
        if value is not None:
            changes[name] = value

    if patch.tags is not None:
        changes["tags"] = list(patch.tags)

    if patch.status is not None:
        changes["status"] = patch.status
        changes["completed_at"] = next_completed_at(
            task.status, patch.status, task.completed_at, now
        )

    changes["updated_at"] = now
    return changes
