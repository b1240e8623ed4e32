"""
Name: Domain Entities

Responsibilities:
  - Define core business entities for task tracking
  - Provide the status/priority enumerations
  - Describe resolved task views (references in display form) and stats

Collaborators:
  - domain.repositories: persists Task records
  - domain.task_policy / task_lifecycle / task_query: operate on Task
  - application.usecases.tasks: return TaskDetails to the HTTP layer

Constraints:
  - Pure dataclasses, no I/O
  - created_by is set once at creation and never rewritten

Notes:
  - Stored tasks change only through task_lifecycle.patch_changes, applied
    by the repository to the supplied columns only
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class TaskStatus(str, Enum):
    """R: Task lifecycle status."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    """R: Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Statuses that no longer count towards "overdue".
CLOSED_STATUSES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.COMPLETED, TaskStatus.CANCELLED}
)


@dataclass
class Task:
    """
    R: Represents a tracked unit of work.

    Attributes:
        id: Unique task identifier
        title: Short title (1-100 chars, trimmed)
        description: Body text (1-500 chars, trimmed)
        assigned_to: User responsible for the task
        created_by: User who created the task (immutable)
        due_date: Calendar date the task is due
        status: Lifecycle status (default pending)
        priority: Priority (default medium)
        completed_at: Set when status last transitioned into completed
        tags: Free-text labels, unique, order irrelevant
        created_at: Creation timestamp
        updated_at: Last modification timestamp
    """

    id: UUID
    title: str
    description: str
    assigned_to: UUID
    created_by: UUID
    due_date: date
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    completed_at: datetime | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_overdue(self, today: date) -> bool:
        return self.due_date < today and self.status not in CLOSED_STATUSES


@dataclass(frozen=True)
class UserSummary:
    """R: Display form of a user reference (id + name + email)."""

    id: UUID
    name: str
    email: str


@dataclass(frozen=True)
class TaskDetails:
    """
    R: Task with assigned_to / created_by resolved to their display form.

    A reference is None only if the user row vanished after assignment.
    """

    task: Task
    assignee: UserSummary | None
    creator: UserSummary | None


@dataclass(frozen=True)
class TaskStats:
    """R: Dashboard counters over the tasks visible to an actor."""

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
    urgent: int = 0
    high: int = 0
    overdue: int = 0
