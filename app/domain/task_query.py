"""
Name: Task Query Filter

Responsibilities:
  - Describe task listing filters independently of the storage engine
  - Apply role-based visibility scoping to every listing
  - Compute the due-date window of a calendar month

Collaborators:
  - domain.task_policy.TaskActor
  - domain.repositories.TaskRepository (executes TaskQuery)

Constraints:
  - For role `user` the assignee filter is always the actor, whatever the
    caller asked for
  - All filters compose with AND; search matches title OR description
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from uuid import UUID

from ..identity.users import UserRole
from .entities import Task, TaskPriority, TaskStatus
from .task_policy import TaskActor


class TaskSort(str, Enum):
    """R: Supported listing orders."""

    CREATED_DESC = "created_desc"
    DUE_ASC = "due_asc"


@dataclass(frozen=True)
class TaskQuery:
    """
    R: Storage-agnostic task filter.

    None means "no constraint" for every field. due_from/due_to are
    inclusive bounds.
    """

    assigned_to: UUID | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    due_from: date | None = None
    due_to: date | None = None

    def matches(self, task: Task) -> bool:
        """Reference semantics for in-memory storage; search folds case like ILIKE."""
        if self.assigned_to is not None and task.assigned_to != self.assigned_to:
            return False
        if self.status is not None and task.status != self.status:
            return False
        if self.priority is not None and task.priority != self.priority:
            return False
        if self.due_from is not None and task.due_date < self.due_from:
            return False
        if self.due_to is not None and task.due_date > self.due_to:
            return False
        if self.search:
            needle = self.search.lower()
            if (
                needle not in task.title.lower()
                and needle not in task.description.lower()
            ):
                return False
        return True


def normalize_search(search: str | None) -> str | None:
    """Blank search terms mean no search filter."""
    if search is None:
        return None
    term = search.strip()
    return term or None


def scope_query(actor: TaskActor, query: TaskQuery) -> TaskQuery:
    """
    R: Narrow a query to the tasks the actor may list.

    - user: only tasks assigned to the actor (overrides any assignee filter)
    - manager/admin: unrestricted (no team scoping exists yet)
    """
    if actor.role == UserRole.USER:
        return replace(query, assigned_to=actor.user_id)
    return query


def month_range(year: int, month: int) -> tuple[date, date]:
    """
    R: First and last calendar day of (year, month), both inclusive.

    Raises:
        ValueError: month outside 1..12 or year outside date's range
    """
    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def sort_tasks(tasks: list[Task], sort: TaskSort) -> list[Task]:
    """Reference ordering, used by in-memory storage (ties broken by id)."""
    if sort == TaskSort.DUE_ASC:
        return sorted(tasks, key=lambda t: (t.due_date, str(t.id)))
    return sorted(
        tasks,
        key=lambda t: (t.created_at.timestamp() if t.created_at else 0.0, str(t.id)),
        reverse=True,
    )
