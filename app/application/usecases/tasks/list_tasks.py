"""
===============================================================================
USE CASE: List Tasks (paged)
===============================================================================

Name:
    List Tasks Use Case

Business Goal:
    Return one page of the tasks an actor may see, optionally filtered by
    status, priority and a free-text search, newest first.

Rules:
    - Visibility: role `user` only sees tasks assigned to them; managers and
      admins see every task.
    - Filters compose with AND; search is a case-insensitive substring match
      on title OR description.
    - page >= 1 (default 1); 1 <= limit <= max_limit (default default_limit).
    - Pages past the last one are empty (storage is not queried for them).
    - Every invalid parameter is reported together.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ListTasksUseCase

Collaborators:
    - TaskRepository.find_tasks / count_tasks
    - UserRepository.get_users_by_ids (display-form references)
    - task_query.scope_query
    - crosscutting.pagination (offset + page metadata)
===============================================================================
"""

from __future__ import annotations

from typing import Any

from ....crosscutting.pagination import build_page_info, page_offset
from ....domain.entities import TaskPriority, TaskStatus
from ....domain.repositories import TaskRepository, UserRepository
from ....domain.task_policy import TaskAction, TaskActor, can_perform
from ....domain.task_query import TaskQuery, TaskSort, normalize_search, scope_query
from ....domain.task_validation import FieldError
from .task_refs import forbidden_error, resolve_task_details, validation_failed
from .task_results import TaskListResult

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ListTasksUseCase:
    """R: Paged, role-scoped task listing."""

    def __init__(
        self,
        task_repository: TaskRepository,
        user_repository: UserRepository,
        *,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> None:
        self._tasks = task_repository
        self._users = user_repository
        self._default_limit = default_limit
        self._max_limit = max_limit

    def execute(
        self,
        actor: TaskActor,
        *,
        page: int = 1,
        limit: int | None = None,
        status: str | None = None,
        priority: str | None = None,
        search: str | None = None,
    ) -> TaskListResult:
        decision = can_perform(actor, TaskAction.LIST)
        if not decision.allowed:
            return TaskListResult(error=forbidden_error(decision.reason))

        if limit is None:
            limit = self._default_limit

        errors: list[FieldError] = []
        if not _is_int(page) or page < 1:
            errors.append(FieldError("page", "Page must be a positive integer"))
        if not _is_int(limit) or not 1 <= limit <= self._max_limit:
            errors.append(
                FieldError("limit", f"Limit must be between 1 and {self._max_limit}")
            )

        status_filter = self._parse(TaskStatus, status, "status", errors)
        priority_filter = self._parse(TaskPriority, priority, "priority", errors)

        if errors:
            return TaskListResult(error=validation_failed(errors))

        query = scope_query(
            actor,
            TaskQuery(
                status=status_filter,
                priority=priority_filter,
                search=normalize_search(search),
            ),
        )

        total = self._tasks.count_tasks(query)
        offset = page_offset(page, limit)
        # Pages past the end are empty; storage never sees the offset.
        tasks = (
            self._tasks.find_tasks(
                query, sort=TaskSort.CREATED_DESC, skip=offset, limit=limit
            )
            if offset < total
            else []
        )

        return TaskListResult(
            tasks=resolve_task_details(tasks, self._users),
            page_info=build_page_info(page=page, limit=limit, total=total),
        )

    @staticmethod
    def _parse(enum_cls, raw: str | None, name: str, errors: list[FieldError]):
        if raw is None or raw == "":
            return None
        try:
            return enum_cls(raw.strip().lower())
        except ValueError:
            errors.append(FieldError(name, f"Invalid {name}"))
            return None
