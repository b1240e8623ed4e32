"""
Name: List Calendar Tasks Use Case

Responsibilities:
  - Return every visible task due within a calendar month
  - Order by due date ascending

Collaborators:
  - domain.repositories.TaskRepository
  - domain.task_query (scope_query, month_range)

Notes:
  - Same visibility scoping as the paged listing; status/priority/search
    filters do not apply here
"""

from __future__ import annotations

from ....domain.repositories import TaskRepository, UserRepository
from ....domain.task_policy import TaskAction, TaskActor, can_perform
from ....domain.task_query import TaskQuery, TaskSort, month_range, scope_query
from ....domain.task_validation import FieldError
from .task_refs import forbidden_error, resolve_task_details, validation_failed
from .task_results import TaskListResult

MIN_YEAR = 1
MAX_YEAR = 9999


class ListCalendarTasksUseCase:
    """R: Tasks due in (year, month), role-scoped."""

    def __init__(
        self, task_repository: TaskRepository, user_repository: UserRepository
    ):
        self._tasks = task_repository
        self._users = user_repository

    def execute(self, actor: TaskActor, *, year: int, month: int) -> TaskListResult:
        decision = can_perform(actor, TaskAction.LIST)
        if not decision.allowed:
            return TaskListResult(error=forbidden_error(decision.reason))

        errors: list[FieldError] = []
        if not MIN_YEAR <= year <= MAX_YEAR:
            errors.append(
                FieldError("year", f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
            )
        if not 1 <= month <= 12:
            errors.append(FieldError("month", "Month must be between 1 and 12"))
        if errors:
            return TaskListResult(error=validation_failed(errors))

        first_day, last_day = month_range(year, month)
        query = scope_query(actor, TaskQuery(due_from=first_day, due_to=last_day))

        tasks = self._tasks.find_tasks(query, sort=TaskSort.DUE_ASC)
        return TaskListResult(tasks=resolve_task_details(tasks, self._users))
