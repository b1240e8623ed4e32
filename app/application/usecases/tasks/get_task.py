"""
Name: Get Task Use Case

Responsibilities:
  - Fetch a task by ID applying the task-level access gate

Collaborators:
  - domain.repositories.TaskRepository
  - domain.repositories.UserRepository
  - domain.task_policy

Notes:
  - Existence is checked before authorization: a missing task is NOT_FOUND
    even for actors that would be denied
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.repositories import TaskRepository, UserRepository
from ....domain.task_policy import TaskAction, TaskActor, can_perform
from .task_refs import forbidden_error, not_found_error, resolve_one
from .task_results import TaskResult


class GetTaskUseCase:
    """R: Fetch a single task by ID."""

    def __init__(
        self, task_repository: TaskRepository, user_repository: UserRepository
    ):
        self._tasks = task_repository
        self._users = user_repository

    def execute(self, task_id: UUID, actor: TaskActor) -> TaskResult:
        task = self._tasks.get_task(task_id)
        if task is None:
            return TaskResult(error=not_found_error())

        decision = can_perform(actor, TaskAction.READ, task)
        if not decision.allowed:
            logger.warning(
                "Task read denied",
                extra={"task_id": str(task_id), "actor_id": str(actor.user_id)},
            )
            return TaskResult(error=forbidden_error(decision.reason))

        return TaskResult(task=resolve_one(task, self._users))
