"""
Name: Delete Task Use Case

Responsibilities:
  - Permanently remove a task (admin only)

Collaborators:
  - domain.repositories.TaskRepository
  - domain.task_policy

Constraints:
  - Role gate first: managers and users are always FORBIDDEN
  - Hard delete, no cascading cleanup (nothing references a task)
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskAction, TaskActor, can_perform
from .task_refs import forbidden_error, not_found_error
from .task_results import DeleteTaskResult


class DeleteTaskUseCase:
    """R: Delete a task by ID."""

    def __init__(self, task_repository: TaskRepository):
        self._tasks = task_repository

    def execute(self, task_id: UUID, actor: TaskActor) -> DeleteTaskResult:
        decision = can_perform(actor, TaskAction.DELETE)
        if not decision.allowed:
            logger.warning(
                "Task delete denied",
                extra={"task_id": str(task_id), "actor_id": str(actor.user_id)},
            )
            return DeleteTaskResult(error=forbidden_error(decision.reason))

        if self._tasks.get_task(task_id) is None:
            return DeleteTaskResult(error=not_found_error())

        if not self._tasks.delete_task(task_id):
            return DeleteTaskResult(error=not_found_error())

        logger.info(
            "Task deleted",
            extra={"task_id": str(task_id), "actor_id": str(actor.user_id)},
        )
        return DeleteTaskResult(deleted=True)
