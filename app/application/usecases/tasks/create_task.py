"""
===============================================================================
USE CASE: Create Task
===============================================================================

Name:
    Create Task Use Case

Business Goal:
    Let admins and managers create tasks assigned to an existing user.

Invariants:
    - Only admin/manager pass the role gate.
    - assignedTo must reference an existing user.
    - createdBy is the actor; status always starts as pending, whatever the
      caller sent; priority defaults to medium; tags default to empty.
    - Nothing is persisted unless every check passed.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateTaskUseCase

Responsibilities:
    - Role gate (TaskAction.CREATE).
    - Validate the payload, accumulating every violation.
    - Check the assignee exists.
    - Build and insert the record, return it with references resolved.

Collaborators:
    - TaskRepository.insert_task
    - UserRepository.get_user / get_users_by_ids
    - task_policy.can_perform
    - task_validation.validate_new_task
    - task_lifecycle.create_task_record
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping
from uuid import uuid4

from ....crosscutting.logger import logger
from ....domain.repositories import TaskRepository, UserRepository
from ....domain.task_lifecycle import create_task_record
from ....domain.task_policy import TaskAction, TaskActor, can_perform
from ....domain.task_validation import validate_new_task
from .task_refs import (
    assignee_not_found,
    forbidden_error,
    resolve_one,
    validation_failed,
)
from .task_results import TaskResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreateTaskUseCase:
    """
    Use Case (Command):
        Creates a task after role, validation and reference checks.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        user_repository: UserRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._tasks = task_repository
        self._users = user_repository
        self._clock = clock

    def execute(self, actor: TaskActor, data: Mapping[str, Any]) -> TaskResult:
        # 1) Role gate: evaluated before anything else is looked at.
        decision = can_perform(actor, TaskAction.CREATE)
        if not decision.allowed:
            logger.warning(
                "Task create denied",
                extra={"actor_id": str(actor.user_id), "role": actor.role.value},
            )
            return TaskResult(error=forbidden_error(decision.reason))

        # 2) Structural validation (all violations at once).
        new_task, errors = validate_new_task(data)
        if new_task is None:
            return TaskResult(error=validation_failed(errors))

        # 3) Referential integrity: the assignee must exist.
        if self._users.get_user(new_task.assigned_to) is None:
            return TaskResult(error=assignee_not_found())

        # 4) Persist.
        task = create_task_record(
            new_task, task_id=uuid4(), created_by=actor.user_id, now=self._clock()
        )
        created = self._tasks.insert_task(task)

        logger.info(
            "Task created",
            extra={
                "task_id": str(created.id),
                "actor_id": str(actor.user_id),
                "assigned_to": str(created.assigned_to),
            },
        )
        return TaskResult(task=resolve_one(created, self._users))
