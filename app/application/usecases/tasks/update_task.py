"""
===============================================================================
USE CASE: Update Task
===============================================================================

Name:
    Update Task Use Case

Business Goal:
    Apply a partial update to a task while enforcing field-level permissions
    and the status/completedAt invariant.

Invariants:
    - Changing assignedTo requires the REASSIGN role gate (admin/manager),
      checked before the task is even loaded.
    - A missing task is NOT_FOUND before any task-level authorization.
    - Validation reports every violation; nothing is written on failure.
    - A new assignee must exist.
    - completedAt follows task_lifecycle.next_completed_at.
    - createdBy never changes.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateTaskUseCase

Responsibilities:
    1) Reassignment role gate (only when assignedTo is supplied).
    2) Load task.
    3) Validate patch.
    4) Check the new assignee exists.
    5) Task-level gate (TaskAction.UPDATE).
    6) Persist the patched columns only.
    7) Return the refreshed record with references resolved.

Collaborators:
    - TaskRepository.get_task / update_task_fields
    - UserRepository.get_user / get_users_by_ids
    - task_policy.check_role_gate / can_perform
    - task_validation.validate_task_patch
    - task_lifecycle.patch_changes
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import Task
from ....domain.repositories import TaskRepository, UserRepository
from ....domain.task_lifecycle import patch_changes
from ....domain.task_policy import (
    TaskAction,
    TaskActor,
    can_perform,
    check_role_gate,
)
from ....domain.task_validation import validate_task_patch
from .task_refs import (
    assignee_not_found,
    forbidden_error,
    not_found_error,
    resolve_one,
    validation_failed,
)
from .task_results import TaskResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UpdateTaskUseCase:
    """
    Use Case (Command):
        Partially updates a task (title, description, status, priority,
        dueDate, assignedTo, tags).
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

    def execute(
        self, task_id: UUID, actor: TaskActor, data: Mapping[str, Any]
    ) -> TaskResult:
        """
        Apply `data` (internal field names, only supplied keys) to the task.
        """
        # 1) Reassignment is role-gated independently of task ownership.
        if "assigned_to" in data:
            decision = check_role_gate(actor, TaskAction.REASSIGN)
            if not decision.allowed:
                self._log_denied(task_id, actor, TaskAction.REASSIGN)
                return TaskResult(error=forbidden_error(decision.reason))

        # 2) Existence precedes the task-level gate.
        task = self._tasks.get_task(task_id)
        if task is None:
            return TaskResult(error=not_found_error())

        # 3) Structural validation.
        patch, errors = validate_task_patch(data)
        if patch is None:
            return TaskResult(error=validation_failed(errors))

        # 4) Referential integrity for the new assignee.
        if patch.touches_assignee and self._users.get_user(patch.assigned_to) is None:
            return TaskResult(error=assignee_not_found())

        # 5) Task-level gate for the update as a whole.
        decision = can_perform(actor, TaskAction.UPDATE, task)
        if not decision.allowed:
            self._log_denied(task_id, actor, TaskAction.UPDATE)
            return TaskResult(error=forbidden_error(decision.reason))

        # 6) Apply + persist (empty patch is a no-op).
        if patch.is_empty():
            return TaskResult(task=resolve_one(task, self._users))

        changes = patch_changes(task, patch, now=self._clock())
        saved = self._tasks.update_task_fields(task.id, changes)
        if saved is None:
            # Deleted between read and write.
            return TaskResult(error=not_found_error())

        self._log_updated(task, saved, actor)

        # 7) Refreshed record with display-form references.
        return TaskResult(task=resolve_one(saved, self._users))

    @staticmethod
    def _log_denied(task_id: UUID, actor: TaskActor, action: TaskAction) -> None:
        logger.warning(
            "Task update denied",
            extra={
                "task_id": str(task_id),
                "actor_id": str(actor.user_id),
                "role": actor.role.value,
                "action": action.value,
            },
        )

    @staticmethod
    def _log_updated(before: Task, after: Task, actor: TaskActor) -> None:
        extra: dict[str, object] = {
            "task_id": str(after.id),
            "actor_id": str(actor.user_id),
        }
        if before.status != after.status:
            extra["status_from"] = before.status.value
            extra["status_to"] = after.status.value
        if before.assigned_to != after.assigned_to:
            extra["assigned_to"] = str(after.assigned_to)
        logger.info("Task updated", extra=extra)
