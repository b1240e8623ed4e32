"""
===============================================================================
TASK REFERENCE HELPERS (errors + display-form resolution)
===============================================================================

Responsibilities:
    - Resolve assigned_to / created_by into UserSummary (name + email),
      batching user lookups for listings.
    - Build consistent TaskError values shared by the task use cases.

Collaborators:
    - domain.repositories.UserRepository
    - domain.entities (Task, TaskDetails, UserSummary)
    - task_results (TaskError, TaskErrorCode)
===============================================================================
"""

from __future__ import annotations

from typing import Final, Iterable, Sequence

from ....domain.entities import Task, TaskDetails, UserSummary
from ....domain.repositories import UserRepository
from ....domain.task_validation import FieldError
from ....identity.users import User
from .task_results import TaskError, TaskErrorCode

MSG_TASK_NOT_FOUND: Final[str] = "Task not found"
MSG_ASSIGNEE_NOT_FOUND: Final[str] = "Assigned user not found"
MSG_VALIDATION_FAILED: Final[str] = "Validation failed"


def _summary(user: User | None) -> UserSummary | None:
    if user is None:
        return None
    return UserSummary(id=user.id, name=user.name, email=user.email)


def resolve_task_details(
    tasks: Sequence[Task], user_repository: UserRepository
) -> list[TaskDetails]:
    """Attach display-form references, one user lookup for the whole batch."""
    if not tasks:
        return []

    user_ids = {t.assigned_to for t in tasks} | {t.created_by for t in tasks}
    users = user_repository.get_users_by_ids(user_ids)

    return [
        TaskDetails(
            task=t,
            assignee=_summary(users.get(t.assigned_to)),
            creator=_summary(users.get(t.created_by)),
        )
        for t in tasks
    ]


def resolve_one(task: Task, user_repository: UserRepository) -> TaskDetails:
    return resolve_task_details([task], user_repository)[0]


# =============================================================================
# Error builders
# =============================================================================


def not_found_error() -> TaskError:
    return TaskError(code=TaskErrorCode.NOT_FOUND, message=MSG_TASK_NOT_FOUND)


def forbidden_error(reason: str | None) -> TaskError:
    return TaskError(code=TaskErrorCode.FORBIDDEN, message=reason or "Access denied")


def validation_failed(errors: Iterable[FieldError]) -> TaskError:
    return TaskError(
        code=TaskErrorCode.VALIDATION_ERROR,
        message=MSG_VALIDATION_FAILED,
        errors=tuple(errors),
    )


def assignee_not_found() -> TaskError:
    return TaskError(
        code=TaskErrorCode.REFERENCE_NOT_FOUND, message=MSG_ASSIGNEE_NOT_FOUND
    )
