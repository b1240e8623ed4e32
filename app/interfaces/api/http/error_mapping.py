"""
===============================================================================
CRC CARD: error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsibilities:
  - Translate TaskError codes to RFC7807 HTTP exceptions.
  - Keep the mapping in one place so routers stay thin.

Collaborators:
  - application.usecases (TaskError, TaskErrorCode)
  - crosscutting.error_responses (factories)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases import TaskError, TaskErrorCode
from app.crosscutting.error_responses import (
    forbidden,
    internal_error,
    not_found,
    reference_not_found,
    validation_error,
)


def raise_task_error(error: TaskError, *, task_id: UUID | None = None) -> None:
    """Translate TaskError -> HTTP. Always raises."""
    if error.code == TaskErrorCode.VALIDATION_ERROR:
        raise validation_error(
            error.message, errors=[e.to_dict() for e in error.errors]
        )
    if error.code == TaskErrorCode.NOT_FOUND:
        raise not_found("Task", str(task_id or "-"))
    if error.code == TaskErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == TaskErrorCode.REFERENCE_NOT_FOUND:
        raise reference_not_found(error.message)

    raise internal_error(error.message)
