"""
===============================================================================
TASK USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Task Use Case Results

Business Goal:
    Shared result and error models for every task use case, with a stable
    contract for:
      - validation failures (all violations at once)
      - authorization denials (always with a reason)
      - missing tasks
      - dangling user references

Why:
    - Use cases return typed results instead of raising, so the HTTP layer
      maps codes to status codes in one place and tests assert on values.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    task_results models (module)

Responsibilities:
    - TaskErrorCode: small, stable set of error categories.
    - TaskError: code + message (+ per-field errors for validation).
    - Results: TaskResult, TaskListResult, DeleteTaskResult, TaskStatsResult.

Collaborators:
    - domain.entities (TaskDetails, TaskStats)
    - domain.task_validation.FieldError
    - crosscutting.pagination.PageInfo
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....crosscutting.pagination import PageInfo
from ....domain.entities import TaskDetails, TaskStats
from ....domain.task_validation import FieldError


class TaskErrorCode(str, Enum):
    """
    Error codes for task use cases.

    Codes:
      - VALIDATION_ERROR: malformed or out-of-range input.
      - FORBIDDEN: authenticated actor denied by policy.
      - NOT_FOUND: the task does not exist.
      - REFERENCE_NOT_FOUND: assignedTo points to a user that does not exist.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"


@dataclass(frozen=True)
class TaskError:
    """
    Use case error.

    Fields:
      - code: stable category (TaskErrorCode)
      - message: human description (the denial reason for FORBIDDEN)
      - errors: per-field violations, only for VALIDATION_ERROR
    """

    code: TaskErrorCode
    message: str
    errors: tuple[FieldError, ...] = ()


@dataclass
class TaskResult:
    """
    Result for use cases returning one task.

    Contract:
      - error is None => task is present
      - error is set => task is None
    """

    task: TaskDetails | None = None
    error: TaskError | None = None


@dataclass
class TaskListResult:
    """
    Result for listings (paged list and calendar).

    page_info is only set for paged listings.
    """

    tasks: List[TaskDetails] = field(default_factory=list)
    page_info: PageInfo | None = None
    error: TaskError | None = None


@dataclass
class DeleteTaskResult:
    """Result for Delete Task: deleted=True once the record is gone."""

    deleted: bool = False
    error: TaskError | None = None


@dataclass
class TaskStatsResult:
    """Result for Task Stats."""

    stats: TaskStats | None = None
    error: TaskError | None = None
