"""
===============================================================================
CRC CARD: domain/__init__.py
===============================================================================

Module:
    Domain layer exports (public domain API)

Responsibilities:
    - Centralize exports for clean imports from application/interfaces.
    - Keep the domain surface area stable.

Rules:
    - Re-export domain contracts and entities only.
    - Never import infrastructure here.
===============================================================================
"""

from .entities import (
    Task,
    TaskDetails,
    TaskPriority,
    TaskStats,
    TaskStatus,
    UserSummary,
)
from .repositories import TaskRepository, UserRepository
from .task_lifecycle import NewTask, TaskPatch, create_task_record, patch_changes
from .task_policy import PolicyDecision, TaskAction, TaskActor, can_perform
from .task_query import TaskQuery, TaskSort, month_range, scope_query
from .task_validation import FieldError, validate_new_task, validate_task_patch

__all__ = [
    "Task",
    "TaskDetails",
    "TaskPriority",
    "TaskStats",
    "TaskStatus",
    "UserSummary",
    "TaskRepository",
    "UserRepository",
    "NewTask",
    "TaskPatch",
    "create_task_record",
    "patch_changes",
    "PolicyDecision",
    "TaskAction",
    "TaskActor",
    "can_perform",
    "TaskQuery",
    "TaskSort",
    "month_range",
    "scope_query",
    "FieldError",
    "validate_new_task",
    "validate_task_patch",
]
