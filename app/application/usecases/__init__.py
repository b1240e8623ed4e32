"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
└── tasks/      # Task lifecycle, listings and stats

Usage
-----
    from app.application.usecases import CreateTaskUseCase, TaskErrorCode
"""

from .tasks import (
    CreateTaskUseCase,
    DeleteTaskResult,
    DeleteTaskUseCase,
    GetTaskStatsUseCase,
    GetTaskUseCase,
    ListCalendarTasksUseCase,
    ListTasksUseCase,
    TaskError,
    TaskErrorCode,
    TaskListResult,
    TaskResult,
    TaskStatsResult,
    UpdateTaskUseCase,
)

__all__ = [
    "CreateTaskUseCase",
    "DeleteTaskResult",
    "DeleteTaskUseCase",
    "GetTaskStatsUseCase",
    "GetTaskUseCase",
    "ListCalendarTasksUseCase",
    "ListTasksUseCase",
    "TaskError",
    "TaskErrorCode",
    "TaskListResult",
    "TaskResult",
    "TaskStatsResult",
    "UpdateTaskUseCase",
]
