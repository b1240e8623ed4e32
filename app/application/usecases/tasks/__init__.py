"""
Task use cases (create / read / update / delete / listings / stats).
"""

from .create_task import CreateTaskUseCase
from .delete_task import DeleteTaskUseCase
from .get_task import GetTaskUseCase
from .get_task_stats import GetTaskStatsUseCase
from .list_calendar_tasks import ListCalendarTasksUseCase
from .list_tasks import ListTasksUseCase
from .task_results import (
    DeleteTaskResult,
    TaskError,
    TaskErrorCode,
    TaskListResult,
    TaskResult,
    TaskStatsResult,
)
from .update_task import UpdateTaskUseCase

__all__ = [
    "CreateTaskUseCase",
    "DeleteTaskUseCase",
    "GetTaskUseCase",
    "GetTaskStatsUseCase",
    "ListCalendarTasksUseCase",
    "ListTasksUseCase",
    "UpdateTaskUseCase",
    "DeleteTaskResult",
    "TaskError",
    "TaskErrorCode",
    "TaskListResult",
    "TaskResult",
    "TaskStatsResult",
]
