"""
Name: Get Task Stats Use Case

Responsibilities:
  - Count visible tasks per status, urgent/high priority and overdue

Collaborators:
  - domain.repositories.TaskRepository
  - domain.task_query.scope_query

Notes:
  - Overdue: due date before today and status not completed/cancelled
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timezone
from typing import Callable

from ....domain.entities import TaskPriority, TaskStats, TaskStatus
from ....domain.repositories import TaskRepository
from ....domain.task_policy import TaskAction, TaskActor, can_perform
from ....domain.task_query import TaskQuery, scope_query
from .task_refs import forbidden_error
from .task_results import TaskStatsResult


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class GetTaskStatsUseCase:
    """R: Dashboard counters over the actor's visible tasks."""

    def __init__(
        self,
        task_repository: TaskRepository,
        *,
        today: Callable[[], date] = _utc_today,
    ):
        self._tasks = task_repository
        self._today = today

    def execute(self, actor: TaskActor) -> TaskStatsResult:
        decision = can_perform(actor, TaskAction.LIST)
        if not decision.allowed:
            return TaskStatsResult(error=forbidden_error(decision.reason))

        tasks = self._tasks.find_tasks(scope_query(actor, TaskQuery()))
        today = self._today()

        statuses = Counter(t.status for t in tasks)
        priorities = Counter(t.priority for t in tasks)

        return TaskStatsResult(
            stats=TaskStats(
                total=len(tasks),
                pending=statuses[TaskStatus.PENDING],
                in_progress=statuses[TaskStatus.IN_PROGRESS],
                completed=statuses[TaskStatus.COMPLETED],
                cancelled=statuses[TaskStatus.CANCELLED],
                urgent=priorities[TaskPriority.URGENT],
                high=priorities[TaskPriority.HIGH],
                overdue=sum(1 for t in tasks if t.is_overdue(today)),
            )
        )
