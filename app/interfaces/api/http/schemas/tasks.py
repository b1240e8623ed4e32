"""
===============================================================================
CRC CARD: schemas/tasks.py
===============================================================================

Module:
    HTTP schemas for Tasks

Responsibilities:
    - Request/response DTOs for the task endpoints (camelCase on the wire).
    - Keep request bodies permissive: field rules live in
      domain.task_validation so every violation is reported together.

Collaborators:
    - domain.entities (TaskDetails, TaskStats, TaskStatus, TaskPriority)
    - crosscutting.pagination.PageInfo
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.crosscutting.pagination import PageInfo
from app.domain.entities import (
    TaskDetails,
    TaskPriority,
    TaskStats,
    TaskStatus,
    UserSummary,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateTaskReq(_CamelModel):
    """Create payload. Status is not accepted: new tasks start pending."""

    title: Any = None
    description: Any = None
    assigned_to: Any = Field(default=None, description="Assignee user id")
    due_date: Any = Field(default=None, description="YYYY-MM-DD")
    priority: Any = None
    tags: Any = None

    def to_input(self) -> dict[str, Any]:
        return self.model_dump(by_alias=False)


class UpdateTaskReq(_CamelModel):
    """Partial update: only the keys sent are applied."""

    title: Any = None
    description: Any = None
    status: Any = None
    priority: Any = None
    assigned_to: Any = None
    due_date: Any = None
    tags: Any = None

    def to_input(self) -> dict[str, Any]:
        return self.model_dump(by_alias=False, exclude_unset=True)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserRefRes(_CamelModel):
    id: UUID
    name: str
    email: str


class TaskRes(_CamelModel):
    id: UUID
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    assigned_to: UserRefRes | None
    created_by: UserRefRes | None
    due_date: date
    completed_at: datetime | None
    tags: list[str]
    created_at: datetime | None
    updated_at: datetime | None


class TaskEnvelopeRes(_CamelModel):
    task: TaskRes


class TaskMessageRes(_CamelModel):
    message: str
    task: TaskRes


class MessageRes(_CamelModel):
    message: str


class PaginationRes(_CamelModel):
    current_page: int
    total_pages: int
    total_tasks: int
    has_next: bool
    has_prev: bool


class TasksListRes(_CamelModel):
    tasks: list[TaskRes]
    pagination: PaginationRes


class CalendarTasksRes(_CamelModel):
    tasks: list[TaskRes]


class TaskStatsRes(_CamelModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    urgent: int
    high: int
    overdue: int


# -----------------------------------------------------------------------------
# Mappers (domain -> DTO)
# -----------------------------------------------------------------------------
def _to_user_ref(summary: UserSummary | None) -> UserRefRes | None:
    if summary is None:
        return None
    return UserRefRes(id=summary.id, name=summary.name, email=summary.email)


def to_task_res(details: TaskDetails) -> TaskRes:
    task = details.task
    return TaskRes(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        assigned_to=_to_user_ref(details.assignee),
        created_by=_to_user_ref(details.creator),
        due_date=task.due_date,
        completed_at=task.completed_at,
        tags=list(task.tags),
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def to_pagination_res(page_info: PageInfo) -> PaginationRes:
    return PaginationRes(
        current_page=page_info.current_page,
        total_pages=page_info.total_pages,
        total_tasks=page_info.total_items,
        has_next=page_info.has_next,
        has_prev=page_info.has_prev,
    )


def to_stats_res(stats: TaskStats) -> TaskStatsRes:
    return TaskStatsRes(
        total=stats.total,
        pending=stats.pending,
        in_progress=stats.in_progress,
        completed=stats.completed,
        cancelled=stats.cancelled,
        urgent=stats.urgent,
        high=stats.high,
        overdue=stats.overdue,
    )
