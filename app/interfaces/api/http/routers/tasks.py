"""
===============================================================================
CRC CARD: app/interfaces/api/http/routers/tasks.py
===============================================================================

Class/Module:
    Task Router

Responsibilities:
    - Expose the task endpoints (list, stats, calendar, CRUD).
    - Convert HTTP requests -> use case inputs.
    - Translate TaskError -> RFC7807 (error_mapping).

Collaborators:
    - app.application.usecases (task use cases)
    - app.container (use case factories)
    - dependencies.current_actor / parse_task_id
    - schemas.tasks (DTOs)

Notes:
    - Static paths (/tasks/stats, /tasks/calendar/...) are declared before
      /tasks/{task_id}.
===============================================================================
"""

from __future__ import annotations

from app.application.usecases import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetTaskStatsUseCase,
    GetTaskUseCase,
    ListCalendarTasksUseCase,
    ListTasksUseCase,
    UpdateTaskUseCase,
)
from app.container import (
    get_calendar_tasks_use_case,
    get_create_task_use_case,
    get_delete_task_use_case,
    get_get_task_use_case,
    get_list_tasks_use_case,
    get_task_stats_use_case,
    get_update_task_use_case,
)
from app.domain.task_policy import TaskActor
from fastapi import APIRouter, Depends, Query

from ..dependencies import current_actor, parse_task_id
from ..error_mapping import raise_task_error
from ..schemas.tasks import (
    CalendarTasksRes,
    CreateTaskReq,
    MessageRes,
    TaskEnvelopeRes,
    TaskMessageRes,
    TasksListRes,
    TaskStatsRes,
    UpdateTaskReq,
    to_pagination_res,
    to_stats_res,
    to_task_res,
)

router = APIRouter()

MSG_CREATED = "Task created successfully"
MSG_UPDATED = "Task updated successfully"
MSG_DELETED = "Task deleted successfully"


# =============================================================================
# Listings
# =============================================================================


@router.get("/tasks", response_model=TasksListRes, tags=["tasks"])
def list_tasks(
    page: int = Query(1),
    limit: int | None = Query(None),
    status: str | None = Query(None),
    priority: str | None = Query(None),
    search: str | None = Query(None),
    actor: TaskActor = Depends(current_actor),
    use_case: ListTasksUseCase = Depends(get_list_tasks_use_case),
):
    result = use_case.execute(
        actor,
        page=page,
        limit=limit,
        status=status,
        priority=priority,
        search=search,
    )
    if result.error is not None:
        raise_task_error(result.error)

    return TasksListRes(
        tasks=[to_task_res(t) for t in result.tasks],
        pagination=to_pagination_res(result.page_info),
    )


@router.get("/tasks/stats", response_model=TaskStatsRes, tags=["tasks"])
def task_stats(
    actor: TaskActor = Depends(current_actor),
    use_case: GetTaskStatsUseCase = Depends(get_task_stats_use_case),
):
    result = use_case.execute(actor)
    if result.error is not None:
        raise_task_error(result.error)
    return to_stats_res(result.stats)


@router.get(
    "/tasks/calendar/{year}/{month}",
    response_model=CalendarTasksRes,
    tags=["tasks"],
)
def calendar_tasks(
    year: int,
    month: int,
    actor: TaskActor = Depends(current_actor),
    use_case: ListCalendarTasksUseCase = Depends(get_calendar_tasks_use_case),
):
    result = use_case.execute(actor, year=year, month=month)
    if result.error is not None:
        raise_task_error(result.error)
    return CalendarTasksRes(tasks=[to_task_res(t) for t in result.tasks])


# =============================================================================
# Single task
# =============================================================================


@router.get("/tasks/{task_id}", response_model=TaskEnvelopeRes, tags=["tasks"])
def get_task(
    task_id: str,
    actor: TaskActor = Depends(current_actor),
    use_case: GetTaskUseCase = Depends(get_get_task_use_case),
):
    tid = parse_task_id(task_id)
    result = use_case.execute(tid, actor)
    if result.error is not None:
        raise_task_error(result.error, task_id=tid)
    return TaskEnvelopeRes(task=to_task_res(result.task))


@router.post(
    "/tasks",
    response_model=TaskMessageRes,
    status_code=201,
    tags=["tasks"],
)
def create_task(
    req: CreateTaskReq,
    actor: TaskActor = Depends(current_actor),
    use_case: CreateTaskUseCase = Depends(get_create_task_use_case),
):
    result = use_case.execute(actor, req.to_input())
    if result.error is not None:
        raise_task_error(result.error)
    return TaskMessageRes(message=MSG_CREATED, task=to_task_res(result.task))


@router.put("/tasks/{task_id}", response_model=TaskMessageRes, tags=["tasks"])
def update_task(
    task_id: str,
    req: UpdateTaskReq,
    actor: TaskActor = Depends(current_actor),
    use_case: UpdateTaskUseCase = Depends(get_update_task_use_case),
):
    tid = parse_task_id(task_id)
    result = use_case.execute(tid, actor, req.to_input())
    if result.error is not None:
        raise_task_error(result.error, task_id=tid)
    return TaskMessageRes(message=MSG_UPDATED, task=to_task_res(result.task))


@router.delete("/tasks/{task_id}", response_model=MessageRes, tags=["tasks"])
def delete_task(
    task_id: str,
    actor: TaskActor = Depends(current_actor),
    use_case: DeleteTaskUseCase = Depends(get_delete_task_use_case),
):
    tid = parse_task_id(task_id)
    result = use_case.execute(tid, actor)
    if result.error is not None:
        raise_task_error(result.error, task_id=tid)
    return MessageRes(message=MSG_DELETED)
