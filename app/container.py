"""
===============================================================================
CRC CARD: app/container.py (Composition Root / manual DI)
===============================================================================

Responsibilities:
  - Compose repositories and use cases (use cases depend on ports).
  - Expose factories for FastAPI (Depends).
  - Keep repository singletons cached with lru_cache.
  - Pick the storage backend from Settings.

Collaborators:
  - app.crosscutting.config.get_settings
  - app.domain.repositories (ports)
  - app.infrastructure.repositories (implementations)
  - app.application.usecases (use cases)

Notes:
  - No business logic here.
  - No FastAPI imports; only factories.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetTaskStatsUseCase,
    GetTaskUseCase,
    ListCalendarTasksUseCase,
    ListTasksUseCase,
    UpdateTaskUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import TaskRepository, UserRepository
from .infrastructure.repositories import (
    InMemoryTaskRepository,
    InMemoryUserRepository,
    PostgresTaskRepository,
    PostgresUserRepository,
)

# =============================================================================
# Repositories (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_task_repository() -> TaskRepository:
    if get_settings().uses_postgres():
        return PostgresTaskRepository()
    return InMemoryTaskRepository()


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    if get_settings().uses_postgres():
        return PostgresUserRepository()
    return InMemoryUserRepository()


# =============================================================================
# Use case factories (one instance per request)
# =============================================================================


def get_list_tasks_use_case() -> ListTasksUseCase:
    settings = get_settings()
    return ListTasksUseCase(
        get_task_repository(),
        get_user_repository(),
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )


def get_calendar_tasks_use_case() -> ListCalendarTasksUseCase:
    return ListCalendarTasksUseCase(get_task_repository(), get_user_repository())


def get_task_stats_use_case() -> GetTaskStatsUseCase:
    return GetTaskStatsUseCase(get_task_repository())


def get_get_task_use_case() -> GetTaskUseCase:
    return GetTaskUseCase(get_task_repository(), get_user_repository())


def get_create_task_use_case() -> CreateTaskUseCase:
    return CreateTaskUseCase(get_task_repository(), get_user_repository())


def get_update_task_use_case() -> UpdateTaskUseCase:
    return UpdateTaskUseCase(get_task_repository(), get_user_repository())


def get_delete_task_use_case() -> DeleteTaskUseCase:
    return DeleteTaskUseCase(get_task_repository())
