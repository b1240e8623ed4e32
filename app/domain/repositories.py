"""
Name: Repository Interfaces (Ports)

Responsibilities:
  - Define contracts for task and user persistence
  - Keep use cases independent of the storage engine

Collaborators:
  - infrastructure.repositories.postgres (PostgreSQL adapters)
  - infrastructure.repositories.in_memory (tests / memory backend)

Constraints:
  - Protocols only (structural typing)
  - Implementations raise crosscutting.exceptions.StorageError on failure
  - "Not found" is None / False, never an exception
"""

from __future__ import annotations

from typing import Iterable, Mapping, Protocol
from uuid import UUID

from ..identity.users import User, UserRole
from .entities import Task
from .task_query import TaskQuery, TaskSort


class TaskRepository(Protocol):
    """R: Task storage contract."""

    def find_tasks(
        self,
        query: TaskQuery,
        *,
        sort: TaskSort = TaskSort.CREATED_DESC,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Task]:
        """Matching tasks in `sort` order; limit=None returns all."""
        ...

    def count_tasks(self, query: TaskQuery) -> int: ...

    def get_task(self, task_id: UUID) -> Task | None: ...

    def insert_task(self, task: Task) -> Task: ...

    def update_task_fields(
        self, task_id: UUID, changes: Mapping[str, object]
    ) -> Task | None:
        """Write only `changes` (column -> value); None if the task vanished."""
        ...

    def delete_task(self, task_id: UUID) -> bool: ...

    def ping(self) -> bool: ...


class UserRepository(Protocol):
    """R: User storage contract."""

    def get_user(self, user_id: UUID) -> User | None: ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def get_users_by_ids(self, user_ids: Iterable[UUID]) -> dict[UUID, User]: ...

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        is_active: bool = True,
    ) -> User:
        """Raise DuplicateEmailError if the email is taken."""
        ...

    def list_users(self, *, active_only: bool = True) -> list[User]: ...

    def count_users(self) -> int: ...
