"""
============================================================
CRC CARD: infrastructure/repositories/in_memory/task.py
============================================================
Class: InMemoryTaskRepository

Responsibilities:
  - Store tasks in memory (tests / STORAGE_BACKEND=memory).
  - Evaluate TaskQuery with the same semantics as the Postgres adapter
    (TaskQuery.matches + sort_tasks).

Collaborators:
  - domain.entities.Task
  - domain.task_query.TaskQuery, TaskSort, sort_tasks

Constraints / Notes:
  - Thread-safe: every access goes through a Lock.
  - Returns copies so callers never alias stored tasks.
  - Updates replace only the supplied fields of the stored record.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Mapping
from uuid import UUID

from ....domain.entities import Task
from ....domain.task_query import TaskQuery, TaskSort, sort_tasks


class InMemoryTaskRepository:
    """
    Thread-safe in-memory task store.

    _tasks is the in-memory "table" (UUID -> Task).
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._tasks: Dict[UUID, Task] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _copy(task: Task) -> Task:
        return replace(task, tags=list(task.tags))

    def _matching(self, query: TaskQuery) -> List[Task]:
        with self._lock:
            values = list(self._tasks.values())
        return [t for t in values if query.matches(t)]

    # =========================================================
    # Listings
    # =========================================================
    def find_tasks(
        self,
        query: TaskQuery,
        *,
        sort: TaskSort = TaskSort.CREATED_DESC,
        skip: int = 0,
        limit: int | None = None,
    ) -> List[Task]:
        ordered = sort_tasks(self._matching(query), sort)
        end = None if limit is None else skip + limit
        return [self._copy(t) for t in ordered[skip:end]]

    def count_tasks(self, query: TaskQuery) -> int:
        return len(self._matching(query))

    # =========================================================
    # Single-row operations
    # =========================================================
    def get_task(self, task_id: UUID) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
        return self._copy(task) if task else None

    def insert_task(self, task: Task) -> Task:
        now = self._now()
        stored = replace(
            task,
            tags=list(task.tags),
            created_at=task.created_at or now,
            updated_at=task.updated_at or now,
        )
        with self._lock:
            self._tasks[stored.id] = stored
        return self._copy(stored)

    def update_task_fields(
        self, task_id: UUID, changes: Mapping[str, object]
    ) -> Task | None:
        with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                return None
            values = dict(changes)
            if "tags" in values:
                values["tags"] = list(values["tags"])
            values.setdefault("updated_at", self._now())
            stored = replace(current, **values)
            self._tasks[task_id] = stored
        return self._copy(stored)

    def delete_task(self, task_id: UUID) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None

    def ping(self) -> bool:
        return True
