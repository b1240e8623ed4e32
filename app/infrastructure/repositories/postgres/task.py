"""
============================================================
CRC CARD: infrastructure/repositories/postgres/task.py
============================================================
Class: PostgresTaskRepository

Responsibilities:
  - Task data access in PostgreSQL (raw SQL).
  - Translate a storage-agnostic TaskQuery into a parameterized WHERE.
  - Paged listings (LIMIT/OFFSET) with deterministic ordering:
      created_desc -> ORDER BY created_at DESC, id DESC
      due_asc      -> ORDER BY due_date ASC, id ASC
  - Map rows -> Task (enums validated).

Collaborators:
  - domain.entities.Task, TaskStatus, TaskPriority
  - domain.task_query.TaskQuery, TaskSort
  - crosscutting.exceptions.StorageError
  - crosscutting.logger.logger
  - psycopg_pool.ConnectionPool
  - Table: tasks

Constraints / Notes:
  - No business logic here: visibility scoping arrives already applied
    in the TaskQuery.
  - Queries are always parameterized; search terms are LIKE-escaped.
  - tags is a TEXT[] column.
  - Updates SET only the supplied columns (no read-modify-write of the row).
============================================================
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional
from uuid import UUID

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import StorageError
from ....crosscutting.logger import logger
from ....domain.entities import Task, TaskPriority, TaskStatus
from ....domain.task_query import TaskQuery, TaskSort

_TASK_COLUMNS = """
    id, title, description, status, priority, assigned_to, created_by,
    due_date, completed_at, tags, created_at, updated_at
"""

# Columns a patch may write; the rest are fixed at insert time.
_UPDATABLE_COLUMNS = frozenset(
    {
        "title",
        "description",
        "status",
        "priority",
        "assigned_to",
        "due_date",
        "completed_at",
        "tags",
        "updated_at",
    }
)

_ORDER_BY = {
    TaskSort.CREATED_DESC: "ORDER BY created_at DESC, id DESC",
    TaskSort.DUE_ASC: "ORDER BY due_date ASC, id ASC",
}


def _escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _where_clause(query: TaskQuery) -> tuple[str, list[object]]:
    """R: Build `WHERE ...` (or empty) plus its params from a TaskQuery."""
    conditions: list[str] = []
    params: list[object] = []

    if query.assigned_to is not None:
        conditions.append("assigned_to = %s")
        params.append(query.assigned_to)
    if query.status is not None:
        conditions.append("status = %s")
        params.append(query.status.value)
    if query.priority is not None:
        conditions.append("priority = %s")
        params.append(query.priority.value)
    if query.due_from is not None:
        conditions.append("due_date >= %s")
        params.append(query.due_from)
    if query.due_to is not None:
        conditions.append("due_date <= %s")
        params.append(query.due_to)
    if query.search:
        pattern = f"%{_escape_like(query.search)}%"
        conditions.append("(title ILIKE %s OR description ILIKE %s)")
        params.extend([pattern, pattern])

    if not conditions:
        return "", params
    return "WHERE " + " AND ".join(conditions), params


def _row_to_task(row: tuple) -> Task:
    try:
        status = TaskStatus(row[3])
        priority = TaskPriority(row[4])
    except ValueError as exc:
        raise StorageError(f"Invalid task enum in database: {exc}") from exc

    return Task(
        id=row[0],
        title=row[1],
        description=row[2],
        status=status,
        priority=priority,
        assigned_to=row[5],
        created_by=row[6],
        due_date=row[7],
        completed_at=row[8],
        tags=list(row[9] or []),
        created_at=row[10],
        updated_at=row[11],
    )


class PostgresTaskRepository:
    """R: PostgreSQL implementation of TaskRepository."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # Execution helpers
    # =========================================================
    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise StorageError(f"{context_msg}: {exc}") from exc

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise StorageError(f"{context_msg}: {exc}") from exc

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
    ) -> list[Task]:
        where, params = _where_clause(query)
        sql = f"SELECT {_TASK_COLUMNS} FROM tasks {where} {_ORDER_BY[sort]}"
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params = [*params, limit, skip]
        elif skip:
            sql += " OFFSET %s"
            params = [*params, skip]

        rows = self._fetchall(
            query=sql,
            params=params,
            context_msg="PostgresTaskRepository: find_tasks failed",
            extra={"sort": sort.value, "skip": skip, "limit": limit},
        )
        return [_row_to_task(r) for r in rows]

    def count_tasks(self, query: TaskQuery) -> int:
        where, params = _where_clause(query)
        row = self._fetchone(
            query=f"SELECT COUNT(*) FROM tasks {where}",
            params=params,
            context_msg="PostgresTaskRepository: count_tasks failed",
            extra={},
        )
        return int(row[0]) if row else 0

    # =========================================================
    # Single-row operations
    # =========================================================
    def get_task(self, task_id: UUID) -> Task | None:
        row = self._fetchone(
            query=f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = %s",
            params=(task_id,),
            context_msg="PostgresTaskRepository: get_task failed",
            extra={"task_id": str(task_id)},
        )
        return _row_to_task(row) if row else None

    def insert_task(self, task: Task) -> Task:
        row = self._fetchone(
            query=f"""
                INSERT INTO tasks (
                    id, title, description, status, priority, assigned_to,
                    created_by, due_date, completed_at, tags, created_at, updated_at
                )
                VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                    COALESCE(%s, NOW()), COALESCE(%s, NOW())
                )
                RETURNING {_TASK_COLUMNS}
            """,
            params=(
                task.id,
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                task.assigned_to,
                task.created_by,
                task.due_date,
                task.completed_at,
                list(task.tags),
                task.created_at,
                task.updated_at,
            ),
            context_msg="PostgresTaskRepository: insert_task failed",
            extra={"task_id": str(task.id)},
        )
        if not row:
            raise StorageError("PostgresTaskRepository: insert_task returned no row")
        return _row_to_task(row)

    def update_task_fields(
        self, task_id: UUID, changes: Mapping[str, object]
    ) -> Task | None:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Not updatable task columns: {sorted(unknown)}")

        assignments: list[str] = []
        params: list[object] = []
        for column, value in changes.items():
            if column == "updated_at":
                continue
            if isinstance(value, (TaskStatus, TaskPriority)):
                value = value.value
            elif column == "tags":
                value = list(value)
            assignments.append(f"{column} = %s")
            params.append(value)
        assignments.append("updated_at = COALESCE(%s, NOW())")
        params.append(changes.get("updated_at"))
        params.append(task_id)

        row = self._fetchone(
            query=f"""
                UPDATE tasks
                SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING {_TASK_COLUMNS}
            """,
            params=tuple(params),
            context_msg="PostgresTaskRepository: update_task_fields failed",
            extra={"task_id": str(task_id), "columns": sorted(changes)},
        )
        return _row_to_task(row) if row else None

    def delete_task(self, task_id: UUID) -> bool:
        row = self._fetchone(
            query="DELETE FROM tasks WHERE id = %s RETURNING id",
            params=(task_id,),
            context_msg="PostgresTaskRepository: delete_task failed",
            extra={"task_id": str(task_id)},
        )
        return row is not None

    def ping(self) -> bool:
        row = self._fetchone(
            query="SELECT 1",
            params=(),
            context_msg="PostgresTaskRepository: ping failed",
            extra={},
        )
        return row is not None
