"""
Name: Postgres Task Repository Tests (offline)

Responsibilities:
  - SQL shape built from TaskQuery (WHERE / ORDER BY / LIMIT)
  - LIKE escaping of search terms
  - Partial UPDATE writes only the supplied columns
  - Driver failures surface as StorageError
"""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from app.crosscutting.exceptions import StorageError
from app.domain.entities import TaskPriority, TaskStatus
from app.domain.task_query import TaskQuery, TaskSort
from app.infrastructure.repositories.postgres.task import (
    PostgresTaskRepository,
    _escape_like,
    _where_clause,
)

pytestmark = pytest.mark.unit


def _pool_returning(*, fetchall=None, fetchone=None):
    conn = MagicMock()
    cursor = conn.execute.return_value
    cursor.fetchall.return_value = fetchall or []
    cursor.fetchone.return_value = fetchone

    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    return pool, conn


def _row(task_id=None):
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    return (
        task_id or uuid4(),
        "Title",
        "Description",
        "in-progress",
        "high",
        uuid4(),
        uuid4(),
        date(2025, 2, 1),
        None,
        ["a"],
        now,
        now,
    )


def test_escape_like():
    assert _escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_where_clause_empty():
    assert _where_clause(TaskQuery()) == ("", [])


def test_where_clause_composes_filters():
    assignee = uuid4()
    where, params = _where_clause(
        TaskQuery(
            assigned_to=assignee,
            status=TaskStatus.PENDING,
            priority=TaskPriority.URGENT,
            search="bug",
        )
    )

    assert where.startswith("WHERE assigned_to = %s AND status = %s")
    assert "(title ILIKE %s OR description ILIKE %s)" in where
    assert params == [assignee, "pending", "urgent", "%bug%", "%bug%"]


def test_find_tasks_pages_and_maps_rows():
    pool, conn = _pool_returning(fetchall=[_row()])
    repo = PostgresTaskRepository(pool=pool)

    tasks = repo.find_tasks(TaskQuery(), skip=10, limit=5)

    sql, params = conn.execute.call_args.args
    assert "ORDER BY created_at DESC, id DESC" in sql
    assert sql.rstrip().endswith("LIMIT %s OFFSET %s")
    assert params == (5, 10)
    assert tasks[0].status == TaskStatus.IN_PROGRESS
    assert tasks[0].tags == ["a"]


def test_find_tasks_due_order_without_limit():
    pool, conn = _pool_returning(fetchall=[])
    repo = PostgresTaskRepository(pool=pool)

    repo.find_tasks(TaskQuery(), sort=TaskSort.DUE_ASC)

    sql, _ = conn.execute.call_args.args
    assert "ORDER BY due_date ASC, id ASC" in sql
    assert "LIMIT" not in sql


def test_update_sets_only_given_columns():
    task_id = uuid4()
    stamp = datetime(2025, 3, 1, tzinfo=timezone.utc)
    pool, conn = _pool_returning(fetchone=_row(task_id))
    repo = PostgresTaskRepository(pool=pool)

    updated = repo.update_task_fields(
        task_id,
        {"status": TaskStatus.COMPLETED, "completed_at": stamp, "updated_at": stamp},
    )

    sql, params = conn.execute.call_args.args
    assert "SET status = %s, completed_at = %s, updated_at = COALESCE(%s, NOW())" in sql
    assert "title = %s" not in sql
    assert params == ("completed", stamp, stamp, task_id)
    assert updated.id == task_id


def test_update_missing_row_returns_none():
    pool, _ = _pool_returning(fetchone=None)
    repo = PostgresTaskRepository(pool=pool)

    assert repo.update_task_fields(uuid4(), {"title": "Ghost"}) is None


def test_update_rejects_fixed_columns():
    pool, conn = _pool_returning()
    repo = PostgresTaskRepository(pool=pool)

    with pytest.raises(ValueError):
        repo.update_task_fields(uuid4(), {"created_by": uuid4()})
    conn.execute.assert_not_called()


def test_delete_reports_missing_row():
    pool, _ = _pool_returning(fetchone=None)
    repo = PostgresTaskRepository(pool=pool)

    assert repo.delete_task(uuid4()) is False


def test_driver_error_becomes_storage_error():
    pool = MagicMock()
    pool.connection.side_effect = RuntimeError("connection refused")
    repo = PostgresTaskRepository(pool=pool)

    with pytest.raises(StorageError):
        repo.get_task(uuid4())


def test_unknown_status_in_row_is_storage_error():
    row = list(_row())
    row[3] = "archived"
    pool, _ = _pool_returning(fetchone=tuple(row))
    repo = PostgresTaskRepository(pool=pool)

    with pytest.raises(StorageError):
        repo.get_task(uuid4())
