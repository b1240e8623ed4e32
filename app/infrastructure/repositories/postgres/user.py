"""
============================================================
CRC CARD: infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Load users for authentication (by email / by id) and reference
    resolution (batch by ids).
  - Create users (registration / dev seed).
  - Run parameterized SQL against the `users` table (migration contract).
  - Map raw rows -> `User`, validating `UserRole`.
  - Surface failures consistently as `StorageError` with structured logs.

Collaborators:
  - psycopg_pool.ConnectionPool
  - infrastructure.db.pool.get_pool
  - identity.users.User / UserRole
  - crosscutting.exceptions.StorageError / DuplicateEmailError

Constraints / Notes:
  - Pure repository: no role policy here.
  - Returns None when the row does not exist.
  - Emails are stored lower-case; callers normalize before lookups.
  - Stable listing order: name ASC, id ASC.
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID, uuid4

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DuplicateEmailError, StorageError
from ....crosscutting.logger import logger
from ....identity.users import User, UserRole

# Explicit column list: one place to change when the schema changes.
_USER_COLUMNS = "id, name, email, password_hash, role, is_active, created_at"

_USER_ORDER_BY = "name ASC, id ASC"


def _row_to_user(row: tuple) -> User:
    """
    Map a `users` row to `User`.

    Unknown roles are a data drift problem -> StorageError.
    """
    try:
        role = UserRole(row[4])
    except ValueError as exc:
        raise StorageError(f"Invalid user role in database: {row[4]}") from exc

    return User(
        id=row[0],
        name=row[1],
        email=row[2],
        password_hash=row[3],
        role=role,
        is_active=row[5],
        created_at=row[6],
    )


class PostgresUserRepository:
    """R: PostgreSQL implementation of UserRepository."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # Execution helpers (consistent logging + StorageError)
    # =========================================================
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

    # =========================================================
    # Reads
    # =========================================================
    def get_user(self, user_id: UUID) -> User | None:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            context_msg="PostgresUserRepository: get_user failed",
            extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> User | None:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s",
            params=(email,),
            context_msg="PostgresUserRepository: get_user_by_email failed",
            extra={"email": email},
        )
        return _row_to_user(row) if row else None

    def get_users_by_ids(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        rows = self._fetchall(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = ANY(%s)",
            params=(ids,),
            context_msg="PostgresUserRepository: get_users_by_ids failed",
            extra={"count": len(ids)},
        )
        users = [_row_to_user(r) for r in rows]
        return {u.id: u for u in users}

    def list_users(self, *, active_only: bool = True) -> list[User]:
        where = "WHERE is_active = true" if active_only else ""
        rows = self._fetchall(
            query=f"SELECT {_USER_COLUMNS} FROM users {where} ORDER BY {_USER_ORDER_BY}",
            params=(),
            context_msg="PostgresUserRepository: list_users failed",
            extra={"active_only": active_only},
        )
        return [_row_to_user(r) for r in rows]

    def count_users(self) -> int:
        row = self._fetchone(
            query="SELECT COUNT(*) FROM users",
            params=(),
            context_msg="PostgresUserRepository: count_users failed",
            extra={},
        )
        return int(row[0]) if row else 0

    # =========================================================
    # Writes
    # =========================================================
    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        is_active: bool = True,
    ) -> User:
        """
        Insert a user and return the stored record.

        uq_users_email violations become DuplicateEmailError.
        """
        user_id = uuid4()
        context_msg = "PostgresUserRepository: create_user failed"
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                row = conn.execute(
                    f"""
                    INSERT INTO users (id, name, email, password_hash, role, is_active)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING {_USER_COLUMNS}
                    """,
                    (user_id, name, email, password_hash, role.value, is_active),
                ).fetchone()
        except pg_errors.UniqueViolation as exc:
            raise DuplicateEmailError(f"Email already registered: {email}") from exc
        except Exception as exc:
            logger.exception(
                context_msg,
                extra={"user_id": str(user_id), "role": role.value, "error": str(exc)},
            )
            raise StorageError(f"{context_msg}: {exc}") from exc

        if not row:
            raise StorageError(f"{context_msg} (no row returned)")
        return _row_to_user(row)
