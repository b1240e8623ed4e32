"""
============================================================
CRC CARD: infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Store users in memory (tests / STORAGE_BACKEND=memory).
  - Enforce email uniqueness like the uq_users_email index.

Collaborators:
  - identity.users.User, UserRole
  - crosscutting.exceptions.DuplicateEmailError

Constraints / Notes:
  - Thread-safe (Lock).
  - Listing order aligned with Postgres: name ASC, id ASC.
============================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List
from uuid import UUID, uuid4

from ....crosscutting.exceptions import DuplicateEmailError
from ....identity.users import User, UserRole


class InMemoryUserRepository:
    """R: Thread-safe in-memory user store."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {u.id: u for u in users}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def get_user(self, user_id: UUID) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def get_users_by_ids(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        with self._lock:
            return {uid: self._users[uid] for uid in user_ids if uid in self._users}

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: UserRole,
        is_active: bool = True,
    ) -> User:
        user = User(
            id=uuid4(),
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            is_active=is_active,
            created_at=self._now(),
        )
        with self._lock:
            if any(u.email == email for u in self._users.values()):
                raise DuplicateEmailError(f"Email already registered: {email}")
            self._users[user.id] = user
        return user

    def list_users(self, *, active_only: bool = True) -> List[User]:
        with self._lock:
            values = list(self._users.values())
        if active_only:
            values = [u for u in values if u.is_active]
        return sorted(values, key=lambda u: (u.name, str(u.id)))

    def count_users(self) -> int:
        with self._lock:
            return len(self._users)
