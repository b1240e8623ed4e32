"""
Name: Dev Seed Demo Tests

Responsibilities:
  - Environment guard (local only)
  - Provisioning of demo users and tasks
  - Idempotency on repeated startups
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from app.application.dev_seed_demo import ensure_dev_demo
from app.crosscutting.config import Settings
from app.domain.entities import TaskStatus
from app.domain.task_query import TaskQuery
from app.infrastructure.repositories.in_memory import (
    InMemoryTaskRepository,
    InMemoryUserRepository,
)

from tests.factories import make_user

pytestmark = pytest.mark.unit

NOW = datetime(2025, 4, 1, 8, 0, tzinfo=timezone.utc)


def _settings(**overrides) -> Settings:
    values = {
        "app_env": "local",
        "storage_backend": "memory",
        "dev_seed_demo": True,
    }
    values.update(overrides)
    return Settings(**values)


def _hasher(password: str) -> str:
    return f"hashed:{password}"


def test_disabled_does_nothing():
    user_repo = MagicMock()

    ran = ensure_dev_demo(
        _settings(dev_seed_demo=False),
        user_repo=user_repo,
        task_repo=MagicMock(),
        password_hasher=_hasher,
    )

    assert ran is False
    user_repo.count_users.assert_not_called()


def test_refuses_outside_local():
    with pytest.raises(RuntimeError, match="must be 'local'"):
        ensure_dev_demo(
            _settings(app_env="development"),
            user_repo=InMemoryUserRepository(),
            task_repo=InMemoryTaskRepository(),
            password_hasher=_hasher,
        )


def test_seeds_users_and_tasks():
    user_repo = InMemoryUserRepository()
    task_repo = InMemoryTaskRepository()

    ran = ensure_dev_demo(
        _settings(),
        user_repo=user_repo,
        task_repo=task_repo,
        password_hasher=_hasher,
        now=NOW,
    )

    assert ran is True
    assert user_repo.count_users() == 5
    admin = user_repo.get_user_by_email("admin@example.com")
    assert admin.password_hash == "hashed:admin123"

    tasks = task_repo.find_tasks(TaskQuery())
    assert len(tasks) == 6
    completed = [t for t in tasks if t.status == TaskStatus.COMPLETED]
    assert len(completed) == 1
    assert completed[0].completed_at is not None
    assert all(
        t.completed_at is None for t in tasks if t.status != TaskStatus.COMPLETED
    )


def test_skips_when_users_exist():
    user_repo = InMemoryUserRepository([make_user()])
    task_repo = InMemoryTaskRepository()

    ran = ensure_dev_demo(
        _settings(),
        user_repo=user_repo,
        task_repo=task_repo,
        password_hasher=_hasher,
    )

    assert ran is False
    assert task_repo.count_tasks(TaskQuery()) == 0


def test_forced_reseed_is_idempotent():
    user_repo = InMemoryUserRepository()
    task_repo = InMemoryTaskRepository()
    settings = _settings(dev_seed_demo_force=True)

    for _ in range(2):
        ensure_dev_demo(
            settings,
            user_repo=user_repo,
            task_repo=task_repo,
            password_hasher=_hasher,
            now=NOW,
        )

    assert user_repo.count_users() == 5
    assert task_repo.count_tasks(TaskQuery()) == 6
