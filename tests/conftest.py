"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (memory storage, no .env file)
  - Provide demo users and in-memory repositories

Collaborators:
  - tests.factories: entity builders

Notes:
  - Fixtures are per-test (function scope) for isolation
"""

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("JWT_SECRET", "test-secret")

from app.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from app.identity.users import User, UserRole  # noqa: E402
from app.infrastructure.repositories.in_memory import (  # noqa: E402
    InMemoryTaskRepository,
    InMemoryUserRepository,
)
from tests.factories import make_user  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


@pytest.fixture
def admin() -> User:
    return make_user(UserRole.ADMIN, name="Admin User", email="admin@example.com")


@pytest.fixture
def manager() -> User:
    return make_user(UserRole.MANAGER, name="Manager User", email="manager@example.com")


@pytest.fixture
def alice() -> User:
    return make_user(UserRole.USER, name="Alice", email="alice@example.com")


@pytest.fixture
def bob() -> User:
    return make_user(UserRole.USER, name="Bob", email="bob@example.com")


@pytest.fixture
def user_repo(admin, manager, alice, bob) -> InMemoryUserRepository:
    return InMemoryUserRepository([admin, manager, alice, bob])


@pytest.fixture
def task_repo() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()
