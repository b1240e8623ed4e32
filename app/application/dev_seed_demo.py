"""
Name: Dev Seed Demo (Local-only)

Responsibilities:
  - Provision a local demo environment (admin + manager + users + tasks)
  - Enforce safety guard: only allowed in local environment
  - Keep operations idempotent (safe to run on every startup)

Architecture:
  - Layer: Application task, wired by the composition root (api/main.py)
  - Depends on repository ports, not on a concrete storage engine

CRC:
  Component: ensure_dev_demo
  Responsibilities:
    - Validate environment guard
    - Skip when users already exist (unless forced)
    - Ensure demo users and demo tasks exist
  Collaborators:
    - user_repo (count_users/get_user_by_email/create_user)
    - task_repo (find_tasks/insert_task)
    - password_hasher
    - Settings (dev_seed_demo/dev_seed_demo_force/app_env)
  Constraints:
    - Must NEVER run outside local environment
    - Must be idempotent
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable
from uuid import uuid4

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.entities import Task, TaskPriority, TaskStatus
from ..domain.repositories import TaskRepository, UserRepository
from ..domain.task_query import TaskQuery
from ..identity.users import User, UserRole

# -----------------------------
# Seed specs
# -----------------------------


@dataclass(frozen=True, slots=True)
class _SeedUserSpec:
    """R: Declarative user seed spec (no side effects)."""

    name: str
    email: str
    password: str
    role: UserRole


@dataclass(frozen=True, slots=True)
class _SeedTaskSpec:
    """R: Declarative task seed spec; dates are relative to today."""

    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    assignee_email: str
    creator_email: str
    due_in_days: int
    tags: tuple[str, ...]
    completed_days_ago: int | None = None


_ADMIN = "admin@example.com"
_MANAGER = "manager@example.com"
_JOHN = "user@example.com"
_JANE = "jane@example.com"
_BOB = "bob@example.com"

# R: Canonical demo users (local only)
_DEMO_USERS: tuple[_SeedUserSpec, ...] = (
    _SeedUserSpec("Admin User", _ADMIN, "admin123", UserRole.ADMIN),
    _SeedUserSpec("Manager User", _MANAGER, "manager123", UserRole.MANAGER),
    _SeedUserSpec("John Doe", _JOHN, "user123", UserRole.USER),
    _SeedUserSpec("Jane Smith", _JANE, "user123", UserRole.USER),
    _SeedUserSpec("Bob Johnson", _BOB, "user123", UserRole.USER),
)

_DEMO_TASKS: tuple[_SeedTaskSpec, ...] = (
    _SeedTaskSpec(
        title="Complete project documentation",
        description=(
            "Write comprehensive documentation for the task management system "
            "including API documentation and user guides."
        ),
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        assignee_email=_JOHN,
        creator_email=_ADMIN,
        due_in_days=7,
        tags=("documentation", "project"),
    ),
    _SeedTaskSpec(
        title="Review code quality",
        description=(
            "Conduct a thorough code review of the frontend components and "
            "suggest improvements."
        ),
        status=TaskStatus.PENDING,
        priority=TaskPriority.MEDIUM,
        assignee_email=_JANE,
        creator_email=_MANAGER,
        due_in_days=3,
        tags=("code-review", "quality"),
    ),
    _SeedTaskSpec(
        title="Fix authentication bug",
        description=(
            "Investigate and fix the JWT token expiration issue reported by users."
        ),
        status=TaskStatus.PENDING,
        priority=TaskPriority.URGENT,
        assignee_email=_BOB,
        creator_email=_ADMIN,
        due_in_days=1,
        tags=("bug-fix", "authentication"),
    ),
    _SeedTaskSpec(
        title="Update user interface",
        description=(
            "Improve the user interface based on user feedback and make it "
            "more responsive."
        ),
        status=TaskStatus.COMPLETED,
        priority=TaskPriority.MEDIUM,
        assignee_email=_JANE,
        creator_email=_MANAGER,
        due_in_days=-2,
        tags=("ui", "improvement"),
        completed_days_ago=1,
    ),
    _SeedTaskSpec(
        title="Database optimization",
        description=(
            "Optimize database queries and add proper indexing for better "
            "performance."
        ),
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        assignee_email=_JOHN,
        creator_email=_ADMIN,
        due_in_days=5,
        tags=("database", "optimization"),
    ),
    _SeedTaskSpec(
        title="Write unit tests",
        description=(
            "Create comprehensive unit tests for all API endpoints and frontend "
            "components."
        ),
        status=TaskStatus.PENDING,
        priority=TaskPriority.MEDIUM,
        assignee_email=_BOB,
        creator_email=_MANAGER,
        due_in_days=10,
        tags=("testing", "unit-tests"),
    ),
)


def _assert_local_env(settings: Settings) -> None:
    """
    R: Safety guard: DEV_SEED_DEMO must only run in local.
    Fail-fast to prevent accidental seeding in real environments.
    """
    env = (settings.app_env or "").strip().lower()
    if env != "local":
        raise RuntimeError(
            f"FATAL: DEV_SEED_DEMO is enabled but APP_ENV is '{env}' "
            "(must be 'local')."
        )


def _ensure_user(
    *,
    spec: _SeedUserSpec,
    user_repo: UserRepository,
    password_hasher: Callable[[str], str],
) -> User:
    """R: Ensure a user exists (idempotent)."""
    user = user_repo.get_user_by_email(spec.email)
    if user:
        logger.info(
            "Dev seed demo: user already exists",
            extra={"email": spec.email, "role": spec.role.value},
        )
        return user

    user = user_repo.create_user(
        name=spec.name,
        email=spec.email,
        password_hash=password_hasher(spec.password),
        role=spec.role,
        is_active=True,
    )
    logger.info(
        "Dev seed demo: user created",
        extra={"email": spec.email, "role": spec.role.value},
    )
    return user


def _ensure_task(
    *,
    spec: _SeedTaskSpec,
    users: dict[str, User],
    task_repo: TaskRepository,
    today: date,
    now: datetime,
) -> None:
    """R: Insert the task unless its assignee already has one with that title."""
    assignee = users[spec.assignee_email]
    existing = task_repo.find_tasks(
        TaskQuery(assigned_to=assignee.id, search=spec.title)
    )
    if any(t.title == spec.title for t in existing):
        return

    completed_at = None
    if spec.completed_days_ago is not None:
        completed_at = now - timedelta(days=spec.completed_days_ago)

    task_repo.insert_task(
        Task(
            id=uuid4(),
            title=spec.title,
            description=spec.description,
            assigned_to=assignee.id,
            created_by=users[spec.creator_email].id,
            due_date=today + timedelta(days=spec.due_in_days),
            status=spec.status,
            priority=spec.priority,
            completed_at=completed_at,
            tags=list(spec.tags),
            created_at=now,
            updated_at=now,
        )
    )
    logger.info(
        "Dev seed demo: task created",
        extra={"title": spec.title, "assignee": spec.assignee_email},
    )


def ensure_dev_demo(
    settings: Settings,
    *,
    user_repo: UserRepository,
    task_repo: TaskRepository,
    password_hasher: Callable[[str], str],
    now: datetime | None = None,
) -> bool:
    """
    R: Ensure the demo environment exists if configured.

    Creates (local only):
      - Admin / Manager / three regular users
      - Six demo tasks spread across statuses and priorities

    Returns:
        True if provisioning ran, False if disabled or skipped.

    Fail-fast:
      - If dev_seed_demo is enabled but env != local
    """
    if not settings.dev_seed_demo:
        return False

    _assert_local_env(settings)

    existing_users = user_repo.count_users()
    if existing_users > 0 and not settings.dev_seed_demo_force:
        logger.info(
            "Dev seed demo: data already present, skipping",
            extra={"users": existing_users},
        )
        return False

    logger.info("Dev seed demo: starting provisioning")

    now = now or datetime.now(timezone.utc)
    users = {
        spec.email: _ensure_user(
            spec=spec, user_repo=user_repo, password_hasher=password_hasher
        )
        for spec in _DEMO_USERS
    }
    for task_spec in _DEMO_TASKS:
        _ensure_task(
            spec=task_spec,
            users=users,
            task_repo=task_repo,
            today=now.date(),
            now=now,
        )

    logger.info("Dev seed demo: provisioning complete")
    return True
