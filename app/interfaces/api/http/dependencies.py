"""
===============================================================================
CRC CARD: dependencies.py (shared router helpers)
===============================================================================

Responsibilities:
  - Convert the authenticated User -> TaskActor (policy input), once per
    request.
  - Parse task ids from the path (malformed id -> 404).

Collaborators:
  - identity.auth_users.require_user
  - domain.task_policy.TaskActor
  - crosscutting.error_responses.not_found
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends

from app.crosscutting.error_responses import not_found
from app.domain.task_policy import TaskActor
from app.identity.auth_users import require_user
from app.identity.users import User


def to_task_actor(user: User) -> TaskActor:
    return TaskActor(user_id=user.id, role=user.role)


def current_actor(user: User = Depends(require_user())) -> TaskActor:
    """Dependency: immutable actor snapshot of the authenticated user."""
    return to_task_actor(user)


def parse_task_id(raw: str) -> UUID:
    """A malformed id cannot name an existing task: 404, not 422."""
    try:
        return UUID(raw)
    except ValueError as exc:
        raise not_found("Task", raw) from exc
