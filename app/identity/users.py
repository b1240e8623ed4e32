"""
===============================================================================
CRC CARD: identity/users.py
===============================================================================

Module:
    User models (JWT identity)

Responsibilities:
    - Define the closed set of user roles used by authorization.
    - Define the User record used by auth flows and reference resolution.

Collaborators:
    - identity/auth_users.py: issues/validates JWT for User and UserRole.
    - domain/task_policy.py: branches on UserRole.
    - infrastructure/repositories/*/user.py: map rows -> User.

Notes:
    - Shapes only, no business logic.
    - Adding a role requires a new branch in domain/task_policy.py.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles supported by authorization."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


@dataclass(frozen=True, slots=True)
class User:
    """User record used by authentication and task references."""

    id: UUID
    name: str
    email: str
    password_hash: str
    role: UserRole
    is_active: bool = True
    created_at: datetime | None = None
