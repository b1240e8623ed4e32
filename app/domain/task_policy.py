"""
Name: Task Access Policy

Responsibilities:
  - Decide whether an actor may list, read, create, update, reassign or
    delete tasks
  - Return the denial reason with every negative decision

Collaborators:
  - identity.users.UserRole
  - domain.entities.Task

Constraints:
  - Pure functions over immutable inputs (no I/O, no request objects)
  - Existence of a task is checked by callers BEFORE the task-level gate

Notes:
  - Evaluation order: role gate for the action type, then the task-level
    ownership gate for READ/UPDATE of a specific task.
  - Managers currently see every task. That branch is kept separate from the
    admin branch so team scoping only touches _manager_task_gate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping
from uuid import UUID

from ..identity.users import UserRole
from .entities import Task


class TaskAction(str, Enum):
    """R: Actions subject to authorization."""

    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    REASSIGN = "reassign"
    DELETE = "delete"


@dataclass(frozen=True)
class TaskActor:
    """R: Immutable identity used for every task decision."""

    user_id: UUID
    role: UserRole


@dataclass(frozen=True)
class PolicyDecision:
    """R: allow | deny(reason)."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "PolicyDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "PolicyDecision":
        return cls(allowed=False, reason=reason)


ALL_ROLES: frozenset[UserRole] = frozenset(UserRole)

# R: Role gate per action type, evaluated before any task is loaded.
ROLE_GATES: Mapping[TaskAction, frozenset[UserRole]] = {
    TaskAction.LIST: ALL_ROLES,
    TaskAction.READ: ALL_ROLES,
    TaskAction.UPDATE: ALL_ROLES,
    TaskAction.CREATE: frozenset({UserRole.ADMIN, UserRole.MANAGER}),
    TaskAction.REASSIGN: frozenset({UserRole.ADMIN, UserRole.MANAGER}),
    TaskAction.DELETE: frozenset({UserRole.ADMIN}),
}

# R: Actions that additionally require the task-level ownership gate.
TASK_SCOPED_ACTIONS: frozenset[TaskAction] = frozenset(
    {TaskAction.READ, TaskAction.UPDATE}
)

# Action-specific denial messages; anything else uses the generic role text.
_ROLE_DENIAL_MESSAGES: Mapping[TaskAction, str] = {
    TaskAction.REASSIGN: "Only admins and managers can reassign tasks",
}

MSG_TASK_DENIED = "Access denied to this task: not assigned or owner"


def _ordered_roles(roles: frozenset[UserRole]) -> list[str]:
    return [role.value for role in UserRole if role in roles]


def check_role_gate(actor: TaskActor, action: TaskAction) -> PolicyDecision:
    """R: Rule 1, role gate for the action type."""
    allowed_roles = ROLE_GATES[action]
    if actor.role in allowed_roles:
        return PolicyDecision.allow()

    message = _ROLE_DENIAL_MESSAGES.get(action)
    if message is None:
        required = ", ".join(_ordered_roles(allowed_roles))
        message = f"Access denied. Required roles: {required}"
    return PolicyDecision.deny(message)


def _admin_task_gate(actor: TaskActor, task: Task) -> PolicyDecision:
    return PolicyDecision.allow()


def _manager_task_gate(actor: TaskActor, task: Task) -> PolicyDecision:
    # No team membership exists yet: managers may access every task.
    return PolicyDecision.allow()


def _user_task_gate(actor: TaskActor, task: Task) -> PolicyDecision:
    if actor.user_id == task.assigned_to or actor.user_id == task.created_by:
        return PolicyDecision.allow()
    return PolicyDecision.deny(MSG_TASK_DENIED)


_TASK_GATES: Mapping[UserRole, Callable[[TaskActor, Task], PolicyDecision]] = {
    UserRole.ADMIN: _admin_task_gate,
    UserRole.MANAGER: _manager_task_gate,
    UserRole.USER: _user_task_gate,
}


def check_task_gate(actor: TaskActor, task: Task) -> PolicyDecision:
    """R: Rule 2, task-level ownership gate for a loaded task."""
    return _TASK_GATES[actor.role](actor, task)


def can_perform(
    actor: TaskActor, action: TaskAction, task: Task | None = None
) -> PolicyDecision:
    """
    R: Full decision for (actor, action, task?).

    READ and UPDATE need the target task; the other actions are decided by
    the role gate alone.
    """
    decision = check_role_gate(actor, action)
    if not decision.allowed or action not in TASK_SCOPED_ACTIONS:
        return decision

    if task is None:
        raise ValueError(f"action '{action.value}' requires a task")

    return check_task_gate(actor, task)
