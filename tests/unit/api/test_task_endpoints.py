"""
Name: Task Endpoint Tests

Responsibilities:
  - Bearer auth on every task route (401 without token)
  - camelCase JSON contract for tasks, pagination and stats
  - TaskError -> RFC 7807 mapping (403 reason, 404, 422 field errors)
"""

from __future__ import annotations

from datetime import date
from unittest.mock import patch
from uuid import uuid4

import pytest
from app.api.exception_handlers import register_exception_handlers
from app.application.usecases import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    GetTaskStatsUseCase,
    GetTaskUseCase,
    ListCalendarTasksUseCase,
    ListTasksUseCase,
    UpdateTaskUseCase,
)
from app import container
from app.domain.entities import TaskStatus
from app.identity.auth_users import AuthSettings, create_access_token
from app.interfaces.api.http.router import build_router
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.factories import make_task

pytestmark = pytest.mark.unit

_AUTH = AuthSettings(jwt_secret="test-secret", jwt_access_ttl_minutes=30)


def _build_app(task_repo, user_repo) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(build_router(), prefix="/api")

    overrides = {
        container.get_list_tasks_use_case: lambda: ListTasksUseCase(
            task_repo, user_repo
        ),
        container.get_calendar_tasks_use_case: lambda: ListCalendarTasksUseCase(
            task_repo, user_repo
        ),
        container.get_task_stats_use_case: lambda: GetTaskStatsUseCase(task_repo),
        container.get_get_task_use_case: lambda: GetTaskUseCase(task_repo, user_repo),
        container.get_create_task_use_case: lambda: CreateTaskUseCase(
            task_repo, user_repo
        ),
        container.get_update_task_use_case: lambda: UpdateTaskUseCase(
            task_repo, user_repo
        ),
        container.get_delete_task_use_case: lambda: DeleteTaskUseCase(task_repo),
    }
    app.dependency_overrides.update(overrides)
    return app


@pytest.fixture
def client(task_repo, user_repo):
    with patch("app.identity.auth_users.get_user_repository", return_value=user_repo):
        with patch("app.identity.auth_users.get_auth_settings", return_value=_AUTH):
            yield TestClient(_build_app(task_repo, user_repo))


def _auth(user) -> dict[str, str]:
    token, _ = create_access_token(user, settings=_AUTH)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Authentication
# =============================================================================


def test_missing_token_is_401(client):
    response = client.get("/api/tasks")

    assert response.status_code == 401
    body = response.json()
    assert body["code"] == "UNAUTHORIZED"
    assert body["detail"] == "Access token required."


def test_garbage_token_is_invalid_credential(client):
    response = client.get("/api/tasks", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIAL"


# =============================================================================
# Listings
# =============================================================================


def test_list_uses_camel_case_and_pagination(client, task_repo, admin, alice):
    for _ in range(15):
        task_repo.insert_task(make_task(assigned_to=alice.id, created_by=admin.id))

    response = client.get("/api/tasks?page=2&limit=10", headers=_auth(admin))

    assert response.status_code == 200
    body = response.json()
    assert len(body["tasks"]) == 5
    assert body["pagination"] == {
        "currentPage": 2,
        "totalPages": 2,
        "totalTasks": 15,
        "hasNext": False,
        "hasPrev": True,
    }
    task = body["tasks"][0]
    assert task["assignedTo"] == {
        "id": str(alice.id),
        "name": "Alice",
        "email": "alice@example.com",
    }
    assert task["createdBy"]["name"] == "Admin User"
    assert task["completedAt"] is None
    assert "dueDate" in task


def test_list_rejects_bad_parameters(client, admin):
    response = client.get("/api/tasks?page=0&status=archived", headers=_auth(admin))

    assert response.status_code == 422
    fields = [e["field"] for e in response.json()["errors"]]
    assert fields == ["page", "status"]


def test_stats(client, task_repo, admin, alice):
    task_repo.insert_task(
        make_task(
            assigned_to=alice.id, created_by=admin.id, status=TaskStatus.IN_PROGRESS
        )
    )

    body = client.get("/api/tasks/stats", headers=_auth(alice)).json()

    assert body["total"] == 1
    assert body["inProgress"] == 1
    assert body["overdue"] == 0


def test_calendar(client, task_repo, admin, alice):
    task_repo.insert_task(
        make_task(
            assigned_to=alice.id, created_by=admin.id, due_date=date(2025, 7, 14)
        )
    )
    task_repo.insert_task(
        make_task(
            assigned_to=alice.id, created_by=admin.id, due_date=date(2025, 8, 1)
        )
    )

    body = client.get("/api/tasks/calendar/2025/7", headers=_auth(alice)).json()

    assert [t["dueDate"] for t in body["tasks"]] == ["2025-07-14"]


def test_calendar_invalid_month(client, admin):
    response = client.get("/api/tasks/calendar/2025/0", headers=_auth(admin))

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "month"


# =============================================================================
# Single task
# =============================================================================


def test_create_task(client, task_repo, manager, alice):
    response = client.post(
        "/api/tasks",
        headers=_auth(manager),
        json={
            "title": "  Ship release  ",
            "description": "Tag and publish",
            "assignedTo": str(alice.id),
            "dueDate": "2025-09-01",
            "priority": "urgent",
            "tags": ["release", "release"],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Task created successfully"
    assert body["task"]["title"] == "Ship release"
    assert body["task"]["status"] == "pending"
    assert body["task"]["tags"] == ["release"]
    assert body["task"]["createdBy"]["email"] == "manager@example.com"


def test_create_task_as_user_is_forbidden(client, alice):
    response = client.post("/api/tasks", headers=_auth(alice), json={})

    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied. Required roles: admin, manager"


def test_create_task_validation_errors(client, admin):
    response = client.post(
        "/api/tasks", headers=_auth(admin), json={"title": "x" * 101}
    )

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert {"field": "title", "message": "Title must be 1-100 characters"} in errors


def test_create_task_unknown_assignee(client, admin):
    response = client.post(
        "/api/tasks",
        headers=_auth(admin),
        json={
            "title": "T",
            "description": "D",
            "assignedTo": str(uuid4()),
            "dueDate": "2025-09-01",
        },
    )

    assert response.status_code == 422
    assert response.json()["code"] == "REFERENCE_NOT_FOUND"


def test_get_task_malformed_id_is_404(client, admin):
    response = client.get("/api/tasks/not-a-uuid", headers=_auth(admin))

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_get_unrelated_task_is_403(client, task_repo, admin, alice, bob):
    task = task_repo.insert_task(make_task(assigned_to=bob.id, created_by=admin.id))

    response = client.get(f"/api/tasks/{task.id}", headers=_auth(alice))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_update_completes_task(client, task_repo, admin, alice):
    task = task_repo.insert_task(make_task(assigned_to=alice.id, created_by=admin.id))

    response = client.put(
        f"/api/tasks/{task.id}", headers=_auth(alice), json={"status": "completed"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Task updated successfully"
    assert body["task"]["status"] == "completed"
    assert body["task"]["completedAt"] is not None


def test_update_reassign_by_user_is_forbidden(client, task_repo, admin, alice, bob):
    task = task_repo.insert_task(make_task(assigned_to=alice.id, created_by=admin.id))

    response = client.put(
        f"/api/tasks/{task.id}",
        headers=_auth(alice),
        json={"assignedTo": str(bob.id)},
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Only admins and managers can reassign tasks"


def test_update_missing_task_is_404(client, admin):
    response = client.put(
        f"/api/tasks/{uuid4()}", headers=_auth(admin), json={"title": "x"}
    )

    assert response.status_code == 404


def test_delete_requires_admin(client, task_repo, admin, manager, alice):
    task = task_repo.insert_task(make_task(assigned_to=alice.id, created_by=admin.id))

    denied = client.delete(f"/api/tasks/{task.id}", headers=_auth(manager))
    deleted = client.delete(f"/api/tasks/{task.id}", headers=_auth(admin))
    again = client.delete(f"/api/tasks/{task.id}", headers=_auth(admin))

    assert denied.status_code == 403
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Task deleted successfully"}
    assert again.status_code == 404
