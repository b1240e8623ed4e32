"""
Name: Health Check Tests
"""

from unittest.mock import MagicMock, patch

import pytest
from app.api.main import app
from fastapi.testclient import TestClient

pytestmark = pytest.mark.unit


def test_healthz_connected():
    repo = MagicMock()
    repo.ping.return_value = True

    with patch("app.api.main.get_task_repository", return_value=repo):
        response = TestClient(app).get("/healthz", headers={"X-Request-Id": "abc"})

    assert response.status_code == 200
    assert response.json() == {"ok": True, "storage": "connected", "request_id": "abc"}
    assert response.headers["X-Request-Id"] == "abc"


def test_healthz_storage_down():
    repo = MagicMock()
    repo.ping.side_effect = RuntimeError("db down")

    with patch("app.api.main.get_task_repository", return_value=repo):
        body = TestClient(app).get("/healthz").json()

    assert body["ok"] is False
    assert body["storage"] == "disconnected"
    assert body["request_id"]
