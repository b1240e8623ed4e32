"""
Name: JSON Logger Tests

Responsibilities:
  - JSON output enriched with request context
  - Redaction of secret-looking extra fields
"""

import json
import logging

import pytest
from app.context import clear_context, set_request_context
from app.crosscutting.logger import JSONFormatter

pytestmark = pytest.mark.unit


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="taskboard-api",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Task created",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_json_with_context():
    set_request_context(request_id="req-9", method="POST", path="/api/tasks")
    try:
        line = JSONFormatter().format(_record(task_id="t-1"))
    finally:
        clear_context()

    payload = json.loads(line)
    assert payload["message"] == "Task created"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-9"
    assert payload["path"] == "/api/tasks"
    assert payload["task_id"] == "t-1"


def test_redacts_sensitive_fields():
    line = JSONFormatter().format(
        _record(password="hunter2", nested={"access_token": "abc", "ok": 1})
    )

    payload = json.loads(line)
    assert payload["password"] == "***REDACTED***"
    assert payload["nested"] == {"access_token": "***REDACTED***", "ok": 1}


def test_context_is_cleared():
    set_request_context(request_id="req-1")
    clear_context()

    payload = json.loads(JSONFormatter().format(_record()))

    assert "request_id" not in payload
