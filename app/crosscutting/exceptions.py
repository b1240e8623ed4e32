"""
===============================================================================
MODULE: Typed internal exceptions
===============================================================================

Goal
----
Consistent internal exceptions carrying:
- a stable error_code
- an error_id for log correlation
- a human message (never leaking secrets)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  TaskboardError + subclasses

Responsibilities:
  - Standardize internal failures that are later mapped to HTTP
  - Generate error_id for tracing

Collaborators:
  - api/exception_handlers.py (maps to AppHTTPException)
  - infrastructure/repositories/* (raise StorageError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class TaskboardError(Exception):
    """R: Base class for internal errors (error_code + error_id + message)."""

    error_code: str = "TASKBOARD_ERROR"

    def __init__(self, message: str, error_id: str | None = None):
        self.message = message
        self.error_id = error_id or str(uuid4())
        super().__init__(message)


class StorageError(TaskboardError):
    """Persistence failures (connection, query, timeout, pool, bad rows)."""

    error_code: str = "STORAGE_ERROR"


class DuplicateEmailError(TaskboardError):
    """A user with the same (normalized) email already exists."""

    error_code: str = "DUPLICATE_EMAIL"
