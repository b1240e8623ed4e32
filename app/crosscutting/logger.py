"""
===============================================================================
MODULE: Structured logger (JSON) with request context
===============================================================================

Goal
----
Log lines that are:
- Parseable (one JSON object per line)
- Correlatable (request_id / method / path)
- Safe (secret-looking keys redacted)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  JSONFormatter + setup_logger()

Responsibilities:
  - Format LogRecords as JSON
  - Enrich with request context from app/context.py
  - Redact sensitive fields and cap sizes

Collaborators:
  - app/context.py (ContextVars)
  - crosscutting/config.py (level and output format)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

# LogRecord attributes that must not be copied as "extra" fields.
_INTERNAL_LOGRECORD_KEYS: set[str] = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "taskName",
}


class _Redactor:
    """
    R: Redact sensitive keys, truncate huge strings and keep values JSON-safe.
    """

    SENSITIVE_KEYS = {
        "password",
        "passwd",
        "password_hash",
        "secret",
        "jwt_secret",
        "token",
        "access_token",
        "authorization",
        "credential",
        "database_url",
    }

    def __init__(self, max_str: int = 8_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTED***"

        if depth > self._max_depth:
            return "***TRUNCATED***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "…(truncated)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple, set)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]

        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)


class JSONFormatter(logging.Formatter):
    """
    R: Convert LogRecord -> JSON, attach request context and stacktraces.
    """

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        from ..context import get_context_dict

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _INTERNAL_LOGRECORD_KEYS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None
            payload["exception"] = {
                "type": exc_type,
                "message": exc_msg,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def setup_logger(name: str = "taskboard-api") -> logging.Logger:
    """
    Create and configure the service logger.

    - Avoids duplicated handlers on re-import
    - Honors log_level / log_json from Settings when they can be loaded
    """
    log = logging.getLogger(name)

    level = "INFO"
    use_json = True

    # Settings may be invalid at import time (e.g. missing DATABASE_URL);
    # logging must still work so the startup error itself gets logged.
    try:
        from .config import get_settings

        s = get_settings()
        level = s.log_level
        use_json = s.log_json
    except Exception:  # noqa: BLE001
        pass

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(message)s")
        )
        log.addHandler(handler)

    return log


# Global instance (import-friendly)
logger = setup_logger()
