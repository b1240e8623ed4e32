"""
===============================================================================
MODULE: HTTP middleware (request context)
===============================================================================

RequestContextMiddleware:
  - Generate or propagate X-Request-Id
  - Set contextvars (method/path) for log correlation
  - Log request completion with latency

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  RequestContextMiddleware

Responsibilities:
  - Observability (request_id + per-request log line)
  - Guarantee clear_context() so context never leaks between requests

Collaborators:
  - app/context.py
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """R: Attach a request_id to every request, its logs and its response."""

    _QUIET_PATHS = {"/healthz"}
    _MAX_REQUEST_ID_LEN = 128

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        request_id = (
            incoming if self._is_valid_request_id(incoming) else str(uuid.uuid4())
        )

        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            latency = time.perf_counter() - start
            logger.exception(
                "request failed",
                extra={"status_code": 500, "latency_ms": round(latency * 1000, 2)},
            )
            raise
        finally:
            latency = time.perf_counter() - start
            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completed",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(latency * 1000, 2),
                    },
                )
            clear_context()

    @classmethod
    def _is_valid_request_id(cls, value: str) -> bool:
        return bool(value) and len(value) <= cls._MAX_REQUEST_ID_LEN
