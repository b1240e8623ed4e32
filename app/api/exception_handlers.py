"""
===============================================================================
CRC CARD: app/api/exception_handlers.py (centralized exception handling)
===============================================================================

Responsibilities:
  - Translate application exceptions to RFC7807 HTTP responses.
  - Log every handled error with request_id + error_id.
  - Never leak internals for untyped errors in production.

Collaborators:
  - crosscutting.error_responses: AppHTTPException, factories, app_exception_handler
  - crosscutting.exceptions: TaskboardError, StorageError
  - crosscutting.config.get_settings (detail level)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    internal_error,
    storage_error,
)
from ..crosscutting.exceptions import StorageError, TaskboardError
from ..crosscutting.logger import logger

_REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request, *, exc: TaskboardError, app_exc: AppHTTPException
) -> JSONResponse:
    """Shared path for typed internal errors; error_id ties body to log."""
    request_id = _request_id_from(request)

    logger.error(
        "Service error",
        extra={
            "code": app_exc.code.value,
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": request_id,
        },
    )

    app_exc.errors = [{"error_id": exc.error_id}]
    return await app_exception_handler(request, app_exc)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    return await _handle_service_error(request, exc=exc, app_exc=storage_error())


async def taskboard_error_handler(
    request: Request, exc: TaskboardError
) -> JSONResponse:
    detail = "Internal error." if get_settings().is_production() else exc.message
    return await _handle_service_error(
        request, exc=exc, app_exc=internal_error(detail)
    )


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in _REQUEST_LOCATIONS]
    return ".".join(parts) or "body"


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reshape FastAPI/pydantic request errors into the RFC7807 422 body."""
    errors = [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg")}
        for err in exc.errors()
    ]
    logger.info(
        "Request validation failed",
        extra={"request_id": _request_id_from(request), "error_count": len(errors)},
    )
    app_exc = AppHTTPException(
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Validation failed",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback for untyped exceptions.

    - Full log (stack trace).
    - Generic response in production.
    """
    request_id = _request_id_from(request)

    logger.error(
        "Unhandled exception",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    detail = str(exc) if not get_settings().is_production() else "Internal error."

    return await app_exception_handler(request, internal_error(detail))


def register_exception_handlers(app) -> None:
    """
    Install handlers on the FastAPI app.

    AppHTTPException must be registered to keep RFC7807 bodies; the generic
    Exception handler goes last as the fallback.
    """
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
