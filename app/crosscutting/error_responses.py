"""
===============================================================================
MODULE: Standard error responses (RFC 7807 / Problem Details)
===============================================================================

Goal
----
Every HTTP error has the same shape so that:
- the frontend can branch on "code"
- the backend can correlate by request_id / error_id
- denials always carry their reason in "detail"

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  AppHTTPException + handlers

Responsibilities:
  - Define the error code catalog (ErrorCode)
  - Build RFC 7807 payloads (ErrorDetail)
  - Provide factories for frequent errors
  - Provide FastAPI handlers returning application/problem+json

Collaborators:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (maps internal errors)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


class ErrorDetail(BaseModel):
    """
    RFC 7807 model (Problem Details).

    Extra fields:
    - code: stable error code for clients
    - errors: optional detail list (e.g. [{"field": "title", "message": "..."}])
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

_OPENAPI_ERROR_SCHEMA = {"$ref": "#/components/schemas/ErrorDetail"}
_OPENAPI_ERROR_CONTENT = {PROBLEM_JSON_MEDIA_TYPE: {"schema": _OPENAPI_ERROR_SCHEMA}}


def _openapi_error(description: str) -> dict[str, Any]:
    return {
        "description": f"{description} (RFC7807)",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    }


OPENAPI_ERROR_RESPONSES = {
    "401": _openapi_error("Unauthorized"),
    "403": _openapi_error("Forbidden"),
    "404": _openapi_error("Not Found"),
    "409": _openapi_error("Conflict"),
    "422": _openapi_error("Validation Error"),
    "503": _openapi_error("Storage Unavailable"),
    "default": _openapi_error("Error"),
}


class AppHTTPException(HTTPException):
    """
    R: HTTPException with a stable ErrorCode and optional per-field errors.
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Error factories
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_ERROR, detail, errors)


def reference_not_found(detail: str) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.REFERENCE_NOT_FOUND, detail)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException(
        404, ErrorCode.NOT_FOUND, f"{resource} '{identifier}' not found"
    )


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def unauthorized(detail: str = "Authentication required.") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def invalid_credential(detail: str = "Invalid token.") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.INVALID_CREDENTIAL, detail)


def forbidden(detail: str = "Access denied.") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def internal_error(detail: str = "An unexpected error occurred.") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def storage_error(detail: str = "Storage operation failed.") -> AppHTTPException:
    return AppHTTPException(503, ErrorCode.STORAGE_ERROR, detail)


# ---------------------------------------------------------------------------
# FastAPI handlers
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """
    Handler for AppHTTPException.

    Adds instance (URL) and the request_id for correlation.
    """
    request_id = getattr(getattr(request, "state", None), "request_id", None)

    errors = exc.errors or []
    if request_id:
        errors = [*errors, {"request_id": request_id}]

    error = ErrorDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=exc.code.value.replace("_", " ").title(),
        status=exc.status_code,
        detail=str(exc.detail),
        code=exc.code,
        instance=str(request.url),
        errors=errors or None,
    )
    headers = getattr(exc, "headers", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
