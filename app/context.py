"""
===============================================================================
CRC CARD: app/context.py (Request-scoped context)
===============================================================================

Responsibilities:
  - Keep request-scoped context in ContextVars (async-safe).
  - Let logs correlate by request without threading parameters through layers.
  - Provide small helpers: set_request_context(), get_context_dict(),
    clear_context().

Collaborators:
  - app.crosscutting.middleware: sets request_id/method/path per request.
  - app.crosscutting.logger: enriches every log record via get_context_dict().

Constraints:
  - Only primitive strings (safe JSON serialization).
  - Empty string means "not available".
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Set the minimal request context."""
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def get_context_dict() -> dict[str, str]:
    """
    Return the current context as a dict, skipping empty values.

    Typical use: structured log enrichment.
    """
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val

    return ctx


def clear_context() -> None:
    """
    Reset the context at the end of a request.

    Prevents context leaking between requests served by the same worker.
    """
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
