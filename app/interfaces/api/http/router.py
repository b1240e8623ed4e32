"""
===============================================================================
CRC CARD: router.py (root router / composition)
===============================================================================

Responsibilities:
  - Define the root APIRouter included by FastAPI (app.include_router).
  - Attach the RFC7807 responses to OpenAPI.
  - Compose feature routers.

Notes:
  - Included from app/api/main.py with prefix="/api".
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.tasks import router as tasks_router


def build_router() -> APIRouter:
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(tasks_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
