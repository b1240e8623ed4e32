"""
Name: Backend ASGI Entrypoint (app.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep the import path used by uvicorn (app.main:app) stable

Notes/Constraints:
  - No configuration or IO should live here
"""

from app.api.main import app

__all__ = ["app"]
