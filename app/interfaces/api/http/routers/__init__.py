"""
===============================================================================
CRC CARD: app/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Re-export feature routers for the root router.

Notes:
    - No endpoints are defined here.
===============================================================================
"""

from .tasks import router as tasks_router

__all__ = ["tasks_router"]
