"""
===============================================================================
CRC CARD: schemas/__init__.py
===============================================================================

Module:
    HTTP Schemas Package (Pydantic DTOs)

Rules:
    - Schemas do NOT import infrastructure.
    - Schemas do NOT run use cases.
    - Only types, input shape and output mapping.
===============================================================================
"""

__all__ = []
