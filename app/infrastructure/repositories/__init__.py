"""
============================================================
CRC CARD
============================================================
Class: app.infrastructure.repositories (Package exports)

Responsibilities:
- Expose the concrete repositories (Postgres and InMemory) from a single
  import point.

Collaborators:
- Postgres repositories (raw SQL)
- InMemory repositories (tests / memory backend)
============================================================
"""

from .in_memory import InMemoryTaskRepository, InMemoryUserRepository
from .postgres import PostgresTaskRepository, PostgresUserRepository

__all__ = [
    # Postgres
    "PostgresTaskRepository",
    "PostgresUserRepository",
    # In-memory
    "InMemoryTaskRepository",
    "InMemoryUserRepository",
]
