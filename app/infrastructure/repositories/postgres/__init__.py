"""
PostgreSQL Repository Implementations.

Raw SQL over a psycopg connection pool.
"""

from .task import PostgresTaskRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresTaskRepository",
    "PostgresUserRepository",
]
