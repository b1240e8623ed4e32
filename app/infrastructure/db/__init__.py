"""Infra DB: pool + typed errors."""

from .errors import (
    DatabasePoolError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)
from .pool import close_pool, get_pool, init_pool

__all__ = [
    "init_pool",
    "get_pool",
    "close_pool",
    "DatabasePoolError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
]
