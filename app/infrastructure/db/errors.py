"""
===============================================================================
CRC CARD: infrastructure/db/errors.py
===============================================================================

Component:
  Typed pool/connectivity errors

Responsibilities:
  - Avoid generic RuntimeErrors.
  - Clear semantics: "not initialized", "already initialized".
===============================================================================
"""


class DatabasePoolError(Exception):
    """Base for connection pool errors."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() was called more than once."""


class PoolNotInitializedError(DatabasePoolError):
    """The pool was used before init_pool()."""
