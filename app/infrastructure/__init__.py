"""Infrastructure adapters: database pool and repositories."""
