"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults suitable for local development

Collaborators:
  - api/main.py: reads settings for CORS, storage wiring and startup checks
  - container.py: picks the storage backend (postgres | memory)
  - identity/auth_users.py: JWT secret and TTL
  - crosscutting/logger.py: log level and JSON output

Constraints:
  - Lives in the crosscutting layer, NOT in domain/application
  - No business logic: pure configuration

Notes:
  - Singleton via lru_cache
  - Tests disable the .env file through Settings.model_config
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_STORAGE_BACKENDS = {"postgres", "memory"}
_INSECURE_SECRETS = {"dev-secret", "changeme", "change-me", "password", "secret"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (local/development/test/production)
        storage_backend: postgres | memory (default: postgres)
        database_url: PostgreSQL connection string (required for postgres)
        db_pool_min_size: Minimum pooled connections (default: 2)
        db_pool_max_size: Maximum pooled connections (default: 10)
        db_statement_timeout_ms: Per-connection statement timeout (default: 30s)
        allowed_origins: Comma-separated CORS origins
        cors_allow_credentials: Allow cookies cross-origin (default: False)
        jwt_secret: Secret for signing JWT access tokens
        jwt_access_ttl_minutes: Access token TTL in minutes (default: 24h)
        log_level: Root log level for the service logger
        log_json: Emit JSON log lines (default: True)
        default_page_size: Task listing page size when none is given
        max_page_size: Upper bound for the task listing page size
        dev_seed_demo: Seed demo users and tasks on startup (local only)
        dev_seed_demo_force: Reseed even when users already exist
    """

    # Environment
    app_env: str = "development"

    # Storage
    storage_backend: str = "postgres"
    database_url: str = ""

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 24 * 60

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Task listing
    default_page_size: int = 10
    max_page_size: int = 100

    # Demo Seed (users + tasks)
    dev_seed_demo: bool = False
    dev_seed_demo_force: bool = False

    @field_validator("storage_backend")
    @classmethod
    def storage_backend_valid(cls, v: str) -> str:
        backend = (v or "postgres").strip().lower()
        if backend not in _STORAGE_BACKENDS:
            raise ValueError("storage_backend must be postgres or memory")
        return backend

    @field_validator("db_pool_min_size", "db_pool_max_size")
    @classmethod
    def pool_size_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("pool sizes must be >= 1")
        return v

    @field_validator("jwt_access_ttl_minutes")
    @classmethod
    def ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("jwt_access_ttl_minutes must be greater than 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_upper(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @model_validator(mode="after")
    def validate_storage_requirements(self):
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must be <= "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )
        if self.storage_backend == "postgres" and not self.database_url.strip():
            raise ValueError("DATABASE_URL is required when STORAGE_BACKEND=postgres")
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError("default_page_size must be between 1 and max_page_size")
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in _INSECURE_SECRETS:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def uses_postgres(self) -> bool:
        return self.storage_backend == "postgres"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
