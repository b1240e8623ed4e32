"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize the FastAPI application (title, version, lifespan)
  - Configure middleware (CORS, request context)
  - Mount the task router and the auth routes under /api
  - Expose the health check

Collaborators:
  - FastAPI / CORSMiddleware
  - RequestContextMiddleware: request id and logging context
  - interfaces.api.http.router: task endpoints
  - api.auth_routes: login/register/me/users
  - infrastructure.db.pool: connection pool lifecycle (postgres backend)
  - application.dev_seed_demo: local demo data

Notes:
  - Settings are validated at startup (lifespan), not at import time
  - /healthz follows the Kubernetes health check convention
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..application.dev_seed_demo import ensure_dev_demo
from ..container import get_task_repository, get_user_repository
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..identity.auth_users import hash_password
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes the pool and the dev seed."""
    settings = get_settings()

    if settings.uses_postgres():
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        try:
            ensure_dev_demo(
                settings,
                user_repo=get_user_repository(),
                task_repo=get_task_repository(),
                password_hasher=hash_password,
            )
        except Exception as e:
            logger.error("Startup failed", extra={"error": str(e)})
            raise

        logger.info(
            "Taskboard API starting up",
            extra={
                "app_env": settings.app_env,
                "storage_backend": settings.storage_backend,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )
        yield
    finally:
        if settings.uses_postgres():
            close_pool()
        logger.info("Taskboard API shutting down")


def _get_allowed_origins() -> list[str]:
    """CORS origins from settings, with a fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except Exception:
        # Fallback for tests that don't set env vars
        return ["http://localhost:3000"]


app = FastAPI(
    title="Taskboard API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "tasks", "description": "Task lifecycle, listings and stats"},
        {"name": "auth", "description": "User authentication (JWT)"},
        {"name": "users", "description": "User directory"},
    ],
)

# Middleware order (bottom = first to execute):
# 1. CORSMiddleware - handles preflight
# 2. RequestContextMiddleware - sets request_id
app.add_middleware(RequestContextMiddleware)

try:
    _cors_allow_credentials = get_settings().cors_allow_credentials
except Exception:
    _cors_allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=_cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    expose_headers=[REQUEST_ID_HEADER],
)

app.include_router(router, prefix="/api")
app.include_router(auth_router, prefix="/api")

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """
    Health check.

    Returns:
        ok: True if storage answers
        storage: "connected" or "disconnected"
        request_id: correlation id for this request
    """
    storage_status = "disconnected"
    try:
        if get_task_repository().ping():
            storage_status = "connected"
    except Exception as e:
        logger.warning("Health check: storage unavailable", extra={"error": str(e)})

    return {
        "ok": storage_status == "connected",
        "storage": storage_status,
        "request_id": getattr(request.state, "request_id", None),
    }
