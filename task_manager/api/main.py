"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context, body limit)
  - Mount task router under /v1 and auth routes at the root
  - Expose health and readiness checks

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - BodyLimitMiddleware: 413 on oversized payloads
  - interfaces.api.http.router: task endpoints
  - api.auth_routes: login/logout/me + admin users

Notes:
  - Middleware order matters: RequestContext -> CORS -> BodyLimit -> routes
  - The DB pool is only initialized when Postgres adapters are in use
  - /healthz and /readyz follow the Kubernetes convention
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..application.dev_seed_admin import ensure_dev_admin
from ..container import get_task_repository, get_user_repository, uses_in_memory_storage
from ..crosscutting.config import get_settings
from ..crosscutting.exceptions import DatabaseError
from ..crosscutting.logger import logger
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..identity.auth_users import hash_password
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import build_router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers

APP_TITLE = "Task Manager API"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes pool and dev seed."""
    settings = get_settings()
    settings.validate_page_params()

    in_memory = uses_in_memory_storage()
    if not in_memory:
        # Must happen before any repository usage
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )

    try:
        ensure_dev_admin(
            settings,
            user_repo=get_user_repository(),
            password_hasher=hash_password,
        )

        logger.info(
            "Task Manager API starting up",
            extra={
                "app_env": settings.app_env,
                "storage": "memory" if in_memory else "postgres",
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )

        yield

    finally:
        if not in_memory:
            close_pool()
        logger.info("Task Manager API shutting down")


def _check_storage() -> str:
    try:
        ok = get_task_repository().ping()
    except DatabaseError as exc:
        logger.warning("Health check: DB unavailable", extra={"error": exc.message})
        return "disconnected"
    return "connected" if ok else "disconnected"


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "tasks", "description": "Task management"},
            {"name": "auth", "description": "User authentication (JWT)"},
        ],
    )

    # Middleware order (bottom = first to execute):
    # 1. RequestContextMiddleware - sets request_id
    # 2. CORSMiddleware - handles preflight
    # 3. BodyLimitMiddleware - rejects oversized bodies early
    app.add_middleware(BodyLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(build_router(), prefix="/v1")
    app.include_router(auth_router)

    register_exception_handlers(app)

    @app.get("/healthz", tags=["health"])
    def healthz(request: Request):
        """
        Health check.

        Returns:
            ok: True if storage answers
            db: "connected" or "disconnected"
            request_id: Correlation ID for this request
        """
        db_status = _check_storage()
        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/readyz", tags=["health"])
    def readyz(request: Request):
        db_status = _check_storage()
        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    return app


app = create_app()
