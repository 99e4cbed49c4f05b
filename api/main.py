"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.queueing.lifecycle import InterviewLifecycleController
from core.queueing.locks import LockManager, build_lock_manager
from core.queueing.positions import InterleaveQuota
from database.engine import Database
from api.routes import health
from api.routes.v1 import admin, committee, queue

# Import middleware components
from core.middleware import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    StructuredLoggingMiddleware,
    setup_logging,
)

# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

logger = logging.getLogger(__name__)


def build_controller(database: Database, locks: LockManager) -> InterviewLifecycleController:
    return InterviewLifecycleController(
        database=database,
        locks=locks,
        quota=InterleaveQuota(
            committee=settings.queue_committee_quota,
            external=settings.queue_external_quota,
            internal=settings.queue_internal_quota,
        ),
        default_duration_minutes=settings.default_interview_duration_minutes,
        notification_threshold=settings.notification_position_threshold,
        renumber_on_start=settings.queue_renumber_on_start,
    )


def create_app(
    database: Optional[Database] = None,
    locks: Optional[LockManager] = None,
) -> FastAPI:
    """
    Build the application.

    ``database`` and ``locks`` default to the configured ones; tests pass
    their own. Either way the lifespan owns their init and teardown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")

        db = database or Database(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        # PostgreSQL schemas come from alembic; SQLite is created on the fly
        await db.init(create_tables=db.is_sqlite)
        lock_manager = locks or build_lock_manager(
            settings.redis_url, settings.queue_lock_timeout_seconds
        )

        app.state.database = db
        app.state.controller = build_controller(db, lock_manager)

        yield

        logger.info(f"Shutting down {settings.app_name}")
        app.state.controller = None
        app.state.database = None
        await lock_manager.close()
        await db.close()

    app = FastAPI(
        title=settings.app_name,
        description="Career fair interview queue and scheduling engine",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Setup error handlers (before middleware)
    setup_error_handlers(app)

    # Middleware executes in reverse order of registration
    # 1. Error handling middleware (outermost - catches all errors)
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.debug)

    # 2. Structured logging middleware (logs all requests/responses)
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=settings.log_request_body,
        log_response_body=settings.log_response_body,
        max_body_size=settings.log_max_body_size,
    )

    # 3. CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    # API v1 routes
    app.include_router(queue.router, prefix=settings.api_v1_prefix)
    app.include_router(committee.router, prefix=settings.api_v1_prefix)
    app.include_router(admin.router, prefix=settings.api_v1_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
