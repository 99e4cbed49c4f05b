"""FastAPI dependencies for dependency injection."""

from fastapi import HTTPException, Request, status

from core.queueing.lifecycle import InterviewLifecycleController
from database.engine import Database


def get_database(request: Request) -> Database:
    """Database handle built by the application lifespan."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not initialized",
        )
    return database


def get_controller(request: Request) -> InterviewLifecycleController:
    """Queue lifecycle controller built by the application lifespan."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Queue engine not initialized",
        )
    return controller
