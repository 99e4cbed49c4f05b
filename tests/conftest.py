"""Shared fixtures and utilities for tests."""

import os

import pytest
import pytest_asyncio

# Settings are read at import time, so the environment goes first
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JSON_LOGS", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.pop("REDIS_URL", None)

from core.queueing.lifecycle import InterviewLifecycleController  # noqa: E402
from core.queueing.locks import LocalLockManager  # noqa: E402
from database.engine import Database  # noqa: E402
from tests.seeding import Seeder  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables before running tests."""
    os.environ["APP_ENV"] = "test"
    os.environ["JSON_LOGS"] = "false"
    os.environ["QUEUE_LOCK_TIMEOUT_SECONDS"] = "5"


@pytest_asyncio.fixture
async def database(tmp_path):
    """File-backed SQLite database, one per test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'queue.db'}")
    await db.init()
    yield db
    await db.close()


@pytest.fixture
def seed(database):
    return Seeder(database)


@pytest.fixture
def controller(database):
    return InterviewLifecycleController(database, LocalLockManager(timeout=5))
