"""
Per-company queue locks.

Queue writes for one company must behave as if serialized. ``LocalLockManager``
covers a single process; ``RedisLockManager`` extends the guarantee to every
worker sharing the same Redis. Both acquire keys in sorted order so an
operation touching several companies cannot deadlock against another.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

from redis.asyncio import Redis, from_url
from redis.exceptions import LockError, RedisError

from core.queueing.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def company_lock_key(company_id: int) -> str:
    return f"company:{company_id}"


class LockManager(ABC):
    """Mutual exclusion keyed by string."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    @abstractmethod
    def hold(self, keys: Iterable[str]):
        """Async context manager holding every key until exit."""

    async def close(self) -> None:
        return None


class LocalLockManager(LockManager):
    """asyncio locks, one per key, living as long as the process."""

    def __init__(self, timeout: float = 10.0):
        super().__init__(timeout)
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, keys: Iterable[str]) -> AsyncIterator[None]:
        acquired: list[asyncio.Lock] = []
        try:
            for key in sorted(set(keys)):
                lock = self._lock_for(key)
                try:
                    await asyncio.wait_for(lock.acquire(), timeout=self.timeout)
                except asyncio.TimeoutError as exc:
                    logger.error(f"Timed out waiting for queue lock {key}")
                    raise StoreUnavailable(
                        "Timed out waiting for the queue lock", key=key
                    ) from exc
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


class RedisLockManager(LockManager):
    """Redis-backed locks for deployments with several worker processes."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        timeout: float = 10.0,
        lease_seconds: float = 30.0,
        key_prefix: str = "forum-queue:lock",
        client: Optional[Redis] = None,
    ):
        super().__init__(timeout)
        if client is None and redis_url is None:
            raise ValueError("RedisLockManager needs a redis_url or a client")
        self._redis = client or from_url(redis_url, decode_responses=True)
        self.lease_seconds = lease_seconds
        self.key_prefix = key_prefix

    @asynccontextmanager
    async def hold(self, keys: Iterable[str]) -> AsyncIterator[None]:
        acquired = []
        try:
            for key in sorted(set(keys)):
                lock = self._redis.lock(
                    f"{self.key_prefix}:{key}",
                    timeout=self.lease_seconds,
                    blocking_timeout=self.timeout,
                )
                try:
                    got = await lock.acquire()
                except RedisError as exc:
                    logger.error(f"Redis error acquiring queue lock {key}: {exc}")
                    raise StoreUnavailable("Queue lock service unavailable", key=key) from exc
                if not got:
                    logger.error(f"Timed out waiting for queue lock {key}")
                    raise StoreUnavailable("Timed out waiting for the queue lock", key=key)
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                try:
                    await lock.release()
                except LockError:
                    # Lease expired before release; the next holder already owns it
                    logger.warning(f"Queue lock {lock.name} expired before release")

    async def close(self) -> None:
        await self._redis.aclose()
        logger.info("Redis lock manager closed")


def build_lock_manager(redis_url: Optional[str], timeout: float) -> LockManager:
    if redis_url:
        logger.info("Using Redis queue locks")
        return RedisLockManager(redis_url=redis_url, timeout=timeout)
    return LocalLockManager(timeout=timeout)
