"""Per-key async mutual exclusion for command dispatch.

Each key gets its own ``asyncio.Lock`` while at least one coroutine holds or
waits for it. Idle keys are dropped so the table does not grow with every
distinct email address or team id seen by the process.

Example:
    locks = KeyedLock()
    async with locks.hold("user:alice@example.com"):
        # At most one coroutine per key runs here
        ...
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger


class KeyedLock:
    """A family of asyncio locks indexed by string key."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        if lock.locked():
            logger.trace(f"Waiting for lock '{key}'")
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
