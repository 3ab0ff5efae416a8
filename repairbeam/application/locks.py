"""Per-key async mutual exclusion.

Serializes read-modify-write sequences on the same catalog list while
letting different lists proceed concurrently.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLock:
    """A map of keys to asyncio locks.

    Locks are created on first use and dropped once nobody holds or
    waits on them, so the map only grows with in-flight keys.

    Example usage:
        locks = KeyedLock()
        async with locks.hold("brands:Phone"):
            ...
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Acquire the lock for ``key`` for the duration of the block.

        Not re-entrant: acquiring the same key twice in one task deadlocks.

        Args:
            key: Lock key, typically a list kind.
        """
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_locked(self, key: str) -> bool:
        """Check whether ``key`` is currently held."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
