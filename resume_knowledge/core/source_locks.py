"""
Per-source lock registry.

Serializes chunk replacement for the same (source_type, source_id) while
letting different sources proceed in parallel. Locks are created on
demand and dropped once no task holds or waits on them.

Dependencies: asyncio
System role: Write serialization for the knowledge store
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class SourceLockRegistry:
    """Registry of asyncio locks keyed by source."""

    def __init__(self) -> None:
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._users: dict[tuple[str, str], int] = {}

    @asynccontextmanager
    async def hold(self, source_type: str, source_id: str) -> AsyncIterator[None]:
        """Hold the lock for one source for the duration of the block."""
        key = (source_type, source_id)
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

    def __len__(self) -> int:
        return len(self._locks)
