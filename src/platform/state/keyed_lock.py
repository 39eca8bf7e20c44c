"""
Keyed Lock

Per-key `anyio.Lock` registry. Every screening, promo code and reservation
gets its own critical section, so operations on different keys never wait
on each other while operations on the same key are serialized. A key's lock
is dropped as soon as no task holds or waits for it.
"""

from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

import anyio

from src.platform.logging.loguru_io import Logger


class KeyedLock:
    def __init__(self, *, name: str) -> None:
        self.name = name
        self._locks: dict[Hashable, anyio.Lock] = {}
        self._users: dict[Hashable, int] = {}  # holder + waiters per key

    def _acquire_slot(self, key: Hashable) -> anyio.Lock:
        # No await between lookup and insert, so two tasks cannot create two locks for one key
        lock = self._locks.get(key)
        if lock is None:
            lock = anyio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        return lock

    def _release_slot(self, key: Hashable) -> None:
        remaining = self._users[key] - 1
        if remaining:
            self._users[key] = remaining
        else:
            del self._users[key]
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """
        Enter the critical section for `key`.

        Usage:
            async with keyed_lock.hold(screening_id):
                ...  # no external I/O in here
        """
        lock = self._acquire_slot(key)
        try:
            if lock.locked():
                Logger.base.debug(f'⏳ [LOCK:{self.name}] Waiting for {key}')
            async with lock:
                yield
        finally:
            self._release_slot(key)

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return bool(lock and lock.locked())

    def __len__(self) -> int:
        return len(self._locks)
