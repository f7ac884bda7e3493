"""Asyncio-safe TTL cache shared by the search dispatcher and adapters.

Entries expire lazily: a lookup on an entry whose age reached its TTL
deletes it and behaves as a miss. ``get_or_create`` serialises concurrent
misses for the same key so that only one upstream call fills an entry;
values are written only after the factory returned successfully.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .constants import SEARCH_CACHE_MAX_ENTRIES, SEARCH_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    inserted_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at >= self.ttl


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class TTLCache(Generic[T]):
    def __init__(
        self,
        ttl_seconds: float = SEARCH_CACHE_TTL_SECONDS,
        max_entries: int = SEARCH_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._name = name
        self._store: dict[str, CacheEntry[T]] = {}
        self._lock = asyncio.Lock()
        self._key_locks: dict[str, _KeyLock] = {}

    def __len__(self) -> int:
        return len(self._store)

    async def get(self, key: str) -> T | None:
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._store[key]
                logger.info("Cache entry expired", extra={"cache": self._name, "key": key})
                return None
            return entry.value

    async def set(self, key: str, value: T) -> None:
        async with self._lock:
            if key not in self._store and len(self._store) >= self._max_entries:
                oldest_key = min(self._store, key=lambda k: self._store[k].inserted_at)
                del self._store[oldest_key]
            self._store[key] = CacheEntry(value=value, inserted_at=self._clock(), ttl=self._ttl)

    async def clear(self) -> None:
        async with self._lock:
            self._store.clear()

    async def get_or_create(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for ``key`` or fill it from ``factory``.

        Exceptions raised by ``factory`` propagate and leave the cache untouched.
        """
        async with self._locked_key(key):
            cached = await self.get(key)
            if cached is not None:
                logger.info("Cache hit", extra={"cache": self._name, "key": key})
                return cached

            logger.info("Cache miss", extra={"cache": self._name, "key": key})
            value = await factory()
            await self.set(key, value)
            return value

    @asynccontextmanager
    async def _locked_key(self, key: str) -> AsyncIterator[None]:
        key_lock = self._key_locks.setdefault(key, _KeyLock())
        key_lock.users += 1
        try:
            async with key_lock.lock:
                yield
        finally:
            key_lock.users -= 1
            if key_lock.users == 0:
                self._key_locks.pop(key, None)
