"""Memoizing cache for asynchronous lookups."""

import asyncio
import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

from cachetools import TTLCache

LOG = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheOptions:
    """Cache bounds.

    Attributes:
        max: maximum number of entries; least recently used entries are
            evicted first
        max_age: maximum age of an entry, in milliseconds
        update_age_on_get: reset an entry's age whenever it is read
    """

    max: int = 100
    max_age: float = 5000
    update_age_on_get: bool = False

    def __post_init__(self):
        """Check the bounds."""
        if self.max < 1:
            raise ValueError("Cache max must be at least 1")
        if self.max_age <= 0:
            raise ValueError("Cache max_age must be positive")


class MemoizingCache(Generic[T]):
    """Caches the results of an async function by key.

    While a lookup for a key is in flight, further callers for the same key
    wait on that lookup instead of starting another. Failed lookups are not
    cached. A lookup, once started, runs to completion even if every caller
    awaiting it is cancelled.
    """

    def __init__(
        self,
        options: Optional[CacheOptions] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            options: cache bounds
            timer: clock returning seconds, used to age entries
        """
        self.options = options or CacheOptions()
        self._cache: TTLCache = TTLCache(
            maxsize=self.options.max,
            ttl=self.options.max_age / 1000,
            timer=timer,
        )
        self._pending: Dict[Hashable, asyncio.Future] = {}

    async def memoize(self, key: Hashable, fn: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for key, calling fn to produce it if needed."""
        try:
            value = self._cache[key]
        except KeyError:
            pass
        else:
            LOG.debug("Cache hit for %s", key)
            if self.options.update_age_on_get:
                self._cache[key] = value
            return value

        task = self._pending.get(key)
        if task is None:
            LOG.debug("Cache miss for %s", key)
            task = asyncio.ensure_future(fn())
            self._pending[key] = task
            # Added before any waiter's callback so the value is stored
            # before waiters resume
            task.add_done_callback(partial(self._settle, key))
        else:
            LOG.debug("Joining in-flight lookup for %s", key)

        return await asyncio.shield(task)

    def _settle(self, key: Hashable, task: asyncio.Future):
        if self._pending.get(key) is task:
            del self._pending[key]

        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            LOG.warning("Lookup for %s failed: %s", key, error)
            return

        self._cache[key] = task.result()

    def is_pending(self, key: Hashable) -> bool:
        """Test whether a lookup for key is in flight."""
        return key in self._pending

    def delete(self, key: Hashable):
        """Drop the cached value for key, if any."""
        self._cache.pop(key, None)

    def clear(self):
        """Drop every cached value."""
        self._cache.clear()

    def __contains__(self, key: Hashable) -> bool:
        """Test whether a fresh value is cached for key."""
        return key in self._cache

    def __len__(self) -> int:
        """Return the number of fresh cached values."""
        self._cache.expire()
        return len(self._cache)
