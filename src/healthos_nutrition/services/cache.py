"""Simple cache abstractions."""

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Protocol


class Cache(Protocol):
    """Cache interface for time-boxed key-value data."""

    def get(self, key: Hashable) -> object | None:
        """Return a cached value if present and still fresh."""

    def set(self, key: Hashable, value: object) -> None:
        """Store a value, stamping it with the current time."""


@dataclass
class _CacheEntry:
    value: object
    stored_at: float


@dataclass
class InMemoryCache(Cache):
    """Process-local TTL cache.

    Stale entries are never evicted proactively; they are overwritten by the
    next ``set`` for the same key. Growth is unbounded, and the state is not
    shared between processes or replicas.
    """

    ttl_seconds: float
    clock: Callable[[], float] = time.monotonic
    _entries: dict[Hashable, _CacheEntry] = field(default_factory=dict)

    def get(self, key: Hashable) -> object | None:
        """Return a cached value if it is younger than the TTL."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.stored_at >= self.ttl_seconds:
            return None
        return entry.value

    def set(self, key: Hashable, value: object) -> None:
        """Store a value with a fresh timestamp."""
        self._entries[key] = _CacheEntry(value=value, stored_at=self.clock())
