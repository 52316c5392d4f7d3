"""
Time-bounded read-through cache in front of an external lookup.

One instance per lookup kind, built once per process with an injected TTL,
lookup function and clock. Staleness is checked lazily on read; failed lookups
never populate (or refresh) an entry.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    stored_at: float


@dataclass(frozen=True)
class CachedResult(Generic[V]):
    value: V
    cached: bool
    age_seconds: float = 0.0


class ReadThroughCache(Generic[K, V]):
    def __init__(
        self,
        *,
        ttl_seconds: float,
        lookup: Callable[[K], V],
        clock: Callable[[], float] = time.monotonic,
        name: str = "lookup",
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self.lookup = lookup
        self.clock = clock
        self.name = name
        self._entries: dict[K, CacheEntry[V]] = {}

    def get(self, key: K) -> CachedResult[V]:
        now = self.clock()
        entry = self._entries.get(key)
        if entry is not None and now - entry.stored_at < self.ttl_seconds:
            logger.debug(f"{self.name} cache hit for {key!r}")
            return CachedResult(value=entry.value, cached=True, age_seconds=now - entry.stored_at)

        # Any typed failure propagates; a stale entry stays until the next success.
        value = self.lookup(key)
        self._entries[key] = CacheEntry(value=value, stored_at=self.clock())
        logger.debug(f"{self.name} cache stored {key!r}")
        return CachedResult(value=value, cached=False)

    def invalidate(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
