"""TTL cache for interpreted queries.

Keys are normalized query strings, values are successful ``Filters`` only.
Access never awaits, so instances are safe to share between interpreters
running on one event loop. Sharing across threads needs a lock around
``get``/``set``.
"""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from propsearch.ai.filters import Filters
from propsearch.settings import settings


def normalize_query(query: str) -> str:
    """Cache key for a query: trimmed and lower-cased."""
    return query.strip().lower()


@dataclass
class CacheEntry:
    """Filters plus the clock reading when they were stored."""

    filters: Filters
    timestamp: float


class InterpretCache:
    """Mapping of normalized query to filters with a TTL and LRU bound."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int | None = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache.

        Args:
            ttl_seconds: Age at which an entry stops being served
            max_entries: Size bound, oldest-used entry is evicted first. None = unbounded
            clock: Monotonic time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Filters | None:
        """Return fresh filters for ``key`` or None. Expired entries are dropped."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if self.clock() - entry.timestamp >= self.ttl_seconds:
            del self._entries[key]
            self._misses += 1
            return None

        self._entries.move_to_end(key)
        self._hits += 1
        return entry.filters

    def set(self, key: str, filters: Filters) -> None:
        """Store filters under ``key`` stamped with the current clock reading."""
        self._entries[key] = CacheEntry(filters=filters, timestamp=self.clock())
        self._entries.move_to_end(key)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def entry(self, key: str) -> CacheEntry | None:
        """Raw entry lookup, ignoring TTL and counters."""
        return self._entries.get(key)

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def get_stats(self) -> dict[str, Any]:
        total = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total else 0.0,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


# Process-wide cache shared by every interpreter that isn't given its own
interpret_cache = InterpretCache(
    ttl_seconds=settings.interpret_cache_ttl_seconds,
    max_entries=settings.interpret_cache_max_entries,
)
