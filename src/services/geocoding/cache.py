"""In-process cache for place-resolution outcomes.

The cache is an explicit object handed to the resolver rather than a module
global, so tests can isolate state and callers can plug in their own backing
store (any ``MutableMapping``). There is no eviction and no locking: writes
for a key are idempotent, so racing requests converge on the same value.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Generic, MutableMapping, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def cache_key(query: str, city: Optional[str] = None) -> str:
    """Return the lowercase, comma-joined ``query,city`` key."""

    joined = f"{query},{city}" if city else query
    return joined.lower()


@dataclass
class GeocodeCache(Generic[T]):
    """Dictionary-like cache with hit/miss statistics.

    Example:
        cache = GeocodeCache[Resolution]()
        cache.set(cache_key("Louvre", "Paris"), resolution)
    """

    store: MutableMapping[str, T] = field(default_factory=dict, repr=False)
    name: str = "geocode"

    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def get(self, key: str) -> Optional[T]:
        value = self.store.get(key)
        if value is None:
            self._misses += 1
            return None
        self._hits += 1
        return value

    def set(self, key: str, value: T) -> None:
        self.store[key] = value
        logger.debug("Cache %s set %r", self.name, key)

    def clear(self) -> int:
        """Drop every entry and reset statistics; return how many entries were dropped."""

        count = len(self.store)
        self.store.clear()
        self._hits = 0
        self._misses = 0
        logger.info("Cache %s cleared (%d entries)", self.name, count)
        return count

    def __contains__(self, key: object) -> bool:
        return key in self.store

    def __len__(self) -> int:
        return len(self.store)

    def stats(self) -> Dict[str, Any]:
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0.0
        return {
            "size": len(self.store),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": round(hit_rate, 1),
        }


@lru_cache(maxsize=1)
def get_default_cache() -> GeocodeCache:
    """Return the process-wide cache shared by resolvers built without one."""

    return GeocodeCache(name="geocode")
