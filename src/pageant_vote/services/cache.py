"""In-process cache for results and candidate listings."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from threading import Lock
from typing import Any, Final, TypeVar

from pageant_vote.core.settings import settings
from pageant_vote.models import Category

logger = logging.getLogger(__name__)

RESULTS_REGION: Final[str] = "results"
CANDIDATES_REGION: Final[str] = "candidates"

T = TypeVar("T")


@dataclass
class _Entry:
    value: Any
    written_at: float
    accessed_at: float


@dataclass
class CacheStats:
    """Hit, miss and eviction counters, logged when a region is invalidated."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0


class ResultsCache:
    """Size-bounded cache with write and access expiry, split into regions.

    Entries expire ``ttl_seconds`` after they were written, or ``idle_seconds``
    after they were last read, whichever comes first. Every invalidation bumps
    the region's generation; a loader that started under an older generation
    returns its value but does not store it, so a read racing a vote write can
    never park a pre-write snapshot in the cache.
    """

    def __init__(
        self,
        *,
        max_entries: int | None = None,
        ttl_seconds: float | None = None,
        idle_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_entries = max_entries if max_entries is not None else settings.cache_max_entries
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.cache_ttl_seconds
        self._idle = idle_seconds if idle_seconds is not None else settings.cache_idle_seconds
        self._clock = clock
        self._lock = Lock()
        self._regions: dict[str, OrderedDict[Hashable, _Entry]] = {
            RESULTS_REGION: OrderedDict(),
            CANDIDATES_REGION: OrderedDict(),
        }
        self._generations: dict[str, int] = {name: 0 for name in self._regions}
        self.stats = CacheStats()

    def get_or_load(self, region: str, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value for ``key`` or compute and store it."""
        with self._lock:
            entries = self._regions[region]
            entry = entries.get(key)
            now = self._clock()
            if entry is not None and not self._expired(entry, now):
                entry.accessed_at = now
                entries.move_to_end(key)
                self.stats.hits += 1
                return entry.value
            if entry is not None:
                del entries[key]
            self.stats.misses += 1
            generation = self._generations[region]

        value = loader()

        with self._lock:
            if self._generations[region] != generation:
                return value
            now = self._clock()
            entries = self._regions[region]
            entries[key] = _Entry(value=value, written_at=now, accessed_at=now)
            entries.move_to_end(key)
            while len(entries) > self._max_entries:
                entries.popitem(last=False)
                self.stats.evictions += 1
        return value

    def invalidate(self, region: str, key: Hashable | None = None) -> None:
        """Drop one key, or the whole region when ``key`` is None."""
        with self._lock:
            self._generations[region] += 1
            if key is None:
                self._regions[region].clear()
            else:
                self._regions[region].pop(key, None)

    def invalidate_results_cache(self) -> None:
        """Evict every cached results entry."""
        self.invalidate(RESULTS_REGION)

    def invalidate_candidate_cache(self, category: Category | None = None) -> None:
        """Evict the candidate listing for ``category``, or all listings."""
        self.invalidate(CANDIDATES_REGION, category)

    def invalidate_all(self) -> None:
        """Evict both regions; called after every committed vote."""
        self.invalidate_results_cache()
        self.invalidate_candidate_cache()
        logger.debug(
            "Results and candidate caches invalidated (hits=%d misses=%d evictions=%d)",
            self.stats.hits,
            self.stats.misses,
            self.stats.evictions,
        )

    def size(self, region: str) -> int:
        """Return the number of live entries in ``region``."""
        with self._lock:
            return len(self._regions[region])

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.written_at > self._ttl or now - entry.accessed_at > self._idle
