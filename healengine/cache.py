"""Per-locator cache of the last strategy that healed it."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from healengine.exceptions import ConfigurationError
from healengine.logger import get_logger
from healengine.models import CacheEntry, CacheEntryStats, CacheStats, Strategy

log = get_logger(__name__)

DEFAULT_REUSE_WINDOW = 60.0  # seconds
DEFAULT_EVICTION_WINDOW = 300.0  # seconds


class ResolutionCache:
    """Maps an original locator to the strategy that last resolved it.

    Two windows apply: an entry is reused only while younger than
    ``reuse_window``, and is purged once older than ``eviction_window``.
    Purging happens as a full sweep on every write; there is no timer.

    All mutations hold one lock, so concurrent writes to the same locator
    are last-writer-wins.
    """

    def __init__(
        self,
        reuse_window: float = DEFAULT_REUSE_WINDOW,
        eviction_window: float = DEFAULT_EVICTION_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if reuse_window < 0:
            raise ConfigurationError(f"reuse_window must be >= 0, got {reuse_window}")
        if eviction_window < reuse_window:
            raise ConfigurationError(
                f"eviction_window ({eviction_window}) must be >= "
                f"reuse_window ({reuse_window})"
            )
        self.reuse_window = reuse_window
        self.eviction_window = eviction_window
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, locator: object) -> bool:
        return locator in self._entries

    def get(self, locator: str) -> CacheEntry | None:
        """Return the entry for a locator regardless of age."""
        return self._entries.get(locator)

    def lookup(self, locator: str) -> CacheEntry | None:
        """Return the entry only while it is inside the reuse window."""
        entry = self._entries.get(locator)
        if entry is None:
            return None
        if self._clock() - entry.last_used >= self.reuse_window:
            return None
        return entry

    def put(self, locator: str, strategy: Strategy) -> CacheEntry:
        """Record a successful strategy for a locator, then sweep."""
        with self._lock:
            now = self._clock()
            previous = self._entries.get(locator)
            if previous is not None and _same_strategy(previous.strategy, strategy):
                count = previous.success_count + 1
            else:
                count = 1
            entry = CacheEntry(strategy=strategy, last_used=now, success_count=count)
            self._entries[locator] = entry
            self._sweep(now)
        log.debug(
            "cache_updated",
            locator=locator,
            strategy=strategy.name,
            success_count=count,
        )
        return entry

    def sweep(self) -> int:
        """Remove every entry older than the eviction window."""
        with self._lock:
            return self._sweep(self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        log.info("cache_cleared")

    def stats(self) -> CacheStats:
        """Return a snapshot of every entry and its age."""
        with self._lock:
            now = self._clock()
            entries = [
                CacheEntryStats(
                    locator=locator,
                    strategy=entry.strategy.name,
                    kind=entry.strategy.kind,
                    success_count=entry.success_count,
                    age=now - entry.last_used,
                )
                for locator, entry in self._entries.items()
            ]
        return CacheStats(total_entries=len(entries), entries=entries)

    def _sweep(self, now: float) -> int:
        expired = [
            locator
            for locator, entry in self._entries.items()
            if now - entry.last_used > self.eviction_window
        ]
        for locator in expired:
            del self._entries[locator]
        if expired:
            log.debug("cache_swept", evicted=len(expired))
        return len(expired)


def _same_strategy(a: Strategy, b: Strategy) -> bool:
    return a.name == b.name and a.descriptor == b.descriptor
