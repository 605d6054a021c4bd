"""Per-entity TTL cache for composed startup signals."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from app.models.startup_signal import StartupSignal

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class _CacheEntry:
    expires_at: float
    signal: StartupSignal


class SignalCache:
    """Maps entity ids to the last composed signal until its expiry.

    Expired entries are evicted lazily on the next lookup.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive.")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[int, _CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def stats(self) -> dict[str, int]:
        return {"hits": self._hits, "misses": self._misses}

    def get(self, entity_id: int) -> StartupSignal | None:
        entry = self._entries.get(entity_id)
        if entry is None:
            self._misses += 1
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[entity_id]
            self._misses += 1
            logger.debug("signals.cache.expired", extra={"entity_id": entity_id})
            return None
        self._hits += 1
        return entry.signal

    def set(self, entity_id: int, signal: StartupSignal) -> None:
        self._entries[entity_id] = _CacheEntry(expires_at=self._clock() + self._ttl, signal=signal)

    def invalidate(self, entity_id: int) -> None:
        self._entries.pop(entity_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def valid_count(self) -> int:
        """Number of entries that have not yet expired."""
        now = self._clock()
        return sum(1 for entry in self._entries.values() if now < entry.expires_at)
