"""
In-memory bar cache with explicit TTL eviction.

Owned by the calling layer; the analytics core never caches.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class BarCache:
    """Keyed store (symbol, timeframe) -> (data, inserted_at)."""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl_seconds: Entry lifetime; entries older than this are evicted on read
            clock: Time source in seconds (injectable for tests)
        """
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Tuple[str, str], Tuple[Any, float]] = {}

    def get(self, symbol: str, timeframe: str) -> Optional[Any]:
        key = (symbol, timeframe)
        entry = self._entries.get(key)
        if entry is None:
            return None

        data, inserted_at = entry
        if self._clock() - inserted_at > self.ttl_seconds:
            del self._entries[key]
            logger.debug("cache_entry_expired", extra={"symbol": symbol, "timeframe": timeframe})
            return None

        return data

    def set(self, symbol: str, timeframe: str, data: Any) -> None:
        self._entries[(symbol, timeframe)] = (data, self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def clear_symbol(self, symbol: str) -> None:
        """Drop every timeframe cached for ``symbol``."""
        for key in [k for k in self._entries if k[0] == symbol]:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return self.get(*key) is not None
