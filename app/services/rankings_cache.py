"""In-process TTL cache for assembled rankings.

One instance lives for the whole process (created with the app) and is
handed to the rankings service. Expiry is lazy: an expired entry is dropped
when it is read, there is no sweeper.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float


class RankingsCache:
    """Thread-safe key -> value store with per-entry time-to-live."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``, replacing any prior entry."""
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be non-negative")
        with self._lock:
            self._entries[key] = CacheEntry(
                key=key,
                value=value,
                expires_at=self._clock() + ttl_seconds,
            )

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
