"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any

from ..clock import Clock, SystemClock
from .base import CacheEntry, ResponseCacheBackend

logger = logging.getLogger("restex.cache")


class ResponseCache(ResponseCacheBackend):
    """
    Process-local, bounded TTL cache keyed by request fingerprint.

    Expiry is checked on lookup. Disabling the cache hides entries without
    deleting them, so re-enabling restores what was stored before. When the
    cache is full, expired rows are purged first and then the oldest rows are
    evicted in insertion order.
    """

    def __init__(
        self,
        *,
        max_entries: int = 1024,
        enabled: bool = True,
        clock: Clock | None = None,
    ) -> None:
        self._rows: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._max_entries = max_entries
        self._enabled = enabled
        self._clock = clock or SystemClock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    def get(self, key: str, default: Any = None) -> Any:
        if not self._enabled:
            return default
        with self._lock:
            row = self._rows.get(key)
            if row is None:
                return default
            if not row.is_live(self._clock.time()):
                self._rows.pop(key, None)
                logger.debug("Evicted expired cache entry %s", key[:12])
                return default
            return row.value

    def put(self, key: str, value: Any, ttl_s: float) -> None:
        if not self._enabled or ttl_s <= 0:
            return
        entry = CacheEntry(value=value, stored_at_s=self._clock.time(), ttl_s=ttl_s)
        with self._lock:
            self._rows.pop(key, None)
            self._rows[key] = entry
            if len(self._rows) > self._max_entries:
                self._purge_expired_locked(entry.stored_at_s)
            while len(self._rows) > self._max_entries:
                evicted, _ = self._rows.popitem(last=False)
                logger.debug("Evicted cache entry %s (capacity)", evicted[:12])

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()

    def purge_expired(self) -> int:
        """Drop all expired rows and return how many were removed."""
        with self._lock:
            return self._purge_expired_locked(self._clock.time())

    def _purge_expired_locked(self, now: float) -> int:
        stale = [key for key, row in self._rows.items() if not row.is_live(now)]
        for key in stale:
            del self._rows[key]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.get(key, _ABSENT) is not _ABSENT


_ABSENT = object()
