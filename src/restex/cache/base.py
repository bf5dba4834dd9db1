"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached response row with expiration metadata."""

    value: Any
    stored_at_s: float
    ttl_s: float

    @property
    def expires_at_s(self) -> float:
        return self.stored_at_s + self.ttl_s

    def is_live(self, now: float) -> bool:
        return now < self.expires_at_s


class ResponseCacheBackend(Protocol):
    """Protocol implemented by caches consulted by `RestAction`."""

    @property
    def enabled(self) -> bool: ...

    def set_enabled(self, enabled: bool) -> None: ...

    def get(self, key: str, default: Any = None) -> Any: ...

    def put(self, key: str, value: Any, ttl_s: float) -> None: ...

    def clear(self) -> None: ...
