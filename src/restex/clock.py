"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: clock.py.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Time source used for token expiry, cache TTL and blocking retry waits."""

    def time(self) -> float: ...

    def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Wall-clock time backed by the `time` module."""

    def time(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
