"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/rate_limit.py.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from email.utils import parsedate_to_datetime

from ..settings import RestSettings
from .contracts import Fail, RateLimitDecision, Retry

RATE_LIMITED_STATUS = 429


def parse_retry_after(value: str | None, *, now: float | None = None) -> float | None:
    """
    Parse a `Retry-After` header into seconds.

    Accepts delta-seconds or an HTTP-date (the latter needs `now`). Returns
    `None` for missing or malformed values.
    """
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None
    try:
        seconds = float(raw)
    except ValueError:
        seconds = None
    if seconds is not None:
        if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
            return None
        return seconds
    if now is None:
        return None
    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None or when.tzinfo is None:
        return None
    return max(0.0, when.timestamp() - now)


@dataclass(frozen=True, slots=True)
class RateLimitPolicy:
    """
    Decide whether a rate-limited attempt is retried and after how long.

    `max_attempts` counts every attempt including the first, so a value of 3
    allows two retries. A parseable `Retry-After` is used as the delay as-is;
    otherwise an exponential fallback capped at `max_delay_s` applies.
    """

    enabled: bool = True
    max_attempts: int = 5
    fallback_delay_s: float = 1.0
    backoff_factor: float = 2.0
    max_delay_s: float = 60.0

    @staticmethod
    def from_settings(settings: RestSettings) -> "RateLimitPolicy":
        return RateLimitPolicy(
            enabled=settings.retry_when_rate_limited,
            max_attempts=settings.max_retry_attempts,
            fallback_delay_s=settings.retry_fallback_delay_s,
            backoff_factor=settings.retry_backoff_factor,
            max_delay_s=settings.retry_max_delay_s,
        )

    def backoff_delay(self, attempt: int) -> float:
        """Fallback delay before retrying after failed attempt number `attempt`."""
        exponent = max(0, attempt - 1)
        try:
            delay_s = self.fallback_delay_s * (self.backoff_factor**exponent)
        except OverflowError:
            return self.max_delay_s
        return min(delay_s, self.max_delay_s)

    def decide(
        self,
        attempt: int,
        status: int,
        retry_after: str | None = None,
        *,
        enabled: bool | None = None,
        now: float | None = None,
    ) -> RateLimitDecision:
        if status != RATE_LIMITED_STATUS:
            return Fail(f"status {status} is not rate limiting")
        retry_enabled = self.enabled if enabled is None else enabled
        if not retry_enabled:
            return Fail("rate limited")
        if attempt >= self.max_attempts:
            return Fail("rate limited")

        server_delay_s = parse_retry_after(retry_after, now=now)
        if server_delay_s is not None:
            return Retry(server_delay_s)
        return Retry(self.backoff_delay(attempt))
