"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Runtime settings and explicit config loading.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from .errors import RestConfigurationError

N = TypeVar("N", int, float)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise RestConfigurationError(f"{name} must be a boolean, got '{raw}'")


def _env_number(name: str, default: str, cast: Callable[[str], N]) -> N:
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise RestConfigurationError(f"{name} must be numeric, got '{raw}'") from e


@dataclass(frozen=True, slots=True)
class RestSettings:
    """Explicit settings consumed by the client, cache, token guard and retry policy."""

    base_url: str | None = None

    use_cache: bool = True
    cache_ttl_s: float = 60.0
    cache_max_entries: int = 1024

    retry_when_rate_limited: bool = True
    max_retry_attempts: int = 5
    retry_fallback_delay_s: float = 1.0
    retry_backoff_factor: float = 2.0
    retry_max_delay_s: float = 60.0

    refresh_token_automatically: bool = True
    token_expiry_margin_s: float = 5.0

    request_timeout_s: float = 30.0
    scheduler_workers: int = 4

    def __post_init__(self) -> None:
        if self.cache_ttl_s < 0:
            raise RestConfigurationError("cache_ttl_s must be >= 0")
        if self.cache_max_entries < 1:
            raise RestConfigurationError("cache_max_entries must be >= 1")
        if self.max_retry_attempts < 1:
            raise RestConfigurationError("max_retry_attempts must be >= 1")
        if self.retry_fallback_delay_s < 0 or self.retry_max_delay_s < 0:
            raise RestConfigurationError("retry delays must be >= 0")
        if self.retry_backoff_factor < 1.0:
            raise RestConfigurationError("retry_backoff_factor must be >= 1.0")
        if self.token_expiry_margin_s < 0:
            raise RestConfigurationError("token_expiry_margin_s must be >= 0")
        if self.scheduler_workers < 1:
            raise RestConfigurationError("scheduler_workers must be >= 1")

    @staticmethod
    def from_env() -> "RestSettings":
        """Load settings from environment variables."""
        return RestSettings(
            base_url=os.getenv("RESTEX_BASE_URL") or None,
            use_cache=_env_bool("RESTEX_USE_CACHE", True),
            cache_ttl_s=_env_number("RESTEX_CACHE_TTL_S", "60", float),
            cache_max_entries=_env_number("RESTEX_CACHE_MAX_ENTRIES", "1024", int),
            retry_when_rate_limited=_env_bool("RESTEX_RETRY_WHEN_RATE_LIMITED", True),
            max_retry_attempts=_env_number("RESTEX_MAX_RETRY_ATTEMPTS", "5", int),
            retry_fallback_delay_s=_env_number("RESTEX_RETRY_FALLBACK_DELAY_S", "1", float),
            retry_backoff_factor=_env_number("RESTEX_RETRY_BACKOFF_FACTOR", "2", float),
            retry_max_delay_s=_env_number("RESTEX_RETRY_MAX_DELAY_S", "60", float),
            refresh_token_automatically=_env_bool(
                "RESTEX_REFRESH_TOKEN_AUTOMATICALLY", True
            ),
            token_expiry_margin_s=_env_number("RESTEX_TOKEN_EXPIRY_MARGIN_S", "5", float),
            request_timeout_s=_env_number("RESTEX_REQUEST_TIMEOUT_S", "30", float),
            scheduler_workers=_env_number("RESTEX_SCHEDULER_WORKERS", "4", int),
        )
