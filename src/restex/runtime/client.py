"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/client.py.
"""

from __future__ import annotations

import urllib.parse
from collections.abc import Mapping
from dataclasses import replace
from typing import TypeVar

from ..auth.token import TokenGuard, TokenRefresher
from ..cache.base import ResponseCacheBackend
from ..cache.inmemory import ResponseCache
from ..clock import Clock, SystemClock
from ..errors import RestConfigurationError
from ..http.status import raise_for_status
from ..http.transport import HttpTransport, UrllibTransport
from ..settings import RestSettings
from ..types import HttpResponse, Producer, RequestBody, RequestDescriptor, Token, TokenRefreshFn
from .action import RestAction
from .rate_limit import RateLimitPolicy
from .scheduler import Scheduler, ThreadScheduler

T = TypeVar("T")


class RestClient:
    """
    Execution context shared by every action built against one API.

    Holds the response cache, token guard, rate-limit policy, scheduler,
    clock and transport. Nothing here is global, so independent clients can
    run side by side.

    `settings.use_cache` applies to an injected cache backend as well; use
    the `use_cache` property to toggle it afterwards.
    """

    def __init__(
        self,
        *,
        settings: RestSettings | None = None,
        token: Token | None = None,
        refresher: TokenRefresher | TokenRefreshFn | None = None,
        transport: HttpTransport | None = None,
        cache: ResponseCacheBackend | None = None,
        scheduler: Scheduler | None = None,
        clock: Clock | None = None,
        rate_limit_policy: RateLimitPolicy | None = None,
    ) -> None:
        self.settings = settings or RestSettings()
        self.clock = clock or SystemClock()
        self.transport = transport or UrllibTransport()

        self.cache: ResponseCacheBackend = (
            cache
            if cache is not None
            else ResponseCache(
                max_entries=self.settings.cache_max_entries,
                enabled=self.settings.use_cache,
                clock=self.clock,
            )
        )
        self.cache.set_enabled(self.settings.use_cache)

        if refresher is not None and token is None:
            raise RestConfigurationError("A token refresher needs an initial token")
        self.tokens = (
            TokenGuard(
                token,
                refresher,
                clock=self.clock,
                refresh_automatically=self.settings.refresh_token_automatically,
                expiry_margin_s=self.settings.token_expiry_margin_s,
            )
            if token is not None
            else None
        )

        self.rate_limit_policy = rate_limit_policy or RateLimitPolicy.from_settings(self.settings)

        self._owns_scheduler = scheduler is None
        self.scheduler: Scheduler = scheduler or ThreadScheduler(
            max_workers=self.settings.scheduler_workers,
        )

    @property
    def use_cache(self) -> bool:
        return self.cache.enabled

    @use_cache.setter
    def use_cache(self, value: bool) -> None:
        self.cache.set_enabled(value)

    @property
    def retry_when_rate_limited(self) -> bool:
        return self.rate_limit_policy.enabled

    @retry_when_rate_limited.setter
    def retry_when_rate_limited(self, value: bool) -> None:
        self.rate_limit_policy = replace(self.rate_limit_policy, enabled=bool(value))

    def action(
        self,
        producer: Producer[T],
        *,
        request: RequestDescriptor | None = None,
        cache_ttl_s: float | None = None,
    ) -> RestAction[T]:
        """Wrap a producer into a cold action bound to this client."""
        return RestAction(self, producer, request=request, cache_ttl_s=cache_ttl_s)

    def clear_cache(self) -> None:
        self.cache.clear()

    def resolve_url(self, url: str) -> str:
        """Resolve a path against `settings.base_url`; absolute URLs pass through."""
        if urllib.parse.urlparse(url).scheme:
            return url
        base = self.settings.base_url
        if not base:
            raise RestConfigurationError(f"Relative URL '{url}' needs settings.base_url")
        return urllib.parse.urljoin(base.rstrip("/") + "/", url.lstrip("/"))

    def request(
        self,
        method: str,
        url: str,
        *,
        body: RequestBody = None,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Send one authorized request and raise the classified error on non-2xx."""
        merged: dict[str, str] = {}
        if self.tokens is not None:
            merged["Authorization"] = self.tokens.current.authorization
        if content_type is not None:
            merged["Content-Type"] = content_type
        merged.update(headers or {})

        payload = body.encode("utf-8") if isinstance(body, str) else body
        response = self.transport.send(
            method.upper(),
            self.resolve_url(url),
            headers=merged,
            body=payload,
            timeout_s=self.settings.request_timeout_s,
        )
        return raise_for_status(response)

    def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> str:
        return self.request("GET", url, headers=headers).text

    def post(
        self,
        url: str,
        body: RequestBody = None,
        *,
        content_type: str | None = "application/json",
        headers: Mapping[str, str] | None = None,
    ) -> str:
        return self.request("POST", url, body=body, content_type=content_type, headers=headers).text

    def put(
        self,
        url: str,
        body: RequestBody = None,
        *,
        content_type: str | None = "application/json",
        headers: Mapping[str, str] | None = None,
    ) -> str:
        return self.request("PUT", url, body=body, content_type=content_type, headers=headers).text

    def delete(
        self,
        url: str,
        body: RequestBody = None,
        *,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        return self.request("DELETE", url, body=body, content_type=content_type, headers=headers).text

    def close(self) -> None:
        """Shut down the scheduler if this client created it."""
        if self._owns_scheduler and isinstance(self.scheduler, ThreadScheduler):
            self.scheduler.shutdown(wait=True)

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
