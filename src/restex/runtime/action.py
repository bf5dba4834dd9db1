"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Lazy, reusable unit of work for one logical API call.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..errors import (
    RateLimitedError,
    SchedulerClosedError,
    TooManyRequestsError,
    UnauthorizedError,
)
from ..fingerprint import fingerprint
from ..types import Producer, RequestDescriptor, Token
from .contracts import Retry
from .rate_limit import parse_retry_after

if TYPE_CHECKING:
    from .client import RestClient

T = TypeVar("T")

logger = logging.getLogger("restex.runtime.action")

_MISS = object()


@dataclass(frozen=True, slots=True)
class _Done(Generic[T]):
    value: T


class _Completion(Generic[T]):
    """Per-completion pipeline state: attempt counter and one-shot reauthorization."""

    def __init__(self, action: RestAction[T]) -> None:
        self._action = action
        self.attempt = 0
        self._cache_checked = False
        self._reauthorized = False

    def step(self) -> _Done[T] | Retry:
        action = self._action
        client = action.client

        if not self._cache_checked:
            self._cache_checked = True
            cached = action._cached()  # noqa: SLF001
            if cached is not _MISS:
                return _Done(cached)

        token: Token | None = None
        if client.tokens is not None:
            token = client.tokens.ensure_valid()

        self.attempt += 1
        logger.debug("Running %r attempt %d", action, self.attempt)
        try:
            value = action.producer()
        except TooManyRequestsError as error:
            now = client.clock.time()
            decision = client.rate_limit_policy.decide(
                self.attempt,
                error.status,
                error.retry_after,
                now=now,
            )
            if isinstance(decision, Retry):
                logger.warning(
                    "Rate limited on attempt %d of %r, retrying in %.2fs",
                    self.attempt,
                    action,
                    decision.delay_s,
                )
                return decision
            raise RateLimitedError(
                decision.reason,
                attempts=self.attempt,
                retry_after_s=parse_retry_after(error.retry_after, now=now),
            ) from error
        except UnauthorizedError:
            tokens = client.tokens
            if tokens is None or self._reauthorized or not tokens.refresh_automatically:
                raise
            self._reauthorized = True
            logger.info("Access token rejected, refreshing before retrying %r", action)
            tokens.force_expire(token)
            return Retry(0.0)

        action._store(value)  # noqa: SLF001
        return _Done(value)


class RestAction(Generic[T]):
    """
    Cold, restartable computation producing `T`.

    Nothing runs until the action is completed. Every completion runs the full
    pipeline (cache lookup, token check, producer, rate-limit retry, cache
    store); the result is never memoized on the action itself, so completing
    twice calls the producer twice unless the response cache answers.

    Caching applies only when a `RequestDescriptor` is supplied, since the
    producer itself is opaque.
    """

    def __init__(
        self,
        client: RestClient,
        producer: Producer[T],
        *,
        request: RequestDescriptor | None = None,
        cache_ttl_s: float | None = None,
    ) -> None:
        self.client = client
        self.producer = producer
        self.request = request
        self.cache_ttl_s = cache_ttl_s
        self._fingerprint = fingerprint(request) if request is not None else None

    @property
    def fingerprint(self) -> str | None:
        return self._fingerprint

    def __repr__(self) -> str:
        if self.request is None:
            return f"RestAction({getattr(self.producer, '__qualname__', 'producer')})"
        return f"RestAction({self.request.method} {self.request.url})"

    def complete(self) -> T:
        """Run the pipeline on the calling thread and return the result or raise."""
        run: _Completion[T] = _Completion(self)
        while True:
            outcome = run.step()
            if isinstance(outcome, Retry):
                self.client.clock.sleep(outcome.delay_s)
                continue
            return outcome.value

    def complete_async(
        self,
        on_result: Callable[[T], Any],
        on_error: Callable[[BaseException], Any] | None = None,
        *,
        delay_s: float = 0.0,
    ) -> None:
        """
        Run the pipeline on the client's scheduler and report through callbacks.

        Returns immediately. Callbacks run on a scheduler worker and never
        before this method has returned. `delay_s` defers the first attempt.
        Retry backoff is scheduled rather than slept, so no worker is held
        during a wait. If the scheduler shuts down while a retry or the
        deferred start is pending, `on_error` receives `SchedulerClosedError`.

        Raises `SchedulerClosedError` directly when the scheduler is already
        closed, since no callback could then run after this method returns.
        """
        run: _Completion[T] = _Completion(self)
        scheduler = self.client.scheduler
        returned = threading.Event()

        def _cancelled(error: SchedulerClosedError) -> None:
            returned.wait()
            self._dispatch(on_error, error, failed=True)

        def _step() -> None:
            returned.wait()
            try:
                outcome = run.step()
                if isinstance(outcome, Retry):
                    scheduler.after(outcome.delay_s, _step, on_cancel=_cancelled)
                    return
            except Exception as error:
                self._dispatch(on_error, error, failed=True)
                return
            self._dispatch(on_result, outcome.value, failed=False)

        scheduler.after(delay_s, _step, on_cancel=_cancelled)
        returned.set()

    def to_future(self, *, delay_s: float = 0.0) -> Future[T]:
        """
        Adapt `complete_async` into a `concurrent.futures.Future`.

        A closed scheduler yields a future that has already failed with
        `SchedulerClosedError`.
        """
        future: Future[T] = Future()
        future.set_running_or_notify_cancel()
        try:
            self.complete_async(future.set_result, future.set_exception, delay_s=delay_s)
        except SchedulerClosedError as error:
            future.set_exception(error)
        return future

    async def acomplete(self) -> T:
        """Await completion from asyncio code without blocking the event loop."""
        return await asyncio.wrap_future(self.to_future())

    def _cached(self) -> Any:
        cache = self.client.cache
        if self._fingerprint is None or not cache.enabled:
            return _MISS
        value = cache.get(self._fingerprint, _MISS)
        if value is _MISS:
            logger.debug("Cache miss for %r", self)
        else:
            logger.debug("Cache hit for %r", self)
        return value

    def _store(self, value: T) -> None:
        cache = self.client.cache
        if self._fingerprint is None or not cache.enabled:
            return
        ttl_s = self.cache_ttl_s if self.cache_ttl_s is not None else self.client.settings.cache_ttl_s
        cache.put(self._fingerprint, value, ttl_s)

    def _dispatch(self, callback: Callable[[Any], Any] | None, payload: Any, *, failed: bool) -> None:
        if callback is None:
            if failed:
                logger.error("Unhandled failure completing %r", self, exc_info=payload)
            return
        try:
            callback(payload)
        except Exception:
            logger.exception("Completion callback for %r failed", self)
