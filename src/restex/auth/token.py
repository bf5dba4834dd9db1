"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Access-token ownership with single-flight refresh.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import replace
from typing import Protocol

from ..clock import Clock, SystemClock
from ..errors import AuthenticationError
from ..types import Token, TokenRefreshFn

logger = logging.getLogger("restex.auth.token")


class TokenRefresher(Protocol):
    """Credential collaborator that exchanges refresh material for a new token."""

    def refresh(self, token: Token) -> Token: ...


class TokenGuard:
    """
    Owns the current token and hands out non-expired snapshots.

    Tokens expiring within `expiry_margin_s` are treated as expired. When a
    refresh is needed, the first caller performs it and every caller that
    arrives while it is outstanding waits on the same pending future, so one
    expiry produces exactly one refresh call.

    An `AuthenticationError` raised by the refresher is sticky: later calls
    re-raise it until `set_token()` installs a new credential.
    """

    def __init__(
        self,
        token: Token,
        refresher: TokenRefresher | TokenRefreshFn | None = None,
        *,
        clock: Clock | None = None,
        refresh_automatically: bool = True,
        expiry_margin_s: float = 5.0,
    ) -> None:
        self._token = token
        self._refresher = refresher
        self._clock = clock or SystemClock()
        self.refresh_automatically = refresh_automatically
        self.expiry_margin_s = expiry_margin_s

        self._lock = threading.Lock()
        self._pending: Future[Token] | None = None
        self._failure: AuthenticationError | None = None
        self.refresh_count = 0

    @property
    def current(self) -> Token:
        """Snapshot of the current token, without any validity check."""
        return self._token

    @property
    def refreshing(self) -> bool:
        return self._pending is not None

    def set_token(self, token: Token) -> None:
        """Install a new token and clear any recorded refresh failure."""
        with self._lock:
            self._token = token
            self._failure = None

    def force_expire(self, token: Token | None = None) -> None:
        """
        Mark the current token as expired so the next use refreshes it.

        When `token` is given, only expire if it is still the current token;
        a token that was already replaced by a refresh is left alone.
        """
        with self._lock:
            if token is not None and token.access_token != self._token.access_token:
                return
            self._token = self._token.expired()

    def ensure_valid(self) -> Token:
        with self._lock:
            if self._failure is not None:
                raise self._failure
            token = self._token
            if not token.is_expired(self._clock.time(), margin_s=self.expiry_margin_s):
                return token
            if not self.refresh_automatically or self._refresher is None:
                raise AuthenticationError(
                    "Access token expired and automatic refresh is not available"
                )
            pending = self._pending
            leader = pending is None
            if leader:
                pending = Future()
                self._pending = pending

        if not leader:
            return pending.result()
        return self._refresh(token, pending)

    def _refresh(self, token: Token, pending: Future[Token]) -> Token:
        logger.info("Refreshing expired access token")
        try:
            fresh = self._call_refresher(token)
        except AuthenticationError as error:
            with self._lock:
                self._failure = error
                self._pending = None
            logger.error("Token refresh rejected: %s", error)
            pending.set_exception(error)
            raise
        except BaseException as error:
            failure = AuthenticationError(f"Token refresh failed: {error!r}")
            failure.__cause__ = error
            with self._lock:
                self._pending = None
            logger.warning("Token refresh failed: %r", error)
            pending.set_exception(failure)
            if isinstance(error, Exception):
                raise failure
            raise

        if fresh.refresh_token is None and token.refresh_token is not None:
            fresh = replace(fresh, refresh_token=token.refresh_token)
        with self._lock:
            self._token = fresh
            self._pending = None
            self.refresh_count += 1
        pending.set_result(fresh)
        return fresh

    def _call_refresher(self, token: Token) -> Token:
        refresher = self._refresher
        if hasattr(refresher, "refresh"):
            return refresher.refresh(token)  # type: ignore[union-attr]
        return refresher(token)  # type: ignore[misc, operator]
