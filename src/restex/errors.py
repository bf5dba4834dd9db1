"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy for request execution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .http.status import ErrorObject


class RestError(Exception):
    """Base error for all restex failures."""


class RestConfigurationError(RestError):
    """Raised when settings or client wiring are invalid."""


class TransportError(RestError):
    """Connectivity-level failure (DNS, timeout, reset). Never retried."""


class AuthenticationError(RestError):
    """Raised when a valid access token cannot be obtained."""


class SchedulerClosedError(RestError):
    """Raised when work is scheduled on a scheduler that was shut down."""


class RateLimitedError(RestError):
    """Raised when a rate-limited call cannot be retried any further."""

    def __init__(
        self,
        message: str = "rate limited",
        *,
        attempts: int,
        retry_after_s: float | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.retry_after_s = retry_after_s


class RemoteError(RestError):
    """Non-2xx response returned by the remote service."""

    def __init__(self, status: int, body: str = "", message: str | None = None) -> None:
        super().__init__(message or (f"HTTP {status}: {body}" if body else f"HTTP {status}"))
        self.status = status
        self.body = body


class BadRequestError(RemoteError):
    """Request rejected by the service (400/403/404)."""

    def __init__(self, status: int, body: str = "", detail: ErrorObject | None = None) -> None:
        message = f"HTTP {status}: {detail.message}" if detail and detail.message else None
        super().__init__(status, body, message)
        self.detail = detail


class UnauthorizedError(RemoteError):
    """Service rejected the access token (401)."""

    def __init__(self, body: str = "") -> None:
        super().__init__(401, body)


class TooManyRequestsError(RemoteError):
    """Service signalled rate limiting (429)."""

    def __init__(self, body: str = "", retry_after: str | None = None) -> None:
        super().__init__(429, body)
        self.retry_after = retry_after
