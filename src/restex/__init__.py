"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

from .auth import TokenGuard, TokenRefresher
from .cache import CacheEntry, ResponseCache, ResponseCacheBackend
from .clock import Clock, SystemClock
from .errors import (
    AuthenticationError,
    BadRequestError,
    RateLimitedError,
    RemoteError,
    RestConfigurationError,
    RestError,
    SchedulerClosedError,
    TooManyRequestsError,
    TransportError,
    UnauthorizedError,
)
from .fingerprint import fingerprint
from .http import (
    Endpoint,
    EndpointBuilder,
    ErrorObject,
    HttpTransport,
    Page,
    UrllibTransport,
    encode,
    raise_for_status,
)
from .runtime import (
    Fail,
    RateLimitDecision,
    RateLimitPolicy,
    RestAction,
    RestClient,
    Retry,
    Scheduler,
    ThreadScheduler,
    parse_retry_after,
)
from .settings import RestSettings
from .types import HttpResponse, Producer, RequestDescriptor, Token

__all__ = [
    "RestClient",
    "RestAction",
    "RestSettings",
    "RequestDescriptor",
    "HttpResponse",
    "Producer",
    "Token",
    "TokenGuard",
    "TokenRefresher",
    "ResponseCache",
    "ResponseCacheBackend",
    "CacheEntry",
    "RateLimitPolicy",
    "RateLimitDecision",
    "Retry",
    "Fail",
    "parse_retry_after",
    "Scheduler",
    "ThreadScheduler",
    "Clock",
    "SystemClock",
    "fingerprint",
    "Endpoint",
    "EndpointBuilder",
    "encode",
    "Page",
    "ErrorObject",
    "HttpTransport",
    "UrllibTransport",
    "raise_for_status",
    "RestError",
    "RestConfigurationError",
    "TransportError",
    "AuthenticationError",
    "RateLimitedError",
    "RemoteError",
    "BadRequestError",
    "UnauthorizedError",
    "TooManyRequestsError",
    "SchedulerClosedError",
]
