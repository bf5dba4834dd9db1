"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

This module defines the value types shared by the execution engine.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Protocol, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import AuthenticationError

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]

RequestBody: TypeAlias = str | bytes | None


class Producer(Protocol[T_co]):
    """Zero-argument operation that performs HTTP calls and returns a result."""

    def __call__(self) -> T_co: ...


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Immutable description of one request, used for fingerprinting."""

    method: str
    url: str
    body: RequestBody = None
    content_type: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Raw HTTP response as returned by a transport."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.text) if self.body else None


class _TokenPayload(BaseModel):
    """OAuth-style token endpoint response."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    token_type: str = "Bearer"
    expires_in: float
    refresh_token: str | None = None
    scope: str = ""


@dataclass(frozen=True, slots=True)
class Token:
    """Access credential with absolute expiry (epoch seconds)."""

    access_token: str
    expires_at: float
    refresh_token: str | None = None
    scopes: frozenset[str] = frozenset()
    token_type: str = "Bearer"

    def is_expired(self, now: float, *, margin_s: float = 0.0) -> bool:
        return now + margin_s >= self.expires_at

    def expired(self) -> Token:
        """Return a copy whose expiry is already in the past."""
        return replace(self, expires_at=0.0)

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"

    @staticmethod
    def from_payload(payload: Mapping[str, Any] | str | bytes, *, now: float) -> Token:
        """Build a token from a token-endpoint JSON payload."""
        try:
            if isinstance(payload, (str, bytes)):
                row = _TokenPayload.model_validate_json(payload)
            else:
                row = _TokenPayload.model_validate(dict(payload))
        except ValidationError as e:
            raise AuthenticationError(f"Invalid token payload: {e.errors()[0]['msg']}") from e
        return Token(
            access_token=row.access_token,
            expires_at=now + row.expires_in,
            refresh_token=row.refresh_token,
            scopes=frozenset(row.scope.split()),
            token_type=row.token_type or "Bearer",
        )


TokenRefreshFn: TypeAlias = Callable[[Token], Token]
