"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Transport layer for raw HTTP calls.
"""

from __future__ import annotations

import http.client
import logging
import socket
import urllib.error
import urllib.request
from collections.abc import Mapping
from typing import Protocol

from ..errors import TransportError
from ..types import HttpResponse

logger = logging.getLogger("restex.http.transport")


class HttpTransport(Protocol):
    """Sends one request and returns the raw response, whatever its status."""

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        timeout_s: float | None = None,
    ) -> HttpResponse: ...


class UrllibTransport:
    """Blocking transport built on `urllib.request`."""

    def __init__(self, *, default_headers: Mapping[str, str] | None = None) -> None:
        self._default_headers = {"Accept": "application/json", **(default_headers or {})}

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
        timeout_s: float | None = None,
    ) -> HttpResponse:
        req = urllib.request.Request(
            url,
            data=body,
            method=method.upper(),
            headers={**self._default_headers, **(headers or {})},
        )
        logger.debug("%s %s", method.upper(), url)
        try:
            with urllib.request.urlopen(req, timeout=timeout_s) as resp:  # noqa: S310
                return HttpResponse(
                    status=resp.status,
                    headers=dict(resp.headers.items()),
                    body=resp.read(),
                )
        except urllib.error.HTTPError as e:
            try:
                payload = e.read()
            except (OSError, http.client.HTTPException):
                payload = b""
            return HttpResponse(
                status=e.code,
                headers=dict(e.headers.items()) if e.headers is not None else {},
                body=payload or b"",
            )
        except urllib.error.URLError as e:
            raise TransportError(f"Network error calling {url}: {e.reason}") from e
        except (socket.timeout, TimeoutError) as e:
            raise TransportError(f"Timed out calling {url}") from e
        except OSError as e:
            raise TransportError(f"Connection failed calling {url}: {e}") from e
