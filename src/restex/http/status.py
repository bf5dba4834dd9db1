"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Classification of HTTP responses into the error taxonomy.
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import BadRequestError, RemoteError, TooManyRequestsError, UnauthorizedError
from ..types import HttpResponse

BAD_REQUEST_STATUSES = frozenset({400, 403, 404})


class ErrorObject(BaseModel):
    """Error detail reported by the remote service."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    status: int
    message: str = ""
    reason: str | None = None


def parse_error_object(response: HttpResponse) -> ErrorObject:
    """
    Extract an error detail from a response body.

    Understands `{"error": {"status": .., "message": ..}}`, the OAuth shape
    `{"error": "..", "error_description": ".."}`, and falls back to the raw
    body text.
    """
    text = response.text.strip()
    try:
        row = json.loads(text) if text else None
    except ValueError:
        row = None

    if isinstance(row, dict):
        err = row.get("error")
        if isinstance(err, dict):
            try:
                return ErrorObject.model_validate({"status": response.status, **err})
            except ValidationError:
                pass
        if isinstance(err, str):
            description = row.get("error_description")
            return ErrorObject(
                status=response.status,
                message=description if isinstance(description, str) else err,
                reason=err,
            )
    return ErrorObject(status=response.status, message=text)


def raise_for_status(response: HttpResponse) -> HttpResponse:
    """Return successful responses; raise the classified error otherwise."""
    if response.ok:
        return response
    body = response.text
    if response.status == 429:
        raise TooManyRequestsError(body, retry_after=response.header("Retry-After"))
    if response.status == 401:
        raise UnauthorizedError(body)
    if response.status in BAD_REQUEST_STATUSES:
        raise BadRequestError(response.status, body, parse_error_object(response))
    raise RemoteError(response.status, body)
