"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: fingerprint.py.
"""

from __future__ import annotations

import hashlib
import json

from .types import RequestDescriptor


def fingerprint(request: RequestDescriptor) -> str:
    """Build deterministic cache key for one request description."""
    body = request.body
    if isinstance(body, bytes):
        encoded_body: dict[str, str] | str | None = {"bytes": body.hex()}
    else:
        encoded_body = body
    payload = {
        "method": request.method,
        "url": request.url,
        "body": encoded_body,
        "content_type": request.content_type,
    }
    normalized = json.dumps(payload, ensure_ascii=True, sort_keys=True)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
