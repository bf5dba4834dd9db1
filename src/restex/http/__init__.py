"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: http/__init__.py.
"""

from .endpoint import Endpoint, EndpointBuilder, encode
from .paging import Page
from .status import ErrorObject, parse_error_object, raise_for_status
from .transport import HttpTransport, UrllibTransport

__all__ = [
    "Endpoint",
    "EndpointBuilder",
    "encode",
    "Page",
    "ErrorObject",
    "parse_error_object",
    "raise_for_status",
    "HttpTransport",
    "UrllibTransport",
]
