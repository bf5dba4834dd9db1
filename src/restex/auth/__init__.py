"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: auth/__init__.py.
"""

from .token import TokenGuard, TokenRefresher

__all__ = [
    "TokenGuard",
    "TokenRefresher",
]
