"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed decisions exchanged between the retry policy and actions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Retry:
    """Try the call again after `delay_s` seconds."""

    delay_s: float


@dataclass(frozen=True, slots=True)
class Fail:
    """Give up and surface the failure."""

    reason: str


RateLimitDecision: TypeAlias = Retry | Fail
