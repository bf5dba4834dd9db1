"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .action import RestAction
from .client import RestClient
from .contracts import Fail, RateLimitDecision, Retry
from .rate_limit import RateLimitPolicy, parse_retry_after
from .scheduler import Scheduler, ThreadScheduler

__all__ = [
    "RestAction",
    "RestClient",
    "Retry",
    "Fail",
    "RateLimitDecision",
    "RateLimitPolicy",
    "parse_retry_after",
    "Scheduler",
    "ThreadScheduler",
]
