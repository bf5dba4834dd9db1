"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: http/paging.py.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """One page of a paginated collection, linked to its neighbours by URL."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    items: list[Any] = Field(default_factory=list)
    next: str | None = None
    previous: str | None = None
    total: int | None = None
    limit: int | None = None
    offset: int | None = None

    @property
    def has_next(self) -> bool:
        return bool(self.next)
