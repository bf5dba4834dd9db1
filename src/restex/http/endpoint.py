"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Base class for per-resource endpoint groups.
"""

from __future__ import annotations

import urllib.parse
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from ..types import Producer, RequestDescriptor
from .paging import Page

if TYPE_CHECKING:
    from ..runtime.action import RestAction
    from ..runtime.client import RestClient

T = TypeVar("T")


def encode(segment: str) -> str:
    """Percent-encode one path segment."""
    return urllib.parse.quote(segment, safe="")


class EndpointBuilder:
    """Path plus query string, skipping parameters whose value is `None`."""

    def __init__(self, path: str) -> None:
        self._path = path
        self._params: list[tuple[str, str]] = []

    def with_param(self, key: str, value: Any) -> EndpointBuilder:
        if value is None:
            return self
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (list, tuple, set, frozenset)):
            value = ",".join(str(item) for item in value)
        self._params.append((key, str(value)))
        return self

    def with_params(self, params: Mapping[str, Any] | None) -> EndpointBuilder:
        for key, value in (params or {}).items():
            self.with_param(key, value)
        return self

    def build(self) -> str:
        if not self._params:
            return self._path
        separator = "&" if "?" in self._path else "?"
        return f"{self._path}{separator}{urllib.parse.urlencode(self._params)}"

    def __str__(self) -> str:
        return self.build()


class Endpoint:
    """Groups the call sites for one resource family on a shared client."""

    def __init__(self, client: RestClient) -> None:
        self.client = client

    def to_action(
        self,
        producer: Producer[T],
        *,
        request: RequestDescriptor | None = None,
        cache_ttl_s: float | None = None,
    ) -> RestAction[T]:
        return self.client.action(producer, request=request, cache_ttl_s=cache_ttl_s)

    def get_action(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        parse: Callable[[str], T] | None = None,
        cache_ttl_s: float | None = None,
    ) -> RestAction[T]:
        """Cached GET action; `parse` turns the body text into the result."""
        url = self.client.resolve_url(EndpointBuilder(path).with_params(params).build())
        request = RequestDescriptor("GET", url)

        def _produce() -> T:
            text = self.client.get(url)
            return parse(text) if parse is not None else text  # type: ignore[return-value]

        return self.to_action(_produce, request=request, cache_ttl_s=cache_ttl_s)

    def get_page_action(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        cache_ttl_s: float | None = None,
    ) -> RestAction[Page]:
        """Cached GET action for a single page of a collection."""
        return self.get_action(
            path,
            params=params,
            parse=Page.model_validate_json,
            cache_ttl_s=cache_ttl_s,
        )

    def get_all_items_action(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> RestAction[list[Any]]:
        """
        Action that walks `next` links from the first page and concatenates items.

        The aggregate is not cached. A retry after rate limiting restarts the
        walk from the first page.
        """
        first_url = self.client.resolve_url(EndpointBuilder(path).with_params(params).build())

        def _produce() -> list[Any]:
            items: list[Any] = []
            url: str | None = first_url
            pages = 0
            while url:
                page = Page.model_validate_json(self.client.get(url))
                items.extend(page.items)
                pages += 1
                if max_pages is not None and pages >= max_pages:
                    break
                url = page.next
            return items

        return self.to_action(_produce)
