from __future__ import annotations

import json

from restex import Endpoint, HttpResponse, Page, RestClient, RestSettings

_BASE = "https://api.example.com/v1"


class _RoutedTransport:
    def __init__(self, routes: dict[str, object]) -> None:
        self._routes = routes
        self.urls: list[str] = []

    def send(self, method, url, *, headers=None, body=None, timeout_s=None):
        self.urls.append(url)
        return HttpResponse(status=200, body=json.dumps(self._routes[url]).encode("utf-8"))


class _AlbumsEndpoint(Endpoint):
    def tracks_page(self, album_id: str, limit: int = 2):
        return self.get_page_action(f"albums/{album_id}/tracks", params={"limit": limit})

    def all_tracks(self, album_id: str, max_pages: int | None = None):
        return self.get_all_items_action(
            f"albums/{album_id}/tracks",
            params={"limit": 2},
            max_pages=max_pages,
        )


_ROUTES = {
    f"{_BASE}/albums/A/tracks?limit=2": {
        "items": [{"id": 1}, {"id": 2}],
        "next": f"{_BASE}/albums/A/tracks?limit=2&offset=2",
        "total": 5,
        "limit": 2,
        "offset": 0,
    },
    f"{_BASE}/albums/A/tracks?limit=2&offset=2": {
        "items": [{"id": 3}, {"id": 4}],
        "next": f"{_BASE}/albums/A/tracks?limit=2&offset=4",
        "previous": f"{_BASE}/albums/A/tracks?limit=2",
        "total": 5,
    },
    f"{_BASE}/albums/A/tracks?limit=2&offset=4": {
        "items": [{"id": 5}],
        "next": None,
        "total": 5,
    },
}


def _client(transport: _RoutedTransport) -> RestClient:
    return RestClient(settings=RestSettings(base_url=_BASE), transport=transport)


def test_page_action_parses_and_caches_one_page():
    transport = _RoutedTransport(_ROUTES)
    client = _client(transport)
    albums = _AlbumsEndpoint(client)

    page = albums.tracks_page("A").complete()
    again = albums.tracks_page("A").complete()

    assert isinstance(page, Page)
    assert page == again
    assert [item["id"] for item in page.items] == [1, 2]
    assert page.has_next
    assert page.total == 5
    assert len(transport.urls) == 1
    client.close()


def test_all_items_action_follows_next_links():
    transport = _RoutedTransport(_ROUTES)
    client = _client(transport)

    items = _AlbumsEndpoint(client).all_tracks("A").complete()

    assert [item["id"] for item in items] == [1, 2, 3, 4, 5]
    assert len(transport.urls) == 3
    client.close()


def test_all_items_action_respects_page_limit():
    transport = _RoutedTransport(_ROUTES)
    client = _client(transport)

    items = _AlbumsEndpoint(client).all_tracks("A", max_pages=2).complete()

    assert [item["id"] for item in items] == [1, 2, 3, 4]
    assert len(transport.urls) == 2
    client.close()


def test_last_page_has_no_next():
    page = Page.model_validate({"items": [], "next": None, "unknown": "ignored"})

    assert page.has_next is False
    assert page.items == []
