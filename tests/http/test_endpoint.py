from __future__ import annotations

import json
import time

import pytest

from restex import (
    BadRequestError,
    Endpoint,
    EndpointBuilder,
    HttpResponse,
    RestClient,
    RestConfigurationError,
    RestSettings,
    Token,
    encode,
)


class _RecordingTransport:
    def __init__(self, *responses: HttpResponse) -> None:
        self.calls: list[dict] = []
        self._responses = list(responses)

    def send(self, method, url, *, headers=None, body=None, timeout_s=None):
        self.calls.append(
            {"method": method, "url": url, "headers": dict(headers or {}), "body": body}
        )
        if len(self._responses) > 1:
            return self._responses.pop(0)
        return self._responses[0]


class _ArtistsEndpoint(Endpoint):
    def get_artist(self, artist_id: str, market: str | None = None):
        return self.get_action(
            f"artists/{encode(artist_id)}",
            params={"market": market},
            parse=json.loads,
        )

    def follow(self, artist_ids: list[str]):
        url = EndpointBuilder("me/following").with_param("ids", artist_ids).build()
        return self.to_action(lambda: self.client.put(url, json.dumps({"type": "artist"})))


def _json(status: int, payload: object) -> HttpResponse:
    return HttpResponse(status=status, body=json.dumps(payload).encode("utf-8"))


def _client(transport: _RecordingTransport) -> RestClient:
    return RestClient(
        settings=RestSettings(base_url="https://api.example.com/v1"),
        token=Token(access_token="abc", expires_at=time.time() + 3600),
        transport=transport,
    )


def test_builder_skips_none_and_joins_sequences():
    url = (
        EndpointBuilder("search")
        .with_param("q", "daft punk")
        .with_param("type", ["artist", "album"])
        .with_param("market", None)
        .with_param("include_external", True)
        .build()
    )

    assert url == "search?q=daft+punk&type=artist%2Calbum&include_external=true"
    assert str(EndpointBuilder("me")) == "me"


def test_encode_escapes_path_separators():
    assert encode("a/b c") == "a%2Fb%20c"


def test_get_action_sends_authorized_request_and_caches():
    transport = _RecordingTransport(_json(200, {"id": "42", "name": "Artist"}))
    client = _client(transport)
    artists = _ArtistsEndpoint(client)

    first = artists.get_artist("42", market="US").complete()
    second = artists.get_artist("42", market="US").complete()

    assert first == second == {"id": "42", "name": "Artist"}
    assert len(transport.calls) == 1
    call = transport.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.example.com/v1/artists/42?market=US"
    assert call["headers"]["Authorization"] == "Bearer abc"
    client.close()


def test_not_found_raises_bad_request_with_detail():
    transport = _RecordingTransport(
        _json(404, {"error": {"status": 404, "message": "non existing id"}})
    )
    client = _client(transport)

    with pytest.raises(BadRequestError) as excinfo:
        _ArtistsEndpoint(client).get_artist("missing").complete()

    assert excinfo.value.detail.message == "non existing id"
    client.close()


def test_rate_limited_get_is_retried():
    transport = _RecordingTransport(
        HttpResponse(status=429, headers={"Retry-After": "0"}),
        _json(200, {"id": "7"}),
    )
    client = RestClient(
        settings=RestSettings(
            base_url="https://api.example.com/v1",
            retry_fallback_delay_s=0.0,
        ),
        transport=transport,
    )

    assert _ArtistsEndpoint(client).get_artist("7").complete() == {"id": "7"}
    assert len(transport.calls) == 2
    client.close()


def test_put_sends_json_body():
    transport = _RecordingTransport(HttpResponse(status=204))
    client = _client(transport)

    assert _ArtistsEndpoint(client).follow(["a", "b"]).complete() == ""

    call = transport.calls[0]
    assert call["method"] == "PUT"
    assert call["url"] == "https://api.example.com/v1/me/following?ids=a%2Cb"
    assert call["body"] == b'{"type": "artist"}'
    assert call["headers"]["Content-Type"] == "application/json"
    client.close()


def test_relative_url_without_base_is_rejected():
    client = RestClient(transport=_RecordingTransport(HttpResponse(status=200)))

    with pytest.raises(RestConfigurationError):
        client.resolve_url("artists/1")
    assert client.resolve_url("https://other.example.com/x") == "https://other.example.com/x"
    client.close()
