from __future__ import annotations

import email.message
import io
import urllib.error
import urllib.request

import pytest

from restex import TransportError, UrllibTransport


class _FakeResponse:
    def __init__(self, status: int, body: bytes, headers: dict[str, str]) -> None:
        self.status = status
        self.headers = email.message.Message()
        for key, value in headers.items():
            self.headers[key] = value
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def test_send_builds_request_and_returns_response(monkeypatch):
    seen = {}

    def _urlopen(req, timeout=None):
        seen["req"] = req
        seen["timeout"] = timeout
        return _FakeResponse(200, b'{"id": 1}', {"Content-Type": "application/json"})

    monkeypatch.setattr(urllib.request, "urlopen", _urlopen)
    transport = UrllibTransport(default_headers={"User-Agent": "restex-tests"})

    response = transport.send(
        "post",
        "https://api.example.com/v1/items",
        headers={"Authorization": "Bearer abc"},
        body=b"{}",
        timeout_s=7.0,
    )

    req = seen["req"]
    assert req.get_method() == "POST"
    assert req.data == b"{}"
    assert req.get_header("Authorization") == "Bearer abc"
    assert req.get_header("Accept") == "application/json"
    assert req.get_header("User-agent") == "restex-tests"
    assert seen["timeout"] == 7.0
    assert response.status == 200
    assert response.json() == {"id": 1}
    assert response.header("content-type") == "application/json"


def test_http_error_is_returned_as_response(monkeypatch):
    def _urlopen(req, timeout=None):
        headers = email.message.Message()
        headers["Retry-After"] = "2"
        raise urllib.error.HTTPError(req.full_url, 429, "Too Many Requests", headers, io.BytesIO(b"slow down"))

    monkeypatch.setattr(urllib.request, "urlopen", _urlopen)

    response = UrllibTransport().send("GET", "https://api.example.com/v1/items")

    assert response.status == 429
    assert response.header("retry-after") == "2"
    assert response.text == "slow down"


def test_network_failure_becomes_transport_error(monkeypatch):
    def _urlopen(req, timeout=None):
        raise urllib.error.URLError("name resolution failed")

    monkeypatch.setattr(urllib.request, "urlopen", _urlopen)

    with pytest.raises(TransportError, match="name resolution failed"):
        UrllibTransport().send("GET", "https://api.example.com/v1/items")


def test_timeout_becomes_transport_error(monkeypatch):
    def _urlopen(req, timeout=None):
        raise TimeoutError("timed out")

    monkeypatch.setattr(urllib.request, "urlopen", _urlopen)

    with pytest.raises(TransportError, match="Timed out"):
        UrllibTransport().send("GET", "https://api.example.com/v1/items", timeout_s=0.1)
