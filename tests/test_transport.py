"""Tests for apicreator.transport.HttpxTransport using httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from apicreator.creator import ApiCreator
from apicreator.exceptions import RemoteRejection
from apicreator.models import RequestConfig
from apicreator.response import FetchResponse
from apicreator.transport import HttpxTransport


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _transport_from_handler(handler) -> HttpxTransport:
    """Build an HttpxTransport over an httpx.MockTransport."""
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class _Recorder:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self.payload = {"ok": True} if payload is None else payload
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)


# ---------------------------------------------------------------------------
# Transport call
# ---------------------------------------------------------------------------


class TestHttpxTransport:
    def test_returns_fetch_response(self) -> None:
        recorder = _Recorder(payload={"id": 1})
        transport = _transport_from_handler(recorder)
        response = asyncio.run(
            transport("https://api.example.com/users/1", {"method": "GET", "headers": {}, "body": None})
        )
        assert isinstance(response, FetchResponse)
        assert response.status == 200
        assert asyncio.run(response.json()) == {"id": 1}
        assert recorder.requests[0].method == "GET"
        assert recorder.requests[0].content == b""

    def test_string_body_sent_as_content(self) -> None:
        recorder = _Recorder()
        transport = _transport_from_handler(recorder)
        asyncio.run(
            transport(
                "https://api.example.com/users",
                {"method": "POST", "headers": {"Content-Type": "application/json"}, "body": '{"a":1}'},
            )
        )
        request = recorder.requests[0]
        assert request.content == b'{"a":1}'
        assert request.headers["content-type"] == "application/json"

    def test_mapping_body_form_encoded(self) -> None:
        recorder = _Recorder()
        transport = _transport_from_handler(recorder)
        asyncio.run(
            transport("https://api.example.com/form", {"method": "POST", "headers": {}, "body": {"a": "1", "b": "x y"}})
        )
        request = recorder.requests[0]
        assert request.content == b"a=1&b=x+y"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"

    def test_lazy_client_created_and_closed(self) -> None:
        transport = HttpxTransport(RequestConfig(timeout=3))

        async def run() -> httpx.AsyncClient:
            async with transport:
                client = transport._client
                assert client is not None
                assert client.timeout.connect == 3
            return client

        client = asyncio.run(run())
        assert client.is_closed
        assert transport._client is None

    def test_injected_client_not_closed(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(_Recorder()))
        transport = HttpxTransport(client=client)
        asyncio.run(transport.aclose())
        assert not client.is_closed

    def test_connection_errors_propagate(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        transport = _transport_from_handler(handler)
        with pytest.raises(httpx.ConnectError):
            asyncio.run(transport("https://api.example.com/x", {"method": "GET"}))


# ---------------------------------------------------------------------------
# End to end through ApiCreator
# ---------------------------------------------------------------------------


class TestWithCreator:
    def test_put_json_body(self) -> None:
        recorder = _Recorder(payload={"id": "123", "email": "x@y.com"})
        users = ApiCreator(base_url="https://api.example.com/users/", fetch=_transport_from_handler(recorder))
        client = users.create({"update_by_id": "PUT /:id"})

        result = asyncio.run(client.update_by_id({"id": "123", "email": "x@y.com"}))

        assert result == {"id": "123", "email": "x@y.com"}
        request = recorder.requests[0]
        assert request.method == "PUT"
        assert str(request.url) == "https://api.example.com/users/123"
        assert json.loads(request.content) == {"email": "x@y.com"}
        assert request.headers["accept"] == "application/json"

    def test_get_query_string(self) -> None:
        recorder = _Recorder(payload=[])
        users = ApiCreator(base_url="https://api.example.com/users?v=2", fetch=_transport_from_handler(recorder))
        client = users.create({"find": "/"})

        asyncio.run(client.find({"where": {"active": True}, "limit": 5}))

        url = recorder.requests[0].url
        assert url.path == "/users"
        assert url.params["v"] == "2"
        assert json.loads(url.params["where"]) == {"active": True}
        assert url.params["limit"] == "5"

    def test_not_found_rejects_with_body(self) -> None:
        recorder = _Recorder(404, {"message": "no such user"})
        users = ApiCreator(base_url="https://api.example.com/users", fetch=_transport_from_handler(recorder))
        client = users.create({"find_by_id": "GET /:id"})

        with pytest.raises(RemoteRejection) as exc_info:
            asyncio.run(client.find_by_id({"id": "9"}))
        assert exc_info.value.payload == {"message": "no such user"}

    def test_no_content(self) -> None:
        recorder = _Recorder(204)
        users = ApiCreator(base_url="https://api.example.com/users", fetch=_transport_from_handler(recorder))
        client = users.create({"delete_by_id": "DELETE /:id"})
        assert asyncio.run(client.delete_by_id({"id": "9"})) is None
