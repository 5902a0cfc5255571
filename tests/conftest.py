"""Shared test fixtures for apicreator.

Provides a fake fetch-style transport that echoes the request it received
back as the JSON body, so tests can assert on exactly what a generated
method sent.  URLs containing ``fail`` produce a 400 response.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from apicreator.defaults import reset_creator


BASE_URL = "http://api/users/"

JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}


class FakeResponse:
    """Minimal response-like object: ``status`` plus an async ``json()``."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body
        self.json_calls = 0

    async def json(self) -> Any:
        self.json_calls += 1
        return json.loads(self._body)


class EchoFetch:
    """Async transport recording every call and echoing it in the body."""

    def __init__(self, status: int | None = None) -> None:
        self.status = status
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, url: str, options: dict[str, Any]) -> FakeResponse:
        self.calls.append((url, options))
        status = self.status
        if status is None:
            status = 400 if "fail" in url else 200
        return FakeResponse(status, json.dumps({"result": {"url": url, "options": options}}))

    @property
    def last(self) -> tuple[str, dict[str, Any]]:
        return self.calls[-1]


# ---------------------------------------------------------------------------
# Auto-reset the process-wide default creator between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_default_creator() -> None:
    yield
    reset_creator()


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear APICREATOR_* environment variables for the test."""
    for var in ["APICREATOR_BASE_URL", "APICREATOR_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fetch() -> EchoFetch:
    return EchoFetch()


def expected(url: str, method: str, headers: dict[str, str] | None = None, body: Any = None) -> dict[str, Any]:
    """The echo body :class:`EchoFetch` returns for a request."""
    return {
        "result": {
            "url": url,
            "options": {
                "method": method,
                "headers": JSON_HEADERS if headers is None else headers,
                "body": body,
            },
        }
    }
