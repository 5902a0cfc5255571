"""Default fetch-style transport backed by :class:`httpx.AsyncClient`.

A transport is any callable ``(url, options)`` returning a response-like
object (or an awaitable of one), where ``options`` holds ``method``,
``headers`` and ``body``.  :class:`HttpxTransport` is the one an
:class:`~apicreator.creator.ApiCreator` falls back to when no ``fetch``
is configured.

Bodies are sent as-is when they are ``str`` or ``bytes`` (the usual case,
since JSON bodies are serialised before reaching the transport) and
form-encoded when they are still a mapping.  Transport errors
(:class:`httpx.HTTPError` and subclasses) propagate unchanged.

Example::

    async with HttpxTransport() as transport:
        users = ApiCreator(base_url="https://api.example.com/users", fetch=transport)
        client = users.create({"find_by_id": "GET /:id"})
        user = await client.find_by_id({"id": 42})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

import httpx

from apicreator.config import default_request_config
from apicreator.models import RequestConfig
from apicreator.response import FetchResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Fetch-like callable sending requests through a shared :class:`httpx.AsyncClient`.

    The client is created on first use unless one is injected, and is
    released by :meth:`aclose` or on leaving the ``async with`` block.

    Args:
        config: Timeout, SSL verification and redirect settings.  Defaults
            to :func:`~apicreator.config.default_request_config`.
        client: Pre-built client to use instead of creating one.  An
            injected client is not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or default_request_config()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def __call__(self, url: str, options: Mapping[str, Any]) -> FetchResponse:
        client = self._ensure_client()
        kwargs: dict[str, Any] = {
            "method": options.get("method", "GET"),
            "url": url,
            "headers": options.get("headers") or {},
        }
        body = options.get("body")
        if isinstance(body, (str, bytes)):
            kwargs["content"] = body
        elif isinstance(body, Mapping):
            kwargs["data"] = body
        elif body is not None:
            kwargs["content"] = str(body)

        response = await client.request(**kwargs)
        logger.debug("%s %s -> %s", kwargs["method"], url, response.status_code)
        return FetchResponse(response)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=self._config.follow_redirects,
            )
            self._owns_client = True
        return self._client
