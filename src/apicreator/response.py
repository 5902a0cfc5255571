"""Response-like objects and the default response parser.

Transports return any object exposing a numeric ``status`` and a
``json()`` method (plain or coroutine).  :class:`FetchResponse` is the one
the default httpx transport hands back; custom transports are free to
return their own.

:func:`default_parse_response` maps the status to a result:

* ``status <= 200`` -- the decoded JSON body.
* ``200 < status < 400`` -- ``None``; the body is not read.
* ``status >= 400`` -- :class:`~apicreator.exceptions.RemoteRejection`
  carrying the decoded JSON body.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import httpx

from apicreator.exceptions import RemoteRejection

logger = logging.getLogger(__name__)


async def maybe_await(value: Any) -> Any:
    """Await *value* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class FetchResponse:
    """Fetch-style view of an :class:`httpx.Response`.

    Args:
        response: A fully read httpx response.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def ok(self) -> bool:
        return self._response.is_success

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def url(self) -> str:
        return str(self._response.url)

    async def json(self) -> Any:
        return self._response.json()

    async def text(self) -> str:
        return self._response.text

    def __repr__(self) -> str:
        return f"<FetchResponse [{self.status}] {self.url}>"


async def default_parse_response(response: Any) -> Any:
    """Decode a response-like object, rejecting error statuses.

    Args:
        response: Object with ``status`` and ``json()``.

    Returns:
        The decoded JSON body for ``status <= 200``, ``None`` for other
        non-error statuses.

    Raises:
        RemoteRejection: For ``status >= 400``, with the decoded body as
            :attr:`~apicreator.exceptions.RemoteRejection.payload`.
    """
    status = response.status
    if status < 400:
        if status > 200:
            return None
        return await maybe_await(response.json())

    payload = await maybe_await(response.json())
    logger.debug("Remote rejected request with status %s", status)
    raise RemoteRejection(payload)
