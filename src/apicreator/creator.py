"""Client factory: bind route descriptors to named coroutine methods.

:class:`ApiCreator` holds a :class:`~apicreator.config.Configuration`
(base URL, transport, headers, hooks) and turns a route map into a
:class:`Client`.  Every generated method performs exactly one transport
call:

1. Apply ``transform_request`` (awaited if it returns an awaitable), then
   shape the request with :func:`~apicreator.shaper.shape_request`.
2. Merge headers: creator store, ``create()`` headers, route headers.
3. Serialise the body as JSON when the ``Content-Type`` mentions ``json``.
4. Await the transport with ``(url, {"method", "headers", "body"})``.
5. Apply the response parser, then the response transform.  Rejections
   raised by the parser skip the transform.

Example::

    users = ApiCreator(base_url="http://api/users/", fetch=fetch)
    client = users.create({
        "create": "POST /",
        "update_by_id": "PUT /:id",
        "find": "/",
    })
    await client.update_by_id({"id": "123", "email": "x@y.com"})
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any, Callable, Optional

from apicreator.config import (
    Configuration,
    default_base_url,
    normalize_overrides,
    resolve_config,
)
from apicreator.headers import HeaderStore
from apicreator.models import RouteDescriptor
from apicreator.response import default_parse_response, maybe_await
from apicreator.shaper import QueryEncoder, shape_request, to_query_string
from apicreator.transport import HttpxTransport

logger = logging.getLogger(__name__)


class Client:
    """Read-only collection of generated API methods.

    Methods are reachable as attributes (``client.find_by_id``) or items
    (``client["findById"]``), which covers route names that are not valid
    Python identifiers.
    """

    def __init__(self, methods: Mapping[str, Callable[..., Any]]) -> None:
        self._methods = dict(methods)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("__") or name == "_methods":
            raise AttributeError(name)
        try:
            return self._methods[name]
        except KeyError:
            raise AttributeError(f"Client has no method '{name}'") from None

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._methods[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __dir__(self) -> list[str]:
        return sorted(set(object.__dir__(self)) | set(self._methods))

    def __repr__(self) -> str:
        return f"Client({', '.join(self._methods)})"


class ApiCreator:
    """Factory for API clients sharing one configuration and header store.

    Args:
        base_url: Prefix for every route path.  May carry a query string,
            which is kept on every request.  Defaults to
            ``$APICREATOR_BASE_URL`` or ``"/"``.
        fetch: Transport callable ``(url, options)``.  Defaults to a lazily
            created :class:`~apicreator.transport.HttpxTransport`.
        headers: Headers merged over ``Accept`` / ``Content-Type``
            ``application/json``.
        parse_response: Turns the transport's response into a result.
            Defaults to :func:`~apicreator.response.default_parse_response`.
        transform_request: Rewrites call parameters before shaping.
        transform_response: Rewrites successful parsed results.
        query_encoder: Serialises leftover GET parameters.  Defaults to
            :func:`~apicreator.shaper.to_query_string`.

    Raises:
        ConfigurationError: If a hook or ``fetch`` is given but not callable.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        fetch: Optional[Callable[..., Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
        parse_response: Optional[Callable[..., Any]] = None,
        transform_request: Optional[Callable[..., Any]] = None,
        transform_response: Optional[Callable[..., Any]] = None,
        query_encoder: Optional[QueryEncoder] = None,
    ) -> None:
        config = Configuration(
            base_url=str(base_url) if base_url is not None else default_base_url(),
            transport=fetch,
            headers=HeaderStore.with_defaults(headers),
            parse_response=parse_response if parse_response is not None else default_parse_response,
            transform_request=transform_request,
            transform_response=transform_response,
            query_encoder=query_encoder if query_encoder is not None else to_query_string,
        )
        self._config = config.validate()
        self._default_transport: Optional[HttpxTransport] = None

    @classmethod
    def from_config(cls, config: Configuration) -> ApiCreator:
        """Build a creator around an existing configuration (validated first)."""
        creator = cls.__new__(cls)
        creator._config = config.validate()
        creator._default_transport = None
        return creator

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ApiCreator:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the default transport, if one was created."""
        if self._default_transport is not None:
            await self._default_transport.aclose()
            self._default_transport = None

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> Configuration:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def headers(self) -> HeaderStore:
        """The live header store shared by every client of this creator."""
        return self._config.headers

    def get_header(self, name: str) -> Any:
        return self._config.headers.get(name)

    def add_header(self, name: str, value: Any) -> None:
        """Set a header on every subsequent request of every client."""
        self._config.headers.add(name, value)

    def remove_header(self, name: str) -> None:
        self._config.headers.remove(name)

    def clone(self, **overrides: Any) -> ApiCreator:
        """Return a new creator with *overrides* applied to this configuration.

        The clone owns a copy of the header store, so header changes on one
        creator never reach the other.  ``headers`` overrides are merged
        over the copied store.  The default transport, once created, is
        shared with the clone so both use one connection pool.

        Raises:
            ConfigurationError: For unknown options or non-callable hooks.
        """
        config = self._config.with_overrides(overrides)
        if config.headers is self._config.headers:
            config.headers = config.headers.copy()
        clone = type(self).from_config(config)
        clone._default_transport = self._default_transport
        return clone

    # ------------------------------------------------------------------ #
    # Client generation
    # ------------------------------------------------------------------ #

    def create(self, routes: Mapping[str, Any], **overrides: Any) -> Client:
        """Generate a client with one method per entry of *routes*.

        Args:
            routes: Method name to route: a
                :class:`~apicreator.models.RouteDescriptor`, a mapping of
                its fields, or the ``"METHOD /path"`` shorthand.
            **overrides: Per-client values for ``base_url``, ``fetch``,
                ``headers``, ``parse_response``, ``transform_request``,
                ``transform_response`` and ``query_encoder``.

        Returns:
            A :class:`Client`.

        Raises:
            ConfigurationError: For unknown options or non-callable hooks.
        """
        changes = normalize_overrides(overrides)
        extra_headers = changes.pop("headers", None)
        client_config = self._config.with_overrides(changes).validate()

        methods: dict[str, Callable[..., Any]] = {}
        for name, spec in routes.items():
            route = RouteDescriptor.from_value(spec)
            effective = resolve_config(route, client_config, self._config)
            methods[name] = self._bind(name, route, effective, extra_headers)
        return Client(methods)

    def _bind(
        self,
        name: str,
        route: RouteDescriptor,
        config: Configuration,
        extra_headers: Optional[Mapping[str, Any]],
    ) -> Callable[..., Any]:
        async def method(params: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> Any:
            raw_params = {**(params or {}), **kwargs}
            call_params: Mapping[str, Any] = raw_params
            if config.transform_request is not None:
                call_params = await maybe_await(config.transform_request(dict(raw_params))) or {}
            request = shape_request(
                call_params,
                route,
                config.base_url,
                None,
                config.query_encoder,
            )

            headers = config.headers.merged(extra_headers).merged(
                _route_headers(route, request.body, raw_params)
            )
            body: Any = request.body
            content_type = str(headers.get("content-type") or "")
            if "json" in content_type and body is not None:
                body = json.dumps(body, separators=(",", ":"))

            http_method = request.method.upper()
            transport = config.transport or self._get_default_transport()
            logger.debug("%s %s", http_method, request.url)
            response = await maybe_await(
                transport(
                    request.url,
                    {"method": http_method, "headers": headers.to_dict(), "body": body},
                )
            )

            result = await maybe_await(config.parse_response(response))
            if config.transform_response is not None:
                result = await maybe_await(config.transform_response(result))
            return result

        method.__name__ = name
        method.__qualname__ = f"Client.{name}"
        method.__doc__ = f"{route.method.value.upper()} {route.path or '/'}"
        return method

    def _get_default_transport(self) -> HttpxTransport:
        if self._default_transport is None:
            self._default_transport = HttpxTransport()
        return self._default_transport


def _route_headers(
    route: RouteDescriptor,
    body: Optional[dict[str, Any]],
    params: dict[str, Any],
) -> Optional[Mapping[str, Any]]:
    if callable(route.headers):
        return route.headers(body=body, params=params)
    return route.headers
