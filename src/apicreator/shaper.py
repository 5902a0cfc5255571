"""Request shaping: turn a flat parameter mapping into a concrete request.

:func:`shape_request` is a pure function.  Given the call's parameters, a
:class:`~apicreator.models.RouteDescriptor` and the effective base URL, it
produces a :class:`~apicreator.models.RequestTriple`:

1. The optional ``transform_request`` hook rewrites the parameters.
2. The base URL's own query string is set aside.
3. Base URL and route path are joined with exactly one ``/``.
4. ``:name`` tokens are substituted from the parameters, longest name
   first, so ``:id`` never eats the front of ``:idOnceAgain``.
5. The base query string is restored.
6. Leftover parameters go to the query string for GET, or become the body
   for every other verb.
7. A fragment on the base URL is moved back to the very end.

Example::

    shape_request(
        {"id": "123", "email": "x@y.com"},
        RouteDescriptor.parse("PUT /:id"),
        "http://api/users/",
    )
    # RequestTriple(url="http://api/users/123", method="put",
    #               body={"email": "x@y.com"})
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, Callable, Optional
from urllib.parse import quote, urlsplit

from apicreator.models import HTTPMethod, RequestTriple, RouteDescriptor

QueryEncoder = Callable[[Mapping[str, Any]], str]

# A token starts with a letter so that ports ("host:8080") are left alone.
PATH_PARAM_PATTERN = re.compile(r":([a-z][a-z0-9-]*)", re.IGNORECASE)

# Characters encodeURIComponent leaves untouched, beyond ``quote``'s own.
_URI_COMPONENT_SAFE = "!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode *value* as a single URI component."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def to_query_string(params: Mapping[str, Any]) -> str:
    """Serialise *params* as ``key=value`` pairs joined by ``&``.

    Non-string values are JSON-encoded first, so nested objects survive as
    ``where=%7B%22email%22...%7D``.
    """
    parts = []
    for key, value in params.items():
        if not isinstance(value, str):
            value = json.dumps(value, separators=(",", ":"))
        parts.append(f"{encode_uri_component(str(key))}={encode_uri_component(value)}")
    return "&".join(parts)


def split_base_query(base_url: str) -> tuple[str, str]:
    """Split *base_url* into ``(url_without_query, "?query")``.

    Absolute URLs are parsed properly, so a fragment is not mistaken for
    part of the query.  Anything else falls back to the text from the first
    literal ``?``.
    """
    parts = urlsplit(base_url)
    if parts.scheme and parts.netloc:
        search = f"?{parts.query}" if parts.query else ""
    else:
        idx = base_url.find("?")
        search = base_url[idx:] if idx != -1 else ""
    if not search:
        return base_url, ""
    return base_url.replace(search, "", 1), search


def split_fragment(base_url: str) -> tuple[str, str]:
    """Split *base_url* into ``(url_without_fragment, "#fragment")``."""
    idx = base_url.find("#")
    if idx == -1:
        return base_url, ""
    return base_url[:idx], base_url[idx:]


def join_path(base_url: str, path: str) -> str:
    """Append *path* to *base_url* with exactly one separating slash.

    An empty or ``/`` path leaves the (trailing-slash trimmed) base as is.
    """
    url = base_url[:-1] if base_url.endswith("/") else base_url
    if path and path != "/":
        url += path if path.startswith("/") else "/" + path
    return url


def find_path_params(url: str) -> list[str]:
    """Return the distinct ``:name`` tokens of *url* in order of appearance."""
    names: list[str] = []
    for match in PATH_PARAM_PATTERN.finditer(url):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


def substitute_path_params(url: str, names: list[str], params: Mapping[str, Any]) -> str:
    """Replace each ``:name`` token in *url* with ``str(params.get(name))``.

    Longer names are substituted first.  A missing parameter renders as
    ``None`` in the URL; it is not reported.
    """
    for name in sorted(names, key=len, reverse=True):
        url = url.replace(f":{name}", str(params.get(name)))
    return url


def shape_request(
    params: Optional[Mapping[str, Any]],
    route: RouteDescriptor,
    base_url: str,
    transform_request: Optional[Callable[..., Any]] = None,
    query_encoder: QueryEncoder = to_query_string,
) -> RequestTriple:
    """Build the ``{url, method, body}`` triple for one call.

    Args:
        params: The flat parameter mapping passed to the generated method.
        route: The route being called.
        base_url: Effective base URL; may carry its own query string.
        transform_request: Optional hook applied to the parameters before
            anything else.  Its return value replaces them.
        query_encoder: Serialises leftover GET parameters.

    Returns:
        A fresh :class:`~apicreator.models.RequestTriple`.
    """
    input_params: Mapping[str, Any] = dict(params or {})
    if transform_request is not None:
        input_params = transform_request(input_params) or {}

    base, fragment = split_fragment(base_url)
    base, base_search = split_base_query(base)
    url = join_path(base, route.path)

    path_params = find_path_params(url)
    url = substitute_path_params(url, path_params, input_params)
    url += base_search

    remaining = {k: v for k, v in input_params.items() if k not in path_params}
    is_get = route.method is HTTPMethod.GET

    if is_get and remaining:
        url += ("&" if base_search else "?") + query_encoder(remaining)
    url += fragment

    return RequestTriple(
        url=url,
        method=route.method.value,
        body=remaining if remaining and not is_get else None,
    )
