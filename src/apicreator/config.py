"""Creator configuration, per-field precedence resolution, and environment defaults.

A :class:`Configuration` is built once per
:class:`~apicreator.creator.ApiCreator`.  Each generated method resolves
its effective settings field by field, highest precedence first:

1. The route descriptor (``transform_request``, ``transform_response``,
   ``parse_response``).
2. Keyword overrides passed to ``create()``.
3. The creator's own configuration.

Environment variables supply defaults the caller did not set:

* ``APICREATOR_BASE_URL`` -- base URL when none is given (else ``"/"``).
* ``APICREATOR_TIMEOUT`` -- timeout in seconds for the default transport.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from apicreator.exceptions import ConfigurationError
from apicreator.headers import HeaderStore
from apicreator.models import RequestConfig, RouteDescriptor
from apicreator.response import default_parse_response
from apicreator.shaper import to_query_string

ENV_BASE_URL = "APICREATOR_BASE_URL"
ENV_TIMEOUT = "APICREATOR_TIMEOUT"

# Alternative keyword names accepted by ApiCreator, create() and clone().
_FIELD_ALIASES = {
    "fetch": "transport",
    "to_query_string": "query_encoder",
}

# Fields that must be callable whenever they are set.
_CALLABLE_FIELDS = (
    "transport",
    "parse_response",
    "transform_request",
    "transform_response",
    "query_encoder",
)
_REQUIRED_FIELDS = ("parse_response", "query_encoder")


def default_base_url() -> str:
    """Return ``$APICREATOR_BASE_URL`` or ``"/"``."""
    return os.environ.get(ENV_BASE_URL) or "/"


def default_request_config() -> RequestConfig:
    """Build the default transport settings, honouring ``$APICREATOR_TIMEOUT``.

    Raises:
        ConfigurationError: If the variable is set but is not a number.
    """
    raw = os.environ.get(ENV_TIMEOUT)
    if not raw:
        return RequestConfig()
    try:
        return RequestConfig(timeout=float(raw))
    except ValueError as exc:
        raise ConfigurationError(
            f"Environment variable '{ENV_TIMEOUT}' is not a number: {raw!r}"
        ) from exc


@dataclass
class Configuration:
    """Effective settings used to shape, send and parse requests.

    ``transport`` may be ``None``, meaning the creator's default
    :class:`~apicreator.transport.HttpxTransport`.  ``headers`` is shared by
    reference with every client built from the owning creator.
    """

    base_url: str = field(default_factory=default_base_url)
    transport: Optional[Callable[..., Any]] = None
    headers: HeaderStore = field(default_factory=HeaderStore.with_defaults)
    parse_response: Callable[..., Any] = default_parse_response
    transform_request: Optional[Callable[..., Any]] = None
    transform_response: Optional[Callable[..., Any]] = None
    query_encoder: Callable[..., str] = to_query_string

    def validate(self) -> Configuration:
        """Raise :class:`ConfigurationError` for any set, non-callable hook.

        Returns:
            ``self``, for chaining.
        """
        for name in _CALLABLE_FIELDS:
            value = getattr(self, name)
            if value is None and name in _REQUIRED_FIELDS:
                raise ConfigurationError(f"'{name}' is not callable")
            if value is not None and not callable(value):
                raise ConfigurationError(f"'{name}' is not callable")
        return self

    def with_overrides(self, overrides: dict[str, Any]) -> Configuration:
        """Return a copy with every non-``None`` override applied.

        The header store is carried over by reference unless a ``headers``
        override is given, in which case the result holds a new store with
        the override merged over this one.
        """
        changes = {k: v for k, v in normalize_overrides(overrides).items() if v is not None}
        if "headers" in changes and not isinstance(changes["headers"], HeaderStore):
            changes["headers"] = self.headers.merged(changes["headers"])
        if "base_url" in changes:
            changes["base_url"] = str(changes["base_url"])
        return dataclasses.replace(self, **changes)


def normalize_overrides(overrides: dict[str, Any]) -> dict[str, Any]:
    """Map keyword aliases to field names and reject unknown keys.

    Raises:
        ConfigurationError: For a keyword that names no configuration field.
    """
    known = {f.name for f in dataclasses.fields(Configuration)}
    result: dict[str, Any] = {}
    for key, value in overrides.items():
        name = _FIELD_ALIASES.get(key, key)
        if name not in known:
            raise ConfigurationError(f"Unknown configuration option '{key}'")
        result[name] = value
    return result


def resolve(route_value: Any, override_value: Any, default_value: Any) -> Any:
    """Return the highest-precedence value that is set.

    Precedence is route > override > default; ``None`` means "not set".
    """
    if route_value is not None:
        return route_value
    if override_value is not None:
        return override_value
    return default_value


def resolve_config(
    route: RouteDescriptor,
    overrides: Configuration,
    defaults: Configuration,
) -> Configuration:
    """Resolve the effective configuration of one route, field by field.

    Args:
        route: The route descriptor; supplies the hook fields it declares.
        overrides: Configuration built from the ``create()`` keyword
            arguments on top of *defaults*.
        defaults: The creator's configuration.

    Returns:
        A new :class:`Configuration`.  Route-level ``headers`` are not part
        of it; they are merged per call since they may depend on the body.
    """
    return Configuration(
        base_url=resolve(None, overrides.base_url, defaults.base_url),
        transport=resolve(None, overrides.transport, defaults.transport),
        headers=overrides.headers,
        parse_response=resolve(route.parse_response, overrides.parse_response, defaults.parse_response),
        transform_request=resolve(
            route.transform_request, overrides.transform_request, defaults.transform_request
        ),
        transform_response=resolve(
            route.transform_response, overrides.transform_response, defaults.transform_response
        ),
        query_encoder=resolve(None, overrides.query_encoder, defaults.query_encoder),
    )
