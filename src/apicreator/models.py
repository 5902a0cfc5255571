"""Pydantic models shared across apicreator modules.

* :class:`HTTPMethod` -- the verbs a route may declare.
* :class:`RouteDescriptor` -- one API method: path template, verb and
  optional per-route hooks.  Built from a shorthand string (``"PUT /:id"``),
  a mapping, or passed through as-is.
* :class:`RequestTriple` -- the ``{url, method, body}`` output of the
  request shaper.
* :class:`RequestConfig` -- settings for the default httpx transport.

Route descriptors accept both ``snake_case`` field names and the
``camelCase`` aliases (``transformRequest``, ``parseResponse`` ...) used by
route maps written for other clients.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


class HTTPMethod(str, enum.Enum):
    """HTTP verbs recognised in route descriptors.

    Anything else silently falls back to :attr:`GET`.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"

    @classmethod
    def coerce(cls, value: Any) -> HTTPMethod:
        """Map a case-insensitive verb to a member, defaulting to ``GET``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.GET


class RouteDescriptor(BaseModel):
    """Configuration for a single generated API method.

    Hook fields that are set but not callable are dropped with a warning,
    so the route inherits that field from the ``create()`` call or the
    creator instead.

    Example::

        RouteDescriptor(path="/:id", method="put")
        RouteDescriptor.parse("PUT /:id")
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = ""
    method: HTTPMethod = HTTPMethod.GET
    headers: Any = Field(
        default=None,
        description="Mapping of extra headers, or callable(body=..., params=...) returning one",
    )
    transform_request: Optional[Callable[..., Any]] = Field(
        default=None, alias="transformRequest"
    )
    transform_response: Optional[Callable[..., Any]] = Field(
        default=None, alias="transformResponse"
    )
    parse_response: Optional[Callable[..., Any]] = Field(
        default=None, alias="parseResponse"
    )

    @field_validator("path", mode="before")
    @classmethod
    def _path_or_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("method", mode="before")
    @classmethod
    def _known_verb(cls, value: Any) -> HTTPMethod:
        return HTTPMethod.coerce(value)

    @field_validator("headers", mode="before")
    @classmethod
    def _headers_shape(cls, value: Any) -> Any:
        if value is None or callable(value):
            return value
        if isinstance(value, Mapping):
            return dict(value)
        logger.warning("Ignoring route headers of type %s", type(value).__name__)
        return None

    @field_validator("transform_request", "transform_response", "parse_response", mode="before")
    @classmethod
    def _callable_or_none(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None and not callable(value):
            logger.warning("Ignoring non-callable route hook %r", info.field_name)
            return None
        return value

    @classmethod
    def parse(cls, spec: str) -> RouteDescriptor:
        """Parse the ``"METHOD /path"`` shorthand.

        A bare ``"/path"`` is a GET route; an unknown verb also means GET.
        A lone verb such as ``"POST"`` targets the base URL itself rather
        than a ``/POST`` path.
        """
        parts = spec.split()
        if not parts:
            return cls()
        if len(parts) == 1:
            if _is_verb(parts[0]):
                return cls(method=HTTPMethod.coerce(parts[0]))
            return cls(path=parts[0])
        return cls(method=HTTPMethod.coerce(parts[0]), path=parts[1])

    @classmethod
    def from_value(cls, value: Any) -> RouteDescriptor:
        """Normalise any accepted route form into a descriptor."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(f"Unsupported route descriptor: {value!r}")


def _is_verb(word: str) -> bool:
    return word.lower() in {m.value for m in HTTPMethod}


class RequestTriple(BaseModel):
    """The concrete request produced by :func:`~apicreator.shaper.shape_request`.

    ``method`` is always lower case; ``body`` is ``None`` whenever there are
    no parameters left after path substitution, or the verb is GET.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    method: str
    body: Optional[dict[str, Any]] = None


class RequestConfig(BaseModel):
    """Settings for the default :class:`~apicreator.transport.HttpxTransport`."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = True
