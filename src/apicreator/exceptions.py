"""Exception hierarchy for apicreator.

All exceptions raised by the package itself inherit from
:class:`ApiCreatorError`.  Failures raised by the transport (for the
default transport, any :class:`httpx.HTTPError`) are *not* wrapped: they
reach the caller of a generated method unchanged.

Subclass hierarchy::

    ApiCreatorError
    +-- ConfigurationError   (bad creator configuration, raised eagerly)
    +-- RemoteRejection      (HTTP status >= 400 under the default parser)
"""

from __future__ import annotations

import json
from typing import Any


class ApiCreatorError(Exception):
    """Base exception for all apicreator errors."""


class ConfigurationError(ApiCreatorError):
    """Raised when a creator is built with a hook or transport that is not callable.

    Raised synchronously from :class:`~apicreator.creator.ApiCreator`
    construction (and :meth:`~apicreator.creator.ApiCreator.clone`), so no
    client is ever produced from an invalid configuration.
    """


class RemoteRejection(ApiCreatorError):
    """Raised by the default response parser for responses with status >= 400.

    The parsed JSON error body is kept as-is on :attr:`payload`; it is not
    annotated with the status code.  Response transforms are never applied
    to it.

    Args:
        payload: The decoded JSON body of the error response.
    """

    def __init__(self, payload: Any):
        super().__init__(_describe(payload))
        self.payload = payload


def _describe(payload: Any) -> str:
    try:
        return json.dumps(payload, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(payload)
