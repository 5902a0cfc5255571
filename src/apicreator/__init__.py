"""apicreator -- declarative async HTTP API clients.

Describe an API as a mapping of method names to routes and get back an
object whose methods each perform one HTTP call::

    from apicreator import ApiCreator

    users = ApiCreator(base_url="https://api.example.com/users")
    client = users.create({
        "create": "POST /",
        "update_by_id": "PUT /:id",
        "find": "/",
        "find_by_id": "GET /:id",
    })

    await client.find({"where": {"email": "a@b.c"}})   # GET /users?where=...
    await client.update_by_id({"id": 7, "email": "x@y.com"})  # PUT /users/7

Path tokens (``:id``) are filled from the call's parameters; whatever is
left goes to the query string for GET and to the JSON body otherwise.

Modules:
    creator: :class:`ApiCreator` and the generated :class:`Client`.
    shaper: Pure request shaping (URL, method, body).
    headers: Case-insensitive :class:`HeaderStore`.
    config: Configuration record and per-field precedence resolution.
    response: Default response parser and fetch-style response wrapper.
    transport: Default httpx-backed transport.
    defaults: Process-wide default creator.
    exceptions: Exception hierarchy.
"""

from apicreator.creator import ApiCreator, Client
from apicreator.exceptions import ApiCreatorError, ConfigurationError, RemoteRejection
from apicreator.headers import HeaderStore
from apicreator.models import HTTPMethod, RequestConfig, RequestTriple, RouteDescriptor
from apicreator.response import FetchResponse, default_parse_response
from apicreator.shaper import shape_request, to_query_string
from apicreator.transport import HttpxTransport

__version__ = "0.1.0"

__all__ = [
    "ApiCreator",
    "ApiCreatorError",
    "Client",
    "ConfigurationError",
    "FetchResponse",
    "HTTPMethod",
    "HeaderStore",
    "HttpxTransport",
    "RemoteRejection",
    "RequestConfig",
    "RequestTriple",
    "RouteDescriptor",
    "default_parse_response",
    "shape_request",
    "to_query_string",
]
