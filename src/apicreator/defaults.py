"""Process-wide default :class:`~apicreator.creator.ApiCreator`.

Applications that talk to a single API can configure one creator at
startup and build clients from it anywhere::

    from apicreator import defaults

    defaults.set_base_url("https://api.example.com")
    defaults.add_header("x-access-token", token)
    users = defaults.create_api({"find_by_id": "GET /users/:id"})

The default creator is built lazily on first use.  :func:`set_base_url`
and :func:`set_fetch` replace it with a reconfigured clone, so clients
created earlier keep their old settings; header changes go to the live
default creator.  Test suites call :func:`reset_creator` between tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional

from apicreator.creator import ApiCreator, Client

_creator: Optional[ApiCreator] = None


def get_creator() -> ApiCreator:
    """Return the default creator, creating it on first use."""
    global _creator
    if _creator is None:
        _creator = ApiCreator()
    return _creator


def set_creator(creator: ApiCreator) -> None:
    """Install *creator* as the process-wide default."""
    global _creator
    _creator = creator


def reset_creator() -> None:
    """Drop the default creator; the next :func:`get_creator` builds a fresh one.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _creator
    _creator = None


def create_api(routes: Mapping[str, Any], **overrides: Any) -> Client:
    """Build a client from the default creator.  See :meth:`ApiCreator.create`."""
    return get_creator().create(routes, **overrides)


def set_base_url(base_url: str) -> None:
    _replace_with_clone(base_url=base_url)


def set_fetch(fetch: Callable[..., Any]) -> None:
    _replace_with_clone(fetch=fetch)


def _replace_with_clone(**overrides: Any) -> None:
    # The clone inherits the default transport; the replaced creator lets go
    # of it so the pool stays reachable only through the live default.
    previous = get_creator()
    set_creator(previous.clone(**overrides))
    previous._default_transport = None


def add_header(name: str, value: Any) -> None:
    get_creator().add_header(name, value)


def remove_header(name: str) -> None:
    get_creator().remove_header(name)


def get_header(name: str) -> Any:
    return get_creator().get_header(name)
