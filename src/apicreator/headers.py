"""Case-insensitive header mapping.

:class:`HeaderStore` keeps at most one entry per case-insensitive name.
The casing used on first insertion is the one sent on the wire; later
writes under a differently-cased name overwrite the value but keep the
stored casing.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any, Optional

DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class HeaderStore(MutableMapping):
    """Mutable mapping of header name to value with case-insensitive keys.

    Args:
        headers: Initial entries, inserted in order.

    Example::

        store = HeaderStore.with_defaults({"x-access-token": "123"})
        store.get("ACCEPT")          # "application/json"
        store.add("content-type", "text/plain")
        list(store)                  # ["Accept", "Content-Type", "x-access-token"]
    """

    def __init__(self, headers: Optional[Mapping[str, Any]] = None) -> None:
        # lower-cased name -> (stored name, value)
        self._entries: dict[str, tuple[str, Any]] = {}
        if headers:
            for name, value in headers.items():
                self.add(name, value)

    @classmethod
    def with_defaults(cls, overrides: Optional[Mapping[str, Any]] = None) -> HeaderStore:
        """Build a store seeded with :data:`DEFAULT_HEADERS` and *overrides* on top."""
        store = cls(DEFAULT_HEADERS)
        if overrides:
            store.update(overrides)
        return store

    # ------------------------------------------------------------------ #
    # Header API
    # ------------------------------------------------------------------ #

    def get(self, name: str, default: Any = None) -> Any:
        entry = self._entries.get(name.lower())
        return default if entry is None else entry[1]

    def add(self, name: str, value: Any) -> None:
        """Set *name* to *value*, keeping the stored casing if it already exists."""
        key = name.lower()
        entry = self._entries.get(key)
        self._entries[key] = (entry[0] if entry else name, value)

    def remove(self, name: str) -> None:
        """Delete *name* if present; absent names are ignored."""
        self._entries.pop(name.lower(), None)

    def copy(self) -> HeaderStore:
        return HeaderStore(self)

    def merged(self, other: Optional[Mapping[str, Any]]) -> HeaderStore:
        """Return a new store with *other* applied over a copy of this one."""
        result = self.copy()
        if other:
            result.update(other)
        return result

    def to_dict(self) -> dict[str, str]:
        """Return the headers to send, skipping entries valued ``None`` or ``""``."""
        return {
            name: value
            for name, value in self._entries.values()
            if value is not None and value != ""
        }

    # ------------------------------------------------------------------ #
    # MutableMapping protocol
    # ------------------------------------------------------------------ #

    def __getitem__(self, name: str) -> Any:
        return self._entries[name.lower()][1]

    def __setitem__(self, name: str, value: Any) -> None:
        self.add(name, value)

    def __delitem__(self, name: str) -> None:
        del self._entries[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (stored for stored, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HeaderStore({dict(self.items())!r})"
