"""Header-bag implementations.

``ScopeHeaders`` edits an ASGI scope in place through Starlette's
``MutableHeaders`` so the next app sees the rewritten headers.
``DictHeaders`` is a plain in-memory multi-map for callers outside an
ASGI pipeline.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from starlette.datastructures import MutableHeaders
from starlette.types import Scope


class ScopeHeaders:
    """Header bag backed by ``scope["headers"]``."""

    def __init__(self, scope: Scope) -> None:
        self._headers = MutableHeaders(scope=scope)

    def get_all(self, name: str) -> list[str]:
        return self._headers.getlist(name)

    def set(self, name: str, value: str) -> None:
        self._headers[name] = value

    def delete(self, name: str) -> None:
        if name in self._headers:
            del self._headers[name]


class DictHeaders:
    """Case-insensitive ordered multi-map of header values."""

    def __init__(
        self,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._items: list[tuple[str, str]] = []
        if headers is None:
            return
        items = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in items:
            self._items.append((name, value))

    def get_all(self, name: str) -> list[str]:
        key = name.lower()
        return [value for item, value in self._items if item.lower() == key]

    def get(self, name: str, default: str | None = None) -> str | None:
        values = self.get_all(name)
        return values[0] if values else default

    def set(self, name: str, value: str) -> None:
        self.delete(name)
        self._items.append((name, value))

    def delete(self, name: str) -> None:
        key = name.lower()
        self._items = [
            (item, value) for item, value in self._items if item.lower() != key
        ]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self.get_all(name))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DictHeaders):
            return NotImplemented
        return _normalised(self._items) == _normalised(other._items)

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def __repr__(self) -> str:
        return f"DictHeaders({self._items!r})"


def _normalised(items: list[tuple[str, str]]) -> list[tuple[str, str]]:
    normalised = [(name.lower(), value) for name, value in items]
    return sorted(normalised, key=lambda item: item[0])
