"""KeyValueStore — request-scoped state shared between handlers."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any


class KeyValueStore:
    """Per-request key/value container.

    Handlers in one chain (and chains on both sides of a mount) share the
    same instance. Keys and value types are agreed on by the callers; the
    store does not check them. Not synchronized.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[Hashable, Any] | None = None

    def set(self, key: Hashable, value: Any) -> None:
        if self._data is None:
            self._data = {}
        self._data[key] = value

    def get(self, key: Hashable, default: Any = None) -> Any:
        if self._data is None:
            return default
        return self._data.get(key, default)

    def lookup(self, key: Hashable) -> tuple[Any, bool]:
        """Return ``(value, found)``; ``found`` is False for absent keys."""
        if self._data is None or key not in self._data:
            return None, False
        return self._data[key], True

    def all(self) -> dict[Hashable, Any]:
        """Snapshot of every stored pair."""
        return dict(self._data or {})

    def __contains__(self, key: object) -> bool:
        return self._data is not None and key in self._data

    def __len__(self) -> int:
        return len(self._data or ())

    def __repr__(self) -> str:
        return f"KeyValueStore({self._data or {}!r})"
