"""RequestMetadata — values carried on the ASGI scope across app boundaries."""

from __future__ import annotations

from typing import Any

from starlette.types import Scope

from ivy_router.exceptions import StateCorruptionError
from ivy_router.kv import KeyValueStore

KV_SCOPE_KEY = "ivy_router.kv"


class RequestMetadata:
    """Opaque carrier over a scope.

    ``with_value`` never mutates the wrapped scope; it returns a carrier over
    a shallow copy, so the original request stays untouched.
    """

    __slots__ = ("_scope",)

    def __init__(self, scope: Scope) -> None:
        self._scope = scope

    @property
    def scope(self) -> Scope:
        return self._scope

    def value(self, key: str, default: Any = None) -> Any:
        return self._scope.get(key, default)

    def with_value(self, key: str, value: Any) -> RequestMetadata:
        return RequestMetadata({**self._scope, key: value})


def restore_store(scope: Scope) -> KeyValueStore | None:
    """Return the store carried by ``scope``, or None if there is none."""
    carried = RequestMetadata(scope).value(KV_SCOPE_KEY)
    if carried is None:
        return None
    if not isinstance(carried, KeyValueStore):
        raise StateCorruptionError(
            f"scope slot {KV_SCOPE_KEY!r} holds {type(carried).__name__}, "
            "expected KeyValueStore"
        )
    return carried
