"""kv_dependency() — share a Router's KeyValueStore with FastAPI endpoints."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Request

from ivy_router.kv import KeyValueStore
from ivy_router.metadata import KV_SCOPE_KEY, restore_store


def kv_dependency() -> Callable[[Request], KeyValueStore]:
    """Return a FastAPI-compatible dependency yielding the request's store.

    When the FastAPI app is mounted under a Router, this is the store the
    parent's middlewares wrote to. Otherwise a fresh store is attached to
    the request scope so every dependency in the request sees the same one.
    """

    def dependency(request: Request) -> KeyValueStore:
        store = restore_store(request.scope)
        if store is None:
            store = KeyValueStore()
            request.scope[KV_SCOPE_KEY] = store
        return store

    return dependency
