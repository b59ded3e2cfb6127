"""Shared pytest fixtures for ivy-router tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from starlette.requests import Request
from starlette.types import Message, Scope

from ivy_router.context import Context


class SentMessages(list[Message]):
    """ASGI ``send`` stand-in that records every message."""

    async def __call__(self, message: Message) -> None:
        self.append(message)

    @property
    def status(self) -> int | None:
        for message in self:
            if message["type"] == "http.response.start":
                return int(message["status"])
        return None

    @property
    def headers(self) -> dict[str, str]:
        for message in self:
            if message["type"] == "http.response.start":
                return {k.decode(): v.decode() for k, v in message["headers"]}
        return {}

    @property
    def body(self) -> bytes:
        return b"".join(
            m.get("body", b"") for m in self if m["type"] == "http.response.body"
        )

    @property
    def completed(self) -> bool:
        return any(
            m["type"] == "http.response.body" and not m.get("more_body", False)
            for m in self
        )


@pytest.fixture
def make_scope() -> Any:
    """Factory for minimal ASGI http scopes."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        **extra: Any,
    ) -> Scope:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "raw_path": path.encode(),
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "server": ("test", 80),
            "scheme": "http",
        }
        scope.update(extra)
        return scope

    return _make


@pytest.fixture
def make_request(make_scope: Any) -> Any:
    """Factory for Starlette Request objects."""

    def _make(**kwargs: Any) -> Request:
        return Request(make_scope(**kwargs))

    return _make


@pytest.fixture
def sent() -> SentMessages:
    return SentMessages()


@pytest.fixture
def make_receive() -> Any:
    """Factory for ASGI ``receive`` callables.

    The body goes out once; later calls block like a client that stays
    connected, until the awaiting task is cancelled.
    """

    def _make(body: bytes = b"") -> Any:
        delivered = False
        connected = asyncio.Event()

        async def receive() -> Message:
            nonlocal delivered
            if not delivered:
                delivered = True
                return {"type": "http.request", "body": body, "more_body": False}
            await connected.wait()
            return {"type": "http.disconnect"}

        return receive

    return _make


@pytest.fixture
def make_context(make_scope: Any, make_receive: Any, sent: SentMessages) -> Any:
    """Factory for Contexts whose output lands in the ``sent`` fixture."""

    def _make(body: bytes = b"", **kwargs: Any) -> Context:
        return Context(make_scope(**kwargs), make_receive(body), sent)

    return _make
