"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

if TYPE_CHECKING:
    from ivy_router.context import Context

# A chain member: raising is the error channel
Handler = Callable[["Context"], Awaitable[None]]

# Invoked once per request when a chain member raises
ErrorHandler = Callable[["Context", Exception], Awaitable[None]]

# Starlette-style request/response endpoint accepted by Router.handle_func
Endpoint = Callable[[Request], Awaitable[Response] | Response]

JSONEncoder = Callable[[Any], bytes]
JSONDecoder = Callable[[bytes | str], Any]

__all__ = [
    "ASGIApp",
    "Endpoint",
    "ErrorHandler",
    "Handler",
    "JSONDecoder",
    "JSONEncoder",
    "Message",
    "Receive",
    "Scope",
    "Send",
]
