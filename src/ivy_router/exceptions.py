"""RouterException hierarchy and JSON error formatting."""

from __future__ import annotations

from typing import Any


class RouterException(Exception):
    """Base for all ivy_router exceptions."""


class HTTPError(RouterException):
    """Handler error that carries its own HTTP status code and detail."""

    def __init__(
        self,
        detail: str,
        *,
        status_code: int = 500,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.headers = headers or {}


class BadRequest(HTTPError):
    """Malformed or incomplete request (400)."""

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(detail, status_code=400)


class NotFound(HTTPError):  # noqa: N818
    """No route matches the request path (404)."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(detail, status_code=404)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """Path matches but not for this method (405)."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            detail or "Method Not Allowed",
            status_code=405,
            headers={"Allow": allow_value},
        )
        self.allowed = allowed


class FatalError(RouterException):
    """Broken internal invariant.

    Dispatch never routes these to an error handler; they abort the request.
    """


class StateCorruptionError(FatalError):
    """The scope's store slot holds something other than a KeyValueStore."""


def error_messages(exc: BaseException) -> list[str]:
    """Flatten ``exc`` into leaf messages, unwrapping exception groups."""
    if isinstance(exc, BaseExceptionGroup):
        messages: list[str] = []
        for inner in exc.exceptions:
            messages.extend(error_messages(inner))
        return messages
    if isinstance(exc, HTTPError):
        return [exc.detail]
    return [str(exc)]


def error_format_json(exc: BaseException) -> dict[str, Any]:
    """Return ``{"errors": [...]}`` for ``exc``."""
    return {"errors": error_messages(exc)}
