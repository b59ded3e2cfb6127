"""basic_auth — HTTP Basic authentication middleware."""

from __future__ import annotations

import base64
import binascii
import hmac
from collections.abc import Mapping

from ivy_router._types import Handler
from ivy_router.context import Context


def _parse_basic(header: str | None) -> tuple[str, str] | None:
    if not header:
        return None
    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def basic_auth(realm: str, credentials: Mapping[str, str]) -> Handler:
    """Reject requests without valid Basic credentials.

    Example::

        router.use(basic_auth("Restricted", {"admin": "secret"}))
    """

    async def middleware(ctx: Context) -> None:
        parsed = _parse_basic(ctx.headers.get("authorization"))
        if parsed is None:
            _reject(ctx, realm)
            return

        username, password = parsed
        expected = credentials.get(username)
        if expected is None or not hmac.compare_digest(
            password.encode("utf-8"), expected.encode("utf-8")
        ):
            _reject(ctx, realm)
            return

        await ctx.next()

    return middleware


def _reject(ctx: Context, realm: str) -> None:
    ctx.set_header("WWW-Authenticate", f'Basic realm="{realm}"')
    ctx.status(401)
