"""request_id — tags each request with a short identifier."""

from __future__ import annotations

import hashlib
import secrets
import struct
import time
from collections.abc import Callable

from ivy_router._types import Handler
from ivy_router.context import Context


def generate_request_id() -> str:
    """8 hex chars from sha1(microsecond timestamp + 8 random bytes)."""
    stamp = struct.pack("<q", time.time_ns() // 1000)
    digest = hashlib.sha1(stamp + secrets.token_bytes(8)).hexdigest()
    return digest[:8]


def request_id(generator: Callable[[], str] | None = None) -> Handler:
    """Assign a request id unless the client sent ``X-Request-ID``.

    The id is bound onto ``ctx.logger`` and echoed in the response.
    """
    generate = generator or generate_request_id

    async def middleware(ctx: Context) -> None:
        if not ctx.request_id:
            rid = generate()
            ctx.logger = ctx.logger.bind(request_id=rid)
            ctx.set_request_id(rid)
        await ctx.next()

    return middleware
