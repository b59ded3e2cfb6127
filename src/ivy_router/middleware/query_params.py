"""required_query_params — reject requests missing query parameters."""

from __future__ import annotations

from ivy_router._types import Handler
from ivy_router.context import Context
from ivy_router.exceptions import BadRequest


def required_query_params(*params: str) -> Handler:
    async def middleware(ctx: Context) -> None:
        for name in params:
            if name not in ctx.request.query_params:
                raise BadRequest(f"missing query-param {name!r}")
        await ctx.next()

    return middleware
