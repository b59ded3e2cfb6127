"""request_logger — logs each request with its final status and duration."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ivy_router._types import Handler
from ivy_router.context import Context
from ivy_router.exceptions import HTTPError
from ivy_router.writer import StatusRecorder


def request_logger(
    *,
    logger: logging.Logger | None = None,
    show_query: bool = True,
    route_filter: Callable[[str], bool] | None = None,
) -> Handler:
    """Middleware logging ``❯❯ METHOD route`` on entry and
    ``❮❮ STATUS METHOD route took N.NNs`` on exit.

    ``route_filter`` returning False skips logging for that path.
    """
    log = logger or logging.getLogger("ivy_router.access")

    async def middleware(ctx: Context) -> None:
        route = ctx.url.path
        if route_filter is not None and not route_filter(route):
            await ctx.next()
            return

        if show_query and ctx.url.query:
            route = f"{route}?{ctx.url.query}"

        recorder = StatusRecorder(ctx.response_writer)
        ctx.set_response_writer(recorder)

        extra = {"request_id": ctx.request_id} if ctx.request_id else {}
        suffix = f" request_id={ctx.request_id}" if ctx.request_id else ""

        start = time.perf_counter()
        log.debug("❯❯ %s %s%s", ctx.method, route, suffix, extra=extra)
        status: int | None = None
        try:
            await ctx.next()
            status = recorder.status_code or 200
        except HTTPError as exc:
            status = exc.status_code
            raise
        except Exception:
            status = 500
            raise
        finally:
            log.info(
                "❮❮ %s %s %s took %.2fs%s",
                status if status is not None else "-",
                ctx.method,
                route,
                time.perf_counter() - start,
                suffix,
                extra=extra,
            )

    return middleware
