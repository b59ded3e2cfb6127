"""Conversions between Handlers and plain ASGI apps."""

from __future__ import annotations

import inspect
import logging

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from ivy_router._types import Endpoint, ErrorHandler, Handler
from ivy_router.config import RouterConfig
from ivy_router.context import Context
from ivy_router.error_handlers import default_error_handler
from ivy_router.exceptions import FatalError, HTTPError

logger = logging.getLogger("ivy_router.dispatch")

# Catch-all parameter a mount registers under its prefix
MOUNT_PATH_PARAM = "ivy_mount_path"


async def serve(
    handler: Handler, ctx: Context, error_handler: ErrorHandler | None = None
) -> None:
    """Run ``handler`` and finalize the response.

    A raised exception reaches the error handler exactly once. Fatal errors
    and non-``Exception`` base exceptions (cancellation) propagate instead.
    An error handler that fails itself is logged and replaced by the default
    one, so nothing escapes to an enclosing router.
    """
    try:
        await handler(ctx)
    except FatalError:
        raise
    except Exception as exc:
        if not isinstance(exc, HTTPError):
            logger.error(
                "unhandled error on %s %s", ctx.method, ctx.url.path, exc_info=exc
            )
        await _handle_error(ctx, exc, error_handler or default_error_handler)
    await ctx.response_writer.finish()


async def _handle_error(
    ctx: Context, exc: Exception, error_handler: ErrorHandler
) -> None:
    try:
        await error_handler(ctx, exc)
    except FatalError:
        raise
    except Exception as failure:
        logger.error(
            "error handler failed on %s %s", ctx.method, ctx.url.path, exc_info=failure
        )
        if error_handler is not default_error_handler:
            await default_error_handler(ctx, exc)


def to_handler(app: ASGIApp) -> Handler:
    """Wrap an ASGI app as a chain member.

    The app receives the Context's scope, so it can rebuild a Context that
    shares the same KeyValueStore, and writes through the current writer,
    picking up headers set upstream. It has no error channel: once it
    returns, the member has succeeded.
    """

    async def handler(ctx: Context) -> None:
        await app(ctx.scope, ctx.receive, ctx.response_writer.relay)

    return handler


def to_asgi(
    handler: Handler,
    *,
    config: RouterConfig | None = None,
    error_handler: ErrorHandler | None = None,
) -> ASGIApp:
    """Expose a Handler (usually a Chain) as a plain ASGI app."""

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        ctx = Context(scope, receive, send, config=config)
        await serve(handler, ctx, error_handler)

    return app


def endpoint_to_asgi(endpoint: Endpoint) -> ASGIApp:
    """Turn a Starlette-style ``request -> Response`` function into an ASGI app.

    Sync endpoints run in Starlette's threadpool.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive, send)
        if inspect.iscoroutinefunction(endpoint):
            response = await endpoint(request)
        else:
            response = await run_in_threadpool(endpoint, request)
        await response(scope, receive, send)

    return app


def strip_prefix(prefix: str, app: ASGIApp) -> ASGIApp:
    """Forward to ``app`` with ``prefix`` removed from the path.

    The stripped prefix moves onto ``root_path`` and the mount's catch-all
    parameter is dropped from ``path_params``. Paths outside the prefix get
    a 404.
    """
    raw_prefix = prefix.encode("utf-8")

    async def stripped(scope: Scope, receive: Receive, send: Send) -> None:
        path: str = scope["path"]
        if not path.startswith(prefix):
            await PlainTextResponse("Not Found", status_code=404)(scope, receive, send)
            return

        child = {
            **scope,
            "path": path[len(prefix) :] or "/",
            "root_path": scope.get("root_path", "") + prefix,
            "path_params": {
                key: value
                for key, value in scope.get("path_params", {}).items()
                if key != MOUNT_PATH_PARAM
            },
        }
        raw_path = scope.get("raw_path")
        if raw_path and raw_path.startswith(raw_prefix):
            child["raw_path"] = raw_path[len(raw_prefix) :] or b"/"
        await app(child, receive, send)

    return stripped
