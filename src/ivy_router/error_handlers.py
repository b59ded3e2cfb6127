"""Built-in error handlers."""

from __future__ import annotations

import logging

from ivy_router.context import Context
from ivy_router.exceptions import HTTPError, error_format_json

logger = logging.getLogger("ivy_router.errors")


def _status_for(exc: Exception) -> int:
    if isinstance(exc, HTTPError):
        return exc.status_code
    return 500


def _prepare(ctx: Context, exc: Exception, content_type: str) -> bool:
    """Set status and headers; False when the response can't take a body."""
    writer = ctx.response_writer
    if writer.finished:
        logger.warning(
            "error after response completed on %s %s: %s",
            ctx.method,
            ctx.url.path,
            exc,
        )
        return False
    if not writer.started:
        writer.headers["content-type"] = content_type
        writer.headers["x-content-type-options"] = "nosniff"
        if isinstance(exc, HTTPError):
            for key, value in exc.headers.items():
                writer.headers[key] = value
        writer.write_header(_status_for(exc))
    return True


async def default_error_handler(ctx: Context, exc: Exception) -> None:
    """Plain-text body with the error message; 500 unless it's an HTTPError."""
    if not _prepare(ctx, exc, "text/plain; charset=utf-8"):
        return
    message = exc.detail if isinstance(exc, HTTPError) else str(exc)
    await ctx.response_writer.write(message.encode("utf-8"))


async def json_error_handler(ctx: Context, exc: Exception) -> None:
    """``{"errors": [...]}`` body; exception groups list every member."""
    if not _prepare(ctx, exc, "application/json"):
        return
    await ctx.response_writer.write(ctx.config.json_encoder(error_format_json(exc)))
