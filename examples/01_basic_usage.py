"""
Basic usage example of ivy-router.

Demonstrates:
- Registering routes with handler chains
- Passing values between handlers through ctx.kv
- Rejecting requests from a middleware with required_query_params
"""

import asyncio
import logging
import os
import random

from ivy_router import BadRequest, Context, Router
from ivy_router.middleware import request_logger, required_query_params

logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(message)s")

router = Router()
router.use(request_logger())


async def hi(ctx: Context) -> None:
    await asyncio.sleep(random.random())
    await ctx.send_string("hello")


async def resolve_dir(ctx: Context) -> None:
    """Store the absolute form of ?dir= for the next handler."""
    directory = ctx.query_param("dir")
    if not directory:
        raise BadRequest(f"invalid query-param (dir = {directory!r})")
    ctx.kv.set("dir", os.path.abspath(directory))
    await ctx.next()


async def show_dir(ctx: Context) -> None:
    await ctx.send_string(
        f"dir: {ctx.kv.get('dir')}, message: {ctx.query_param('message')}"
    )


router.get("/hi", hi)
router.get("/hi-qp", required_query_params("message", "dir"), resolve_dir, show_dir)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(router, host="0.0.0.0", port=8000)

    # Test with:
    # curl http://localhost:8000/hi
    # curl "http://localhost:8000/hi-qp?message=hi&dir=."
    # curl "http://localhost:8000/hi-qp?message=hi"
