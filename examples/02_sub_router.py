"""
Sub-router example of ivy-router.

Demonstrates:
- Mounting one Router under a prefix of another
- Parent middleware state visible inside the mounted router
- A custom error handler inherited by the mounted router
"""

import asyncio
import logging

from ivy_router import Context, Router
from ivy_router.middleware import request_logger

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")


async def error_handler(ctx: Context, exc: Exception) -> None:
    await ctx.status(500).send_string(f"[ERROR HANDLER]: {exc}")


router = Router(error_handler=error_handler)
router.use(request_logger())


async def parent_middleware(ctx: Context) -> None:
    ctx.logger.info("inside parent router middleware")
    ctx.kv.set("sample", "SAMPLE")
    await ctx.next()


router.use(parent_middleware)


async def ping(ctx: Context) -> None:
    await ctx.send_string("hi")


router.get("/_ping", ping)


# Sub router
v2 = Router()


async def middleware_1(ctx: Context) -> None:
    ctx.kv.set("hello", "middleware 1")
    await ctx.next()


async def middleware_2(ctx: Context) -> None:
    ctx.kv.set("world", "middleware 2")
    await ctx.next()


async def v2_ping(ctx: Context) -> None:
    await asyncio.sleep(1)
    kv = ctx.kv
    await ctx.send_string(
        f"OK! from router 2 (hello = {kv.get('hello')}, "
        f"world = {kv.get('world')}, sample = {kv.get('sample')})"
    )


async def v2_error(ctx: Context) -> None:
    raise RuntimeError("error from sub router")


v2.get("/_ping", middleware_1, middleware_2, v2_ping)
v2.get("/error", v2_error)

router.mount("/v2", v2)


async def parent_error(ctx: Context) -> None:
    raise RuntimeError("error from parent")


router.get("/error", parent_error)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(router, host="0.0.0.0", port=8000)

    # Test with:
    # curl http://localhost:8000/_ping
    # curl http://localhost:8000/v2/_ping
    # curl http://localhost:8000/v2/error
    # curl http://localhost:8000/error
