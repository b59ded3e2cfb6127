"""
Middleware example of ivy-router.

Demonstrates:
- Request ids bound onto ctx.logger
- HTTP Basic authentication for a group of routes
- JSON error responses with json_error_handler
"""

import logging

from ivy_router import Context, NotFound, Router, json_error_handler
from ivy_router.middleware import basic_auth, request_id, request_logger

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")

USERS = {"1": {"id": "1", "name": "Ada"}}

router = Router(error_handler=json_error_handler)
router.use(request_id(), request_logger())


async def load_user(ctx: Context) -> None:
    user = USERS.get(ctx.path_param("id"))
    if user is None:
        raise NotFound(f"user {ctx.path_param('id')!r} not found")
    ctx.kv.set("user", user)
    await ctx.next()


async def show_user(ctx: Context) -> None:
    ctx.logger.info("showing user")
    await ctx.send_json(ctx.kv.get("user"))


router.get("/users/{id}", load_user, show_user)

# Admin routes: everything registered below requires credentials
admin = Router(error_handler=json_error_handler)
admin.use(basic_auth("Admin", {"admin": "secret"}))


async def stats(ctx: Context) -> None:
    await ctx.send_json({"users": len(USERS)})


admin.get("/stats", stats)
router.mount("/admin", admin)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(router, host="0.0.0.0", port=8000)

    # Test with:
    # curl -i http://localhost:8000/users/1
    # curl -i http://localhost:8000/users/2
    # curl -i -u admin:secret http://localhost:8000/admin/stats
