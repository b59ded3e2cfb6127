"""
FastAPI interop example of ivy-router.

Demonstrates:
- Mounting a FastAPI app under a Router
- Reading the Router's KeyValueStore from FastAPI with kv_dependency()
"""

from fastapi import Depends, FastAPI

from ivy_router import Context, KeyValueStore, Router, kv_dependency

api = FastAPI(title="Mounted API")


@api.get("/whoami")
async def whoami(kv: KeyValueStore = Depends(kv_dependency())):
    """Reads what the Router's middleware stored for this request."""
    return {"user": kv.get("user"), "tenant": kv.get("tenant")}


router = Router()


async def identify(ctx: Context) -> None:
    ctx.kv.set("user", ctx.headers.get("x-user", "anonymous"))
    ctx.kv.set("tenant", ctx.query_param("tenant", "default"))
    await ctx.next()


router.use(identify)
router.mount("/api", api)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(router, host="0.0.0.0", port=8000)

    # Test with:
    # curl -H "X-User: ada" "http://localhost:8000/api/whoami?tenant=acme"
