"""Router — route registration, mounting, and ASGI dispatch."""

from __future__ import annotations

import logging

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from ivy_router._types import Endpoint, ErrorHandler, Handler
from ivy_router.adapter import (
    MOUNT_PATH_PARAM,
    endpoint_to_asgi,
    serve,
    strip_prefix,
    to_handler,
)
from ivy_router.chain import Chain, build_chain
from ivy_router.config import RouterConfig
from ivy_router.context import Context
from ivy_router.exceptions import HTTPError
from ivy_router.matcher import Matcher, PatternMatcher

logger = logging.getLogger("ivy_router.router")


class Router:
    """Method+path routing over handler chains.

    Register everything before serving: ``use`` only affects routes
    registered after it, and the table is read without locks while
    requests are in flight::

        router = Router()
        router.use(request_logger())
        router.get("/users/{id}", load_user, show_user)
        router.mount("/v2", v2_router)
    """

    def __init__(
        self,
        *,
        error_handler: ErrorHandler | None = None,
        config: RouterConfig | None = None,
        matcher: Matcher | None = None,
    ) -> None:
        self.error_handler = error_handler
        self.config = config or RouterConfig()
        self._matcher: Matcher = matcher or PatternMatcher()
        self._middlewares: list[Handler] = []

    @property
    def matcher(self) -> Matcher:
        return self._matcher

    @property
    def middlewares(self) -> tuple[Handler, ...]:
        return tuple(self._middlewares)

    def use(self, *middlewares: Handler) -> Router:
        self._middlewares.extend(middlewares)
        return self

    def _register(self, method: str | None, path: str, *handlers: Handler) -> None:
        if not handlers:
            return
        chain = build_chain([*self._middlewares, *handlers])
        self._matcher.add(method, path, chain)
        logger.debug("registered %s %s (%d handlers)", method or "*", path, len(chain))

    def method(self, method: str, path: str, *handlers: Handler) -> None:
        """Register for any verb, including non-standard ones.

        Methods are case-sensitive: ``method`` is matched exactly as given.
        """
        self._register(method, path, *handlers)

    def get(self, path: str, *handlers: Handler) -> None:
        self._register("GET", path, *handlers)

    def post(self, path: str, *handlers: Handler) -> None:
        self._register("POST", path, *handlers)

    def put(self, path: str, *handlers: Handler) -> None:
        self._register("PUT", path, *handlers)

    def delete(self, path: str, *handlers: Handler) -> None:
        self._register("DELETE", path, *handlers)

    def head(self, path: str, *handlers: Handler) -> None:
        self._register("HEAD", path, *handlers)

    def patch(self, path: str, *handlers: Handler) -> None:
        self._register("PATCH", path, *handlers)

    def options(self, path: str, *handlers: Handler) -> None:
        self._register("OPTIONS", path, *handlers)

    def handle(self, path: str, app: ASGIApp) -> None:
        """Serve ``path`` (any method) with a plain ASGI app."""
        self._register(None, path, to_handler(app))

    def handle_func(self, path: str, endpoint: Endpoint) -> None:
        """Serve ``path`` (any method) with a ``request -> Response`` function."""
        self.handle(path, endpoint_to_asgi(endpoint))

    def mount(self, prefix: str, app: ASGIApp) -> None:
        """Forward ``prefix`` and everything below it to ``app``.

        The app sees the path with ``prefix`` stripped. This router's
        middlewares run first and share their KeyValueStore with a mounted
        Router. A mounted Router without an error handler gets a copy of
        this router's handler now; later changes here don't reach it.
        """
        prefix = prefix.rstrip("/")
        if isinstance(app, Router) and app.error_handler is None:
            app.error_handler = self.error_handler

        handler = to_handler(strip_prefix(prefix, app))
        self._register(None, prefix or "/", handler)
        self._register(None, f"{prefix}/{{{MOUNT_PATH_PARAM}:path}}", handler)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            logger.debug("closing unsupported %s connection", scope["type"])
            await send({"type": "websocket.close", "code": 1000})
            return

        try:
            match = self._matcher.match(scope["method"], scope["path"])
        except HTTPError as exc:
            response = PlainTextResponse(
                exc.detail, status_code=exc.status_code, headers=exc.headers
            )
            await response(scope, receive, send)
            return

        chain: Chain = match.endpoint
        ctx = Context(
            {**scope, "path_params": match.path_params},
            receive,
            send,
            config=self.config,
        )
        await serve(chain, ctx, self.error_handler)

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
