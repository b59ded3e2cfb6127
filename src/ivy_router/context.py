"""Context — per-request state, continuation, and response helpers."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

from starlette.datastructures import URL, Headers
from starlette.requests import Request
from starlette.responses import FileResponse, Response
from starlette.types import Receive, Scope, Send

from ivy_router.config import RouterConfig
from ivy_router.kv import KeyValueStore
from ivy_router.log import BoundLogger, get_logger
from ivy_router.metadata import KV_SCOPE_KEY, RequestMetadata, restore_store
from ivy_router.writer import ResponseWriter

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_KEY = "ivy_router.request_id"

Continuation = Callable[["Context"], Awaitable[None]]


class Context:
    """Wraps one inbound request and its outbound response.

    A store already carried by the scope (set by a parent router or an
    earlier Context) is reused, so state written upstream of a mount stays
    visible downstream of it.
    """

    def __init__(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
        *,
        config: RouterConfig | None = None,
    ) -> None:
        self.config = config or RouterConfig()

        store = restore_store(scope)
        if store is None:
            store = KeyValueStore()
        self.kv = store

        metadata = RequestMetadata(scope).with_value(KV_SCOPE_KEY, store)
        self._request = Request(metadata.scope, receive)
        self._receive = receive
        self._writer = ResponseWriter(send)

        self.logger: BoundLogger = get_logger(self.config.logger_name)

        self._position = 0
        self._continuation: Continuation | None = None

    # -- continuation -----------------------------------------------------

    @property
    def position(self) -> int:
        """Index of the chain member currently running."""
        return self._position

    async def next(self) -> None:
        """Run the next handler in the chain; a no-op past the last one."""
        if self._continuation is not None:
            await self._continuation(self)

    def _bind_chain(
        self, continuation: Continuation | None, position: int = 0
    ) -> tuple[Continuation | None, int]:
        previous = (self._continuation, self._position)
        self._continuation = continuation
        self._position = position
        return previous

    def _advance(self) -> int:
        self._position += 1
        return self._position

    # -- request side -----------------------------------------------------

    @property
    def request(self) -> Request:
        return self._request

    @property
    def scope(self) -> Scope:
        return self._request.scope

    @property
    def receive(self) -> Receive:
        return self._receive

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def url(self) -> URL:
        return self._request.url

    @property
    def headers(self) -> Headers:
        return self._request.headers

    def path_param(self, key: str, default: Any = None) -> Any:
        """Value bound to ``{key}`` in the matched route pattern."""
        return self._request.path_params.get(key, default)

    def query_param(self, key: str, default: str | None = None) -> str | None:
        return self._request.query_params.get(key, default)

    def get_cookie(self, name: str) -> str | None:
        return self._request.cookies.get(name)

    def all_cookies(self) -> dict[str, str]:
        return dict(self._request.cookies)

    async def body(self) -> bytes:
        return await self._request.body()

    def stream(self) -> AsyncGenerator[bytes, None]:
        return self._request.stream()

    async def parse_body(self) -> Any:
        """Decode the request body with the router's JSON decoder."""
        return self.config.json_decoder(await self._request.body())

    @property
    def request_id(self) -> str | None:
        value, found = self.kv.lookup(REQUEST_ID_KEY)
        if found:
            return value
        return self._request.headers.get(REQUEST_ID_HEADER)

    def set_request_id(self, request_id: str) -> None:
        self.kv.set(REQUEST_ID_KEY, request_id)
        self.set_header(REQUEST_ID_HEADER, request_id)

    # -- response side ----------------------------------------------------

    @property
    def response_writer(self) -> ResponseWriter:
        return self._writer

    def set_response_writer(self, writer: ResponseWriter) -> None:
        """Swap the writer, e.g. for a wrapping StatusRecorder."""
        self._writer = writer

    def set_header(self, key: str, value: str) -> None:
        self._writer.headers[key] = value

    def set_cookie(self, key: str, value: str = "", **options: Any) -> None:
        """Add a ``Set-Cookie`` header; options follow Starlette's ``set_cookie``."""
        carrier = Response()
        carrier.set_cookie(key, value, **options)
        self._copy_cookies(carrier)

    def clear_cookie(self, key: str, **options: Any) -> None:
        carrier = Response()
        carrier.delete_cookie(key, **options)
        self._copy_cookies(carrier)

    def _copy_cookies(self, response: Response) -> None:
        for name, value in response.raw_headers:
            if name == b"set-cookie":
                self._writer.headers.append("set-cookie", value.decode("latin-1"))

    def status(self, code: int) -> Context:
        """Set the response status; chain with a send, e.g.
        ``await ctx.status(201).send_string("created")``."""
        self._writer.write_header(code)
        return self

    async def send_status(self, code: int) -> None:
        self.status(code)
        await self._writer.flush()

    async def write(self, data: bytes) -> int:
        return await self._writer.write(data)

    async def flush(self) -> None:
        await self._writer.flush()

    async def send_bytes(self, data: bytes) -> None:
        await self._writer.write(data)

    async def send_string(self, text: str) -> None:
        await self._writer.write(text.encode("utf-8"))

    async def send_json(self, value: Any) -> None:
        payload = self.config.json_encoder(value)
        self._writer.headers["content-type"] = "application/json"
        await self._writer.write(payload)

    async def send_html(self, html: str | bytes) -> None:
        if isinstance(html, str):
            html = html.encode("utf-8")
        self._writer.headers["content-type"] = "text/html; charset=utf-8"
        await self._writer.write(html)

    async def send_response(self, response: Response) -> None:
        """Send a Starlette response; headers set earlier are merged in."""
        await response(self.scope, self._receive, self._writer.relay)

    async def send_file(self, path: str, **options: Any) -> None:
        await self.send_response(FileResponse(path, **options))
