"""ResponseWriter — incremental response sink over an ASGI ``send``."""

from __future__ import annotations

import logging

from starlette.datastructures import MutableHeaders
from starlette.types import Message, Send

logger = logging.getLogger("ivy_router.writer")


class ResponseWriter:
    """Writes one HTTP response through ASGI messages.

    The status line and headers go out on the first body write (or on
    ``flush``/``finish``). A status that was never set defaults to 200.
    Foreign ASGI apps may use ``send`` directly; the writer tracks their
    progress so ``finish`` never emits a second response.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self.headers = MutableHeaders()
        self.status_code: int | None = None
        self.started = False
        self.finished = False

    def write_header(self, status_code: int) -> None:
        if self.started:
            logger.warning(
                "write_header(%d) ignored, response already started with %s",
                status_code,
                self.status_code,
            )
            return
        self.status_code = status_code

    async def write(self, data: bytes) -> int:
        if self.finished:
            raise RuntimeError("response already completed")
        await self.flush()
        if data:
            await self.send(
                {"type": "http.response.body", "body": data, "more_body": True}
            )
        return len(data)

    async def flush(self) -> None:
        """Send the status line and headers if they haven't gone out yet."""
        if self.started:
            return
        await self.send(
            {
                "type": "http.response.start",
                "status": self.status_code or 200,
                "headers": self.headers.raw,
            }
        )

    async def send(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.started = True
            self.status_code = message["status"]
        elif message["type"] == "http.response.body" and not message.get(
            "more_body", False
        ):
            self.finished = True
        await self._send(message)

    async def relay(self, message: Message) -> None:
        """``send`` handed to foreign apps and responses.

        Headers already set on this writer are added to their start message
        unless the message sets the same name (``set-cookie`` always goes out).
        """
        if message["type"] == "http.response.start" and self.headers.raw:
            headers = list(message.get("headers", []))
            own = {name for name, _ in headers}
            for name, value in self.headers.raw:
                if name not in own or name == b"set-cookie":
                    headers.append((name, value))
            message = {**message, "headers": headers}
        await self.send(message)

    async def finish(self) -> None:
        """Complete the response; a no-op once it is already complete."""
        if self.finished:
            return
        await self.flush()
        await self.send({"type": "http.response.body", "body": b"", "more_body": False})


class StatusRecorder(ResponseWriter):
    """Wraps another writer and records what passes through it.

    Used by instrumentation middleware via ``ctx.set_response_writer``.
    """

    def __init__(self, inner: ResponseWriter) -> None:
        self.inner = inner
        self.bytes_written = 0

    # Header and progress state live on the wrapped writer
    @property  # type: ignore[override]
    def headers(self) -> MutableHeaders:
        return self.inner.headers

    @property  # type: ignore[override]
    def status_code(self) -> int | None:
        return self.inner.status_code

    @property  # type: ignore[override]
    def started(self) -> bool:
        return self.inner.started

    @property  # type: ignore[override]
    def finished(self) -> bool:
        return self.inner.finished

    def write_header(self, status_code: int) -> None:
        self.inner.write_header(status_code)

    async def send(self, message: Message) -> None:
        if message["type"] == "http.response.body":
            self.bytes_written += len(message.get("body", b""))
        await self.inner.send(message)
