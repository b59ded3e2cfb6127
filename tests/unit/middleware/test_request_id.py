"""Tests for request_id middleware."""

from __future__ import annotations

import re
from typing import Any

import httpx

from ivy_router.context import Context
from ivy_router.middleware.request_id import generate_request_id, request_id
from ivy_router.router import Router


async def _get(app: Any, **kwargs: Any) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get("/", **kwargs)


def _router(**kwargs: Any) -> Router:
    async def echo(ctx: Context) -> None:
        await ctx.send_json(
            {"request_id": ctx.request_id, "fields": ctx.logger.fields}
        )

    router = Router().use(request_id(**kwargs))
    router.get("/", echo)
    return router


class TestGenerateRequestID:
    def test_eight_hex_chars(self) -> None:
        assert re.fullmatch(r"[0-9a-f]{8}", generate_request_id())

    def test_unique(self) -> None:
        assert len({generate_request_id() for _ in range(100)}) == 100


class TestRequestIDMiddleware:
    async def test_assigns_and_echoes_id(self) -> None:
        response = await _get(_router(generator=lambda: "fixed-id"))
        assert response.headers["x-request-id"] == "fixed-id"
        assert response.json() == {
            "request_id": "fixed-id",
            "fields": {"request_id": "fixed-id"},
        }

    async def test_client_id_kept(self) -> None:
        response = await _get(
            _router(generator=lambda: "generated"),
            headers={"X-Request-ID": "from-client"},
        )
        assert response.json()["request_id"] == "from-client"
        assert "x-request-id" not in response.headers

    async def test_default_generator(self) -> None:
        response = await _get(_router())
        assert re.fullmatch(r"[0-9a-f]{8}", response.headers["x-request-id"])
