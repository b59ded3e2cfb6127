"""End-to-end request scenarios through a Router."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from ivy_router.context import Context
from ivy_router.error_handlers import json_error_handler
from ivy_router.exceptions import StateCorruptionError
from ivy_router.router import Router


async def _get(app: Any, path: str = "/", **kwargs: Any) -> Any:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path, **kwargs)


def _set_kv(key: str, value: Any) -> Any:
    async def handler(ctx: Context) -> None:
        ctx.kv.set(key, value)
        await ctx.next()

    return handler


def _send_kv(key: str) -> Any:
    async def handler(ctx: Context) -> None:
        await ctx.send_string(ctx.kv.get(key, "<unset>"))

    return handler


class TestScenarios:
    async def test_values_flow_between_handlers(self) -> None:
        router = Router()
        router.get("/", _set_kv("hello", "world"), _send_kv("hello"))
        resp = await _get(router)
        assert resp.status_code == 200
        assert resp.text == "world"

    async def test_handler_error_without_custom_handler(self) -> None:
        async def boom(ctx: Context) -> None:
            raise RuntimeError("boom")

        router = Router()
        router.get("/", boom)
        resp = await _get(router)
        assert resp.status_code == 500
        assert "boom" in resp.text

    async def test_mounted_child_sees_parent_state(self) -> None:
        child = Router()
        child.get("/test", _send_kv("K"))

        parent = Router().use(_set_kv("K", "world"))
        parent.mount("/v2", child)

        resp = await _get(parent, "/v2/test")
        assert resp.status_code == 200
        assert resp.text == "world"

    async def test_short_circuit_blocks_handler(self) -> None:
        handler_called = False

        async def gate(ctx: Context) -> None:
            await ctx.send_string("blocked")

        async def handler(ctx: Context) -> None:
            nonlocal handler_called
            handler_called = True

        router = Router().use(gate)
        router.get("/", handler)
        resp = await _get(router)
        assert resp.text == "blocked"
        assert handler_called is False

    async def test_chain_runs_in_order_exactly_once(self) -> None:
        order: list[int] = []

        def step(n: int) -> Any:
            async def handler(ctx: Context) -> None:
                order.append(n)
                await ctx.next()

            return handler

        async def done(ctx: Context) -> None:
            order.append(4)
            await ctx.send_string("done")

        router = Router().use(step(1), step(2))
        router.get("/", step(3), done)
        resp = await _get(router)
        assert resp.text == "done"
        assert order == [1, 2, 3, 4]


class TestErrorHandlerInvocation:
    @pytest.mark.parametrize("fail_at", [None, 0, 1, 2])
    async def test_at_most_one_call_per_request(self, fail_at: int | None) -> None:
        calls: list[str] = []

        async def on_error(ctx: Context, exc: Exception) -> None:
            calls.append(str(exc))
            await ctx.status(500).send_string("handled")

        def member(index: int) -> Any:
            async def handler(ctx: Context) -> None:
                if index == fail_at:
                    raise ValueError(f"failed at {index}")
                await ctx.next()

            return handler

        async def tail(ctx: Context) -> None:
            await ctx.send_string("ok")

        router = Router(error_handler=on_error)
        router.get("/", member(0), member(1), member(2), tail)
        resp = await _get(router)

        if fail_at is None:
            assert calls == []
            assert resp.text == "ok"
        else:
            assert calls == [f"failed at {fail_at}"]
            assert resp.text == "handled"

    async def test_error_caught_by_upstream_member_never_reaches_handler(
        self,
    ) -> None:
        calls: list[Exception] = []

        async def on_error(ctx: Context, exc: Exception) -> None:
            calls.append(exc)

        async def recover(ctx: Context) -> None:
            try:
                await ctx.next()
            except ValueError:
                await ctx.status(409).send_string("recovered")

        async def boom(ctx: Context) -> None:
            raise ValueError("boom")

        router = Router(error_handler=on_error)
        router.get("/", recover, boom)
        resp = await _get(router)
        assert resp.status_code == 409
        assert calls == []

    async def test_json_error_handler_end_to_end(self) -> None:
        async def boom(ctx: Context) -> None:
            raise ExceptionGroup("bad input", [ValueError("x"), ValueError("y")])

        router = Router(error_handler=json_error_handler)
        router.get("/", boom)
        resp = await _get(router)
        assert resp.status_code == 500
        assert resp.json() == {"errors": ["x", "y"]}

    async def test_fatal_error_bypasses_error_handler(self) -> None:
        calls: list[Exception] = []

        async def on_error(ctx: Context, exc: Exception) -> None:
            calls.append(exc)

        async def corrupt(ctx: Context) -> None:
            raise StateCorruptionError("store lost")

        router = Router(error_handler=on_error)
        router.get("/", corrupt)
        with pytest.raises(StateCorruptionError):
            await _get(router)
        assert calls == []
