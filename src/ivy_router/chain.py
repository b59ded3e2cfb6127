"""Chain — ordered handlers composed into a single Handler."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ivy_router._types import Handler
from ivy_router.context import Context


@dataclass(frozen=True)
class Chain:
    """Immutable, pre-built execution order for one route.

    ``handlers[0]`` runs when the chain is invoked; each handler reaches the
    next one through ``await ctx.next()``. A handler that doesn't call it
    ends the chain there, and calling it from the last handler does nothing.
    """

    handlers: tuple[Handler, ...]

    def __len__(self) -> int:
        return len(self.handlers)

    async def __call__(self, ctx: Context) -> None:
        if not self.handlers:
            return
        outer = ctx._bind_chain(self._continue)
        try:
            await self.handlers[0](ctx)
        finally:
            # Nested chain: hand the context back to the enclosing one
            if outer[0] is not None:
                ctx._bind_chain(*outer)

    async def _continue(self, ctx: Context) -> None:
        if ctx.position + 1 >= len(self.handlers):
            return
        await self.handlers[ctx._advance()](ctx)


def build_chain(handlers: Iterable[Handler]) -> Chain:
    return Chain(handlers=tuple(handlers))
