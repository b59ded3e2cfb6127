"""BoundLogger — a LoggerAdapter that carries request-scoped fields."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any


class BoundLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger with fields attached by middleware.

    Fields are appended to every message as ``key=value`` and exposed on the
    record as ``record.ivy_fields`` for structured formatters::

        ctx.logger = ctx.logger.bind(request_id="3fa2c1d0")
        ctx.logger.info("loaded user")  # "loaded user request_id=3fa2c1d0"
    """

    def __init__(
        self, logger: logging.Logger, fields: dict[str, Any] | None = None
    ) -> None:
        super().__init__(logger, fields or {})

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self.extra or {})

    def bind(self, **fields: Any) -> BoundLogger:
        return BoundLogger(self.logger, {**self.fields, **fields})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        fields = self.fields
        extra = dict(kwargs.get("extra") or {})
        extra["ivy_fields"] = fields
        kwargs["extra"] = extra
        if fields:
            pairs = " ".join(f"{key}={value}" for key, value in fields.items())
            msg = f"{msg} {pairs}"
        return msg, kwargs


def get_logger(name: str) -> BoundLogger:
    return BoundLogger(logging.getLogger(name))
