"""Router configuration.

RouterConfig is a frozen dataclass handed to each Router at construction,
so serialization can't be swapped under in-flight requests.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ivy_router._types import JSONDecoder, JSONEncoder


def encode_json(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode(
        "utf-8"
    )


def decode_json(data: bytes | str) -> Any:
    return json.loads(data)


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Per-router settings. Override what you need::

        config = RouterConfig(json_encoder=orjson.dumps, logger_name="api")
    """

    json_encoder: JSONEncoder = encode_json
    json_decoder: JSONDecoder = decode_json

    # Base logger for Context.logger
    logger_name: str = "ivy_router.request"
