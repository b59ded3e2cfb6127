"""ivy-router - handler chains, middleware, and mountable routers on ASGI."""

from ivy_router.adapter import endpoint_to_asgi, serve, strip_prefix, to_asgi, to_handler
from ivy_router.chain import Chain, build_chain
from ivy_router.config import RouterConfig
from ivy_router.context import Context
from ivy_router.dependency import kv_dependency
from ivy_router.error_handlers import default_error_handler, json_error_handler
from ivy_router.exceptions import (
    BadRequest,
    FatalError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    RouterException,
    StateCorruptionError,
    error_format_json,
)
from ivy_router.kv import KeyValueStore
from ivy_router.log import BoundLogger
from ivy_router.matcher import Matcher, PatternMatcher, RouteMatch
from ivy_router.metadata import KV_SCOPE_KEY, RequestMetadata, restore_store
from ivy_router.router import Router
from ivy_router.writer import ResponseWriter, StatusRecorder

__all__ = [
    "KV_SCOPE_KEY",
    "BadRequest",
    "BoundLogger",
    "Chain",
    "Context",
    "FatalError",
    "HTTPError",
    "KeyValueStore",
    "Matcher",
    "MethodNotAllowed",
    "NotFound",
    "PatternMatcher",
    "RequestMetadata",
    "ResponseWriter",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "RouterException",
    "StateCorruptionError",
    "StatusRecorder",
    "build_chain",
    "default_error_handler",
    "endpoint_to_asgi",
    "error_format_json",
    "json_error_handler",
    "kv_dependency",
    "restore_store",
    "serve",
    "strip_prefix",
    "to_asgi",
    "to_handler",
]
