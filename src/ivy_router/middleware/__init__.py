"""Built-in middlewares."""

from ivy_router.middleware.basic_auth import basic_auth
from ivy_router.middleware.logger import request_logger
from ivy_router.middleware.query_params import required_query_params
from ivy_router.middleware.request_id import generate_request_id, request_id

__all__ = [
    "basic_auth",
    "generate_request_id",
    "request_id",
    "request_logger",
    "required_query_params",
]
