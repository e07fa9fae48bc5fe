"""Adapters that fill JSON responses in transit."""

from fieldfill.interceptors.asgi import FillResponseMiddleware
from fieldfill.interceptors.body import fill_json_body
from fieldfill.interceptors.filters import InterceptorConfig, is_json_content_type, should_intercept
from fieldfill.interceptors.httpx_transport import FillingTransport, create_filling_client

__all__ = [
    "InterceptorConfig",
    "should_intercept",
    "is_json_content_type",
    "fill_json_body",
    "FillingTransport",
    "create_filling_client",
    "FillResponseMiddleware",
]
