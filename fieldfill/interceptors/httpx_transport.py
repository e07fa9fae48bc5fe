"""httpx transport that fills JSON responses on their way to the caller."""

import logging
from typing import TYPE_CHECKING, Any, Optional

import httpx

from fieldfill.interceptors.body import fill_json_body
from fieldfill.interceptors.filters import InterceptorConfig, is_json_content_type, should_intercept

if TYPE_CHECKING:
    from fieldfill.services.filler import FieldFiller

logger = logging.getLogger(__name__)

# Headers describing the original body, which no longer apply once refilled
_STALE_HEADERS = {"content-length", "content-encoding", "transfer-encoding"}


class FillingTransport(httpx.AsyncBaseTransport):
    """Wraps another transport and fills JSON bodies of matching responses.

    Responses that do not match the config, or are not JSON, are returned
    untouched and unread.
    """

    def __init__(
        self,
        filler: "FieldFiller",
        config: Optional[InterceptorConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.filler = filler
        self.config = config or InterceptorConfig()
        self._transport = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        response = await self._transport.handle_async_request(request)

        if not should_intercept(self.config, str(request.url), request.method):
            return response
        if not is_json_content_type(response.headers.get("content-type")):
            return response

        # Decoded according to Content-Encoding
        body = await response.aread()
        await response.aclose()

        filled = await fill_json_body(self.filler, body, self.config.fill_options)
        if filled is None:
            content = body
        else:
            logger.debug(f"Filled response body for {request.method} {request.url}")
            content = filled

        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _STALE_HEADERS
        ]
        return httpx.Response(
            status_code=response.status_code,
            headers=headers,
            content=content,
            extensions=response.extensions,
        )

    async def aclose(self) -> None:
        await self._transport.aclose()


def create_filling_client(
    filler: "FieldFiller",
    config: Optional[InterceptorConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **client_kwargs: Any,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` whose JSON responses get filled.

    Args:
        filler: Filler used for response bodies.
        config: Interception filters and fill options.
        transport: Underlying transport, defaults to ``httpx.AsyncHTTPTransport``.
        **client_kwargs: Passed through to ``httpx.AsyncClient``.
    """
    return httpx.AsyncClient(
        transport=FillingTransport(filler, config, transport),
        **client_kwargs,
    )
