"""ASGI middleware that fills JSON responses of a FastAPI/Starlette app."""

import logging
from typing import TYPE_CHECKING, List, Optional

from starlette.datastructures import URL, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from fieldfill.interceptors.body import fill_json_body
from fieldfill.interceptors.filters import InterceptorConfig, is_json_content_type, should_intercept

if TYPE_CHECKING:
    from fieldfill.services.filler import FieldFiller

logger = logging.getLogger(__name__)


class FillResponseMiddleware:
    """Buffers matching JSON responses and fills them before sending.

    Usage:
        app.add_middleware(FillResponseMiddleware, filler=filler, config=config)
    """

    def __init__(
        self,
        app: ASGIApp,
        filler: "FieldFiller",
        config: Optional[InterceptorConfig] = None,
    ):
        self.app = app
        self.filler = filler
        self.config = config or InterceptorConfig()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        url = str(URL(scope=scope))
        if not should_intercept(self.config, url, scope.get("method", "GET")):
            await self.app(scope, receive, send)
            return

        await _FillingResponder(self.filler, self.config).run(self.app, scope, receive, send)


class _FillingResponder:
    """Per-request state for one buffered response."""

    def __init__(self, filler: "FieldFiller", config: InterceptorConfig):
        self.filler = filler
        self.config = config
        self.start_message: Optional[Message] = None
        self.chunks: List[bytes] = []
        self.passthrough = False

    async def run(self, app: ASGIApp, scope: Scope, receive: Receive, send: Send) -> None:
        self.send = send
        await app(scope, receive, self.send_wrapper)

    async def send_wrapper(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            headers = MutableHeaders(raw=message["headers"])
            # Compressed bodies are left alone
            self.passthrough = not is_json_content_type(headers.get("content-type")) or (
                "content-encoding" in headers
            )
            if self.passthrough:
                await self.send(message)
            else:
                self.start_message = message
            return

        if self.passthrough or message["type"] != "http.response.body":
            await self.send(message)
            return

        self.chunks.append(message.get("body", b""))
        if message.get("more_body", False):
            return

        await self.flush()

    async def flush(self) -> None:
        body = b"".join(self.chunks)
        filled = await fill_json_body(self.filler, body, self.config.fill_options)
        if filled is not None:
            logger.debug(f"Filled response body ({len(body)} -> {len(filled)} bytes)")
            body = filled

        message = self.start_message
        headers = MutableHeaders(raw=list(message["headers"]))
        headers["content-length"] = str(len(body))
        message["headers"] = headers.raw

        await self.send(message)
        await self.send({"type": "http.response.body", "body": body, "more_body": False})
