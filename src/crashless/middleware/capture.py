"""Terminal error-capture middleware."""

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from crashless.config.settings import MiddlewareConfig
from crashless.exporters.registry import ExporterRegistry
from crashless.middleware.normalizer import ErrorNormalizer


class CrashlessMiddleware:
    """Catch every exception raised below it and answer with an error envelope.

    This is a pure ASGI middleware rather than a ``BaseHTTPMiddleware`` so it
    can watch the ``send`` channel: once ``http.response.start`` has gone out
    the response is committed, and a later failure (a background task, a
    broken stream) is reported but never written a second time.

    Nothing is re-raised. Non-HTTP scopes pass straight through.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: MiddlewareConfig | None = None,
        *,
        normalizer: ErrorNormalizer | None = None,
        registry: ExporterRegistry | None = None,
    ) -> None:
        if normalizer is not None and (config is not None or registry is not None):
            raise ValueError("Pass either a normalizer or config/registry, not both")
        self.app = app
        self.normalizer = normalizer or ErrorNormalizer(config, registry)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            request = Request(scope)
            response = await self.normalizer.capture(exc, request, committed=response_started)
            if response is not None:
                await response(scope, receive, send)
