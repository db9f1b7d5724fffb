"""One-call installation of the error layer on a FastAPI application."""

from typing import Any

import structlog
from fastapi import FastAPI

from crashless.config.settings import MiddlewareConfig
from crashless.errors.handlers import register_error_handlers
from crashless.exporters.registry import ExporterRegistry
from crashless.middleware.capture import CrashlessMiddleware
from crashless.middleware.normalizer import ErrorNormalizer
from crashless.routing.wrapper import handle_async

logger = structlog.get_logger()


def install(
    app: FastAPI,
    config: MiddlewareConfig | None = None,
    *,
    registry: ExporterRegistry | None = None,
    **options: Any,
) -> ErrorNormalizer:
    """Install error capture on ``app``.

    Call it right after creating the app: async handling only applies to
    routes registered afterwards, and middleware cannot be added once the app
    has started.

    Args:
        app: The application.
        config: Installation options. Keyword ``options`` build one instead,
            e.g. ``install(app, log=False)``.
        registry: Exporter registry to dispatch to. Defaults to the
            process-wide one.

    Returns:
        The normalizer shared by the middleware and the framework handlers.
    """
    if config is not None and options:
        raise ValueError("Pass either a MiddlewareConfig or keyword options, not both")
    config = config or MiddlewareConfig(**options)

    if config.handle_async:
        handle_async(app)
    normalizer = ErrorNormalizer(config, registry)
    app.add_middleware(CrashlessMiddleware, normalizer=normalizer)
    register_error_handlers(app, normalizer)

    if config.log:
        logger.debug(
            "crashless_installed",
            handle_async=config.handle_async,
            mask_messages=config.mask_messages,
            default_status=config.default_status,
            telemetry=config.on_telemetry is not None,
        )
    return normalizer
