"""crashless - async-safe error capture and reporting for FastAPI services."""

__version__ = "0.1.0"

from crashless.config import MiddlewareConfig, ServiceSettings, current_mode, is_production
from crashless.errors import (
    DomainError,
    ErrorEnvelope,
    FailureKind,
    ForwardedFailure,
    create_error,
    forward_error,
)
from crashless.errors.handlers import register_error_handlers
from crashless.exporters import ExporterRegistry, RequestMeta, exporter_registry, register_exporter
from crashless.install import install
from crashless.logging import get_logger, setup_logging
from crashless.middleware import CrashlessMiddleware, ErrorNormalizer
from crashless.routing import AsyncSafeRoute, handle_async, wrap_handler

__all__ = [
    "AsyncSafeRoute",
    "CrashlessMiddleware",
    "DomainError",
    "ErrorEnvelope",
    "ErrorNormalizer",
    "ExporterRegistry",
    "FailureKind",
    "ForwardedFailure",
    "MiddlewareConfig",
    "RequestMeta",
    "ServiceSettings",
    "create_error",
    "current_mode",
    "exporter_registry",
    "forward_error",
    "get_logger",
    "handle_async",
    "install",
    "is_production",
    "register_error_handlers",
    "register_exporter",
    "setup_logging",
    "wrap_handler",
]
