"""Environment-based service configuration and per-installation middleware options."""

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from crashless.config.mode import current_mode


@dataclass(frozen=True)
class MiddlewareConfig:
    """Options for one error-middleware installation. Immutable once built.

    Attributes:
        handle_async: Wrap handlers registered after installation so awaitable
            results are resolved before the response is built.
        log: Emit one structured log event per captured failure. When ``False``
            nothing at all is logged for captured failures.
        mask_messages: Replace client-facing messages with a generic phrase in
            production. Codes are never masked.
        default_status: Status used for failures that carry none.
        on_telemetry: Callback invoked with ``(error, meta)`` for every failure,
            scheduled alongside the registered exporters.
    """

    handle_async: bool = True
    log: bool = True
    mask_messages: bool = True
    default_status: int = 500
    on_telemetry: Callable[..., Any] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.default_status, bool) or not isinstance(self.default_status, int):
            raise TypeError(f"default_status must be an int, got {self.default_status!r}")
        if self.on_telemetry is not None and not callable(self.on_telemetry):
            raise TypeError("on_telemetry must be callable")


@dataclass(frozen=True)
class ServiceSettings:
    """Immutable service configuration read from environment variables."""

    service_name: str = field(default_factory=lambda: os.getenv("SERVICE_NAME", "crashless"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))
    environment: str = field(default_factory=current_mode)
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "4000")))

    def __post_init__(self) -> None:
        object.__setattr__(self, "log_level", self.log_level.upper())
        object.__setattr__(self, "environment", self.environment.lower())

    @property
    def is_production(self) -> bool:
        """Mode at construction time. Request handling re-reads the environment."""
        return self.environment == "production"
