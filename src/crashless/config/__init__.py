"""Configuration: per-installation options, service settings and mode resolution."""

from crashless.config.mode import current_mode, is_production
from crashless.config.settings import MiddlewareConfig, ServiceSettings

__all__ = ["MiddlewareConfig", "ServiceSettings", "current_mode", "is_production"]
