"""Structured logging for crashless services."""

from crashless.logging.setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
