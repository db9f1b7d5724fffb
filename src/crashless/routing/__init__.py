"""Registration-time handler wrapping."""

from crashless.routing.wrapper import AsyncSafeRoute, handle_async, is_wrapped, wrap_handler

__all__ = ["AsyncSafeRoute", "handle_async", "is_wrapped", "wrap_handler"]
