"""Error-capture middleware and the failure normalizer behind it."""

from crashless.middleware.capture import CrashlessMiddleware
from crashless.middleware.normalizer import ErrorNormalizer

__all__ = ["CrashlessMiddleware", "ErrorNormalizer"]
