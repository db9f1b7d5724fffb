"""Failure classification and the client-facing error envelope.

Any value that reaches the error channel is first classified into one of three
kinds, then turned into an :class:`ErrorEnvelope`:

* ``DOMAIN``: a :class:`DomainError`, or any exception exposing a string
  ``code`` or an integer ``status`` / ``status_code``.
* ``GENERIC``: any other exception.
* ``MALFORMED``: ``None`` or anything that is not an exception.
"""

import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any

from crashless.errors.exceptions import DEFAULT_STATUS, DomainError, ForwardedFailure

MASKED_MESSAGE = "Internal server error"
UNKNOWN_MESSAGE = "Unknown error"


class FailureKind(str, Enum):
    DOMAIN = "domain"
    GENERIC = "generic"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class ErrorEnvelope:
    """The JSON body written for every captured failure."""

    message: str
    code: str
    status: int
    stack: str | None = None
    details: Any = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "code": self.code,
            "status": self.status,
        }
        if self.stack is not None:
            body["stack"] = self.stack
        if self.details is not None:
            body["details"] = self.details
        return body


def derived_code(status: int) -> str:
    return f"ERR_{status}"


def _int_attr(exc: BaseException, *names: str) -> int | None:
    for name in names:
        value = getattr(exc, name, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _str_attr(exc: BaseException, name: str) -> str | None:
    value = getattr(exc, name, None)
    return value if isinstance(value, str) else None


def classify(value: Any) -> tuple[FailureKind, Any]:
    """Classify a failure value, unboxing :class:`ForwardedFailure` first.

    Returns:
        The kind and the (possibly unboxed) payload.
    """
    if isinstance(value, ForwardedFailure):
        value = value.value
    if isinstance(value, DomainError):
        return FailureKind.DOMAIN, value
    if isinstance(value, Exception):
        if _str_attr(value, "code") or _int_attr(value, "status", "status_code") is not None:
            return FailureKind.DOMAIN, value
        return FailureKind.GENERIC, value
    return FailureKind.MALFORMED, value


def format_stack(failure: Any) -> str | None:
    """Formatted traceback of the carrying exception, if there is one."""
    if not isinstance(failure, BaseException):
        return None
    return "".join(traceback.format_exception(failure)).rstrip()


def to_domain_error(value: Any, default_status: int = DEFAULT_STATUS) -> tuple[FailureKind, DomainError]:
    """Reduce any failure value to a :class:`DomainError`.

    Domain errors built with :func:`create_error` are returned as-is. Other
    exceptions are converted, keeping the original as ``__cause__``.
    """
    kind, payload = classify(value)

    if kind is FailureKind.MALFORMED:
        error = DomainError(UNKNOWN_MESSAGE, DEFAULT_STATUS, derived_code(DEFAULT_STATUS))
        if isinstance(value, ForwardedFailure):
            error.__cause__ = value
        return kind, error

    if isinstance(payload, DomainError):
        status = _int_attr(payload, "status")
        if status is not None and payload.code:
            return kind, payload
        status = default_status if status is None else status
        error = DomainError(payload.message, status, payload.code or derived_code(status), payload.details)
        error.__cause__ = payload
        return kind, error

    if kind is FailureKind.DOMAIN:
        status = _int_attr(payload, "status", "status_code")
        if status is None:
            status = default_status
        message = _str_attr(payload, "message")
        if message is None:
            message = _str_attr(payload, "detail")
        if message is None:
            message = str(payload) or type(payload).__name__
        code = _str_attr(payload, "code") or derived_code(status)
        details = getattr(payload, "details", None)
    else:
        status = default_status
        message = str(payload) or type(payload).__name__
        code = derived_code(status)
        details = None

    error = DomainError(message, status, code, details)
    error.__cause__ = payload
    return kind, error


def build_envelope(
    error: DomainError,
    *,
    production: bool,
    mask_messages: bool,
    stack: str | None = None,
) -> ErrorEnvelope:
    """Apply the mode policy to a normalized error.

    Production with masking replaces the message; development exposes ``stack``.
    """
    message = error.message
    if production and mask_messages:
        message = MASKED_MESSAGE
    return ErrorEnvelope(
        message=message,
        code=error.code,
        status=error.status,
        stack=None if production else stack,
        details=error.details,
    )
