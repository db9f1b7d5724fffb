"""Failure values that travel the framework's normal ``raise`` path."""

from typing import Any, NoReturn

DEFAULT_STATUS = 500
DEFAULT_CODE = "ERR_INTERNAL"


class DomainError(Exception):
    """An explicitly constructed failure carrying HTTP status, code and details.

    Attributes:
        message: Human-readable description, returned to clients unless masked.
        status: HTTP status code the envelope is sent with.
        code: Stable machine-readable identifier. Never masked.
        details: Optional structured payload, kept by reference.
    """

    def __init__(
        self,
        message: str,
        status: int = DEFAULT_STATUS,
        code: str = DEFAULT_CODE,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "status": self.status,
        }
        if self.details is not None:
            result["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"DomainError(message={self.message!r}, status={self.status}, code={self.code!r})"


class ForwardedFailure(Exception):
    """Carries a non-exception failure value through ``raise``.

    Python only raises exceptions, so ``None`` or arbitrary objects handed to
    :func:`forward_error` are boxed here and unboxed again during
    classification.
    """

    def __init__(self, value: Any) -> None:
        super().__init__(repr(value))
        self.value = value


def create_error(
    message: str,
    status: int = DEFAULT_STATUS,
    code: str = DEFAULT_CODE,
    details: Any = None,
) -> DomainError:
    """Build a :class:`DomainError`. Pure construction, nothing is raised.

    Args:
        message: Any string, including an empty one.
        status: HTTP status. Not range-checked.
        code: Symbolic error code.
        details: Structured payload attached verbatim; omitted when ``None``.

    Returns:
        The constructed error, ready to ``raise``.
    """
    return DomainError(message, status=status, code=code, details=details)


def forward_error(value: Any) -> NoReturn:
    """Send ``value`` into the error channel, whatever it is."""
    if isinstance(value, Exception):
        raise value
    raise ForwardedFailure(value)
