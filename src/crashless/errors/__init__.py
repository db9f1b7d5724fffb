"""Error values, classification and the response envelope."""

from crashless.errors.envelope import (
    MASKED_MESSAGE,
    UNKNOWN_MESSAGE,
    ErrorEnvelope,
    FailureKind,
    build_envelope,
    classify,
    to_domain_error,
)
from crashless.errors.exceptions import DomainError, ForwardedFailure, create_error, forward_error

__all__ = [
    "MASKED_MESSAGE",
    "UNKNOWN_MESSAGE",
    "DomainError",
    "ErrorEnvelope",
    "FailureKind",
    "ForwardedFailure",
    "build_envelope",
    "classify",
    "create_error",
    "forward_error",
    "to_domain_error",
]
