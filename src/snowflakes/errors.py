"""
Error codes and types for snowflakes.

Error codes are part of the public surface: callers persist them in audit
trails and compare them across language implementations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .read import FlakeRecord


class ErrorCode(str, Enum):
    """
    Flake error codes.
    """
    SIGNATURE_MISMATCH = "SIGNATURE_MISMATCH"
    MALFORMED_INPUT = "MALFORMED_INPUT"
    MISSING_ANCESTOR = "MISSING_ANCESTOR"
    CHAIN_TOO_DEEP = "CHAIN_TOO_DEEP"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class FlakeError(ValueError):
    """Base class for every error raised while issuing or reading flakes."""

    code: ErrorCode = ErrorCode.MALFORMED_INPUT

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.details = details or {}

    def to_error(self) -> "VerificationError":
        return VerificationError(code=self.code, message=self.message, details=self.details)


class MalformedFlakeError(FlakeError):
    """Digit stream or payload cannot be decoded or signed."""


class ChainDepthError(FlakeError):
    """Ancestor chain would exceed what a flake can carry."""

    code = ErrorCode.CHAIN_TOO_DEEP


class ConfigurationError(FlakeError):
    """Client configuration cannot produce a valid base value."""

    code = ErrorCode.CONFIGURATION_ERROR


class SignatureMismatchError(FlakeError):
    """
    Raised by strict verification. The decoded (untrusted) record stays
    available on ``record`` for inspection.
    """

    code = ErrorCode.SIGNATURE_MISMATCH

    def __init__(self, message: str, record: "FlakeRecord", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)
        self.record = record


@dataclass
class VerificationError:
    """
    A single verification error with typed code and audit details.
    """
    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class VerificationResult:
    """
    Result of verifying a flake.

    ``record`` is the decoded flake whenever decoding succeeded, even when
    the signature did not match; it is ``None`` only for malformed input.
    """
    valid: bool
    errors: list[VerificationError] = field(default_factory=list)
    record: "FlakeRecord | None" = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
        }
