"""Base error classes and error codes for versecut.

Contains ErrorCode enum, VersecutError base class, and ConfigurationError.
All versecut-specific exceptions inherit from VersecutError.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standard error codes for versecut errors.

    These codes can be used to programmatically identify error types
    and are included in serialized error payloads.
    """

    # Configuration errors (CFG_*)
    CFG_INVALID = "CFG_INVALID"
    CFG_MISSING = "CFG_MISSING"

    # Embedding errors (EMB_*)
    EMB_BACKEND_UNAVAILABLE = "EMB_BACKEND_UNAVAILABLE"
    EMB_ENCODING_FAILED = "EMB_ENCODING_FAILED"
    EMB_DIMENSION_MISMATCH = "EMB_DIMENSION_MISMATCH"

    # Classification errors (CLS_*)
    CLS_CORPUS_INVALID = "CLS_CORPUS_INVALID"
    CLS_RUN_FAILED = "CLS_RUN_FAILED"

    # Generic errors
    UNKNOWN = "UNKNOWN"


class VersecutError(Exception):
    """Base exception for all versecut errors.

    Attributes:
        message: Human-readable error message.
        code: Machine-readable error code from ErrorCode enum.
        details: Optional additional context about the error.
        cause: Optional original exception that caused this error.
    """

    default_message: str = "An error occurred"
    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        self.cause = cause

        super().__init__(self.message)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        parts = [f"{self.__class__.__name__}({self.message!r}"]
        if self.code != self.default_code:
            parts.append(f", code={self.code.value!r}")
        if self.details:
            parts.append(f", details={self.details!r}")
        if self.cause:
            parts.append(f", cause={self.cause!r}")
        parts.append(")")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for JSON output."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "detail": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Configuration Errors


class ConfigurationError(VersecutError):
    """Raised for configuration and settings issues."""

    default_message = "Configuration error"
    default_code = ErrorCode.CFG_INVALID

    def __init__(
        self,
        message: str | None = None,
        *,
        config_key: str | None = None,
        config_path: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        if config_path:
            details["config_path"] = config_path
        super().__init__(message, code=code, details=details, cause=cause)
