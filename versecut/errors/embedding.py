"""Embedding error classes.

Contains errors for the embedding backend and vector shape checks.
"""

from __future__ import annotations

from typing import Any

from versecut.errors.base import ErrorCode, VersecutError


class EmbeddingError(VersecutError):
    """Base class for embedding failures."""

    default_message = "Embedding operation failed"
    default_code = ErrorCode.EMB_ENCODING_FAILED

    def __init__(
        self,
        message: str | None = None,
        *,
        model_name: str | None = None,
        text: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if model_name:
            details["model_name"] = model_name
        if text is not None:
            details["text_preview"] = text[:80] + "..." if len(text) > 80 else text
        super().__init__(message, code=code, details=details, cause=cause)


class EmbeddingBackendError(EmbeddingError):
    """Raised when the embedding backend cannot be loaded or used."""

    default_message = "Embedding backend unavailable"
    default_code = ErrorCode.EMB_BACKEND_UNAVAILABLE


class DimensionMismatchError(EmbeddingError):
    """Raised when two vectors that must be comparable differ in length.

    Signals a corpus/backend configuration problem. Vectors are never
    padded or truncated to make them fit.
    """

    default_message = "Vector dimension mismatch"
    default_code = ErrorCode.EMB_DIMENSION_MISMATCH

    def __init__(
        self,
        message: str | None = None,
        *,
        expected: int | None = None,
        actual: int | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        super().__init__(message, code=code, details=details, cause=cause)
