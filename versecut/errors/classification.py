"""Classification error classes."""

from __future__ import annotations

from typing import Any

from versecut.errors.base import ErrorCode, VersecutError


class CorpusError(VersecutError):
    """Raised when a reference corpus cannot produce a centroid."""

    default_message = "Invalid reference corpus"
    default_code = ErrorCode.CLS_CORPUS_INVALID


class ClassificationRunError(VersecutError):
    """Raised once per failed run; no partial results are returned."""

    default_message = "Lyric classification failed"
    default_code = ErrorCode.CLS_RUN_FAILED

    def __init__(
        self,
        message: str | None = None,
        *,
        line_index: int | None = None,
        line_count: int | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if line_index is not None:
            details["line_index"] = line_index
        if line_count is not None:
            details["line_count"] = line_count
        super().__init__(message, code=code, details=details, cause=cause)
