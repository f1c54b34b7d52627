"""Convenience factory functions for common error scenarios.

Provides shorthand functions for creating commonly-used error instances
with appropriate error codes and details pre-filled.
"""

from __future__ import annotations

from versecut.errors.classification import ClassificationRunError
from versecut.errors.embedding import DimensionMismatchError, EmbeddingBackendError


def embedding_backend_unavailable(
    model_name: str, cause: Exception | None = None
) -> EmbeddingBackendError:
    """Create an EmbeddingBackendError for a model that failed to load."""
    reason = f": {cause}" if cause is not None else ""
    return EmbeddingBackendError(
        f"Could not load embedding model {model_name}{reason}",
        model_name=model_name,
        cause=cause,
    )


def dimension_mismatch(what: str, expected: int, actual: int) -> DimensionMismatchError:
    """Create a DimensionMismatchError naming the vectors being compared."""
    return DimensionMismatchError(
        f"{what}: expected {expected} dimensions, got {actual}",
        expected=expected,
        actual=actual,
    )


def classification_run_failed(
    line_index: int | None, line_count: int, cause: Exception
) -> ClassificationRunError:
    """Create the single terminal error for a failed classification run."""
    where = f" at line {line_index}" if line_index is not None else ""
    return ClassificationRunError(
        f"Classification of {line_count} lines failed{where}: {cause}",
        line_index=line_index,
        line_count=line_count,
        cause=cause,
    )
