"""Unified exception hierarchy for versecut.

Exception Hierarchy:
    VersecutError (base)
    +-- ConfigurationError - Configuration and settings issues
    +-- EmbeddingError - Embedding operation failures
    |   +-- EmbeddingBackendError - Backend could not be loaded or used
    |   +-- DimensionMismatchError - Incomparable vector lengths
    +-- CorpusError - Reference corpus cannot build a centroid
    +-- ClassificationRunError - Terminal error for a failed run

Usage:
    from versecut.errors import ClassificationRunError

    try:
        results = session.classify_lines(lines)
    except ClassificationRunError as e:
        logger.error("Classification failed: %s (code: %s)", e.message, e.code)
"""

from versecut.errors.base import (
    ConfigurationError,
    ErrorCode,
    VersecutError,
)
from versecut.errors.classification import ClassificationRunError, CorpusError
from versecut.errors.embedding import (
    DimensionMismatchError,
    EmbeddingBackendError,
    EmbeddingError,
)
from versecut.errors.factories import (
    classification_run_failed,
    dimension_mismatch,
    embedding_backend_unavailable,
)

__all__ = [
    # Base
    "ErrorCode",
    "VersecutError",
    "ConfigurationError",
    # Embedding
    "EmbeddingError",
    "EmbeddingBackendError",
    "DimensionMismatchError",
    # Classification
    "CorpusError",
    "ClassificationRunError",
    # Factories
    "classification_run_failed",
    "dimension_mismatch",
    "embedding_backend_unavailable",
]
