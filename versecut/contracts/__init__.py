"""Data contracts shared by the classifier, the CLI and callers."""

from versecut.contracts.classification import (
    Classification,
    ClassificationMethod,
    ClassificationStats,
    Evidence,
    FeatureSet,
    Line,
    LineContext,
    LineType,
)

__all__ = [
    "Classification",
    "ClassificationMethod",
    "ClassificationStats",
    "Evidence",
    "FeatureSet",
    "Line",
    "LineContext",
    "LineType",
]
