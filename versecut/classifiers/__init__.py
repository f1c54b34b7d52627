"""Lyric line classifiers.

Submodules:
    patterns: Whole-line named regex matcher
    rules: SAFE and SUSPICIOUS header rule sets
    features: Per-line feature extraction and neighborhood contexts
    centroids: Reference corpus and header/lyric centroids
    line_classifier: Per-line state machine
    session: Two-pass orchestration over a lyric sheet
    stats: Run statistics
"""

from versecut.classifiers.centroids import (
    DEFAULT_CORPUS,
    Centroids,
    ReferenceCorpus,
    build_centroid,
    build_centroids,
    load_centroids,
    save_centroids,
)
from versecut.classifiers.features import build_contexts, extract_features
from versecut.classifiers.line_classifier import LineClassifier
from versecut.classifiers.rules import contains_structural_keyword, is_suspicious, match_safe
from versecut.classifiers.session import ClassifierSession, classify_lines, strip_headers
from versecut.classifiers.stats import summarize

__all__ = [
    "Centroids",
    "ClassifierSession",
    "DEFAULT_CORPUS",
    "LineClassifier",
    "ReferenceCorpus",
    "build_centroid",
    "build_centroids",
    "build_contexts",
    "classify_lines",
    "contains_structural_keyword",
    "extract_features",
    "is_suspicious",
    "load_centroids",
    "match_safe",
    "save_centroids",
    "strip_headers",
    "summarize",
]
