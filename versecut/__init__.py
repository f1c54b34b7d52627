"""versecut - Tell song-section headers apart from lyric lines.

Classifies each line of a lyric sheet as header, lyric, empty or uncertain
so headers can be stripped before the lyrics are laid out.
"""

from versecut.classifiers import (
    ClassifierSession,
    classify_lines,
    strip_headers,
    summarize,
)
from versecut.contracts import Classification, ClassificationMethod, LineType

__version__ = "0.3.0"

__all__ = [
    "Classification",
    "ClassificationMethod",
    "ClassifierSession",
    "LineType",
    "classify_lines",
    "strip_headers",
    "summarize",
]
