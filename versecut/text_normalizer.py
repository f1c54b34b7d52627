"""Text Normalizer - Canonical text cleaning for lyric lines.

Single source of truth for line-level text helpers. Embedding inputs,
embedding cache keys and centroid examples all pass through normalize_text()
so that the same line always maps to the same vector.

Usage:
    from versecut.text_normalizer import normalize_text, word_count

    normalize_text("[Verse 1]")  # "verse 1"
    word_count("Drop the bass")  # 3
"""

import re

# Anything that is not a word character or whitespace counts as punctuation
PUNCTUATION_REGEX = re.compile(r"[^\w\s]+", re.UNICODE)
WHITESPACE_REGEX = re.compile(r"\s+")

# Decorations people wrap around section names: *Intro*, ~Chorus~, <Verse>
EDGE_SYMBOLS_REGEX = re.compile(r"^[^\w]+|[^\w]+$", re.UNICODE)


def normalize_text(text: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace.

    Args:
        text: Raw line text.

    Returns:
        Normalized text. Lines made only of punctuation normalize to "".
    """
    lowered = text.lower()
    no_punct = PUNCTUATION_REGEX.sub(" ", lowered)
    return WHITESPACE_REGEX.sub(" ", no_punct).strip()


def strip_edge_symbols(text: str) -> str:
    """Remove leading and trailing non-word characters."""
    return EDGE_SYMBOLS_REGEX.sub("", text.strip())


def word_count(text: str) -> int:
    """Number of whitespace-separated tokens in a line."""
    return len(text.split())


def is_all_caps(text: str) -> bool:
    """True if the text has at least one cased letter and no lowercase ones."""
    has_cased = any(ch.isalpha() and ch.upper() != ch.lower() for ch in text)
    return has_cased and text == text.upper()


__all__ = [
    "is_all_caps",
    "normalize_text",
    "strip_edge_symbols",
    "word_count",
]
