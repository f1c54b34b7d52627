"""Run statistics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from versecut.contracts import Classification, ClassificationStats, LineType


def summarize(results: Sequence[Classification]) -> ClassificationStats:
    """Aggregate counts over a list of classifications.

    Average confidence is taken over non-empty lines only; empty lines carry
    a trivial 1.0 that would inflate it.
    """
    non_empty = [r for r in results if r.type != LineType.EMPTY]
    types = Counter(r.type for r in non_empty)
    methods = Counter(r.method.value for r in non_empty)
    avg = sum(r.confidence for r in non_empty) / len(non_empty) if non_empty else 0.0

    return ClassificationStats(
        total=len(results),
        non_empty=len(non_empty),
        headers=types[LineType.HEADER],
        lyrics=types[LineType.LYRIC],
        uncertain=types[LineType.UNCERTAIN],
        reprocessed=sum(1 for r in results if r.reprocessed),
        avg_confidence=avg,
        by_method=dict(methods),
    )


__all__ = ["summarize"]
