"""Feature extraction for single lines and their neighborhoods.

Features are pure functions of a line and its LineContext. Contexts are built
for a whole run at once: in the first pass nothing is known about neighbors
beyond their text, in the second pass the count of neighboring lines that
the first pass called lyrics is filled in.
"""

from __future__ import annotations

from collections.abc import Sequence

from versecut.classifiers.rules import contains_structural_keyword, is_suspicious
from versecut.contracts import FeatureSet, Line, LineContext
from versecut.text_normalizer import is_all_caps, word_count


def extract_features(line: Line, context: LineContext) -> FeatureSet:
    """Compute the FeatureSet for a line.

    Args:
        line: The line to describe.
        context: Its neighborhood.

    Returns:
        FeatureSet. Never raises.
    """
    text = line.text
    return FeatureSet(
        word_count=word_count(text),
        char_count=len(text),
        is_all_caps=is_all_caps(text),
        has_brackets="[" in text or "]" in text,
        has_parentheses="(" in text or ")" in text,
        contains_structural_keyword=contains_structural_keyword(text),
        is_suspicious=is_suspicious(text),
        has_exclamation="!" in text,
        previous_empty=not (context.previous_text or "").strip(),
        next_empty=not (context.next_text or "").strip(),
        position_in_group=context.position_in_group,
        surrounding_confirmed_lyric_count=context.surrounding_confirmed_lyric_count,
    )


def build_contexts(
    lines: Sequence[Line],
    confirmed_lyric: Sequence[bool] | None = None,
    window: int = 2,
) -> list[LineContext]:
    """Build one LineContext per line.

    ``position_in_group`` is the 0-based offset of a line inside its block of
    consecutive non-empty lines (0 for empty lines).

    Args:
        lines: All lines of the run, in order.
        confirmed_lyric: Per-line flags from the first pass. When given, each
            context carries the number of lyric lines within ``window`` lines
            on either side (the line itself excluded).
        window: Neighbors counted on each side.

    Raises:
        ValueError: If confirmed_lyric does not have one flag per line.
    """
    if confirmed_lyric is not None and len(confirmed_lyric) != len(lines):
        raise ValueError(
            f"confirmed_lyric has {len(confirmed_lyric)} flags for {len(lines)} lines"
        )

    contexts: list[LineContext] = []
    position = 0
    for i, line in enumerate(lines):
        if line.is_empty:
            position = 0
            group_position = 0
        else:
            group_position = position
            position += 1

        density: int | None = None
        if confirmed_lyric is not None:
            lo = max(0, i - window)
            hi = min(len(lines), i + window + 1)
            density = sum(1 for j in range(lo, hi) if j != i and confirmed_lyric[j])

        contexts.append(
            LineContext(
                previous_text=lines[i - 1].text if i > 0 else None,
                next_text=lines[i + 1].text if i + 1 < len(lines) else None,
                position_in_group=group_position,
                surrounding_confirmed_lyric_count=density,
            )
        )
    return contexts


__all__ = ["build_contexts", "extract_features"]
