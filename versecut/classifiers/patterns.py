"""Pattern Matching Utilities - Named whole-line regex rules.

Header detection only cares about what a line *is*, never about what it
mentions, so every rule here is applied with ``fullmatch`` against the
trimmed line. A rule that would need ``search`` belongs in feature
extraction, not here.

Usage:
    from versecut.classifiers.patterns import LineRuleMatcher

    RULES = [
        ("short_code", r"[VCB]\\d{1,2}"),
        ("timestamp", r"\\[\\d{1,2}:\\d{2}\\]"),
    ]

    matcher = LineRuleMatcher(RULES)
    matcher.match("V3")        # "short_code"
    matcher.match("V3 again")  # None
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from re import Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleMatch:
    """A rule that matched a line."""

    name: str
    pattern: str


class LineRuleMatcher:
    """Ordered whole-line matcher over named regex rules.

    Returns the first rule whose pattern matches the entire trimmed line.

    Thread Safety:
        Thread-safe. Patterns are compiled once at initialization and
        matching never raises.
    """

    def __init__(
        self,
        rules: list[tuple[str, str | Pattern[str]]],
        flags: int = re.IGNORECASE,
    ) -> None:
        """Initialize the matcher.

        Args:
            rules: List of (name, pattern) tuples. Patterns can be strings or
                pre-compiled regex objects.
            flags: Regex flags to use when compiling string patterns.
                Defaults to re.IGNORECASE.
        """
        self._rules: list[tuple[str, Pattern[str]]] = []

        for name, pattern in rules:
            if isinstance(pattern, str):
                try:
                    self._rules.append((name, re.compile(pattern, flags)))
                except re.error as e:
                    logger.warning("Invalid regex for rule %s %r: %s", name, pattern, e)
            else:
                self._rules.append((name, pattern))

    def match(self, text: str) -> RuleMatch | None:
        """Match a line against the rules in order.

        Args:
            text: Line text. Surrounding whitespace is ignored.

        Returns:
            The first matching rule, or None.
        """
        stripped = text.strip()
        if not stripped:
            return None

        for name, pattern in self._rules:
            if pattern.fullmatch(stripped):
                return RuleMatch(name=name, pattern=pattern.pattern)

        return None

    def matches(self, text: str) -> bool:
        return self.match(text) is not None


__all__ = [
    "LineRuleMatcher",
    "RuleMatch",
]
