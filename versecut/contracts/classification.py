"""Data contracts for line classification.

A run turns an ordered list of raw strings into Line records, derives one
FeatureSet per line, and returns one Classification per line. Everything here
is frozen: the second pass builds new Classification objects instead of
editing first-pass ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LineType(str, Enum):
    HEADER = "header"
    LYRIC = "lyric"
    EMPTY = "empty"
    UNCERTAIN = "uncertain"


class ClassificationMethod(str, Enum):
    """Stage of the state machine that produced a verdict."""

    EMPTY = "empty"
    SAFE_RULE = "rule-safe"
    HEURISTIC_LENGTH = "heuristic-length"
    HEURISTIC_EXCLAMATION = "heuristic-exclamation"
    ML_CONTEXT = "ml-context"


@dataclass(frozen=True)
class Line:
    """One input line. ``text`` is the trimmed form of ``raw``."""

    index: int
    raw: str
    text: str

    @classmethod
    def from_raw(cls, index: int, raw: str) -> Line:
        return cls(index=index, raw=raw, text=raw.strip())

    @property
    def is_empty(self) -> bool:
        return not self.text


@dataclass(frozen=True)
class LineContext:
    """Neighborhood of a line.

    ``surrounding_confirmed_lyric_count`` is None during the first pass; it is
    only known once every line has a provisional verdict.
    """

    previous_text: str | None = None
    next_text: str | None = None
    position_in_group: int = 0
    surrounding_confirmed_lyric_count: int | None = None


@dataclass(frozen=True)
class FeatureSet:
    """Structural signals for one line."""

    word_count: int
    char_count: int
    is_all_caps: bool
    has_brackets: bool
    has_parentheses: bool
    contains_structural_keyword: bool
    is_suspicious: bool
    has_exclamation: bool
    previous_empty: bool
    next_empty: bool
    position_in_group: int
    surrounding_confirmed_lyric_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "word_count": self.word_count,
            "char_count": self.char_count,
            "is_all_caps": self.is_all_caps,
            "has_brackets": self.has_brackets,
            "has_parentheses": self.has_parentheses,
            "contains_structural_keyword": self.contains_structural_keyword,
            "is_suspicious": self.is_suspicious,
            "has_exclamation": self.has_exclamation,
            "previous_empty": self.previous_empty,
            "next_empty": self.next_empty,
            "position_in_group": self.position_in_group,
            "surrounding_confirmed_lyric_count": self.surrounding_confirmed_lyric_count,
        }


@dataclass(frozen=True)
class Evidence:
    """Why a verdict was reached.

    SAFE verdicts fill ``rule``. ML verdicts fill the similarity fields and
    list the context adjustments that were applied, in order.
    """

    rule: str | None = None
    header_similarity: float | None = None
    lyric_similarity: float | None = None
    raw_header_similarity: float | None = None
    raw_lyric_similarity: float | None = None
    adjustments: tuple[str, ...] = ()
    suspicious_bias: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.rule is not None:
            data["rule"] = self.rule
        if self.header_similarity is not None:
            data["header_similarity"] = round(self.header_similarity, 4)
            data["lyric_similarity"] = round(self.lyric_similarity or 0.0, 4)
            data["raw_header_similarity"] = round(self.raw_header_similarity or 0.0, 4)
            data["raw_lyric_similarity"] = round(self.raw_lyric_similarity or 0.0, 4)
        if self.adjustments:
            data["adjustments"] = list(self.adjustments)
        if self.suspicious_bias:
            data["suspicious_bias"] = True
        return data


@dataclass(frozen=True)
class Classification:
    """Verdict for one line.

    Attributes:
        line: The classified line.
        type: Header, lyric, empty or uncertain.
        confidence: Value in [0, 1]. SAFE rule matches are always 1.0.
        method: Stage that produced the verdict.
        evidence: Optional structured explanation.
        features: Features the verdict was based on (None for empty lines).
        reprocessed: True when the second pass replaced the first verdict.
    """

    line: Line
    type: LineType
    confidence: float
    method: ClassificationMethod
    evidence: Evidence | None = None
    features: FeatureSet | None = None
    reprocessed: bool = False

    @property
    def text(self) -> str:
        return self.line.raw

    @property
    def is_header(self) -> bool:
        return self.type == LineType.HEADER

    @property
    def keep_for_layout(self) -> bool:
        """Uncertain lines are kept: dropping real lyrics is the worse failure."""
        return self.type != LineType.HEADER

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "index": self.line.index,
            "text": self.line.raw,
            "type": self.type.value,
            "confidence": round(self.confidence, 4),
            "method": self.method.value,
            "reprocessed": self.reprocessed,
        }
        if self.evidence is not None:
            data["evidence"] = self.evidence.to_dict()
        if self.features is not None:
            data["features"] = self.features.to_dict()
        return data


@dataclass(frozen=True)
class ClassificationStats:
    """Aggregate counts over one run."""

    total: int
    non_empty: int
    headers: int
    lyrics: int
    uncertain: int
    reprocessed: int
    avg_confidence: float
    by_method: dict[str, int] = field(default_factory=dict)

    @property
    def rule_share(self) -> float:
        """Share of non-empty lines decided without the embedding model."""
        if not self.non_empty:
            return 0.0
        ml = self.by_method.get(ClassificationMethod.ML_CONTEXT.value, 0)
        return (self.non_empty - ml) / self.non_empty

    @property
    def ml_share(self) -> float:
        if not self.non_empty:
            return 0.0
        return self.by_method.get(ClassificationMethod.ML_CONTEXT.value, 0) / self.non_empty

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "non_empty": self.non_empty,
            "headers": self.headers,
            "lyrics": self.lyrics,
            "uncertain": self.uncertain,
            "reprocessed": self.reprocessed,
            "avg_confidence": round(self.avg_confidence, 4),
            "by_method": dict(self.by_method),
            "rule_share": round(self.rule_share, 4),
            "ml_share": round(self.ml_share, 4),
        }
