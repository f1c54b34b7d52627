"""Per-line classification state machine.

Each non-empty line moves through the stages below until one of them decides:

    1. SAFE rule         -> header, 1.0
    2. Length bypass     -> lyric (long lines that are not suspicious)
    3. Exclamation bypass-> lyric (short shouts without structural words)
    4. Embedding + context multipliers -> header, lyric or uncertain

Only stage 4 needs the embedding backend or the centroids, and both are
fetched on demand, so a line decided earlier never touches them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from versecut.classifiers.rules import match_safe
from versecut.config import VersecutConfig, get_config
from versecut.contracts import (
    Classification,
    ClassificationMethod,
    Evidence,
    FeatureSet,
    Line,
    LineType,
)
from versecut.vector_math import cosine_similarity

if TYPE_CHECKING:
    from versecut.classifiers.centroids import Centroids
    from versecut.embedding_adapter import EmbeddingProvider

logger = logging.getLogger(__name__)


class LineClassifier:
    """Classify one line given its features.

    Args:
        provider: Embedding provider used by the ML stage.
        centroids: Zero-argument callable returning the run's Centroids.
            Called only when a line reaches the ML stage.
        config: Thresholds and multipliers. Defaults to get_config().

    Thread Safety:
        Thread-safe as long as the provider and the centroids callable are;
        the classifier itself holds no mutable state.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        centroids: Callable[[], Centroids],
        config: VersecutConfig | None = None,
    ) -> None:
        self._provider = provider
        self._centroids = centroids
        self._config = config or get_config()

    def classify(self, line: Line, features: FeatureSet) -> Classification:
        """Run the state machine for one line.

        Raises:
            EmbeddingError: If the line reaches the ML stage and the backend fails.
        """
        if line.is_empty:
            return Classification(
                line=line,
                type=LineType.EMPTY,
                confidence=1.0,
                method=ClassificationMethod.EMPTY,
            )

        safe = match_safe(line.text)
        if safe is not None:
            return Classification(
                line=line,
                type=LineType.HEADER,
                confidence=1.0,
                method=ClassificationMethod.SAFE_RULE,
                evidence=Evidence(rule=safe.name),
                features=features,
            )

        heuristics = self._config.heuristics
        if features.word_count >= heuristics.length_min_words and not features.is_suspicious:
            return Classification(
                line=line,
                type=LineType.LYRIC,
                confidence=heuristics.length_confidence,
                method=ClassificationMethod.HEURISTIC_LENGTH,
                features=features,
            )

        if (
            features.word_count <= heuristics.exclamation_max_words
            and features.has_exclamation
            and not features.contains_structural_keyword
        ):
            return Classification(
                line=line,
                type=LineType.LYRIC,
                confidence=heuristics.exclamation_confidence,
                method=ClassificationMethod.HEURISTIC_EXCLAMATION,
                features=features,
            )

        return self._classify_with_embedding(line, features)

    def _classify_with_embedding(self, line: Line, features: FeatureSet) -> Classification:
        centroids = self._centroids()
        vector = self._provider.embed(line.text)

        raw_header = cosine_similarity(vector, centroids.header)
        raw_lyric = cosine_similarity(vector, centroids.lyric)
        header_sim, lyric_sim, adjustments = self._apply_context(raw_header, raw_lyric, features)

        line_type = LineType.HEADER if header_sim > lyric_sim else LineType.LYRIC
        confidence = min(1.0, max(0.0, abs(header_sim - lyric_sim)))

        thresholds = self._config.thresholds
        suspicious_bias = False
        if confidence < thresholds.uncertain_below:
            if features.is_suspicious and header_sim >= thresholds.suspicious_header_ratio * lyric_sim:
                line_type = LineType.HEADER
                suspicious_bias = True
            else:
                line_type = LineType.UNCERTAIN

        logger.debug(
            "ML verdict for line %d: %s (h=%.3f l=%.3f conf=%.3f adj=%s)",
            line.index,
            line_type.value,
            header_sim,
            lyric_sim,
            confidence,
            ",".join(adjustments) or "-",
        )

        return Classification(
            line=line,
            type=line_type,
            confidence=confidence,
            method=ClassificationMethod.ML_CONTEXT,
            evidence=Evidence(
                header_similarity=header_sim,
                lyric_similarity=lyric_sim,
                raw_header_similarity=raw_header,
                raw_lyric_similarity=raw_lyric,
                adjustments=tuple(adjustments),
                suspicious_bias=suspicious_bias,
            ),
            features=features,
        )

    def _apply_context(
        self, header_sim: float, lyric_sim: float, features: FeatureSet
    ) -> tuple[float, float, list[str]]:
        boosts = self._config.boosts
        adjustments: list[str] = []

        density = features.surrounding_confirmed_lyric_count
        if density is not None and density >= boosts.lyric_density_min_neighbors:
            lyric_sim *= 1.0 + boosts.lyric_density
            adjustments.append("lyric_density")

        if features.is_suspicious:
            header_sim *= 1.0 + boosts.suspicious_header
            adjustments.append("suspicious_header")

        if (
            features.word_count <= boosts.short_caps_max_words
            and features.is_all_caps
            and features.char_count <= boosts.short_caps_max_chars
        ):
            header_sim *= 1.0 + boosts.short_caps_header
            adjustments.append("short_caps_header")

        if (
            features.word_count >= boosts.keyword_sentence_min_words
            and features.contains_structural_keyword
        ):
            lyric_sim *= 1.0 + boosts.keyword_sentence_lyric
            adjustments.append("keyword_sentence_lyric")

        return header_sim, lyric_sim, adjustments


__all__ = ["LineClassifier"]
