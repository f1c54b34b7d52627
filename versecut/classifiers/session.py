"""Two-pass classification over a whole lyric sheet.

Pass 1 classifies every line with only its textual neighborhood. Pass 2 then
counts, for each line, how many of its neighbors pass 1 called lyrics, and
re-runs the state machine on the lines pass 1 was least sure about:

    - uncertain lines
    - lines flagged suspicious
    - headers below ``thresholds.reprocess_header_below``

Pass 2 builds a new list; pass-1 verdicts are never edited in place. There
is exactly one re-evaluation pass.

A session owns its embedding cache and its centroids. A failed run leaves no
state behind: if building the centroids failed, the next run builds them
again. Sessions are cheap; the expensive piece, the sentence-embedding
model, is shared process-wide through get_default_backend().

Usage:
    from versecut.classifiers import ClassifierSession, strip_headers

    session = ClassifierSession()
    results = session.classify_lines(text.splitlines())
    print("\\n".join(strip_headers(results)))
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from versecut.classifiers.centroids import DEFAULT_CORPUS, Centroids, ReferenceCorpus, build_centroids
from versecut.classifiers.features import build_contexts, extract_features
from versecut.classifiers.lazy import LazyValue
from versecut.classifiers.line_classifier import LineClassifier
from versecut.classifiers.stats import summarize
from versecut.config import VersecutConfig, get_config
from versecut.contracts import Classification, Line, LineContext, LineType
from versecut.embedding_adapter import EmbeddingProvider
from versecut.errors import ClassificationRunError, classification_run_failed
from versecut.observability import log_event, timed_operation

logger = logging.getLogger(__name__)


class ClassifierSession:
    """Classify lyric sheets with a shared cache and lazily built centroids.

    Args:
        config: Configuration. Defaults to get_config().
        provider: Embedding provider. Defaults to a new provider over the
            shared default backend, with its own cache.
        centroids: Precomputed centroids (e.g. from load_centroids()). When
            omitted they are built from ``corpus`` the first time a line
            needs the ML stage.
        corpus: Reference corpus used to build centroids.

    Thread Safety:
        classify_lines() may be called from several threads. The cache and
        the centroid initialization are lock-protected.
    """

    def __init__(
        self,
        config: VersecutConfig | None = None,
        provider: EmbeddingProvider | None = None,
        centroids: Centroids | None = None,
        corpus: ReferenceCorpus = DEFAULT_CORPUS,
    ) -> None:
        self.config = config or get_config()
        self.provider = provider or EmbeddingProvider()
        self.corpus = corpus
        self._fixed_centroids = centroids
        self._centroids: LazyValue[Centroids] = LazyValue(self._make_centroids, name="centroids")
        self.classifier = LineClassifier(self.provider, self._centroids.get, self.config)

    def _make_centroids(self) -> Centroids:
        if self._fixed_centroids is not None:
            return self._fixed_centroids
        return build_centroids(self.provider, self.corpus)

    @property
    def centroids(self) -> Centroids:
        """The session's centroids, built on first access."""
        return self._centroids.get()

    def reset(self) -> None:
        """Clear the embedding cache and forget computed centroids."""
        self.provider.cache.clear()
        self._centroids.reset()

    def classify_lines(self, raw_lines: Sequence[str]) -> list[Classification]:
        """Classify every line of a lyric sheet.

        Args:
            raw_lines: Lines in order. Whitespace-only lines are fine.

        Returns:
            One Classification per input line, in input order.

        Raises:
            ClassificationRunError: If any line fails. No partial results are
                returned; the cause and the failing line index are attached.
        """
        lines = [Line.from_raw(i, raw) for i, raw in enumerate(raw_lines)]
        if not lines:
            return []

        try:
            with timed_operation(logger, "classifier.pass1", level=logging.DEBUG, lines=len(lines)):
                first = self._first_pass(lines)
            with timed_operation(logger, "classifier.pass2", level=logging.DEBUG) as ctx:
                final = self._second_pass(lines, first)
                ctx["reprocessed"] = sum(1 for r in final if r.reprocessed)
        except ClassificationRunError as e:
            self._end_failed_run(e)
            raise
        except Exception as e:
            error = classification_run_failed(None, len(lines), e)
            self._end_failed_run(error)
            raise error from e

        stats = summarize(final)
        log_event(
            logger,
            "classifier.run.complete",
            message=f"Classified {stats.total} lines",
            lines=stats.total,
            headers=stats.headers,
            lyrics=stats.lyrics,
            uncertain=stats.uncertain,
            reprocessed=stats.reprocessed,
            cache_size=len(self.provider.cache),
        )
        return final

    def _first_pass(self, lines: list[Line]) -> list[Classification]:
        contexts = build_contexts(lines, window=self.config.thresholds.context_window)
        workers = self.config.classifier.max_workers
        if workers <= 1 or len(lines) < 2:
            return [self._classify_one(line, ctx, len(lines)) for line, ctx in zip(lines, contexts)]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="versecut") as pool:
            return list(
                pool.map(
                    self._classify_one,
                    lines,
                    contexts,
                    [len(lines)] * len(lines),
                )
            )

    def _second_pass(
        self, lines: list[Line], first: list[Classification]
    ) -> list[Classification]:
        confirmed = [r.type == LineType.LYRIC for r in first]
        contexts = build_contexts(
            lines, confirmed_lyric=confirmed, window=self.config.thresholds.context_window
        )

        final: list[Classification] = []
        for line, ctx, previous in zip(lines, contexts, first):
            if self._needs_reprocessing(previous):
                redo = self._classify_one(line, ctx, len(lines))
                final.append(dataclasses.replace(redo, reprocessed=True))
            else:
                final.append(previous)
        return final

    def _needs_reprocessing(self, result: Classification) -> bool:
        if result.type == LineType.UNCERTAIN:
            return True
        if result.features is not None and result.features.is_suspicious:
            return True
        return (
            result.type == LineType.HEADER
            and result.confidence < self.config.thresholds.reprocess_header_below
        )

    def _classify_one(self, line: Line, context: LineContext, line_count: int) -> Classification:
        try:
            return self.classifier.classify(line, extract_features(line, context))
        except Exception as e:
            raise classification_run_failed(line.index, line_count, e) from e

    def _end_failed_run(self, error: ClassificationRunError) -> None:
        centroids_failed = self._centroids.failed
        log_event(
            logger,
            "classifier.run.failed",
            level=logging.ERROR,
            message=str(error),
            code=error.code.value,
            line_index=error.details.get("line_index"),
            line_count=error.details.get("line_count"),
            centroids_failed=centroids_failed,
        )
        # A failed centroid build belongs to this run only
        if centroids_failed:
            self._centroids.reset()


def classify_lines(
    raw_lines: Sequence[str], session: ClassifierSession | None = None
) -> list[Classification]:
    """Classify lines with a throwaway session unless one is given."""
    return (session or ClassifierSession()).classify_lines(raw_lines)


def strip_headers(results: Sequence[Classification]) -> list[str]:
    """Raw text of the lines layout should keep.

    Lyrics, uncertain lines and empty separators are kept; headers are dropped.
    """
    return [r.text for r in results if r.keep_for_layout]


__all__ = ["ClassifierSession", "classify_lines", "strip_headers"]
