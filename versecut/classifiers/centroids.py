"""Header and lyric centroids.

A centroid is the mean of the provider embeddings of a list of reference
lines. The ML stage compares a line against the header centroid and the
lyric centroid and lets the closer one win.

The default lyric references deliberately include sentences that use
structural words in prose ("Like a bridge over troubled water") so the lyric
centroid is not pulled away from every line that mentions a keyword.

Centroids are stored as:
    centroids.npy: Numpy file with dict {"header": array, "lyric": array}
"""

from __future__ import annotations

import logging
import pickle
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from versecut.errors import CorpusError, dimension_mismatch
from versecut.observability import timed_operation
from versecut.vector_math import as_vector, mean_vector

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from versecut.embedding_adapter import EmbeddingProvider

logger = logging.getLogger(__name__)

REFERENCE_HEADERS: tuple[str, ...] = (
    # Bracketed section names
    "[Verse 1]",
    "[Verse 2]",
    "[Verse 3]",
    "[Chorus]",
    "[Pre-Chorus]",
    "[Post-Chorus]",
    "[Bridge]",
    "[Intro]",
    "[Outro]",
    "[Hook]",
    "[Refrain]",
    "[Interlude]",
    # Bare section names
    "CHORUS",
    "PRE CHORUS",
    "BRIDGE",
    "VERSE 1",
    "INTRO",
    "OUTRO",
    "INSTRUMENTAL",
    "BREAKDOWN",
    "DROP",
    "BEAT",
    "SOLO",
    "Interlude",
    "Instrumental Break",
    "Guitar Solo",
    # Short codes
    "V1",
    "V2",
    "V3",
    "V4",
)

REFERENCE_LYRICS: tuple[str, ...] = (
    "Walking home beneath the silver stars",
    "I can't believe you're gone",
    "Love is all we need",
    "Dancing in the moonlight",
    "When I was young and free",
    "You and me together",
    "Dreams that never die",
    "Hold me close tonight",
    "Running through the rain",
    "Forever in my heart",
    "The time is near and coming soon",
    "All the world will see the truth",
    # Structural words used as ordinary language
    "Like a bridge over troubled water",
    "We let the bass drop low tonight",
    "Every beat of my heart is yours",
    "Feel the breakdown coming near",
    "Instrumental music fills the empty hall",
    "Sing the chorus of my heart",
    "Another verse of the same old song",
    "Rap battles in the street tonight",
)


@dataclass(frozen=True)
class ReferenceCorpus:
    """Example lines for the two centroids."""

    header_examples: tuple[str, ...] = REFERENCE_HEADERS
    lyric_examples: tuple[str, ...] = REFERENCE_LYRICS


DEFAULT_CORPUS = ReferenceCorpus()


@dataclass(frozen=True)
class Centroids:
    """Header and lyric centroids of equal length.

    Raises:
        DimensionMismatchError: On construction with vectors of different length.
    """

    header: NDArray[np.float32]
    lyric: NDArray[np.float32]

    def __post_init__(self) -> None:
        header = as_vector(self.header).copy()
        lyric = as_vector(self.lyric).copy()
        if header.shape != lyric.shape:
            raise dimension_mismatch("centroids", header.shape[0], lyric.shape[0])
        header.setflags(write=False)
        lyric.setflags(write=False)
        object.__setattr__(self, "header", header)
        object.__setattr__(self, "lyric", lyric)

    @property
    def dim(self) -> int:
        return int(self.header.shape[0])


def build_centroid(provider: EmbeddingProvider, examples: Sequence[str]) -> NDArray[np.float32]:
    """Mean provider embedding of the examples.

    Raises:
        CorpusError: If no examples are given.
    """
    if not examples:
        raise CorpusError("Cannot build a centroid from an empty example list")
    return mean_vector(provider.embed_many(list(examples)))


def build_centroids(
    provider: EmbeddingProvider,
    corpus: ReferenceCorpus = DEFAULT_CORPUS,
) -> Centroids:
    """Build both centroids from a reference corpus."""
    with timed_operation(
        logger,
        "centroids.build",
        header_examples=len(corpus.header_examples),
        lyric_examples=len(corpus.lyric_examples),
    ):
        return Centroids(
            header=build_centroid(provider, corpus.header_examples),
            lyric=build_centroid(provider, corpus.lyric_examples),
        )


def save_centroids(centroids: Centroids, path: Path) -> None:
    """Write centroids to a .npy file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    # Write through a handle so numpy does not append a .npy suffix
    with path.open("wb") as f:
        np.save(f, {"header": centroids.header, "lyric": centroids.lyric})
    logger.info("Saved %d-dim centroids to %s", centroids.dim, path)


def load_centroids(path: Path) -> Centroids:
    """Read centroids written by save_centroids().

    Raises:
        FileNotFoundError: If the file does not exist.
        CorpusError: If the file is not a centroid file or lacks a centroid.
    """
    try:
        data = np.load(path, allow_pickle=True).item()
    except (ValueError, pickle.UnpicklingError) as e:
        raise CorpusError(f"{path} is not a centroid file", cause=e) from e
    if not isinstance(data, dict) or not {"header", "lyric"} <= data.keys():
        raise CorpusError(f"{path} does not contain header and lyric centroids")
    centroids = Centroids(header=np.array(data["header"]), lyric=np.array(data["lyric"]))
    logger.info("Loaded %d-dim centroids from %s", centroids.dim, path)
    return centroids


__all__ = [
    "Centroids",
    "DEFAULT_CORPUS",
    "REFERENCE_HEADERS",
    "REFERENCE_LYRICS",
    "ReferenceCorpus",
    "build_centroid",
    "build_centroids",
    "load_centroids",
    "save_centroids",
]
