"""Vector helpers for embedding comparison.

Pure and stateless. Vectors are 1-D numpy arrays; length mismatches are
configuration errors and raise instead of being coerced.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from versecut.errors import dimension_mismatch

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


def as_vector(values: ArrayLike) -> NDArray[np.float32]:
    """Return values as a flat float32 vector."""
    vector = np.asarray(values, dtype=np.float32)
    return vector.reshape(-1)


def l2_normalize(vector: ArrayLike) -> NDArray[np.float32]:
    """Scale a vector to unit length. Zero vectors are returned unchanged."""
    vec = as_vector(vector)
    norm = float(np.linalg.norm(vec))
    if norm == 0.0:
        return vec.copy()
    return (vec / norm).astype(np.float32)


def cosine_similarity(a: ArrayLike, b: ArrayLike) -> float:
    """Cosine similarity in [-1, 1].

    Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    va = as_vector(a)
    vb = as_vector(b)
    if va.shape != vb.shape:
        raise dimension_mismatch("cosine similarity", va.shape[0], vb.shape[0])

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))


def mean_vector(vectors: Sequence[ArrayLike]) -> NDArray[np.float32]:
    """Element-wise mean of equal-length vectors.

    Raises:
        ValueError: If no vectors are given.
        DimensionMismatchError: If the vectors differ in length.
    """
    if not vectors:
        raise ValueError("mean_vector requires at least one vector")

    flat = [as_vector(v) for v in vectors]
    expected = flat[0].shape[0]
    for vec in flat[1:]:
        if vec.shape[0] != expected:
            raise dimension_mismatch("centroid example", expected, vec.shape[0])
    return np.mean(np.vstack(flat), axis=0).astype(np.float32)


__all__ = [
    "as_vector",
    "cosine_similarity",
    "l2_normalize",
    "mean_vector",
]
