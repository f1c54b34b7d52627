"""Embedding Adapter - the single way versecut turns text into vectors.

Layers:
    1. EmbeddingBackend             - anything with encode(texts) and embedding_dim
    2. SentenceTransformerBackend   - default backend, lazily loaded, shared per process
    3. EmbeddingProvider            - normalization, per-session cache, shape checks

All text passes through normalize_text() before it is encoded or used as a
cache key, so "[Chorus]" and "chorus" share one vector. Provider vectors are
L2-normalized and read-only; the cache hands back the identical array object
on every repeat lookup.

Usage:
    from versecut.embedding_adapter import EmbeddingProvider

    provider = EmbeddingProvider()          # uses get_default_backend()
    vec = provider.embed("[Verse 1]")       # shape (384,)
    assert provider.embed("verse 1") is vec
"""

from __future__ import annotations

import gc
import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np

from versecut.config import EmbeddingConfig, get_config
from versecut.errors import (
    EmbeddingError,
    VersecutError,
    dimension_mismatch,
    embedding_backend_unavailable,
)
from versecut.observability import timed_operation
from versecut.text_normalizer import normalize_text
from versecut.vector_math import l2_normalize

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================

EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
EMBEDDING_DIM = 384


# =============================================================================
# Backends
# =============================================================================


@runtime_checkable
class EmbeddingBackend(Protocol):
    """Deterministic text-to-vector mapping."""

    @property
    def embedding_dim(self) -> int: ...

    def encode(self, texts: list[str]) -> NDArray[np.float32]:
        """Return an array of shape (len(texts), embedding_dim)."""
        ...


class SentenceTransformerBackend:
    """SentenceTransformer model loaded on first use.

    A failed load is not kept: it raises EmbeddingBackendError and the next
    call tries again. The backend is shared by every session in the process,
    so one unreachable model hub must not disable later runs.

    Thread Safety:
        Thread-safe. The model is loaded at most once; encode() may be called
        from several threads.
    """

    def __init__(self, config: EmbeddingConfig | None = None) -> None:
        self._config = config or EmbeddingConfig()
        self._model: Any = None
        self._lock = threading.Lock()

    @property
    def model_name(self) -> str:
        return self._config.model_name

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def _ensure_model(self) -> Any:
        if self._model is not None:
            return self._model

        with self._lock:
            if self._model is not None:
                return self._model
            try:
                with timed_operation(
                    logger,
                    "embedding.model_load",
                    model=self.model_name,
                    local_files_only=self._config.local_files_only,
                ):
                    from sentence_transformers import SentenceTransformer

                    self._model = SentenceTransformer(
                        self.model_name,
                        device=self._config.device,
                        local_files_only=self._config.local_files_only,
                    )
            except Exception as e:
                raise embedding_backend_unavailable(self.model_name, cause=e) from e

            return self._model

    @property
    def embedding_dim(self) -> int:
        """Dimension reported by the loaded model (loads it if needed)."""
        model = self._ensure_model()
        dim = model.get_sentence_embedding_dimension()
        return int(dim) if dim else EMBEDDING_DIM

    def encode(self, texts: list[str]) -> NDArray[np.float32]:
        model = self._ensure_model()
        if not texts:
            return np.array([], dtype=np.float32).reshape(0, self.embedding_dim)

        embeddings = model.encode(
            texts,
            batch_size=self._config.batch_size,
            convert_to_numpy=True,
            normalize_embeddings=False,
            show_progress_bar=False,
        )
        return np.asarray(embeddings, dtype=np.float32)

    def unload(self) -> None:
        """Drop the model; the next encode() loads it again."""
        with self._lock:
            if self._model is not None:
                self._model = None
                gc.collect()
                logger.info("Unloaded SentenceTransformer model %s", self.model_name)


# =============================================================================
# Cache
# =============================================================================


class EmbeddingCache:
    """Unbounded normalized-text -> vector map owned by one session.

    Concurrent writers for the same key converge on a single stored vector:
    the first one wins and everyone gets that object back.
    """

    def __init__(self) -> None:
        self._vectors: dict[str, NDArray[np.float32]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> NDArray[np.float32] | None:
        with self._lock:
            vector = self._vectors.get(key)
            if vector is None:
                self._misses += 1
            else:
                self._hits += 1
            return vector

    def put(self, key: str, vector: NDArray[np.float32]) -> NDArray[np.float32]:
        """Store a vector unless one is already stored; return the stored one."""
        with self._lock:
            return self._vectors.setdefault(key, vector)

    def clear(self) -> None:
        with self._lock:
            self._vectors.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"size": len(self._vectors), "hits": self._hits, "misses": self._misses}

    def __contains__(self, key: object) -> bool:
        return key in self._vectors

    def __len__(self) -> int:
        return len(self._vectors)


# =============================================================================
# Provider
# =============================================================================


class EmbeddingProvider:
    """Normalizing, caching front end over an EmbeddingBackend.

    Thread Safety:
        embed() is safe to call concurrently; see EmbeddingCache.
    """

    def __init__(
        self,
        backend: EmbeddingBackend | None = None,
        cache: EmbeddingCache | None = None,
    ) -> None:
        self.backend = backend if backend is not None else get_default_backend()
        self.cache = cache if cache is not None else EmbeddingCache()

    @property
    def embedding_dim(self) -> int:
        return self.backend.embedding_dim

    def embed(self, text: str) -> NDArray[np.float32]:
        """Embed one line.

        Args:
            text: Raw line text.

        Returns:
            Read-only, L2-normalized float32 vector. Repeat calls with text
            that normalizes identically return the same object.

        Raises:
            EmbeddingBackendError: Backend could not be loaded.
            DimensionMismatchError: Backend returned a vector of the wrong length.
            EmbeddingError: Backend failed in any other way.
        """
        key = normalize_text(text)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        raw = self._encode([key], original=text)
        return self._store(key, raw[0])

    def embed_many(self, texts: Sequence[str]) -> list[NDArray[np.float32]]:
        """Embed several lines, encoding all cache misses in one backend call."""
        keys = [normalize_text(t) for t in texts]
        vectors: dict[str, NDArray[np.float32]] = {}
        missing: list[str] = []
        for key in keys:
            if key in vectors or key in missing:
                continue
            cached = self.cache.get(key)
            if cached is not None:
                vectors[key] = cached
            else:
                missing.append(key)

        if missing:
            raw = self._encode(missing)
            for key, row in zip(missing, raw):
                vectors[key] = self._store(key, row)

        return [vectors[key] for key in keys]

    def _encode(self, keys: list[str], original: str | None = None) -> NDArray[np.float32]:
        try:
            result = self.backend.encode(keys)
        except VersecutError:
            raise
        except Exception as e:
            raise EmbeddingError(
                f"Embedding backend failed: {e}",
                model_name=getattr(self.backend, "model_name", None),
                text=original if original is not None else keys[0],
                cause=e,
            ) from e

        array = np.asarray(result, dtype=np.float32)
        if array.ndim == 1 and len(keys) == 1:
            array = array.reshape(1, -1)
        if array.ndim != 2 or array.shape[0] != len(keys):
            raise EmbeddingError(
                f"Embedding backend returned shape {array.shape} for {len(keys)} texts",
                text=original if original is not None else keys[0],
            )

        expected = self.backend.embedding_dim
        if array.shape[1] != expected:
            raise dimension_mismatch("embedding", expected, array.shape[1])
        return array

    def _store(self, key: str, row: NDArray[np.float32]) -> NDArray[np.float32]:
        vector = l2_normalize(row)
        vector.setflags(write=False)
        return self.cache.put(key, vector)


# =============================================================================
# Singleton Access
# =============================================================================

_backend: SentenceTransformerBackend | None = None
_backend_lock = threading.Lock()


def get_default_backend() -> SentenceTransformerBackend:
    """Get or create the process-wide SentenceTransformer backend.

    The model itself is not loaded until the first encode().
    """
    global _backend

    if _backend is None:
        with _backend_lock:
            if _backend is None:
                _backend = SentenceTransformerBackend(get_config().embedding)

    return _backend


def reset_default_backend() -> None:
    """Unload and forget the shared backend."""
    global _backend

    with _backend_lock:
        if _backend is not None:
            _backend.unload()
        _backend = None


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Constants
    "EMBEDDING_DIM",
    "EMBEDDING_MODEL",
    # Classes
    "EmbeddingBackend",
    "EmbeddingCache",
    "EmbeddingProvider",
    "SentenceTransformerBackend",
    # Singleton functions
    "get_default_backend",
    "reset_default_backend",
]
