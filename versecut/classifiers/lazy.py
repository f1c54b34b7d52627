"""Lazy Initialization Utility - Thread-safe, fail-fast lazy values.

Centroids are only needed once a line reaches the embedding stage, so a run
whose lines are all decided by rules never touches the embedding backend.
A failed computation is remembered and re-raised on every later call; the
value is never silently replaced with None.

Usage:
    from versecut.classifiers.lazy import LazyValue

    centroids = LazyValue(lambda: build_centroids(provider), name="centroids")

    # First call computes the value
    data = centroids.get()

    # Subsequent calls return the cached value (or re-raise the cached error)
    data = centroids.get()

    # Reset to recompute
    centroids.reset()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LazyValue(Generic[T]):
    """Compute-once value with double-checked locking.

    Type Parameters:
        T: The type of the lazily-initialized value.

    Thread Safety:
        Thread-safe. The compute function runs at most once until reset()
        is called, even when several threads call get() concurrently.

    Error Handling:
        If the compute function raises, the exception is stored and raised
        again from every subsequent get(). Call reset() to allow a retry.
    """

    def __init__(self, compute_fn: Callable[[], T], name: str = "value") -> None:
        """Initialize the lazy value.

        Args:
            compute_fn: Zero-argument callable producing the value.
            name: Human-readable name used in log messages.
        """
        self._compute_fn = compute_fn
        self._name = name
        self._value: T | None = None
        self._error: Exception | None = None
        self._lock = threading.Lock()

    def get(self) -> T:
        """Return the value, computing it on first use.

        Raises:
            Exception: Whatever the compute function raised, on this call and
                every later one until reset().
        """
        # Fast path: value already computed
        if self._value is not None:
            return self._value

        with self._lock:
            if self._value is not None:
                return self._value
            if self._error is not None:
                raise self._error

            try:
                value = self._compute_fn()
            except Exception as e:
                logger.warning("Failed to compute %s: %s", self._name, e)
                self._error = e
                raise

            if value is None:
                self._error = RuntimeError(f"Compute function for {self._name} returned None")
                raise self._error

            self._value = value
            logger.debug("Successfully computed %s", self._name)
            return value

    def reset(self) -> None:
        """Forget the cached value or error so the next get() recomputes."""
        with self._lock:
            self._value = None
            self._error = None

    @property
    def is_initialized(self) -> bool:
        return self._value is not None

    @property
    def failed(self) -> bool:
        return self._error is not None


__all__ = ["LazyValue"]
