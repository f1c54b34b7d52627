"""Structured logging and timing utilities for versecut.

Provides:
- StructuredFormatter: JSON log formatter for structured log output
- timed_operation: Context manager that logs operation timing
- log_event: Helper for structured event logging with metrics
- configure_logging: Root logger setup used by the CLI

Uses stdlib logging only.

Usage:
    from versecut.observability.logging import timed_operation, log_event

    with timed_operation(logger, "centroids.build", examples=42):
        centroids = build_centroids(provider)

    log_event(logger, "classifier.run.complete", lines=31, reprocessed=4)
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs log records as single-line JSON with standard fields:
    timestamp, level, logger, message, plus any extra fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if getattr(record, "event_type", None):
            entry["event"] = record.event_type  # type: ignore[attr-defined]
        if getattr(record, "metrics", None):
            entry["metrics"] = record.metrics  # type: ignore[attr-defined]
        if getattr(record, "metadata", None):
            entry["metadata"] = record.metadata  # type: ignore[attr-defined]

        if record.exc_info and record.exc_info[1]:
            entry["error"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(entry, default=str)


def _split_fields(fields: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    # bool is an int subclass but reads better as metadata
    metrics = {
        k: v for k, v in fields.items() if isinstance(v, (int, float)) and not isinstance(v, bool)
    }
    metadata = {k: v for k, v in fields.items() if k not in metrics}
    return metrics, metadata


@contextmanager
def timed_operation(
    log: logging.Logger,
    operation: str,
    level: int = logging.INFO,
    **extra: Any,
) -> Iterator[dict[str, Any]]:
    """Context manager that logs operation start/complete with timing.

    Args:
        log: Logger instance.
        operation: Operation name (e.g., "classifier.pass1").
        level: Log level for completion message (start is always DEBUG).
        **extra: Additional key-value pairs included in the log.

    Yields:
        dict that can be updated with additional metrics during the operation.

    Example:
        with timed_operation(logger, "classifier.pass2") as ctx:
            ctx["reprocessed"] = len(flagged)
    """
    ctx: dict[str, Any] = {}
    start = time.perf_counter()
    log.debug(
        "%s started",
        operation,
        extra={"event_type": f"{operation}.start", "metadata": extra},
    )
    try:
        yield ctx
    except Exception:
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.error(
            "%s failed after %.1fms",
            operation,
            elapsed_ms,
            exc_info=True,
            extra={
                "event_type": f"{operation}.failed",
                "metrics": {"latency_ms": round(elapsed_ms, 1)},
                "metadata": extra,
            },
        )
        raise

    elapsed_ms = (time.perf_counter() - start) * 1000
    metrics, metadata = _split_fields({**extra, **ctx})
    log.log(
        level,
        "%s completed in %.1fms",
        operation,
        elapsed_ms,
        extra={
            "event_type": f"{operation}.complete",
            "metrics": {"latency_ms": round(elapsed_ms, 1), **metrics},
            "metadata": metadata,
        },
    )


def log_event(
    log: logging.Logger,
    event_type: str,
    level: int = logging.INFO,
    message: str | None = None,
    **fields: Any,
) -> None:
    """Log a structured event with typed fields.

    Args:
        log: Logger instance.
        event_type: Event type string (e.g., "classifier.run.complete").
        level: Log level.
        message: Optional human-readable message. Defaults to event_type.
        **fields: Arbitrary key-value fields. Numeric values go to metrics,
                  others go to metadata.
    """
    metrics, metadata = _split_fields(fields)
    log.log(
        level,
        message or event_type,
        extra={
            "event_type": event_type,
            "metrics": metrics or None,
            "metadata": metadata or None,
        },
    )


def configure_logging(verbose: bool = False, structured: bool = False) -> None:
    """Configure the root logger for command-line use.

    Args:
        verbose: DEBUG level when True, otherwise WARNING.
        structured: Emit single-line JSON instead of plain text.
    """
    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Replace existing handlers to avoid duplicate output
    root.handlers = [handler]


__all__ = [
    "StructuredFormatter",
    "configure_logging",
    "log_event",
    "timed_operation",
]
