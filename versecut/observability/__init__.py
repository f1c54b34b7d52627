"""Observability - structured logging and timing.

Submodules:
    logging: Structured JSON logging formatter and timing utilities
"""

from versecut.observability.logging import (
    StructuredFormatter,
    configure_logging,
    log_event,
    timed_operation,
)

__all__ = [
    "StructuredFormatter",
    "configure_logging",
    "log_event",
    "timed_operation",
]
