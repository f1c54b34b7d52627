"""Tests for versecut/observability/logging.py."""

import json
import logging
import sys

import pytest

from versecut.observability import (
    StructuredFormatter,
    configure_logging,
    log_event,
    timed_operation,
)

logger = logging.getLogger("versecut.test")


def _events(caplog):
    return [getattr(r, "event_type", None) for r in caplog.records]


class TestStructuredFormatter:
    def _record(self, **extra):
        record = logging.LogRecord(
            "versecut.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        entry = json.loads(StructuredFormatter().format(self._record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "versecut.test"
        assert entry["message"] == "hello world"
        assert "event" not in entry

    def test_event_fields(self):
        record = self._record(event_type="x.done", metrics={"n": 2}, metadata={"k": "v"})
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["event"] == "x.done"
        assert entry["metrics"] == {"n": 2}
        assert entry["metadata"] == {"k": "v"}

    def test_exception_info(self):
        try:
            raise ValueError("bad line")
        except ValueError:
            record = logging.LogRecord(
                "versecut.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["error"] == {"type": "ValueError", "message": "bad line"}


class TestTimedOperation:
    def test_complete_event(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="versecut.test"):
            with timed_operation(logger, "op", lines=3, mode="fast") as ctx:
                ctx["reprocessed"] = 1

        assert _events(caplog) == ["op.start", "op.complete"]
        done = caplog.records[-1]
        assert done.levelno == logging.INFO
        assert done.metrics["lines"] == 3
        assert done.metrics["reprocessed"] == 1
        assert done.metrics["latency_ms"] >= 0
        assert done.metadata == {"mode": "fast"}

    def test_failed_event_reraises(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="versecut.test"):
            with pytest.raises(RuntimeError):
                with timed_operation(logger, "op"):
                    raise RuntimeError("nope")

        assert _events(caplog) == ["op.start", "op.failed"]
        assert caplog.records[-1].levelno == logging.ERROR

    def test_custom_level(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="versecut.test"):
            with timed_operation(logger, "op", level=logging.DEBUG):
                pass
        assert caplog.records[-1].levelno == logging.DEBUG


class TestLogEvent:
    def test_splits_metrics_and_metadata(self, caplog):
        with caplog.at_level(logging.INFO, logger="versecut.test"):
            log_event(logger, "run.done", lines=4, ratio=0.5, ok=True, model="mini")

        record = caplog.records[-1]
        assert record.event_type == "run.done"
        assert record.getMessage() == "run.done"
        assert record.metrics == {"lines": 4, "ratio": 0.5}
        assert record.metadata == {"ok": True, "model": "mini"}

    def test_custom_message_and_level(self, caplog):
        with caplog.at_level(logging.WARNING, logger="versecut.test"):
            log_event(logger, "run.slow", level=logging.WARNING, message="slow run")
        record = caplog.records[-1]
        assert record.getMessage() == "slow run"
        assert record.metrics is None


class TestConfigureLogging:
    def test_replaces_root_handlers(self):
        configure_logging()
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_verbose_structured(self):
        configure_logging(verbose=True, structured=True)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
