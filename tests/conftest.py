"""Pytest configuration for versecut tests.

Installs a deterministic fake embedding backend so no test downloads or
loads a sentence-transformers model, and points configuration at a file
that does not exist so a developer's ~/.versecut/config.json never leaks in.
"""

import logging
import sys
import types

import pytest

from tests.fixtures.backends import FlakySentenceTransformer, KeywordBackend


@pytest.fixture
def keyword_backend():
    """Provide a fresh keyword backend for tests."""
    return KeywordBackend()


@pytest.fixture
def flaky_sentence_transformers(monkeypatch):
    """Install a sentence_transformers module whose first model load fails."""
    monkeypatch.setattr(FlakySentenceTransformer, "attempts", 0)
    monkeypatch.setattr(FlakySentenceTransformer, "failures", 1)
    module = types.ModuleType("sentence_transformers")
    module.SentenceTransformer = FlakySentenceTransformer
    monkeypatch.setitem(sys.modules, "sentence_transformers", module)
    return module


@pytest.fixture(autouse=True)
def auto_fake_backend(monkeypatch, tmp_path):
    """Auto-mock get_default_backend() and isolate configuration for all tests."""
    from versecut.config import reset_config

    backend = KeywordBackend()
    monkeypatch.setattr("versecut.embedding_adapter.get_default_backend", lambda: backend)
    monkeypatch.setenv("VERSECUT_CONFIG", str(tmp_path / "missing-config.json"))
    reset_config()

    # The CLI replaces root handlers; put pytest's back afterwards
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level

    yield backend

    root.handlers = saved_handlers
    root.setLevel(saved_level)
    reset_config()
