"""versecut Configuration System.

Loads and validates configuration from ~/.versecut/config.json (or the path in
the VERSECUT_CONFIG environment variable). Uses Pydantic for schema validation
with sensible defaults.

The confidence threshold and the context multipliers were tuned by hand
against a small corpus of real lyrics, so they live here rather than as
module constants.

Usage:
    from versecut.config import get_config, save_config

    config = get_config()
    print(config.thresholds.uncertain_below)

    # Modify and save
    config.classifier.max_workers = 4
    save_config(config)
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".versecut" / "config.json"
CONFIG_ENV_VAR = "VERSECUT_CONFIG"

# Current config schema version
CONFIG_VERSION = 1


class EmbeddingConfig(BaseModel):
    """Sentence-embedding backend configuration.

    Attributes:
        model_name: SentenceTransformer model id or local path.
        device: Torch device ("cpu", "cuda", "mps"). None lets the library pick.
        local_files_only: Never hit the network; the model must be cached.
        batch_size: Batch size used when encoding centroid examples.
    """

    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str | None = None
    local_files_only: bool = False
    batch_size: int = Field(default=32, ge=1, le=1024)


class HeuristicConfig(BaseModel):
    """Heuristic bypass rules that skip the embedding call.

    Attributes:
        length_min_words: Lines with at least this many words (and not
            suspicious) are lyrics.
        length_confidence: Confidence reported by the length bypass.
        exclamation_max_words: Short exclamations up to this many words are lyrics.
        exclamation_confidence: Confidence reported by the exclamation bypass.
    """

    length_min_words: int = Field(default=5, ge=1)
    length_confidence: float = Field(default=0.95, ge=0.0, le=1.0)
    exclamation_max_words: int = Field(default=3, ge=1)
    exclamation_confidence: float = Field(default=0.85, ge=0.0, le=1.0)


class ContextBoostConfig(BaseModel):
    """Multiplicative context adjustments applied to centroid similarities.

    Each boost is a fraction: 0.15 scales the similarity by 1.15.
    """

    lyric_density: float = Field(default=0.15, ge=0.0, le=2.0)
    suspicious_header: float = Field(default=0.25, ge=0.0, le=2.0)
    short_caps_header: float = Field(default=0.15, ge=0.0, le=2.0)
    keyword_sentence_lyric: float = Field(default=0.20, ge=0.0, le=2.0)
    short_caps_max_words: int = Field(default=2, ge=1)
    short_caps_max_chars: int = Field(default=20, ge=1)
    keyword_sentence_min_words: int = Field(default=4, ge=1)
    lyric_density_min_neighbors: int = Field(default=2, ge=1)


class ThresholdConfig(BaseModel):
    """Decision thresholds for the ML stage and the second pass.

    Attributes:
        uncertain_below: ML margins below this are reported as uncertain.
        suspicious_header_ratio: An uncertain suspicious line becomes a header
            when header similarity is at least this fraction of lyric similarity.
        reprocess_header_below: Pass-1 headers below this confidence are
            re-evaluated in pass 2.
        context_window: Neighbors on each side counted for lyric density.
    """

    uncertain_below: float = Field(default=0.10, ge=0.0, le=1.0)
    suspicious_header_ratio: float = Field(default=0.90, ge=0.0, le=1.0)
    reprocess_header_below: float = Field(default=0.30, ge=0.0, le=1.0)
    context_window: int = Field(default=2, ge=1, le=10)


class ClassifierConfig(BaseModel):
    """Run-level options.

    Attributes:
        max_workers: Threads used for the first pass. 1 runs sequentially.
    """

    max_workers: int = Field(default=1, ge=1, le=64)


class VersecutConfig(BaseModel):
    """versecut configuration schema."""

    config_version: int = CONFIG_VERSION
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    heuristics: HeuristicConfig = Field(default_factory=HeuristicConfig)
    boosts: ContextBoostConfig = Field(default_factory=ContextBoostConfig)
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)


# Module-level singleton with thread safety
_config: VersecutConfig | None = None
_config_lock = threading.Lock()


def default_config_path() -> Path:
    """Config path, honoring the VERSECUT_CONFIG environment variable."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else CONFIG_PATH


def load_config(config_path: Path | None = None) -> VersecutConfig:
    """Load configuration from file, return defaults if missing/invalid.

    Args:
        config_path: Optional path to config file. Defaults to
            default_config_path().

    Returns:
        VersecutConfig instance with loaded or default values.
    """
    path = config_path or default_config_path()

    if not path.exists():
        logger.debug("Config file not found at %s, using defaults", path)
        return VersecutConfig()

    try:
        with path.open() as f:
            data: dict[str, Any] = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in config file %s: %s, using defaults", path, e)
        return VersecutConfig()
    except OSError as e:
        logger.warning("Cannot read config file %s: %s, using defaults", path, e)
        return VersecutConfig()

    try:
        return VersecutConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Config validation failed: %s, using defaults", e)
        return VersecutConfig()


def save_config(config: VersecutConfig, config_path: Path | None = None) -> bool:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to config file. Defaults to
            default_config_path().

    Returns:
        True if saved successfully, False otherwise.
    """
    path = config_path or default_config_path()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w") as f:
            json.dump(config.model_dump(), f, indent=2)

        os.chmod(path, 0o600)

        logger.debug("Configuration saved to %s", path)
        return True

    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        return False


def get_config() -> VersecutConfig:
    """Get singleton configuration instance.

    Uses double-check locking for thread safety.

    Returns:
        Shared VersecutConfig instance.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def reset_config() -> None:
    """Reset singleton configuration for testing."""
    global _config
    with _config_lock:
        _config = None


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_PATH",
    "CONFIG_VERSION",
    "ClassifierConfig",
    "ContextBoostConfig",
    "EmbeddingConfig",
    "HeuristicConfig",
    "ThresholdConfig",
    "VersecutConfig",
    "default_config_path",
    "get_config",
    "load_config",
    "reset_config",
    "save_config",
]
