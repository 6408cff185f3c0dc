"""
Configuration loading for Mockup Studio.

Settings live in config.yaml at the project root. Environment variables
override the few values that differ between machines (API key, data dir).
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = PROJECT_ROOT / "config.yaml"

DEFAULTS: dict[str, Any] = {
    "studio": {
        "data_dir": "data/studio",
        "history_file": "history.json",
        "persist_debounce_seconds": 0.5,
    },
    "backends": {
        "gemini": {
            "base_url": "https://generativelanguage.googleapis.com/v1beta",
            "text_model": "gemini-2.5-flash",
            "image_model": "imagen-3.0-generate-002",
            "timeout_seconds": 120,
        },
    },
}


def _merge(base: dict, override: dict) -> dict:
    """Recursively merge override into a copy of base."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> dict:
    """
    Load configuration, layering config.yaml and environment over DEFAULTS.

    A missing file yields the defaults. An empty file is treated the same.
    """
    config_path = Path(path) if path else CONFIG_PATH
    file_config: dict = {}
    if config_path.exists():
        file_config = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}

    config = _merge(DEFAULTS, file_config)

    if os.environ.get("MOCKUP_STUDIO_DATA_DIR"):
        config["studio"]["data_dir"] = os.environ["MOCKUP_STUDIO_DATA_DIR"]
    if os.environ.get("GEMINI_API_KEY"):
        config["backends"]["gemini"]["api_key"] = os.environ["GEMINI_API_KEY"]

    return config


def history_path(config: dict) -> Path:
    """Resolve the history file location; relative data dirs hang off the project root."""
    studio = config.get("studio", {})
    data_dir = Path(studio.get("data_dir", DEFAULTS["studio"]["data_dir"]))
    if not data_dir.is_absolute():
        data_dir = PROJECT_ROOT / data_dir
    return data_dir / studio.get("history_file", DEFAULTS["studio"]["history_file"])
