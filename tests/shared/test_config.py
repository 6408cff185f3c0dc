"""Tests for configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

from shared.config import DEFAULTS, PROJECT_ROOT, history_path, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, temp_dir):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MOCKUP_STUDIO_DATA_DIR", None)
            os.environ.pop("GEMINI_API_KEY", None)
            config = load_config(temp_dir / "absent.yaml")

        assert config["studio"] == DEFAULTS["studio"]
        assert "api_key" not in config["backends"]["gemini"]

    def test_empty_file_gives_defaults(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("")
        assert load_config(path)["studio"]["persist_debounce_seconds"] == 0.5

    def test_file_values_merge_over_defaults(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text(
            "studio:\n"
            "  persist_debounce_seconds: 2\n"
            "backends:\n"
            "  gemini:\n"
            "    text_model: gemini-test\n"
        )

        config = load_config(path)

        assert config["studio"]["persist_debounce_seconds"] == 2
        assert config["studio"]["history_file"] == "history.json"
        assert config["backends"]["gemini"]["text_model"] == "gemini-test"
        assert config["backends"]["gemini"]["image_model"] == DEFAULTS["backends"]["gemini"]["image_model"]

    def test_defaults_not_mutated(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("studio:\n  data_dir: elsewhere\n")
        load_config(path)
        assert DEFAULTS["studio"]["data_dir"] == "data/studio"

    def test_environment_overrides(self, temp_dir):
        env = {"MOCKUP_STUDIO_DATA_DIR": str(temp_dir), "GEMINI_API_KEY": "env-key"}
        with patch.dict(os.environ, env):
            config = load_config(temp_dir / "absent.yaml")

        assert config["studio"]["data_dir"] == str(temp_dir)
        assert config["backends"]["gemini"]["api_key"] == "env-key"


class TestHistoryPath:
    def test_relative_data_dir_hangs_off_project_root(self):
        config = {"studio": {"data_dir": "data/studio", "history_file": "history.json"}}
        assert history_path(config) == PROJECT_ROOT / "data" / "studio" / "history.json"

    def test_absolute_data_dir(self, temp_dir):
        config = {"studio": {"data_dir": str(temp_dir), "history_file": "h.json"}}
        assert history_path(config) == temp_dir / "h.json"

    def test_missing_section_uses_defaults(self):
        assert history_path({}).name == "history.json"
        assert isinstance(history_path({}), Path)
