"""Tests for the studio command line."""

import json
import os
from unittest.mock import patch

import pytest

import studio_cli


@pytest.fixture
def data_env(temp_dir):
    """Point the CLI's history at a temporary data directory."""
    with patch.dict(os.environ, {"MOCKUP_STUDIO_DATA_DIR": str(temp_dir)}):
        yield temp_dir


@pytest.fixture
def fake_session(session):
    with patch.object(studio_cli, "build_session", return_value=session):
        yield session


class TestParser:
    def test_describe_defaults_to_first_style(self):
        args = studio_cli.build_parser().parse_args(["describe", "music dashboard"])
        assert args.text == "music dashboard"
        assert args.style == "Minimalist"

    def test_describe_rejects_unknown_style(self):
        with pytest.raises(SystemExit):
            studio_cli.build_parser().parse_args(["describe", "x", "--style", "Baroque"])

    def test_clone_collects_screenshots(self):
        args = studio_cli.build_parser().parse_args(
            ["clone", "--screenshot", "a.png", "--screenshot", "b.png"]
        )
        assert [p.name for p in args.screenshot] == ["a.png", "b.png"]
        assert args.url is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            studio_cli.build_parser().parse_args([])


class TestRunCommands:
    """Generation commands against fake adapters."""

    def test_describe_success(self, fake_session, adapters, data_env):
        assert studio_cli.main(["describe", "music dashboard", "--style", "Cyberpunk"]) == 0
        assert len(fake_session.history) == 1
        assert adapters.closed

    def test_describe_partial_failure_exit_code(self, fake_session, adapters, make_failure, data_env):
        adapters.failures["synthesize_image"] = make_failure("quota exceeded")

        assert studio_cli.main(["describe", "music dashboard"]) == 1
        assert adapters.closed

    def test_describe_blank_text_is_validation_error(self, fake_session, adapters, data_env):
        assert studio_cli.main(["describe", "   "]) == 2
        assert adapters.calls == []

    def test_remix_writes_output_file(self, fake_session, temp_dir, data_env):
        base = temp_dir / "base.html"
        style = temp_dir / "style.html"
        out = temp_dir / "out.html"
        base.write_text("<div>mine</div>")
        style.write_text("<div class='neon'>theirs</div>")

        assert studio_cli.main(["remix", str(base), str(style), "--out", str(out)]) == 0
        assert out.read_text() == "<div>restyled</div>"

    def test_clone_missing_screenshot_is_input_error(self, fake_session, adapters, temp_dir, data_env, capsys):
        missing = temp_dir / "nope.png"

        assert studio_cli.main(["clone", "--screenshot", str(missing)]) == 2
        assert "Cannot read screenshot" in capsys.readouterr().out
        assert adapters.calls == []

    def test_remix_missing_file_is_input_error(self, fake_session, adapters, temp_dir, data_env):
        style = temp_dir / "style.html"
        style.write_text("<b>")

        assert studio_cli.main(["remix", str(temp_dir / "absent.html"), str(style)]) == 2
        assert adapters.calls == []


class TestHistoryCommands:
    def test_history_empty(self, data_env, capsys):
        assert studio_cli.main(["history"]) == 0
        assert "No history yet" in capsys.readouterr().out

    def test_clear_history_removes_file(self, data_env):
        history_file = data_env / "history.json"
        history_file.write_text(json.dumps([]))

        assert studio_cli.main(["clear-history"]) == 0
        assert not history_file.exists()

    def test_restore_unknown_id(self, fake_session, data_env):
        assert studio_cli.main(["restore", "missing"]) == 1

    def test_restore_known_id(self, fake_session, data_env):
        studio_cli.main(["describe", "login form"])
        entry_id = fake_session.history[0].id

        assert studio_cli.main(["restore", entry_id]) == 0
        assert fake_session.run_input.text == "login form"
