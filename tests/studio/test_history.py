"""
Tests for studio/history.py and studio/restore.py
"""

import pytest

from studio.history import HistoryLog, HistoryRecorder, MAX_HISTORY, summarize
from studio.models import (
    CloneInput,
    CloneOutput,
    DescriptionInput,
    DescriptionOutput,
    GroundingSource,
    HistoryEntry,
    Mode,
    ModifyInput,
    ModifyOutput,
    VisualStyle,
    empty_input,
)
from studio.restore import restore


def make_entry(entry_id: str, text: str = "idea") -> HistoryEntry:
    return HistoryEntry(
        id=entry_id,
        input=DescriptionInput(text=text),
        output=DescriptionOutput(enhanced_prompt=f"prompt for {text}"),
    )


class TestHistoryLog:
    """Tests for the bounded most-recent-first log."""

    def test_prepend_puts_newest_first(self):
        history = HistoryLog().prepend(make_entry("1")).prepend(make_entry("2"))
        assert [e.id for e in history] == ["2", "1"]

    def test_prepend_returns_new_log(self):
        empty = HistoryLog()
        history = empty.prepend(make_entry("1"))
        assert len(empty) == 0
        assert len(history) == 1

    def test_capacity_evicts_oldest(self):
        history = HistoryLog()
        for i in range(MAX_HISTORY + 1):
            history = history.prepend(make_entry(str(i)))

        assert len(history) == MAX_HISTORY
        assert history[0].id == str(MAX_HISTORY)
        assert history[-1].id == "1"
        assert history.find("0") is None

    def test_existing_entries_keep_their_order(self):
        history = HistoryLog()
        for i in range(5):
            history = history.prepend(make_entry(str(i)))
        before = [e.id for e in history]
        history = history.prepend(make_entry("new"))
        assert [e.id for e in history][1:] == before

    def test_find(self):
        history = HistoryLog((make_entry("a"), make_entry("b")))
        assert history.find("b").id == "b"
        assert history.find("missing") is None

    def test_clear_keeps_capacity(self):
        history = HistoryLog((make_entry("a"),), max_length=5).clear()
        assert len(history) == 0
        assert history.max_length == 5

    def test_from_list_rejects_non_list(self):
        with pytest.raises(TypeError):
            HistoryLog.from_list({"id": "1"})

    def test_from_list_truncates(self):
        data = [make_entry(str(i)).to_dict() for i in range(30)]
        assert len(HistoryLog.from_list(data)) == MAX_HISTORY

    def test_equality(self):
        assert HistoryLog((make_entry("a"),)) == HistoryLog((make_entry("a"),))
        assert HistoryLog((make_entry("a"),)) != HistoryLog()


class TestHistoryRecorder:
    """Tests for entry creation."""

    def test_ids_strictly_increase(self):
        recorder = HistoryRecorder()
        ids = [int(recorder.on_settled(DescriptionInput("x"), DescriptionOutput()).id) for _ in range(50)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 50

    def test_ids_increase_when_clock_steps_back(self, monkeypatch):
        recorder = HistoryRecorder()
        monkeypatch.setattr("studio.history.time.time_ns", lambda: 1000)
        first = recorder.on_settled(ModifyInput("<a>", "<b>"), ModifyOutput())
        second = recorder.on_settled(ModifyInput("<a>", "<b>"), ModifyOutput())
        assert first.id == "1000"
        assert second.id == "1001"

    def test_seed_continues_after_loaded_ids(self, monkeypatch):
        monkeypatch.setattr("studio.history.time.time_ns", lambda: 5)
        recorder = HistoryRecorder()
        recorder.seed(HistoryLog((make_entry("900"), make_entry("legacy-id"))))
        assert recorder.on_settled(DescriptionInput("x"), DescriptionOutput()).id == "901"

    def test_partial_output_recorded(self):
        output = DescriptionOutput(enhanced_prompt="p", html="<div/>")
        entry = HistoryRecorder().on_settled(DescriptionInput("x", VisualStyle.NEUMORPHIC), output)
        assert entry.output.preview_image is None
        assert entry.output.html == "<div/>"
        assert entry.created_at > 0

    def test_mismatched_output_rejected(self):
        with pytest.raises(ValueError):
            HistoryRecorder().on_settled(DescriptionInput("x"), CloneOutput())


class TestSummarize:
    """Tests for history listing summaries."""

    def test_description(self):
        entry = HistoryEntry(
            id="1",
            input=DescriptionInput("music dashboard", VisualStyle.CYBERPUNK),
            output=DescriptionOutput(enhanced_prompt="## Vibe", preview_image="data:image/jpeg;base64,AA=="),
        )
        summary = summarize(entry)
        assert summary.title == "music dashboard"
        assert summary.badge == "Describe"
        assert summary.subtitle == "Style: Cyberpunk"
        assert summary.preview == "## Vibe"
        assert summary.thumbnail.startswith("data:image/jpeg")

    def test_description_without_prompt(self):
        entry = HistoryEntry(id="1", input=DescriptionInput(""), output=DescriptionOutput())
        summary = summarize(entry)
        assert summary.title == "Generated UI"
        assert summary.preview == "No prompt generated"
        assert summary.thumbnail is None

    def test_modify(self):
        entry = HistoryEntry(id="1", input=ModifyInput("<a>", "<b>"), output=ModifyOutput("<c>"))
        summary = summarize(entry)
        assert (summary.title, summary.badge, summary.subtitle) == ("HTML Remix", "Remix", "Cloned style applied")
        assert summary.preview == "<a>"

    @pytest.mark.parametrize("sources,subtitle", [(0, "0 sources"), (1, "1 source"), (3, "3 sources")])
    def test_clone_source_count(self, sources, subtitle):
        output = CloneOutput(
            html="<main/>",
            grounding_sources=tuple(GroundingSource(f"s{i}", f"https://s/{i}") for i in range(sources)),
        )
        entry = HistoryEntry(id="1", input=CloneInput(url="https://x"), output=output)
        assert summarize(entry).subtitle == subtitle

    def test_screenshot_only_clone(self, screenshot):
        entry = HistoryEntry(id="1", input=CloneInput(screenshots=(screenshot,)), output=CloneOutput())
        summary = summarize(entry)
        assert summary.title == "Screenshot clone"
        assert summary.preview == "No HTML generated"


class TestRestore:
    """Tests for rebuilding state from an entry."""

    def test_restored_mode_gets_entry_input(self):
        entry = HistoryEntry(
            id="1",
            input=ModifyInput("<a>", "<b>"),
            output=ModifyOutput("<c>"),
        )
        state = restore(entry)

        assert state.mode == Mode.MODIFY
        assert state.run_input == entry.input
        assert state.output == entry.output
        assert state.inputs[Mode.MODIFY] == entry.input

    def test_other_modes_reset_to_defaults(self):
        entry = HistoryEntry(id="1", input=CloneInput(url="https://x"), output=CloneOutput())
        state = restore(entry)

        assert state.inputs[Mode.DESCRIPTION] == empty_input(Mode.DESCRIPTION)
        assert state.inputs[Mode.MODIFY] == empty_input(Mode.MODIFY)

    def test_restore_is_deterministic(self):
        entry = make_entry("1", "login form")
        assert restore(entry) == restore(entry)
