"""Tests for busybee.processing_state — ProcessingState persistence and change tracking."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from busybee.processing_state import ProcessingState


class TestProcessingStateInit:
    def test_default_path(self):
        with patch.object(Path, "exists", return_value=False):
            s = ProcessingState()
        assert "processing_state.json" in str(s.path)

    def test_custom_path(self, tmp_path):
        p = tmp_path / "state.json"
        s = ProcessingState(state_path=p)
        assert s.path == p

    def test_valid_json_loaded(self, tmp_path):
        p = tmp_path / "state.json"
        p.write_text(json.dumps({"/inbox/a.txt": {"modified_at": 1.0, "output": "a.md"}}))
        s = ProcessingState(state_path=p)
        assert "/inbox/a.txt" in s._state

    def test_file_missing_empty_state(self, tmp_path):
        s = ProcessingState(state_path=tmp_path / "nonexistent.json")
        assert s._state == {}

    def test_corrupt_json_empty_state(self, tmp_path):
        p = tmp_path / "state.json"
        p.write_text("not json{{{")
        s = ProcessingState(state_path=p)
        assert s._state == {}


class TestNeedsProcessing:
    def test_new_file(self, tmp_path):
        s = ProcessingState(state_path=tmp_path / "s.json")
        assert s.needs_processing(tmp_path / "new.txt", 100.0) is True

    def test_unchanged_file(self, tmp_path):
        s = ProcessingState(state_path=tmp_path / "s.json")
        source = tmp_path / "a.txt"
        s.record(source, 100.0, "out/a.md")
        assert s.needs_processing(source, 100.0) is False

    def test_modified_file(self, tmp_path):
        s = ProcessingState(state_path=tmp_path / "s.json")
        source = tmp_path / "a.txt"
        s.record(source, 100.0, "out/a.md")
        assert s.needs_processing(source, 200.0) is True

    def test_entry_missing_modified_at(self, tmp_path):
        p = tmp_path / "s.json"
        source = tmp_path / "a.txt"
        p.write_text(json.dumps({str(source.resolve()): {"output": "a.md"}}))
        s = ProcessingState(state_path=p)
        assert s.needs_processing(source, 100.0) is True

    def test_relative_and_absolute_paths_match(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        s = ProcessingState(state_path=tmp_path / "s.json")
        s.record(Path("a.txt"), 100.0, "a.md")
        assert s.needs_processing(tmp_path / "a.txt", 100.0) is False


class TestRecord:
    def test_persists_to_disk(self, tmp_path):
        p = tmp_path / "s.json"
        source = tmp_path / "a.txt"
        ProcessingState(state_path=p).record(source, 100.0, "out/a.md")

        data = json.loads(p.read_text())
        entry = data[str(source.resolve())]
        assert entry["modified_at"] == 100.0
        assert entry["output"] == "out/a.md"
        assert "processed_at" in entry

    def test_reloaded_state(self, tmp_path):
        p = tmp_path / "s.json"
        source = tmp_path / "a.txt"
        ProcessingState(state_path=p).record(source, 100.0, "out/a.md")
        assert ProcessingState(state_path=p).needs_processing(source, 100.0) is False

    def test_creates_parent_dirs(self, tmp_path):
        p = tmp_path / "nested" / "dir" / "s.json"
        ProcessingState(state_path=p).record(tmp_path / "a.txt", 1.0, "a.md")
        assert p.exists()

    def test_overwrites_entry(self, tmp_path):
        s = ProcessingState(state_path=tmp_path / "s.json")
        source = tmp_path / "a.txt"
        s.record(source, 1.0, "first.md")
        s.record(source, 2.0, "second.md")
        assert s.get_output(source) == "second.md"
        assert len(s._state) == 1


class TestGetOutput:
    def test_known_file(self, tmp_path):
        s = ProcessingState(state_path=tmp_path / "s.json")
        s.record(tmp_path / "a.txt", 1.0, "out/a.md")
        assert s.get_output(tmp_path / "a.txt") == "out/a.md"

    def test_unknown_file(self, tmp_path):
        s = ProcessingState(state_path=tmp_path / "s.json")
        assert s.get_output(tmp_path / "missing.txt") is None
