"""Tests for busybee.file_organizer — naming, frontmatter and writing the output folders."""

from __future__ import annotations

import json

import pytest
import yaml

from busybee.file_organizer import (
    NOTES_DIR,
    ORDERS_DIR,
    RECORDINGS_DIR,
    TRANSCRIPTS_DIR,
    base_filename,
    build_frontmatter,
    file_prefix,
    organize,
    plan_paths,
    sanitize_title,
)
from busybee.models import LLMSucceeded, OutputDocument
from busybee.processor import MeetingProcessor, ProcessedMeeting


@pytest.fixture
def minutes_meeting(agenda_transcript) -> ProcessedMeeting:
    return MeetingProcessor(mode="heuristic").process(agenda_transcript, "Regular Meeting", "commission")


@pytest.fixture
def order_meeting(order_transcript) -> ProcessedMeeting:
    return MeetingProcessor(mode="heuristic").process(order_transcript, "Status Conference", "case")


@pytest.fixture
def llm_meeting(sample_summary) -> ProcessedMeeting:
    return ProcessedMeeting(
        title="Staff Sync",
        meeting_type="general",
        transcript="We talked about parking.",
        document=OutputDocument(markdown="# Staff Sync\n", kind="general"),
        outcome=LLMSucceeded(sample_summary),
    )


def _split_frontmatter(text: str) -> tuple[dict, str]:
    _, fm, body = text.split("---", 2)
    return yaml.safe_load(fm), body


class TestSanitizeTitle:
    def test_special_chars_removed(self):
        assert sanitize_title("Regular Meeting: June/15!") == "Regular_Meeting_June15"

    def test_hyphens_kept(self):
        assert sanitize_title("Follow-up  Session") == "Follow-up_Session"

    @pytest.mark.parametrize("title", ["", "!!!", "   "])
    def test_empty_fallback(self, title):
        assert sanitize_title(title) == "Untitled_Meeting"


class TestFilePrefix:
    def test_commission(self):
        assert file_prefix("commission") == "Commission_"

    def test_case_with_number(self):
        assert file_prefix("case", "CSC-24-011") == "CSC-24-011_"

    def test_case_without_number(self):
        assert file_prefix("case") == "Case_"

    @pytest.mark.parametrize("meeting_type", ["board", "general", "other"])
    def test_no_prefix(self, meeting_type):
        assert file_prefix(meeting_type) == ""


class TestBaseFilename:
    def test_commission(self, fixed_now):
        name = base_filename("Regular Meeting", "commission", when=fixed_now)
        assert name == "Commission_Regular_Meeting_2024-06-15T12-00-00"

    def test_case(self, fixed_now):
        name = base_filename("Hearing", "case", case_number="CSC-24-011", when=fixed_now)
        assert name == "CSC-24-011_Hearing_2024-06-15T12-00-00"


class TestPlanPaths:
    def test_notes(self, minutes_meeting, tmp_path, fixed_now):
        paths = plan_paths(minutes_meeting, tmp_path, when=fixed_now)
        base = "Commission_Regular_Meeting_2024-06-15T12-00-00"
        assert paths.summary == tmp_path / NOTES_DIR / f"{base}_summary.md"
        assert paths.transcript == tmp_path / TRANSCRIPTS_DIR / f"{base}_transcript.txt"
        assert paths.analysis == tmp_path / TRANSCRIPTS_DIR / f"{base}_analysis.json"
        assert paths.audio is None

    def test_order(self, order_meeting, tmp_path, fixed_now):
        paths = plan_paths(order_meeting, tmp_path, when=fixed_now)
        assert paths.summary == (
            tmp_path / ORDERS_DIR / "CSC-24-011_Status_Conference_2024-06-15T12-00-00_order.md"
        )

    def test_audio_suffix_lowercased(self, minutes_meeting, tmp_path, fixed_now):
        paths = plan_paths(minutes_meeting, tmp_path, audio_path=tmp_path / "rec.M4A", when=fixed_now)
        assert paths.audio == tmp_path / RECORDINGS_DIR / "Commission_Regular_Meeting_2024-06-15T12-00-00.m4a"


class TestBuildFrontmatter:
    def test_heuristic(self, minutes_meeting, fixed_now):
        fm, _ = _split_frontmatter(build_frontmatter(minutes_meeting, fixed_now) + "\n")
        assert fm["title"] == "Regular Meeting"
        assert fm["processed_at"] == "2024-06-15T12:00:00"
        assert fm["meeting_type"] == "commission"
        assert fm["source"] == "heuristic"
        assert fm["official_order"] is False
        assert "case_number" not in fm
        assert fm["tags"] == ["meeting", "busybee", "commission"]

    def test_case_number(self, order_meeting, fixed_now):
        fm, _ = _split_frontmatter(build_frontmatter(order_meeting, fixed_now) + "\n")
        assert fm["case_number"] == "CSC-24-011"
        assert fm["official_order"] is True

    def test_llm(self, llm_meeting, fixed_now):
        fm, _ = _split_frontmatter(build_frontmatter(llm_meeting, fixed_now) + "\n")
        assert fm["date"] == "2024-06-15"
        assert fm["source"] == "llm"
        assert fm["participants"] == ["Raymond Muna", "Patrick Fitial"]

    def test_delimiters(self, llm_meeting, fixed_now):
        fm = build_frontmatter(llm_meeting, fixed_now)
        assert fm.startswith("---\n")
        assert fm.endswith("\n---")


class TestOrganize:
    def test_writes_files(self, minutes_meeting, tmp_path, fixed_now):
        paths = organize(minutes_meeting, tmp_path, when=fixed_now)

        fm, body = _split_frontmatter(paths.summary.read_text())
        assert fm["title"] == "Regular Meeting"
        assert body.strip().startswith("# Regular Meeting")
        assert paths.transcript.read_text() == minutes_meeting.transcript

        analysis = json.loads(paths.analysis.read_text())
        assert analysis["source"] == "heuristic"
        assert analysis["processed_at"] == "2024-06-15T12:00:00"
        assert analysis["files"] == {
            "summary": f"{NOTES_DIR}/Commission_Regular_Meeting_2024-06-15T12-00-00_summary.md",
            "transcript": f"{TRANSCRIPTS_DIR}/Commission_Regular_Meeting_2024-06-15T12-00-00_transcript.txt",
        }

    def test_without_frontmatter(self, llm_meeting, tmp_path, fixed_now):
        paths = organize(llm_meeting, tmp_path, include_frontmatter=False, when=fixed_now)
        assert paths.summary.read_text() == "# Staff Sync\n"

    def test_order_folder(self, order_meeting, tmp_path, fixed_now):
        paths = organize(order_meeting, tmp_path, when=fixed_now)
        assert paths.summary.parent == tmp_path / ORDERS_DIR
        assert paths.summary.exists()
        assert not (tmp_path / NOTES_DIR).exists()

    def test_copies_audio(self, minutes_meeting, tmp_path, fixed_now):
        audio = tmp_path / "rec.m4a"
        audio.write_bytes(b"\x00\x01")
        out = tmp_path / "out"
        paths = organize(minutes_meeting, out, audio_path=audio, when=fixed_now)
        assert paths.audio.read_bytes() == b"\x00\x01"
        assert audio.exists()
        analysis = json.loads(paths.analysis.read_text())
        assert analysis["files"]["audio"] == f"{RECORDINGS_DIR}/{paths.audio.name}"

    def test_dry_run_writes_nothing(self, minutes_meeting, tmp_path, fixed_now, caplog):
        audio = tmp_path / "rec.wav"
        audio.write_bytes(b"\x00")
        out = tmp_path / "out"
        with caplog.at_level("INFO"):
            paths = organize(minutes_meeting, out, audio_path=audio, dry_run=True, when=fixed_now)
        assert not out.exists()
        assert paths.summary.name.endswith("_summary.md")
        assert "[DRY RUN]" in caplog.text
