"""Write processed meetings into the Recordings/Transcripts/Notes/Orders_Notice layout."""

from __future__ import annotations

import json
import logging
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import yaml

from .processor import ProcessedMeeting

log = logging.getLogger(__name__)

RECORDINGS_DIR = "Recordings"
TRANSCRIPTS_DIR = "Transcripts"
NOTES_DIR = "Notes"
ORDERS_DIR = "Orders_Notice"

_TITLE_CHARS_RE = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class OrganizedPaths:
    summary: Path
    transcript: Path
    analysis: Path
    audio: Path | None = None


def sanitize_title(title: str) -> str:
    """Keep letters, digits and hyphens; spaces become underscores."""
    cleaned = _TITLE_CHARS_RE.sub("", title or "").strip()
    return _WHITESPACE_RE.sub("_", cleaned) or "Untitled_Meeting"


def file_prefix(meeting_type: str, case_number: str | None = None) -> str:
    match meeting_type:
        case "commission":
            return "Commission_"
        case "case":
            return f"{case_number}_" if case_number else "Case_"
        case _:
            return ""


def base_filename(
    title: str,
    meeting_type: str,
    *,
    case_number: str | None = None,
    when: datetime | None = None,
) -> str:
    """Generate a base name like 'Commission_Regular_Meeting_2024-06-15T12-00-00'."""
    when = when or datetime.now()
    stamp = when.strftime("%Y-%m-%dT%H-%M-%S")
    return f"{file_prefix(meeting_type, case_number)}{sanitize_title(title)}_{stamp}"


def plan_paths(
    meeting: ProcessedMeeting,
    output_root: Path,
    *,
    audio_path: Path | None = None,
    when: datetime | None = None,
) -> OrganizedPaths:
    """Where each artifact of a processed meeting goes."""
    base = base_filename(meeting.title, meeting.meeting_type, case_number=meeting.case_number, when=when)
    if meeting.is_order:
        summary = output_root / ORDERS_DIR / f"{base}_order.md"
    else:
        summary = output_root / NOTES_DIR / f"{base}_summary.md"
    audio = None
    if audio_path is not None:
        audio = output_root / RECORDINGS_DIR / f"{base}{audio_path.suffix.lower() or '.wav'}"
    return OrganizedPaths(
        summary=summary,
        transcript=output_root / TRANSCRIPTS_DIR / f"{base}_transcript.txt",
        analysis=output_root / TRANSCRIPTS_DIR / f"{base}_analysis.json",
        audio=audio,
    )


def build_frontmatter(meeting: ProcessedMeeting, when: datetime) -> str:
    """Build YAML frontmatter for the summary document."""
    if meeting.analysis is not None:
        meeting_date = meeting.analysis.meeting_info.date
        participants = [p.name for p in meeting.analysis.participants]
    else:
        meeting_date = when.date().isoformat()
        participants = list(meeting.summary.participants) if meeting.summary else []

    fm: dict = {
        "title": meeting.title,
        "date": meeting_date,
        "processed_at": when.isoformat(timespec="seconds"),
        "meeting_type": meeting.meeting_type,
        "source": meeting.source,
        "official_order": meeting.is_order,
    }
    if meeting.case_number:
        fm["case_number"] = meeting.case_number
    fm["participants"] = participants
    fm["tags"] = ["meeting", "busybee", meeting.meeting_type]

    return "---\n" + yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False) + "---"


def _write(path: Path, content: str, *, dry_run: bool) -> None:
    if dry_run:
        log.info("[DRY RUN] Would write %s (%d chars)", path, len(content))
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    log.info("Wrote %s (%d chars)", path, len(content))


def organize(
    meeting: ProcessedMeeting,
    output_root: Path,
    *,
    audio_path: Path | None = None,
    include_frontmatter: bool = True,
    dry_run: bool = False,
    when: datetime | None = None,
) -> OrganizedPaths:
    """Write summary, transcript and analysis files and copy the recording. Returns the paths."""
    when = when or datetime.now()
    paths = plan_paths(meeting, output_root, audio_path=audio_path, when=when)

    summary = meeting.document.markdown
    if include_frontmatter:
        summary = build_frontmatter(meeting, when) + "\n\n" + summary
    _write(paths.summary, summary, dry_run=dry_run)
    _write(paths.transcript, meeting.transcript, dry_run=dry_run)

    analysis = meeting.to_dict()
    analysis["processed_at"] = when.isoformat(timespec="seconds")
    analysis["files"] = {
        "summary": str(paths.summary.relative_to(output_root)),
        "transcript": str(paths.transcript.relative_to(output_root)),
    }
    if paths.audio is not None:
        analysis["files"]["audio"] = str(paths.audio.relative_to(output_root))
    _write(paths.analysis, json.dumps(analysis, indent=2, default=str), dry_run=dry_run)

    if paths.audio is not None and audio_path is not None:
        if dry_run:
            log.info("[DRY RUN] Would copy %s to %s", audio_path, paths.audio)
        else:
            paths.audio.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(audio_path, paths.audio)
            log.info("Copied recording to %s", paths.audio)

    return paths
