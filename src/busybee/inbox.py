"""Process transcript and audio files from disk into the output folders."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .config import Config
from .file_organizer import OrganizedPaths, organize
from .llm_client import SUPPORTED_AUDIO_FORMATS, LLMError
from .processing_state import ProcessingState
from .processor import MeetingProcessor
from .transcript_loader import TRANSCRIPT_SUFFIXES, load_transcript

log = logging.getLogger(__name__)

INBOX_SUFFIXES = TRANSCRIPT_SUFFIXES + SUPPORTED_AUDIO_FORMATS

_CASE_NUMBER_RE = re.compile(r"CSC-\d{2}-\d{3}", re.IGNORECASE)
_TIMESTAMP_SUFFIX_RE = re.compile(r"[_\s-]*\d{4}-\d{2}-\d{2}(?:[T_ ]\d{2}[-:]\d{2}(?:[-:]\d{2})?)?$")


def is_inbox_file(path: Path) -> bool:
    return path.suffix.lower() in INBOX_SUFFIXES and not path.name.startswith(".")


def title_from_filename(path: Path) -> str:
    """'2024-06-15_regular-commission_meeting.txt' -> 'regular commission meeting'."""
    stem = _TIMESTAMP_SUFFIX_RE.sub("", path.stem)
    stem = re.sub(r"^\d{4}-\d{2}-\d{2}[_\s-]*", "", stem)
    title = re.sub(r"[_-]+", " ", stem).strip()
    return title or path.stem


def guess_meeting_type(path: Path, default: str = "other") -> str:
    """Infer the meeting type from words in the file name."""
    name = path.stem.lower()
    if _CASE_NUMBER_RE.search(name) or "case" in name or "hearing" in name:
        return "case"
    if "commission" in name:
        return "commission"
    if "board" in name:
        return "board"
    return default


def process_file(
    path: Path,
    config: Config,
    processor: MeetingProcessor,
    *,
    title: str | None = None,
    meeting_type: str | None = None,
    dry_run: bool = False,
) -> OrganizedPaths:
    """Load or transcribe one file, process it and write the results."""
    path = Path(path)
    is_audio = path.suffix.lower() in SUPPORTED_AUDIO_FORMATS

    if is_audio:
        if processor.llm is None:
            raise LLMError("Audio transcription needs an OpenAI API key")
        transcript = processor.llm.transcribe_audio(path)
    else:
        transcript = load_transcript(path)

    meeting = processor.process(
        transcript,
        title or title_from_filename(path),
        meeting_type or guess_meeting_type(path, config.default_meeting_type),
        recording_filename=path.name if is_audio else None,
    )
    return organize(
        meeting,
        config.output_root,
        audio_path=path if is_audio else None,
        include_frontmatter=config.include_frontmatter,
        dry_run=dry_run,
    )


def run_inbox(
    config: Config,
    state: ProcessingState,
    processor: MeetingProcessor,
    *,
    dry_run: bool = False,
) -> int:
    """Process every new or changed inbox file once. Returns the number processed."""
    inbox = config.inbox_dir
    if inbox is None or not inbox.exists():
        log.warning("Inbox directory not found: %s", inbox)
        return 0

    candidates = sorted(p for p in inbox.iterdir() if p.is_file() and is_inbox_file(p))
    to_process = [p for p in candidates if state.needs_processing(p, p.stat().st_mtime)]

    if not to_process:
        log.debug("All %d inbox files are up to date", len(candidates))
        return 0

    log.debug("%d of %d inbox files need processing", len(to_process), len(candidates))

    processed = 0
    for path in to_process:
        try:
            paths = process_file(path, config, processor, dry_run=dry_run)
            if not dry_run:
                state.record(path, path.stat().st_mtime, str(paths.summary.relative_to(config.output_root)))
            processed += 1
        except Exception:
            log.error("Failed to process %s", path.name, exc_info=True)

    log.info("Inbox pass complete: %d files processed", processed)
    return processed
