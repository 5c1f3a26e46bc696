"""Read transcripts from plain text files or speaker-segment JSON exports."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .models import TranscriptEntry

log = logging.getLogger(__name__)

TEXT_SUFFIXES = (".txt", ".md")
JSON_SUFFIXES = (".json",)
TRANSCRIPT_SUFFIXES = TEXT_SUFFIXES + JSON_SUFFIXES


def _parse_timestamp(value: str | int | float | None) -> float | None:
    """Seconds from a number or an ``HH:MM:SS`` / ``MM:SS`` string."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        # Epoch-style millis from some recorders
        return value / 1000 if value > 1e6 else float(value)
    if isinstance(value, str):
        parts = value.strip().split(":")
        try:
            if len(parts) == 1:
                return float(parts[0])
            seconds = 0.0
            for part in parts:
                seconds = seconds * 60 + float(part)
            return seconds
        except ValueError:
            return None
    return None


def format_timestamp(seconds: float) -> str:
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_entries(raw: dict | list) -> list[TranscriptEntry]:
    """Pull speaker segments out of a JSON document.

    Accepts a bare list, or a mapping with a ``segments``, ``entries`` or
    ``transcript`` list. Malformed segments are skipped.
    """
    if isinstance(raw, dict):
        items = raw.get("segments") or raw.get("entries") or raw.get("transcript") or []
    else:
        items = raw
    if not isinstance(items, list):
        raise ValueError("Transcript JSON has no segment list")

    entries: list[TranscriptEntry] = []
    for i, item in enumerate(items):
        try:
            text = (item.get("text") or "").strip()
            if not text:
                continue
            entries.append(
                TranscriptEntry(
                    speaker=(item.get("speaker") or item.get("source") or "Speaker").strip(),
                    text=text,
                    timestamp=_parse_timestamp(item.get("start", item.get("timestamp"))),
                )
            )
        except Exception:
            log.warning("Failed to parse transcript segment %d", i, exc_info=True)

    log.debug("Parsed %d transcript segments", len(entries))
    return entries


def format_entries(entries: list[TranscriptEntry]) -> str:
    """Render segments as ``[HH:MM:SS] Speaker: text`` lines."""
    lines: list[str] = []
    for entry in entries:
        prefix = f"[{format_timestamp(entry.timestamp)}] " if entry.timestamp is not None else ""
        lines.append(f"{prefix}{entry.speaker}: {entry.text}")
    return "\n".join(lines)


def load_transcript(path: Path) -> str:
    """Load a transcript file as plain text."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8")
    if suffix in JSON_SUFFIXES:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return format_entries(parse_entries(raw))
    raise ValueError(f"Unsupported transcript format: {path.suffix}")
