"""Time-bounded cache of language model responses."""

from __future__ import annotations

import base64
import json
import logging
import time
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 24.0


def cache_key(transcript: str, meeting_type: str) -> str:
    """Meeting type plus the first 32 characters of the base64-encoded transcript."""
    encoded = base64.b64encode(transcript.encode("utf-8")).decode("ascii")
    return f"{meeting_type}_{encoded[:32]}"


class ResponseCache:
    """Cached model responses with a fixed time-to-live.

    Stale entries are ignored on read and never removed. When ``path`` is
    given, entries are persisted as JSON after every write.
    """

    def __init__(self, ttl_hours: float = DEFAULT_TTL_HOURS, path: Path | None = None):
        self.ttl_seconds = ttl_hours * 3600
        self.path = Path(path).expanduser() if path else None
        self._entries: dict[str, dict] = {}
        self._load()

    def _load(self) -> None:
        if self.path and self.path.exists():
            try:
                entries = json.loads(self.path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                entries = None
            if not isinstance(entries, dict):
                log.warning("Failed to load response cache, starting fresh")
                entries = {}
            self._entries = entries
            log.debug("Loaded response cache with %d entries", len(self._entries))

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._entries, indent=2), encoding="utf-8")

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, transcript: str, meeting_type: str, *, now: float | None = None) -> dict | None:
        entry = self._entries.get(cache_key(transcript, meeting_type))
        if not isinstance(entry, dict):
            return None
        now = time.time() if now is None else now
        timestamp = entry.get("timestamp")
        if not isinstance(timestamp, (int, float)) or now - timestamp >= self.ttl_seconds:
            log.debug("Cached response for %s is stale", meeting_type)
            return None
        result = entry.get("result")
        return result if isinstance(result, dict) else None

    def put(self, transcript: str, meeting_type: str, result: dict, *, now: float | None = None) -> None:
        self._entries[cache_key(transcript, meeting_type)] = {
            "result": result,
            "timestamp": time.time() if now is None else now,
        }
        self._save()
