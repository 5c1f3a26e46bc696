"""Track which inbox files have been processed to avoid processing them twice."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger(__name__)

_DEFAULT_STATE_PATH = Path.home() / ".local" / "share" / "busybee" / "processing_state.json"


class ProcessingState:
    """Persistent ledger of processed files keyed by absolute path."""

    def __init__(self, state_path: Path | None = None):
        self.path = state_path or _DEFAULT_STATE_PATH
        self._state: dict[str, dict] = {}
        self._load()

    def _load(self) -> None:
        if self.path.exists():
            try:
                self._state = json.loads(self.path.read_text(encoding="utf-8"))
                log.debug("Loaded processing state with %d entries", len(self._state))
            except (json.JSONDecodeError, OSError):
                log.warning("Failed to load processing state, starting fresh")
                self._state = {}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self._state, indent=2, default=str),
            encoding="utf-8",
        )

    @staticmethod
    def _key(source: Path) -> str:
        return str(Path(source).resolve())

    def needs_processing(self, source: Path, modified_at: float) -> bool:
        """True for new files and files changed since they were last processed."""
        entry = self._state.get(self._key(source))
        if entry is None:
            return True
        return entry.get("modified_at") != modified_at

    def record(self, source: Path, modified_at: float, output: str) -> None:
        """Record that a file has been processed into ``output``."""
        self._state[self._key(source)] = {
            "modified_at": modified_at,
            "output": output,
            "processed_at": datetime.now(tz=timezone.utc).isoformat(),
        }
        self._save()

    def get_output(self, source: Path) -> str | None:
        entry = self._state.get(self._key(source))
        if entry:
            return entry.get("output")
        return None
