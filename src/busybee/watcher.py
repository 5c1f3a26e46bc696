"""Watchdog-based daemon that monitors the inbox directory."""

from __future__ import annotations

import logging
import signal
import threading
import time
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import Config
from .inbox import is_inbox_file, run_inbox
from .processing_state import ProcessingState
from .processor import MeetingProcessor

log = logging.getLogger(__name__)

_DEBOUNCE_SECONDS = 2.0


class _InboxEventHandler(FileSystemEventHandler):
    """Schedules an inbox pass when transcript or audio files appear or change."""

    def __init__(
        self,
        config: Config,
        state: ProcessingState,
        processor: MeetingProcessor,
        *,
        dry_run: bool = False,
    ):
        super().__init__()
        self._config = config
        self._state = state
        self._processor = processor
        self._dry_run = dry_run
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def _handle(self, event: FileSystemEvent, path: str) -> None:
        if event.is_directory or not is_inbox_file(Path(path)):
            return
        log.debug("Inbox file %s changed, scheduling pass in %.1fs", Path(path).name, _DEBOUNCE_SECONDS)
        self._schedule_pass()

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle(event, str(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle(event, str(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        self._handle(event, str(event.dest_path))

    def _schedule_pass(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(_DEBOUNCE_SECONDS, self._do_pass)
            self._timer.daemon = True
            self._timer.start()

    def _do_pass(self) -> None:
        try:
            run_inbox(self._config, self._state, self._processor, dry_run=self._dry_run)
        except Exception:
            log.error("Inbox pass failed", exc_info=True)


def watch(
    config: Config,
    state: ProcessingState,
    processor: MeetingProcessor,
    *,
    dry_run: bool = False,
) -> None:
    """Start watching the inbox directory. Blocks until interrupted."""
    inbox = config.inbox_dir

    if inbox is None or not inbox.exists():
        log.error("Inbox directory does not exist: %s", inbox)
        raise SystemExit(1)

    # Pick up anything dropped in while we were not running
    log.info("Running initial inbox pass...")
    run_inbox(config, state, processor, dry_run=dry_run)

    handler = _InboxEventHandler(config, state, processor, dry_run=dry_run)
    observer = Observer()
    observer.schedule(handler, str(inbox), recursive=False)

    stop_event = threading.Event()

    def _shutdown(signum: int, frame: object) -> None:
        sig_name = signal.Signals(signum).name
        log.info("Received %s, shutting down...", sig_name)
        stop_event.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    observer.start()
    log.info("Watching %s for new meetings (Ctrl+C to stop)", inbox)

    try:
        while not stop_event.is_set():
            time.sleep(1)
    finally:
        observer.stop()
        observer.join()
        log.info("Watcher stopped")
