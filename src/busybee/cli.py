"""Command-line interface for BusyBee."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import ANALYSIS_MODES, load_config
from .inbox import process_file, run_inbox
from .llm_client import LLMError, estimate_usage
from .models import MEETING_TYPES
from .processing_state import ProcessingState
from .processor import MeetingProcessor, TranscriptValidationError
from .transcript_loader import load_transcript
from .watcher import watch


def _print_estimates(files: list[Path]) -> None:
    for path in files:
        usage = estimate_usage(load_transcript(path))
        print(
            f"{path.name}: ~{usage.total_tokens} tokens "
            f"(input {usage.input_tokens}, output {usage.output_tokens}), "
            f"est. ${usage.total_cost:.4f}"
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="busybee",
        description="Turn commission meeting transcripts into minutes and notes",
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Transcript (.txt, .md, .json) or audio files to process",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to config YAML (default: ~/.config/busybee/config.yaml)",
    )
    parser.add_argument(
        "--title", "-t",
        default=None,
        help="Meeting title (default: derived from the file name)",
    )
    parser.add_argument(
        "--type",
        dest="meeting_type",
        choices=MEETING_TYPES,
        default=None,
        help="Meeting type (default: guessed from the file name)",
    )
    parser.add_argument(
        "--mode",
        choices=ANALYSIS_MODES,
        default=None,
        help="Analysis mode: language model, heuristic extractors, or model with fallback",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Process the inbox once and exit (no daemon)",
    )
    parser.add_argument(
        "--estimate",
        action="store_true",
        help="Print the estimated model usage for the given files and exit",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without writing files",
    )

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.estimate:
        try:
            _print_estimates(args.files)
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            raise SystemExit(1) from None
        return

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from None

    processor = MeetingProcessor.from_config(config, mode=args.mode)

    if args.files:
        for path in args.files:
            try:
                paths = process_file(
                    path,
                    config,
                    processor,
                    title=args.title,
                    meeting_type=args.meeting_type,
                    dry_run=args.dry_run,
                )
            except (TranscriptValidationError, LLMError, OSError, ValueError) as e:
                print(f"Error: {path.name}: {e}", file=sys.stderr)
                raise SystemExit(1) from None
            print(f"{path.name} -> {paths.summary}")
        return

    state = ProcessingState(config.state_path)

    if args.once:
        processed = run_inbox(config, state, processor, dry_run=args.dry_run)
        if processed:
            print(f"Processed {processed} file(s)")
        else:
            print("Nothing new in the inbox")
    else:
        watch(config, state, processor, dry_run=args.dry_run)
