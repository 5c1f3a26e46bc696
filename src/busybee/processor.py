"""Orchestrator: validate -> correct names -> analyze -> synthesize -> classify."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace

from .analyzer import TranscriptAnalyzer
from .cache import ResponseCache
from .classifier import classify_text, find_case_number, is_official_order
from .config import Config
from .llm_client import LLMClient
from .models import (
    MEETING_TYPES,
    AnalysisOutcome,
    AnalysisResult,
    HeuristicFallback,
    LLMFailed,
    LLMSucceeded,
    LLMSummary,
    OutputDocument,
)
from .roster import Roster, normalize_names
from .synthesizer import (
    DEFAULT_QUORUM,
    document_kind_for,
    load_template,
    render_error,
    render_summary,
    synthesize,
)

log = logging.getLogger(__name__)


class TranscriptValidationError(ValueError):
    """The transcript or its metadata cannot be processed."""


@dataclass
class ProcessedMeeting:
    title: str
    meeting_type: str
    transcript: str
    document: OutputDocument
    outcome: AnalysisOutcome

    @property
    def is_order(self) -> bool:
        return self.document.is_order

    @property
    def source(self) -> str:
        match self.outcome:
            case LLMSucceeded():
                return "llm"
            case HeuristicFallback():
                return "heuristic"
            case _:
                return "error"

    @property
    def analysis(self) -> AnalysisResult | None:
        return self.outcome.analysis if isinstance(self.outcome, HeuristicFallback) else None

    @property
    def summary(self) -> LLMSummary | None:
        return self.outcome.summary if isinstance(self.outcome, LLMSucceeded) else None

    @property
    def case_number(self) -> str | None:
        if self.meeting_type != "case":
            return None
        return find_case_number(self.transcript)

    def to_dict(self) -> dict:
        """JSON-ready record of how the meeting was processed."""
        data: dict = {
            "title": self.title,
            "meeting_type": self.meeting_type,
            "source": self.source,
            "is_order": self.is_order,
            "case_number": self.case_number,
        }
        match self.outcome:
            case LLMSucceeded(summary=summary):
                data["summary"] = asdict(summary)
            case HeuristicFallback(analysis=analysis, reason=reason):
                data["fallback_reason"] = reason
                analysis_data = analysis.to_dict()
                analysis_data.pop("transcript", None)
                data["analysis"] = analysis_data
            case LLMFailed(reason=reason):
                data["error"] = reason
        return data


class MeetingProcessor:
    """Runs one transcript through the full pipeline.

    ``mode`` picks the analysis path: ``llm`` uses only the model, ``heuristic``
    only the regex extractors, and ``auto`` tries the model first and falls
    back to the extractors when it fails.
    """

    def __init__(
        self,
        roster: Roster | None = None,
        *,
        llm: LLMClient | None = None,
        mode: str = "auto",
        template: str | None = None,
        case_template: str | None = None,
        correct_names: bool = True,
        quorum_size: int = DEFAULT_QUORUM,
    ):
        self.roster = roster if roster is not None else Roster.default()
        self.llm = llm
        self.mode = mode
        self.template = template
        self.case_template = case_template
        self.correct_names = correct_names
        self.quorum_size = quorum_size
        self.analyzer = TranscriptAnalyzer(self.roster, correct_names=False)

    @classmethod
    def from_config(cls, config: Config, *, mode: str | None = None) -> MeetingProcessor:
        mode = mode or config.analysis_mode
        cache = None
        if config.cache_enabled and mode != "heuristic":
            cache = ResponseCache(ttl_hours=config.cache_ttl_hours, path=config.cache_path)
        # Built in every mode: audio files still need transcription
        llm = LLMClient(
            config.openai_api_key,
            model=config.openai_model,
            max_tokens=config.openai_max_tokens,
            temperature=config.openai_temperature,
            cache=cache,
        )
        return cls(
            config.roster,
            llm=llm,
            mode=mode,
            template=load_template(config.template_source),
            case_template=load_template(config.case_template_source),
            correct_names=config.correct_names,
            quorum_size=config.quorum_size,
        )

    def validate(self, transcript: str | None, title: str | None, meeting_type: str) -> None:
        if not transcript or not transcript.strip():
            raise TranscriptValidationError("Transcript is empty")
        if not title or not title.strip():
            raise TranscriptValidationError("Meeting title is required")
        if meeting_type not in MEETING_TYPES:
            raise TranscriptValidationError(
                f"Unknown meeting type {meeting_type!r}, expected one of {', '.join(MEETING_TYPES)}"
            )

    def analyze(self, transcript: str, title: str, meeting_type: str) -> AnalysisOutcome:
        """Pick the analysis path for the configured mode."""
        if self.mode == "heuristic":
            return HeuristicFallback(self.analyzer.analyze(transcript, title, meeting_type))

        if self.llm is None:
            outcome: AnalysisOutcome = LLMFailed("Language model not configured")
        else:
            outcome = self.llm.summarize(transcript, title, meeting_type)

        if isinstance(outcome, LLMFailed) and self.mode == "auto":
            log.info("Falling back to heuristic analysis for %r: %s", title, outcome.reason)
            return HeuristicFallback(self.analyzer.analyze(transcript, title, meeting_type), outcome.reason)
        return outcome

    def _template_for(self, kind: str) -> str | None:
        if kind == "minutes":
            return self.template
        if kind == "case":
            return self.case_template
        return None

    def render(
        self,
        outcome: AnalysisOutcome,
        transcript: str,
        title: str,
        meeting_type: str,
        *,
        recording_filename: str | None = None,
    ) -> OutputDocument:
        match outcome:
            case LLMSucceeded(summary=summary):
                return OutputDocument(
                    markdown=render_summary(summary, title),
                    is_order=classify_text(transcript, meeting_type, summary.key_decisions),
                    kind=document_kind_for(meeting_type),
                )
            case HeuristicFallback(analysis=analysis):
                kind = document_kind_for(meeting_type)
                document = synthesize(
                    analysis,
                    kind,
                    self._template_for(kind),
                    quorum_size=self.quorum_size,
                    recording_filename=recording_filename,
                )
                return replace(document, is_order=is_official_order(analysis))
            case LLMFailed(reason=reason):
                return OutputDocument(markdown=render_error(title, transcript, reason), kind="error")
        raise TypeError(f"Unexpected analysis outcome: {outcome!r}")

    def process(
        self,
        transcript: str,
        title: str,
        meeting_type: str = "other",
        *,
        recording_filename: str | None = None,
    ) -> ProcessedMeeting:
        """Process one transcript. Raises TranscriptValidationError on bad input."""
        self.validate(transcript, title, meeting_type)
        title = title.strip()

        if self.correct_names:
            transcript = normalize_names(transcript, self.roster)

        outcome = self.analyze(transcript, title, meeting_type)
        document = self.render(
            outcome, transcript, title, meeting_type, recording_filename=recording_filename
        )
        meeting = ProcessedMeeting(
            title=title,
            meeting_type=meeting_type,
            transcript=transcript,
            document=document,
            outcome=outcome,
        )
        log.info(
            "Processed %r as %s via %s%s",
            title, document.kind, meeting.source, " (official order)" if meeting.is_order else "",
        )
        return meeting
