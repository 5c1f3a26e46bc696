"""Aggregator: run every extractor over a transcript and collect the results."""

from __future__ import annotations

import logging
from typing import Any, Callable

from . import extractors
from .models import (
    AgendaApproval,
    Adjournment,
    AnalysisResult,
    CallToOrder,
    MeetingInfo,
)
from .roster import Roster, normalize_names

log = logging.getLogger(__name__)


class TranscriptAnalyzer:
    """Heuristic analysis of a meeting transcript.

    The roster is fixed at construction. ``analyze`` never raises: an extractor
    that blows up is logged and its field keeps the empty default.
    """

    def __init__(self, roster: Roster | None = None, *, correct_names: bool = True):
        self.roster = roster if roster is not None else Roster.default()
        self.correct_names = correct_names

    def _run(self, name: str, func: Callable[..., Any], default: Any, *args: Any) -> Any:
        try:
            return func(*args)
        except Exception:
            log.warning("Extractor %s failed", name, exc_info=True)
            return default

    def analyze(self, transcript: str, title: str, meeting_type: str = "other") -> AnalysisResult:
        transcript = transcript or ""
        if self.correct_names:
            transcript = self._run("normalize_names", normalize_names, transcript, transcript, self.roster)

        roster = self.roster
        result = AnalysisResult(
            meeting_info=self._run(
                "meeting_info", extractors.extract_meeting_info,
                MeetingInfo(title=title), transcript, title, meeting_type,
            ),
            transcript=transcript,
            meeting_type=meeting_type,
            attendance=self._run("attendance", extractors.extract_attendance, [], transcript, roster),
            call_to_order=self._run(
                "call_to_order", extractors.extract_call_to_order, CallToOrder(), transcript, roster
            ),
            agenda_approval=self._run(
                "agenda_approval", extractors.extract_agenda_approval, AgendaApproval(), transcript, roster
            ),
            motions=self._run("motions", extractors.extract_motions, [], transcript, roster),
            action_items=self._run("action_items", extractors.extract_action_items, [], transcript, roster),
            decisions=self._run("decisions", extractors.extract_decisions, [], transcript),
            discussions=self._run("discussions", extractors.extract_discussions, [], transcript, roster),
            old_business=self._run("old_business", extractors.extract_old_business, [], transcript, roster),
            new_business=self._run("new_business", extractors.extract_new_business, [], transcript, roster),
            public_comment=self._run(
                "public_comment", extractors.extract_public_comment, [], transcript, roster
            ),
            participants=self._run("participants", extractors.extract_participants, [], transcript, roster),
            outcomes=self._run("outcomes", extractors.extract_outcomes, [], transcript),
            next_meeting=self._run("next_meeting", extractors.extract_next_meeting, None, transcript),
            adjournment=self._run("adjournment", extractors.extract_adjournment, Adjournment(), transcript),
        )

        log.debug(
            "Analyzed %r: %d motions, %d action items, %d decisions, %d/%d present",
            title,
            len(result.motions),
            len(result.action_items),
            len(result.decisions),
            len(result.present_members),
            len(result.attendance),
        )
        return result
