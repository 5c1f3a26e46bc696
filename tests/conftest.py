"""Shared fixtures for busybee tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from busybee.config import Config
from busybee.models import (
    Adjournment,
    AnalysisResult,
    AttendanceRecord,
    CallToOrder,
    LLMSummary,
    MeetingInfo,
    Motion,
    Vote,
    VoteTally,
)
from busybee.roster import Roster

AGENDA_TRANSCRIPT = (
    "Raymond Muna called the meeting to order. "
    "Patrick Fitial moved to approve the agenda. "
    "Victoria Bellas seconded. "
    "Motion carried unanimously."
)

ORDER_TRANSCRIPT = (
    "This is the status conference for case CSC-24-011. "
    "It is hereby ordered that the parties file their briefs within thirty days."
)

COMMISSION_TRANSCRIPT = """\
Regular meeting held on June 15, 2024.
The meeting was held at the Commission Conference Room.
Chairperson Raymond Muna called the meeting to order at 1:05 pm.
Roll call: Raymond Muna present, Patrick Fitial present, Victoria Bellas present, Richard Farrell present, Elvira Mesgnon absent.

Patrick Fitial: I move to approve the budget amendment for fiscal year 2025.
Richard Farrell: I second.
All in favor? The motion carried with 4 ayes and 0 nays.
The budget officer will submit the revised budget by next Friday.

Meeting adjourned at 2:30 pm with no further business.
"""


@pytest.fixture
def agenda_transcript() -> str:
    return AGENDA_TRANSCRIPT


@pytest.fixture
def order_transcript() -> str:
    return ORDER_TRANSCRIPT


@pytest.fixture
def commission_transcript() -> str:
    return COMMISSION_TRANSCRIPT


@pytest.fixture
def roster() -> Roster:
    return Roster.default()


@pytest.fixture
def small_roster() -> Roster:
    return Roster.from_mapping(
        {
            "Alice Reyes": {"role": "Chairperson", "variants": ["Alicia"], "voting_member": True},
            "Bob Santos": {"role": "Commissioner", "variants": ["Bobby"], "voting_member": True},
            "Carol Cruz": ["Carol"],
        }
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def sample_result() -> AnalysisResult:
    return AnalysisResult(
        meeting_info=MeetingInfo(
            title="Regular Meeting",
            date="June 15, 2024",
            time="1:05 pm",
            location="Commission Conference Room",
            type="Commission Meeting",
        ),
        transcript="Sample transcript text.",
        meeting_type="commission",
        attendance=[
            AttendanceRecord(name="Raymond Muna", role="Chairperson", present=True),
            AttendanceRecord(name="Patrick Fitial", role="Vice Chair", present=True),
            AttendanceRecord(name="Victoria Bellas", role="Secretary", present=True),
            AttendanceRecord(name="Richard Farrell", role="Budget Officer", present=True),
            AttendanceRecord(name="Elvira Mesgnon", role="Commissioner", present=False),
        ],
        call_to_order=CallToOrder(found=True, time="1:05 pm", chairperson="Raymond Muna"),
        motions=[
            Motion(
                number=1,
                text="approve the budget amendment",
                maker="Patrick Fitial",
                seconder="Richard Farrell",
                vote=Vote(result="Carried", tally=VoteTally(yes=4, no=0)),
            )
        ],
        decisions=["The motion carried with 4 ayes and 0 nays"],
        adjournment=Adjournment(found=True, time="2:30 pm", method="No further business"),
    )


@pytest.fixture
def sample_summary() -> LLMSummary:
    return LLMSummary(
        summary="## Overview\nThe commission approved the budget.",
        action_items=["Budget Officer to submit revised budget"],
        participants=["Raymond Muna", "Patrick Fitial"],
        key_decisions=["Budget amendment approved"],
        meeting_type="commission",
    )


@pytest.fixture
def sample_config(tmp_path: Path) -> Config:
    return Config(
        output_root=tmp_path / "out",
        inbox_dir=tmp_path / "inbox",
        state_path=tmp_path / "state.json",
        cache_path=tmp_path / "cache.json",
    )
