"""Data models for meeting transcripts, analysis results and output documents."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Union

MEETING_TYPES = ("commission", "board", "case", "general", "other")

UNASSIGNED_MEMBER = "Member"


@dataclass
class TranscriptEntry:
    speaker: str
    text: str
    timestamp: float | None = None


@dataclass
class AttendanceRecord:
    name: str
    role: str = ""
    present: bool = False
    arrival_time: str | None = None
    departure_time: str | None = None


@dataclass
class VoteTally:
    yes: int = 0
    no: int = 0
    abstain: int = 0


@dataclass
class Vote:
    type: str = "Voice Vote"
    result: str = "Unknown"
    tally: VoteTally | None = None
    details: str = ""


@dataclass
class Motion:
    number: int
    text: str
    maker: str = UNASSIGNED_MEMBER
    seconder: str = UNASSIGNED_MEMBER
    discussion: str = ""
    vote: Vote = field(default_factory=Vote)
    amendments: list[str] = field(default_factory=list)
    kind: str = "Main Motion"


@dataclass
class ActionItem:
    description: str
    assigned_to: str = "Staff"
    deadline: str | None = None
    priority: str | None = None
    related_to: str = "General"


@dataclass
class BusinessItem:
    title: str
    discussion: str = ""
    presenter: str | None = None
    outcome: str | None = None
    action_taken: str | None = None
    has_motion: bool = False


@dataclass
class DiscussionTopic:
    topic: str
    participants: list[str] = field(default_factory=list)
    key_points: list[str] = field(default_factory=list)
    outcome: str | None = None


@dataclass
class AgendaApproval:
    proposed: bool = False
    approved: bool = False
    maker: str | None = None
    seconder: str | None = None
    result: str | None = None


@dataclass
class PublicCommentSpeaker:
    topic: str
    summary: str
    name: str | None = None


@dataclass
class Participant:
    name: str
    role: str = "Participant"
    contributions: list[str] = field(default_factory=list)


@dataclass
class MeetingInfo:
    title: str
    date: str = field(default_factory=lambda: date.today().isoformat())
    time: str | None = None
    location: str | None = None
    type: str = "General Meeting"


@dataclass
class CallToOrder:
    found: bool = False
    time: str | None = None
    chairperson: str | None = None


@dataclass
class Adjournment:
    found: bool = False
    time: str | None = None
    method: str | None = None


@dataclass
class NextMeeting:
    date: str | None = None
    time: str | None = None
    location: str | None = None
    topics: list[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Everything the heuristic pipeline pulled out of one transcript."""

    meeting_info: MeetingInfo
    transcript: str = ""
    meeting_type: str = "other"
    attendance: list[AttendanceRecord] = field(default_factory=list)
    call_to_order: CallToOrder = field(default_factory=CallToOrder)
    agenda_approval: AgendaApproval = field(default_factory=AgendaApproval)
    motions: list[Motion] = field(default_factory=list)
    action_items: list[ActionItem] = field(default_factory=list)
    decisions: list[str] = field(default_factory=list)
    discussions: list[DiscussionTopic] = field(default_factory=list)
    old_business: list[BusinessItem] = field(default_factory=list)
    new_business: list[BusinessItem] = field(default_factory=list)
    public_comment: list[PublicCommentSpeaker] = field(default_factory=list)
    participants: list[Participant] = field(default_factory=list)
    outcomes: list[str] = field(default_factory=list)
    next_meeting: NextMeeting | None = None
    adjournment: Adjournment = field(default_factory=Adjournment)

    @property
    def present_members(self) -> list[AttendanceRecord]:
        return [a for a in self.attendance if a.present]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LLMSummary:
    """Structured response returned by the language model."""

    summary: str
    action_items: list[str] = field(default_factory=list)
    participants: list[str] = field(default_factory=list)
    key_decisions: list[str] = field(default_factory=list)
    meeting_type: str = "other"
    extras: dict = field(default_factory=dict)


@dataclass
class LLMSucceeded:
    summary: LLMSummary


@dataclass
class LLMFailed:
    reason: str


@dataclass
class HeuristicFallback:
    analysis: AnalysisResult
    reason: str | None = None


AnalysisOutcome = Union[LLMSucceeded, LLMFailed, HeuristicFallback]


@dataclass
class OutputDocument:
    markdown: str
    is_order: bool = False
    filename: str = ""
    kind: str = "minutes"
