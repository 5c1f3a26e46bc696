"""Regex extractors that pull meeting facts out of free-form transcript text.

Each public ``extract_*`` function takes the transcript (and the roster where
names matter) and returns plain model objects. Nothing here raises on odd
input: a miss is an empty list or a default value.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from .models import (
    UNASSIGNED_MEMBER,
    ActionItem,
    Adjournment,
    AgendaApproval,
    AttendanceRecord,
    BusinessItem,
    CallToOrder,
    DiscussionTopic,
    MeetingInfo,
    Motion,
    NextMeeting,
    Participant,
    PublicCommentSpeaker,
    Vote,
    VoteTally,
)
from .roster import Roster

log = logging.getLogger(__name__)

MAX_ACTION_ITEMS = 15
MAX_DECISIONS = 12
MAX_DISCUSSIONS = 10
MAX_BUSINESS_ITEMS = 10
MAX_OUTCOMES = 6
MOTION_WINDOW = 600
DISCUSSION_WINDOW = 800

MEETING_TYPE_LABELS = {
    "commission": "Commission Meeting",
    "board": "Board Meeting",
    "case": "Case Hearing",
    "general": "General Meeting",
    "other": "General Meeting",
}

# Keyword -> office, first hit wins
ASSIGNEE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("classification", "Classification Office"),
    ("budget", "Budget Officer"),
    ("farrell", "Budget Officer"),
    ("secretary", "Secretary"),
    ("bellas", "Secretary"),
    ("hearing officer", "Hearing Officer"),
    ("director", "Director"),
    ("chair", "Chairperson"),
    ("muna", "Chairperson"),
    ("staff", "Administrative Staff"),
    ("commission", "Commission"),
)

RELATED_TOPICS = ("budget", "personnel", "policy", "procurement", "classification", "audit")

DECISION_KEYWORDS = (
    "decided", "approved", "denied", "rejected", "adopted", "carried", "passed",
    "failed", "tabled", "postponed", "authorized", "ratified", "confirmed",
    "unanimously",
)
GOVERNANCE_NOUNS = ("motion", "vote", "commission", "board")

_NAME = r"[A-Z][\w'’\-]+(?:\s+[A-Z][\w'’\-]+){0,2}"
_NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6,
    "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12,
}
_NUM = r"(\d+|" + "|".join(_NUMBER_WORDS) + r")"

_TIME_RE = re.compile(r"(?<![\d:])(\d{1,2}:\d{2}(?::\d{2})?(?:\s?[ap]\.?m\b)?)", re.IGNORECASE)
_LINE_TS_RE = re.compile(r"^\s*\[?(\d{1,2}:\d{2}(?::\d{2})?)\]?")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+(?=\s|$)|\n+")
_SPEAKER_RE = re.compile(
    r"^\s*(?:\[[^\]\n]*\]\s*)?([A-Z][\w.'’\-]*(?:[ \t]+[A-Z][\w.'’\-]*){0,3})[ \t]*:[ \t]*(.+)$",
    re.MULTILINE,
)
_NOT_SPEAKERS = {
    "date", "time", "location", "agenda", "motion", "result", "outcome", "decision",
    "note", "notes", "item", "action", "vote", "topic", "subject", "re", "present",
    "absent", "second", "issue", "discussion", "recommendation", "summary",
}
_NAME_STOPWORDS = {
    "the", "motion", "it", "i", "a", "and", "then", "this", "that", "was", "vote",
    "second", "seconded", "chair", "okay", "ok", "so", "all", "we", "commission",
    "board", "agenda", "meeting", "yes", "no", "thank", "thanks", "is", "there",
}

_MOTION_TRIGGER_RE = re.compile(
    r"\bmotion\s+(?:was\s+)?(?:made\s+)?by\s+(?P<by>" + _NAME + r")\s+to\b"
    r"|\b(?:i\s+(?:would\s+like\s+to\s+|hereby\s+)?move|(?:make\s+a\s+)?motion\s+to"
    r"|moved?\s+to|moves\s+to|moved\s+that|move\s+that|so\s+moved?)\b",
    re.IGNORECASE,
)
_SECOND_RE = re.compile(
    r"(?i:second(?:ed)?\s+by)\s+(?P<after>" + _NAME + r")"
    r"|(?P<label>" + _NAME + r")\s*:\s*(?i:(?:i\s+)?second(?:ed)?\b)"
    r"|(?P<before>" + _NAME + r")\s+(?i:seconds?|seconded)\b"
)
_NOT_A_MOTION_RE = re.compile(r"^(?:on\b|the\s+next\b|next\b|forward\b|ahead\b)", re.IGNORECASE)

_ROLL_CALL_RE = re.compile(r"\broll\s+call\b", re.IGNORECASE)
_ABSENT_RE = re.compile(r"\b(?:absent|excused|not\s+present)\b", re.IGNORECASE)
_ABSENT_LABEL_RE = re.compile(r"\W*(?:absent|excused)\b", re.IGNORECASE)
_CLAUSE_SPLIT_RE = re.compile(r"[,;.!?\n]")
_ARRIVAL_RE = re.compile(r"\b(?:arrived|joined)\b", re.IGNORECASE)
_DEPARTURE_RE = re.compile(r"\b(?:left|departed|stepped\s+out)\b", re.IGNORECASE)

_SECTION_RES = {
    "old_business": re.compile(r"\b(?:old|unfinished|previous)\s+business\b", re.IGNORECASE),
    "new_business": re.compile(r"\bnew\s+business\b", re.IGNORECASE),
    "public_comment": re.compile(r"\bpublic\s+comments?\b", re.IGNORECASE),
    "next_meeting": re.compile(r"\bnext\s+meeting\b", re.IGNORECASE),
    "adjournment": re.compile(r"\badjourn", re.IGNORECASE),
}
_ITEM_MARKER_RE = re.compile(
    r"^[ \t]*\d{1,2}[.)][ \t]+|\bitem\s*(?:no\.?\s*)?#?\d+\s*[:.\-]?\s*",
    re.IGNORECASE | re.MULTILINE,
)
_ITEM_PHRASE_RE = re.compile(
    r"\b(?:discuss(?:ed|ion)?|present(?:ed|ation)?|report(?:ed)?|update\s+on|regarding|review(?:ed)?)\b",
    re.IGNORECASE,
)
_PRESENTER_RE = re.compile(
    r"(?:presented\s+by|reported\s+by)\s+(" + _NAME + r")"
    r"|(" + _NAME + r")\s+(?:presented|presents|reported|reports|discussed|gave)\b"
)
_OUTCOME_RE = re.compile(r"\b(?:result|outcome|decision|conclusion)s?\s*[:\-]?\s+([^.\n]+)", re.IGNORECASE)
_ACTION_TAKEN_RE = re.compile(r"\b(?:action|will|shall)[:\s]+([^.\n]+)", re.IGNORECASE)

_ACTION_INDICATOR_RE = re.compile(
    r"\b(?:will|shall|must|needs?\s+to|should|responsible\s+for|assigned\s+to|coordinate|"
    r"prepare|submit|forward|complete|follow\s+up|ensure|provide|deliver)\b",
    re.IGNORECASE,
)
_DEADLINE_RE = re.compile(
    r"\b(?:by|before|within|no\s+later\s+than)\s+"
    r"(?:the\s+)?(?:next|end\s+of|close\s+of|this|tomorrow|today|noon|\d|a\s+week|a\s+month|"
    r"(?:mon|tues|wednes|thurs|fri|satur|sun)day|jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec|"
    r"one|two|three|four|five|six|seven|ten|fourteen|thirty)[^,.;\n]{0,40}",
    re.IGNORECASE,
)

_MONTHS = (
    r"(?:January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept?|Oct|Nov|Dec)\.?"
)
_DATE_PATTERNS = (
    re.compile(r"\bmeeting\s+(?:held\s+)?(?:on\s+)?(" + _MONTHS + r"\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4})", re.IGNORECASE),
    re.compile(r"\b(" + _MONTHS + r"\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4})\b"),
    re.compile(r"\b(\d{1,2}/\d{1,2}/\d{2,4})\b"),
    re.compile(r"\b(\d{4}-\d{2}-\d{2})\b"),
    re.compile(r"\bdate:[ \t]*([^\n]+)", re.IGNORECASE),
)
_LOCATION_PATTERNS = (
    re.compile(
        r"\bmeeting\s+(?:is\s+|was\s+)?(?:held\s+)?(?:at|in)\s+(?:the\s+)?"
        r"([^.\n]*?(?:room|hall|center|centre|building|office|chambers?))\b",
        re.IGNORECASE,
    ),
    re.compile(r"\blocation:[ \t]*([^\n]+)", re.IGNORECASE),
)
_CALL_TO_ORDER_PATTERNS = (
    re.compile(r"\b(?:meeting|session)\s+(?:was\s+|is\s+)?(?:called|brought)\s+to\s+order\b", re.IGNORECASE),
    re.compile(r"\b(?:call|calling|called|bring|bringing)\s+(?:this\s+|the\s+)?(?:meeting|session)\s+to\s+order\b", re.IGNORECASE),
    re.compile(r"\b(?:call|calling)\s+to\s+order\b", re.IGNORECASE),
)
_CHAIR_TITLE_RE = re.compile(r"\b(?:Chairperson|Chairman|Chairwoman|Chair)\s+(" + _NAME + r")")
_ADJOURN_PATTERNS = (
    re.compile(r"\bmotion\s+to\s+adjourn\b", re.IGNORECASE),
    re.compile(r"\b(?:meeting\s+(?:is\s+|was\s+)?)?(?:adjourned|adjourns?|concluded)\b", re.IGNORECASE),
    re.compile(r"\bclose\s+the\s+meeting\b", re.IGNORECASE),
)
_TOPIC_PATTERNS = (
    re.compile(r"\b(?:discuss(?:ion)?|present(?:ation)?|report)\s+(?:on|about|of|regarding)\s+([^.\n]{15,100})", re.IGNORECASE),
    re.compile(r"\b(?:agenda\s+item|item)\s*\d*[:\-\s]+([^.\n]{20,100})", re.IGNORECASE),
    re.compile(r"\b(?:topic|subject|matter)[:\-\s]+([^.\n]{15,80})", re.IGNORECASE),
)
_KEY_POINT_RE = re.compile(
    r"\b(?:important|significant|key|main|primary|critical|concern|issue|problem|solution|recommendation)\w*",
    re.IGNORECASE,
)
_DISCUSSION_OUTCOME_PATTERNS = (
    re.compile(r"\b(?:outcome|result|conclusion|decision)[:\s]+([^.\n]+)", re.IGNORECASE),
    re.compile(r"\b(?:agreed|decided|resolved)[:\s]+([^.\n]+)", re.IGNORECASE),
    re.compile(r"\b(?:will|shall)\s+([^.\n]+)", re.IGNORECASE),
)
_MEETING_OUTCOME_PATTERNS = (
    re.compile(r"\b(?:as\s+a\s+result|consequently|therefore),?\s+([^.\n]+)", re.IGNORECASE),
    re.compile(r"\b(?:outcome|result|conclusion)[:\-\s]+([^.\n]+)", re.IGNORECASE),
    re.compile(r"\bnext\s+steps?[:\-\s]+([^.\n]+)", re.IGNORECASE),
    re.compile(r"\b(?:going|moving)\s+forward,?\s+([^.\n]+)", re.IGNORECASE),
)
_COMMENT_VERB_RE = re.compile(
    r"(" + _NAME + r")\s+(?:spoke|commented|addressed|asked|raised|expressed|testified)\b([^.\n]*)"
)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def split_sentences(text: str) -> list[str]:
    """Split text on sentence punctuation and line breaks."""
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s and s.strip()]


def _sentence_start(text: str, pos: int) -> int:
    """Index where the sentence containing ``pos`` begins.

    Walks back from ``pos`` to the nearest boundary that ``_SENTENCE_SPLIT_RE``
    would end at: a line break, or sentence punctuation followed by whitespace.
    """
    i = pos
    while i > 0:
        ch = text[i - 1]
        if ch == "\n":
            return i
        if ch in ".!?" and (i == pos or text[i].isspace()):
            return i
        i -= 1
    return 0


def _line_at(text: str, pos: int) -> str:
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    return text[start:] if end == -1 else text[start:end]


def _truncate(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def _parse_number(raw: str) -> int:
    raw = raw.lower()
    if raw.isdigit():
        return int(raw)
    return _NUMBER_WORDS.get(raw, 0)


def find_time(text: str) -> str | None:
    m = _TIME_RE.search(text)
    return m.group(1).strip() if m else None


def _speaker_label(line: str) -> str | None:
    m = _SPEAKER_RE.match(line)
    if not m:
        return None
    label = m.group(1).strip()
    if label.split()[0].lower().rstrip(".") in _NOT_SPEAKERS:
        return None
    return label


def _candidate_name(raw: str | None, roster: Roster) -> str | None:
    """Turn a regex-captured name into a canonical or plausible person name."""
    if not raw:
        return None
    raw = raw.strip()
    resolved = roster.resolve(raw)
    if resolved:
        return resolved
    words = [w for w in raw.split() if w.lower().strip(".,") not in _NAME_STOPWORDS]
    return " ".join(words) if words else None


def _slice_section(text: str, name: str) -> str | None:
    """Return text from the ``name`` section header up to the next section header."""
    start_re = _SECTION_RES[name]
    m = start_re.search(text)
    if not m:
        return None
    end = len(text)
    for other, other_re in _SECTION_RES.items():
        if other == name:
            continue
        nxt = other_re.search(text, m.end())
        if nxt and nxt.start() < end:
            end = nxt.start()
    return text[m.start():end]


def _find_maker(text: str, trigger: re.Match, roster: Roster) -> str:
    """Who made the motion: named in the trigger, in the same sentence, or the speaker."""
    by = trigger.groupdict().get("by")
    if by:
        return _candidate_name(by, roster) or UNASSIGNED_MEMBER

    start = _sentence_start(text, trigger.start())
    prefix = text[start:trigger.start()]
    mentions = roster.find_all(prefix)
    if mentions:
        return mentions[-1][1].name

    label = _speaker_label(_line_at(text, trigger.start()))
    if label:
        return roster.resolve(label) or label

    m = re.search(r"(" + _NAME + r")\s*$", prefix)
    if m:
        name = _candidate_name(m.group(1), roster)
        if name:
            return name
    return UNASSIGNED_MEMBER


def _seconder_candidates(region: str, roster: Roster) -> list[str]:
    names: list[str] = []
    for m in _SECOND_RE.finditer(region):
        raw = m.group("after") or m.group("label") or m.group("before")
        name = _candidate_name(raw, roster)
        if name:
            names.append(name)
    return names


def _find_seconder(
    text: str,
    start: int,
    end: int,
    maker: str,
    roster: Roster,
) -> str:
    """First seconder in [start, end) who is not the maker, looking further on if needed."""
    for name in _seconder_candidates(text[start:end], roster):
        if name != maker:
            return name
    # Same person (or nobody) in the window: keep looking forward
    for name in _seconder_candidates(text[end:end + MOTION_WINDOW], roster):
        if name != maker:
            return name
    return UNASSIGNED_MEMBER


def extract_vote(context: str) -> Vote:
    """Vote type, result and tally from the text around a motion."""
    lower = context.lower()

    vote_type = "Voice Vote"
    if "roll call" in lower:
        vote_type = "Roll Call Vote"
    elif "show of hands" in lower:
        vote_type = "Show of Hands"
    elif "unanimous consent" in lower:
        vote_type = "Unanimous Consent"

    # Later checks take precedence
    result = "Unknown"
    if re.search(r"\b(?:carried|passed|passes|carries)\b", lower):
        result = "Carried"
    if re.search(r"\b(?:failed|fails|defeated)\b", lower):
        result = "Failed"
    if "unanimous" in lower:
        result = "Unanimous"
    if re.search(r"\btabled\b", lower):
        result = "Tabled"

    def count(words: str) -> int | None:
        m = re.search(r"\b" + _NUM + r"\s*(?:-\s*)?(?:" + words + r")\b", lower) or re.search(
            r"\b(?:" + words + r")\s*[:\-]?\s*" + _NUM + r"\b", lower
        )
        return _parse_number(m.group(1)) if m else None

    yes = count(r"yes|ayes?|yeas?|in\s+favou?r")
    no = count(r"no|nays?|noes|against|opposed")
    abstain = count(r"abstain\w*|abstentions?")

    tally = None
    if yes is not None or no is not None or abstain is not None:
        tally = VoteTally(yes=yes or 0, no=no or 0, abstain=abstain or 0)

    return Vote(type=vote_type, result=result, tally=tally, details=_truncate(context, 200))


def _motion_kind(text: str) -> str:
    lower = text.lower()
    if "adjourn" in lower:
        return "Adjournment Motion"
    if re.search(r"\btable\b", lower):
        return "Table Motion"
    if "agenda" in lower:
        return "Agenda Approval"
    if "approve" in lower or "adopt" in lower:
        return "Approval Motion"
    return "Main Motion"


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def extract_meeting_info(transcript: str, title: str, meeting_type: str = "other") -> MeetingInfo:
    """Date, time and location; the first matching date pattern wins."""
    meeting_date = date.today().isoformat()
    for pattern in _DATE_PATTERNS:
        m = pattern.search(transcript)
        if m:
            meeting_date = m.group(1).strip()
            break

    location = None
    for pattern in _LOCATION_PATTERNS:
        m = pattern.search(transcript)
        if m:
            location = m.group(1).strip()
            break

    return MeetingInfo(
        title=title,
        date=meeting_date,
        time=find_time(transcript),
        location=location,
        type=MEETING_TYPE_LABELS.get(meeting_type, "General Meeting"),
    )


def _roll_call_section(transcript: str) -> str | None:
    m = _ROLL_CALL_RE.search(transcript)
    if not m:
        return None
    end = min(len(transcript), m.start() + 1500)
    blank = re.search(r"\n\s*\n", transcript[m.end():end])
    if blank:
        end = m.end() + blank.start()
    for name in ("old_business", "new_business", "public_comment", "adjournment"):
        nxt = _SECTION_RES[name].search(transcript, m.end(), end)
        if nxt:
            end = nxt.start()
    agenda = re.search(r"\bagenda\b", transcript[m.end():end], re.IGNORECASE)
    if agenda:
        end = m.end() + agenda.start()
    return transcript[m.start():end]


def _marked_absent(text: str, match: re.Match) -> bool:
    """Absence marker in the same clause, or an "Absent:" sentence label."""
    start = _sentence_start(text, match.start())
    if _ABSENT_LABEL_RE.match(text, start):
        return True
    clause_start = max(start, max(text.rfind(c, start, match.start()) for c in ",;.!?\n") + 1)
    end_m = _CLAUSE_SPLIT_RE.search(text, match.end())
    clause = text[clause_start:end_m.start() if end_m else len(text)]
    return bool(_ABSENT_RE.search(clause))


def _time_in_sentence(text: str, match: re.Match, verb_re: re.Pattern) -> str | None:
    start = _sentence_start(text, match.start())
    end_m = _SENTENCE_SPLIT_RE.search(text, match.end())
    sentence = text[start:end_m.start() if end_m else len(text)]
    if verb_re.search(sentence):
        return find_time(sentence)
    return None


def extract_attendance(transcript: str, roster: Roster) -> list[AttendanceRecord]:
    """Present/absent for every voting member, with arrival/departure times if stated."""
    members = roster.voting_members
    if not members or not transcript.strip():
        return []

    roll_call = _roll_call_section(transcript)
    roll_hits: dict[str, list[re.Match]] = {}
    for m, person in roster.find_all(roll_call or ""):
        roll_hits.setdefault(person.name, []).append(m)
    all_hits: dict[str, list[re.Match]] = {}
    for m, person in roster.find_all(transcript):
        all_hits.setdefault(person.name, []).append(m)

    records: list[AttendanceRecord] = []
    for person in members:
        present = False
        in_roll = roll_hits.get(person.name, [])
        anywhere = all_hits.get(person.name, [])

        if in_roll:
            present = not any(_marked_absent(roll_call, m) for m in in_roll)
        elif anywhere:
            present = not any(_marked_absent(transcript, m) for m in anywhere)

        arrival = departure = None
        if present:
            for m in anywhere:
                arrival = arrival or _time_in_sentence(transcript, m, _ARRIVAL_RE)
                departure = departure or _time_in_sentence(transcript, m, _DEPARTURE_RE)
            if arrival is None and anywhere:
                ts = _LINE_TS_RE.match(_line_at(transcript, anywhere[0].start()))
                arrival = ts.group(1) if ts else None

        records.append(
            AttendanceRecord(
                name=person.name,
                role=person.role,
                present=present,
                arrival_time=arrival,
                departure_time=departure,
            )
        )
    return records


def extract_call_to_order(transcript: str, roster: Roster) -> CallToOrder:
    for pattern in _CALL_TO_ORDER_PATTERNS:
        m = pattern.search(transcript)
        if not m:
            continue
        ctx_start = max(0, m.start() - 100)
        context = transcript[ctx_start:m.end() + 200]

        chair = None
        before = roster.find_all(transcript[_sentence_start(transcript, m.start()):m.start()])
        if before:
            chair = before[-1][1].name
        else:
            titled = _CHAIR_TITLE_RE.search(context)
            if titled:
                chair = _candidate_name(titled.group(1), roster)
        if chair is None:
            chairs = [p for p in roster.voting_members if p.role.lower().startswith("chair")]
            if chairs and any(p.name == chairs[0].name for _, p in roster.find_all(context)):
                chair = chairs[0].name

        return CallToOrder(found=True, time=find_time(context), chairperson=chair)
    return CallToOrder()


def extract_agenda_approval(transcript: str, roster: Roster) -> AgendaApproval:
    """Motion to approve or adopt the agenda, with maker, seconder and result."""
    proposal = re.search(
        r"\b(?:motion|move[sd]?)\b[^.!?\n]*?\b(?:approve|adopt)\w*\b[^.!?\n]*?\bagenda\b",
        transcript,
        re.IGNORECASE,
    )
    if not proposal:
        approved = re.search(r"\bagenda\b[^.!?\n]*?\b(?:was\s+)?(?:approved|adopted)\b", transcript, re.IGNORECASE)
        if approved:
            return AgendaApproval(proposed=False, approved=True, result="Approved")
        return AgendaApproval()

    trigger = _MOTION_TRIGGER_RE.search(transcript, _sentence_start(transcript, proposal.start()), proposal.end())
    maker = _find_maker(transcript, trigger, roster) if trigger else UNASSIGNED_MEMBER
    window_end = min(len(transcript), proposal.end() + 400)
    seconder = _find_seconder(transcript, proposal.end(), window_end, maker, roster)

    following = transcript[proposal.start():window_end].lower()
    result = None
    if "unanimous" in following:
        result = "Unanimous"
    elif re.search(r"\bcarried\b", following):
        result = "Carried"
    elif re.search(r"\bpassed\b", following):
        result = "Passed"
    elif re.search(r"\b(?:approved|adopted)\b", following):
        result = "Approved"
    elif re.search(r"\bfailed\b", following):
        result = "Failed"

    return AgendaApproval(
        proposed=True,
        approved=result in ("Unanimous", "Carried", "Passed", "Approved"),
        maker=maker,
        seconder=seconder,
        result=result,
    )


def _motion_discussion(text: str) -> str:
    parts: list[str] = []
    for sentence in split_sentences(text):
        if _MOTION_TRIGGER_RE.search(sentence):
            break
        lower = sentence.lower()
        if "second" in lower or re.search(r"\b(?:carried|failed|passed|unanimous|tabled|all in favou?r|vote)\b", lower):
            continue
        parts.append(sentence)
    return _truncate(". ".join(parts), 500)


def extract_motions(transcript: str, roster: Roster) -> list[Motion]:
    """Every motion with maker, seconder, discussion and vote."""
    triggers = list(_MOTION_TRIGGER_RE.finditer(transcript))
    motions: list[Motion] = []

    for i, trigger in enumerate(triggers):
        rest = re.match(r"[^.!?\n]*", transcript[trigger.end():])
        text = rest.group(0).strip(" ,:;") if rest else ""
        text_end = trigger.end() + (rest.end() if rest else 0)
        if trigger.group(0).lower().startswith("so move"):
            start = _sentence_start(transcript, trigger.start())
            text = transcript[start:trigger.start()].strip(" ,:;") or text
            if len(text) <= 10:
                prev = split_sentences(transcript[:start])
                text = prev[-1] if prev else text

        if len(text) <= 10 or _NOT_A_MOTION_RE.match(text):
            continue

        window_end = min(len(transcript), trigger.start() + MOTION_WINDOW)
        if i + 1 < len(triggers):
            window_end = min(window_end, triggers[i + 1].start())
        window_end = max(window_end, text_end)

        maker = _find_maker(transcript, trigger, roster)
        seconder = _find_seconder(transcript, trigger.end(), window_end, maker, roster)
        context = transcript[trigger.start():window_end]
        amendments = [
            m.group(0).strip()
            for m in re.finditer(r"\bamend(?:ment|ed)?\b[:\s]+[^.\n]+", context, re.IGNORECASE)
        ]

        motions.append(
            Motion(
                number=len(motions) + 1,
                text=text,
                maker=maker,
                seconder=seconder,
                discussion=_motion_discussion(transcript[text_end:text_end + DISCUSSION_WINDOW]),
                vote=extract_vote(context),
                amendments=amendments,
                kind=_motion_kind(text),
            )
        )

    log.debug("Found %d motions", len(motions))
    return motions


def identify_assignee(sentence: str) -> str:
    lower = sentence.lower()
    for keyword, office in ASSIGNEE_KEYWORDS:
        if keyword in lower:
            return office
    return "Staff"


def extract_deadline(sentence: str) -> str | None:
    m = _DEADLINE_RE.search(sentence)
    return m.group(0).strip() if m else None


def determine_priority(sentence: str) -> str | None:
    lower = sentence.lower()
    if any(w in lower for w in ("urgent", "immediate", "asap", "as soon as possible")):
        return "High"
    if "soon" in lower or "quickly" in lower:
        return "Medium"
    if "when possible" in lower or "eventually" in lower:
        return "Low"
    return None


def identify_related_topic(sentence: str) -> str:
    lower = sentence.lower()
    for topic in RELATED_TOPICS:
        if topic in lower:
            return topic.capitalize()
    return "General"


def extract_action_items(transcript: str, roster: Roster | None = None) -> list[ActionItem]:
    """Sentences that carry an obligation, with inferred owner and deadline."""
    items: list[ActionItem] = []
    for sentence in split_sentences(transcript):
        if not (20 < len(sentence) < 300):
            continue
        if not _ACTION_INDICATOR_RE.search(sentence):
            continue

        assigned_to = identify_assignee(sentence)
        if assigned_to == "Staff" and roster is not None:
            mentioned = roster.mentions(sentence)
            if mentioned:
                assigned_to = mentioned[0].title

        items.append(
            ActionItem(
                description=sentence,
                assigned_to=assigned_to,
                deadline=extract_deadline(sentence),
                priority=determine_priority(sentence),
                related_to=identify_related_topic(sentence),
            )
        )
        if len(items) >= MAX_ACTION_ITEMS:
            break
    return items


def extract_decisions(transcript: str) -> list[str]:
    """Sentences with a decision keyword that also mention a governance noun."""
    decisions: list[str] = []
    for sentence in split_sentences(transcript):
        if len(sentence) <= 20:
            continue
        lower = sentence.lower()
        if not any(k in lower for k in DECISION_KEYWORDS):
            continue
        if any(n in lower for n in GOVERNANCE_NOUNS):
            decisions.append(sentence)
            if len(decisions) >= MAX_DECISIONS:
                break
    return decisions


def _key_points(section: str) -> list[str]:
    points = [
        s for s in split_sentences(section)
        if 30 < len(s) < 200 and _KEY_POINT_RE.search(s)
    ]
    return points[:5]


def _discussion_outcome(section: str) -> str | None:
    for pattern in _DISCUSSION_OUTCOME_PATTERNS:
        m = pattern.search(section)
        if m:
            return m.group(1).strip()
    return None


def _speakers_in(text: str, roster: Roster) -> list[str]:
    speakers: list[str] = []
    for m in _SPEAKER_RE.finditer(text):
        label = _speaker_label(m.group(0))
        if not label:
            continue
        name = roster.resolve(label) or label
        if name not in speakers:
            speakers.append(name)
    return speakers


def extract_discussions(transcript: str, roster: Roster) -> list[DiscussionTopic]:
    topics: list[DiscussionTopic] = []
    seen: set[str] = set()
    for pattern in _TOPIC_PATTERNS:
        for m in pattern.finditer(transcript):
            topic = m.group(1).strip()
            if len(topic) <= 10 or topic.lower() in seen:
                continue
            seen.add(topic.lower())
            section = transcript[m.start():m.start() + 1500]
            topics.append(
                DiscussionTopic(
                    topic=topic,
                    participants=_speakers_in(section, roster),
                    key_points=_key_points(section),
                    outcome=_discussion_outcome(section),
                )
            )
            if len(topics) >= MAX_DISCUSSIONS:
                return topics
    return topics


def _business_item(title: str, discussion: str, roster: Roster) -> BusinessItem:
    body = f"{title}\n{discussion}"

    presenter = None
    pm = _PRESENTER_RE.search(body)
    if pm:
        presenter = _candidate_name(pm.group(1) or pm.group(2), roster)

    outcome = None
    om = _OUTCOME_RE.search(discussion)
    if om:
        outcome = om.group(1).strip()
    else:
        for sentence in split_sentences(discussion):
            if re.search(r"\b(?:approved|denied|carried|failed|tabled|adopted)\b", sentence, re.IGNORECASE):
                outcome = sentence
                break

    am = _ACTION_TAKEN_RE.search(discussion)
    return BusinessItem(
        title=_truncate(title, 120),
        discussion=_truncate(discussion, 600),
        presenter=presenter,
        outcome=outcome,
        action_taken=am.group(0).strip() if am else None,
        has_motion=bool(_MOTION_TRIGGER_RE.search(body)),
    )


def _split_title(chunk: str) -> tuple[str, str]:
    m = re.search(r"[.!?](?=\s|$)|\n", chunk)
    if not m:
        return chunk.strip(), ""
    return chunk[:m.start()].strip(), chunk[m.end():].strip()


def _business_items(section: str | None, roster: Roster) -> list[BusinessItem]:
    if not section:
        return []
    header = re.match(r"[^\n.:]*[.:]?", section)
    body = section[header.end():] if header else section

    items: list[BusinessItem] = []
    markers = list(_ITEM_MARKER_RE.finditer(body))
    if markers:
        for i, marker in enumerate(markers):
            end = markers[i + 1].start() if i + 1 < len(markers) else len(body)
            title, discussion = _split_title(body[marker.end():end])
            if len(title) > 10:
                items.append(_business_item(title, discussion, roster))
    else:
        sentences = split_sentences(body)
        starts = [i for i, s in enumerate(sentences) if _ITEM_PHRASE_RE.search(s) and len(s) > 20]
        for n, i in enumerate(starts):
            end = starts[n + 1] if n + 1 < len(starts) else len(sentences)
            discussion = ". ".join(sentences[i + 1:end])
            items.append(_business_item(sentences[i], discussion, roster))
    return items[:MAX_BUSINESS_ITEMS]


def extract_old_business(transcript: str, roster: Roster) -> list[BusinessItem]:
    return _business_items(_slice_section(transcript, "old_business"), roster)


def extract_new_business(transcript: str, roster: Roster) -> list[BusinessItem]:
    return _business_items(_slice_section(transcript, "new_business"), roster)


def extract_public_comment(transcript: str, roster: Roster) -> list[PublicCommentSpeaker]:
    section = _slice_section(transcript, "public_comment")
    if not section:
        return []

    speakers: list[PublicCommentSpeaker] = []
    labelled = [m for m in _SPEAKER_RE.finditer(section) if _speaker_label(m.group(0))]
    for i, m in enumerate(labelled):
        end = labelled[i + 1].start() if i + 1 < len(labelled) else len(section)
        content = section[m.start(2):end].strip()
        if len(content) <= 20:
            continue
        first = split_sentences(content)
        speakers.append(
            PublicCommentSpeaker(
                name=roster.resolve(m.group(1)) or m.group(1).strip(),
                topic=_truncate(first[0], 100) if first else "General Comment",
                summary=_truncate(content, 300),
            )
        )

    if not speakers:
        for m in _COMMENT_VERB_RE.finditer(section):
            name = _candidate_name(m.group(1), roster)
            if not name:
                continue
            sentence = m.group(0).strip()
            about = re.search(r"\b(?:about|on|regarding|concerning)\s+(.+)", m.group(2))
            speakers.append(
                PublicCommentSpeaker(
                    name=name,
                    topic=_truncate(about.group(1), 100) if about else "General Comment",
                    summary=_truncate(sentence, 300),
                )
            )
    return speakers


def extract_next_meeting(transcript: str) -> NextMeeting | None:
    section = _slice_section(transcript, "next_meeting")
    if not section:
        return None
    section = section[:600]

    date_m = re.search(
        r"\b(" + _MONTHS + r"\s+\d{1,2}(?:st|nd|rd|th)?(?:,?\s+\d{4})?|\d{1,2}/\d{1,2}/\d{2,4})",
        section,
    )
    loc_m = re.search(
        r"\b(?:location[:\s]+|held\s+(?:at|in)\s+|in\s+the\s+)([^.\n,]+)", section, re.IGNORECASE
    )
    topics = [
        m.group(0).strip()
        for m in re.finditer(r"\b(?:agenda|topic|discuss)\w*\s+[^.\n]+", section, re.IGNORECASE)
    ]
    return NextMeeting(
        date=date_m.group(1) if date_m else None,
        time=find_time(section),
        location=loc_m.group(1).strip() if loc_m else None,
        topics=topics[:5],
    )


def extract_adjournment(transcript: str) -> Adjournment:
    for pattern in _ADJOURN_PATTERNS:
        m = pattern.search(transcript)
        if not m:
            continue
        after = transcript[m.start():m.end() + 300]
        context = transcript[max(0, m.start() - 100):m.end() + 300]
        lower = context.lower()
        if "no further business" in lower:
            method = "No further business"
        elif "consensus" in lower:
            method = "General consensus"
        else:
            method = "Motion to adjourn"
        return Adjournment(found=True, time=find_time(after) or find_time(context), method=method)
    return Adjournment()


def extract_participants(transcript: str, roster: Roster) -> list[Participant]:
    """Known people mentioned in the transcript plus any other labelled speakers."""
    spoken: dict[str, list[str]] = {}
    for m in _SPEAKER_RE.finditer(transcript):
        label = _speaker_label(m.group(0))
        if not label:
            continue
        contribution = m.group(2).strip()
        if len(contribution) > 10:
            name = roster.resolve(label) or label
            spoken.setdefault(name, []).append(contribution)

    participants: list[Participant] = []
    known: set[str] = set()
    for person in roster.mentions(transcript):
        known.add(person.name)
        participants.append(
            Participant(
                name=person.name,
                role=person.role or "Participant",
                contributions=spoken.get(person.name, [])[:10],
            )
        )
    for name, contributions in spoken.items():
        if name not in known:
            participants.append(Participant(name=name, contributions=contributions[:5]))
    return participants


def extract_outcomes(transcript: str) -> list[str]:
    outcomes: list[str] = []
    for pattern in _MEETING_OUTCOME_PATTERNS:
        for m in pattern.finditer(transcript):
            outcome = m.group(1).strip()
            if len(outcome) > 15 and outcome not in outcomes:
                outcomes.append(outcome)
    return outcomes[:MAX_OUTCOMES]
