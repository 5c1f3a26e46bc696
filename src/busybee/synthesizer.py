"""Render analysis results as markdown meeting documents."""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path

import httpx

from .classifier import find_case_number
from .models import (
    ActionItem,
    AnalysisResult,
    AttendanceRecord,
    BusinessItem,
    DiscussionTopic,
    LLMSummary,
    Motion,
    OutputDocument,
)

log = logging.getLogger(__name__)

DOCUMENT_KINDS = ("minutes", "general", "case")
DEFAULT_QUORUM = 4
TEMPLATE_GUIDE_MARKER = "TEMPLATE USAGE GUIDE"
TEMPLATE_TIMEOUT = 10.0
ERROR_PREVIEW_CHARS = 500

_LEFTOVER_TOKEN_RE = re.compile(r"\[[A-Z][A-Z0-9_/]*\]")
_SEQUENTIAL_TOKEN_RE = re.compile(r"\[(ATTENDANCE_STATUS|MEMBER_NAME|MOTION_RESULT|VOTE_RESULT|X)\]")
_MEMBERS_PRESENT_RE = re.compile(r"\[X\] of (\d+) members present")
_BUSINESS_BLOCK_RE = re.compile(r"### \[BUSINESS_ITEM_1\].*?### \[ADD_ADDITIONAL_ITEMS_AS_NEEDED\]", re.DOTALL)
_ACTION_BLOCK_RE = re.compile(r"(?:^- \[ACTION_ITEM_\d+\][^\n]*(?:\n|$))+", re.MULTILINE)
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})(?::\d{2})?\s*([ap])?\.?m?\.?", re.IGNORECASE)
_DEPARTMENT_RE = re.compile(r"\b(?:Department|Office|Division) of(?:\s+[A-Z][A-Za-z&]*)+")

HEARING_TYPES = (
    ("status conference", "Status Conference"),
    ("adjudication hearing", "Adjudication Hearing"),
    ("show cause", "Show Cause"),
)


def load_template(source: str | Path | None) -> str | None:
    """Read a template from a local path or an http(s) URL.

    Any failure returns None so callers fall back to direct assembly.
    """
    if not source:
        return None
    source = str(source)
    if source.startswith(("http://", "https://")):
        try:
            response = httpx.get(source, timeout=TEMPLATE_TIMEOUT, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("Template not accessible at %s: %s", source, exc)
            return None
        return response.text

    path = Path(source).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        log.warning("Template not readable at %s", path)
        return None


def _cell(text: str | None, limit: int | None = None) -> str:
    text = (text or "").replace("\n", " ").replace("|", "\\|").strip()
    if limit and len(text) > limit:
        text = text[: limit - 3] + "..."
    return text


def _clock_minutes(value: str | None) -> int | None:
    m = _CLOCK_RE.search(value or "")
    if not m:
        return None
    hour, minute, meridiem = int(m.group(1)), int(m.group(2)), (m.group(3) or "").lower()
    if meridiem == "p" and hour < 12:
        hour += 12
    elif meridiem == "a" and hour == 12:
        hour = 0
    return hour * 60 + minute


def meeting_duration(start: str | None, end: str | None) -> str | None:
    """Human readable span between two clock times, e.g. '1 hour 15 minutes'."""
    begin, finish = _clock_minutes(start), _clock_minutes(end)
    if begin is None or finish is None or finish <= begin:
        return None
    hours, minutes = divmod(finish - begin, 60)
    parts = []
    if hours:
        parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    if minutes:
        parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")
    return " ".join(parts)


def _member_label(record: AttendanceRecord) -> str:
    return f"{record.role} {record.name}".strip()


def _quorum_met(result: AnalysisResult, quorum_size: int) -> bool:
    return len(result.present_members) >= quorum_size


def _action_table(items: list[ActionItem]) -> str:
    lines = [
        "| Action Item | Assigned To | Deadline | Related To | Priority |",
        "|-------------|-------------|----------|------------|----------|",
    ]
    for item in items:
        lines.append(
            f"| {_cell(item.description, 80)} | {_cell(item.assigned_to)} | "
            f"{_cell(item.deadline) or 'TBD'} | {_cell(item.related_to)} | {item.priority or 'Normal'} |"
        )
    return "\n".join(lines)


def _business_section(items: list[BusinessItem]) -> str:
    blocks: list[str] = []
    for index, item in enumerate(items, start=1):
        lines = [f"### {index}. {item.title}", ""]
        if item.presenter:
            lines.append(f"**Presented by:** {item.presenter}")
        if item.discussion:
            lines.append(f"**Discussion:** {item.discussion}")
        if item.outcome:
            lines.append(f"**Outcome:** {item.outcome}")
        if item.action_taken:
            lines.append(f"**Action Taken:** {item.action_taken}")
        blocks.append("\n".join(lines).rstrip())
    return "\n\n".join(blocks)


def _motion_section(motions: list[Motion]) -> str:
    blocks: list[str] = []
    for motion in motions:
        lines = [
            f"### Motion {motion.number}: {motion.text}",
            "",
            f"**Made by:** {motion.maker}",
            f"**Seconded by:** {motion.seconder}",
        ]
        if motion.discussion:
            lines += ["", f"**Discussion:** {motion.discussion}"]
        if motion.amendments:
            lines += ["", "**Amendments:**"] + [f"- {a}" for a in motion.amendments]
        lines += ["", "**Vote Details:**", f"- Type: {motion.vote.type}", f"- Result: {motion.vote.result}"]
        tally = motion.vote.tally
        if tally:
            count = f"- Vote Count: {tally.yes} Yes, {tally.no} No"
            if tally.abstain:
                count += f", {tally.abstain} Abstain"
            lines.append(count)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _discussion_section(discussions: list[DiscussionTopic]) -> str:
    blocks: list[str] = []
    for index, discussion in enumerate(discussions, start=1):
        lines = [f"### {index}. {discussion.topic}"]
        if discussion.participants:
            lines += ["", f"**Participants:** {', '.join(discussion.participants)}"]
        if discussion.key_points:
            lines += ["", "**Key Points:**"] + [f"- {p}" for p in discussion.key_points]
        if discussion.outcome:
            lines += ["", f"**Outcome:** {discussion.outcome}"]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _header(result: AnalysisResult, subtitle: str) -> str:
    info = result.meeting_info
    lines = [f"# {info.title}", f"## {subtitle}", "", f"**Meeting Date:** {info.date}"]
    if info.time:
        lines.append(f"**Meeting Time:** {info.time}")
    if info.location:
        lines.append(f"**Location:** {info.location}")
    lines.append(f"**Meeting Type:** {info.type}")
    return "\n".join(lines)


def _footer(result: AnalysisResult, stats: list[str]) -> str:
    lines = ["---", "", "*Generated by BusyBee*", ""]
    lines += [f"- {s}" for s in stats]
    lines.append(f"- Content analyzed: {len(result.transcript)} characters")
    return "\n".join(lines)


def assemble_minutes(result: AnalysisResult, *, quorum_size: int = DEFAULT_QUORUM) -> str:
    """Robert's Rules minutes. Sections without data are left out."""
    sections: list[str] = [_header(result, "Official Meeting Minutes")]

    if result.attendance:
        present = result.present_members
        absent = [a for a in result.attendance if not a.present]
        lines = ["## Attendance and Quorum", ""]
        if present:
            lines.append(f"**Members Present ({len(present)}):**")
            for member in present:
                line = f"- {_member_label(member)}"
                if member.arrival_time:
                    line += f" (arrived at {member.arrival_time})"
                lines.append(line)
        if absent:
            if present:
                lines.append("")
            lines.append(f"**Members Absent ({len(absent)}):**")
            lines += [f"- {_member_label(m)}" for m in absent]
        status = "Met" if _quorum_met(result, quorum_size) else "Not Met"
        lines += ["", f"**Quorum Status:** {status} ({len(present)} of {len(result.attendance)} members present)"]
        sections.append("\n".join(lines))

    call = result.call_to_order
    if call.found:
        sentence = "The meeting was called to order"
        if call.chairperson:
            sentence += f" by {call.chairperson}"
        if call.time:
            sentence += f" at {call.time}"
        sections.append(f"## Call to Order\n\n{sentence}.")

    agenda = result.agenda_approval
    if agenda.proposed or agenda.approved:
        lines = ["## Approval of Agenda", ""]
        if agenda.proposed:
            lines.append(f"**Motion:** {agenda.maker or 'A member'} moved to approve the agenda as presented.")
            if agenda.seconder:
                lines.append(f"**Second:** {agenda.seconder}")
        else:
            lines.append("The agenda was approved.")
        if agenda.result:
            lines.append(f"**Result:** {agenda.result}")
        sections.append("\n".join(lines))

    if result.public_comment:
        blocks = ["## Public Comment"]
        for index, speaker in enumerate(result.public_comment, start=1):
            heading = f"### Speaker {index}" + (f": {speaker.name}" if speaker.name else "")
            blocks.append(f"{heading}\n\n**Topic:** {speaker.topic}\n**Summary:** {speaker.summary}")
        sections.append("\n\n".join(blocks))

    if result.old_business:
        sections.append("## Old Business\n\n" + _business_section(result.old_business))
    if result.new_business:
        sections.append("## New Business\n\n" + _business_section(result.new_business))
    if result.motions:
        sections.append("## Motions and Voting\n\n" + _motion_section(result.motions))
    if result.discussions:
        sections.append("## Key Discussions\n\n" + _discussion_section(result.discussions))
    if result.decisions:
        sections.append(
            "## Decisions\n\n" + "\n".join(f"{i}. {d}" for i, d in enumerate(result.decisions, start=1))
        )
    if result.action_items:
        sections.append("## Action Items\n\n" + _action_table(result.action_items))

    nxt = result.next_meeting
    if nxt and (nxt.date or nxt.time or nxt.location):
        lines = ["## Next Meeting", ""]
        if nxt.date:
            lines.append(f"**Date:** {nxt.date}")
        if nxt.time:
            lines.append(f"**Time:** {nxt.time}")
        if nxt.location:
            lines.append(f"**Location:** {nxt.location}")
        if nxt.topics:
            lines += ["**Special Agenda Items:**"] + [f"- {t}" for t in nxt.topics]
        sections.append("\n".join(lines))

    adjournment = result.adjournment
    if adjournment.found:
        sentence = "The meeting was adjourned"
        if adjournment.time:
            sentence += f" at {adjournment.time}"
        sentence += "."
        if adjournment.method:
            sentence += f" ({adjournment.method})"
        sections.append(f"## Adjournment\n\n{sentence}")

    sections.append(
        _footer(
            result,
            [
                f"{len(result.attendance)} members tracked ({len(result.present_members)} present)",
                f"{len(result.motions)} motions",
                f"{len(result.old_business)} old business items, {len(result.new_business)} new business items",
                f"{len(result.action_items)} action items",
                f"{len(result.discussions)} discussion topics",
                f"{len(result.public_comment)} public comment speakers",
            ],
        )
    )
    return "\n\n".join(sections) + "\n"


def assemble_general(result: AnalysisResult) -> str:
    sections: list[str] = [_header(result, "General Meeting Summary")]

    if result.participants:
        lines = [f"## Participants ({len(result.participants)})", ""]
        for p in result.participants:
            role = f" ({p.role})" if p.role and p.role != "Participant" else ""
            lines.append(f"- {p.name}{role}")
        sections.append("\n".join(lines))
    if result.discussions:
        sections.append(
            f"## Key Discussions ({len(result.discussions)})\n\n" + _discussion_section(result.discussions)
        )
    if result.decisions:
        sections.append(
            f"## Key Decisions ({len(result.decisions)})\n\n"
            + "\n".join(f"{i}. {d}" for i, d in enumerate(result.decisions, start=1))
        )
    if result.action_items:
        sections.append(f"## Action Items ({len(result.action_items)})\n\n" + _action_table(result.action_items))

    active = [p for p in result.participants if p.contributions]
    if active:
        blocks = ["## Participant Contributions"]
        for p in active:
            lines = [f"### {p.name}"]
            if p.role and p.role != "Participant":
                lines.append(f"**Role:** {p.role}")
            lines.append("**Key Contributions:**")
            lines += [f"- {c}" for c in p.contributions[:3]]
            blocks.append("\n".join(lines))
        sections.append("\n\n".join(blocks))

    sections.append(
        _footer(
            result,
            [
                f"{len(result.participants)} participants",
                f"{len(result.discussions)} discussion topics",
                f"{len(result.action_items)} action items",
                f"{len(result.decisions)} key decisions",
            ],
        )
    )
    return "\n\n".join(sections) + "\n"


def assemble_case(result: AnalysisResult) -> str:
    header = _header(result, "Case Hearing Summary")
    case_number = find_case_number(result.transcript)
    if case_number:
        header += f"\n**Case Number:** {case_number}"
    sections: list[str] = [header]

    if result.participants:
        lines = ["## Parties and Participants", ""]
        lines += [
            f"- {p.name}" + (f" ({p.role})" if p.role and p.role != "Participant" else "")
            for p in result.participants
        ]
        sections.append("\n".join(lines))
    if result.motions:
        sections.append("## Motions\n\n" + _motion_section(result.motions))
    if result.discussions:
        sections.append("## Issues Discussed\n\n" + _discussion_section(result.discussions))
    if result.decisions:
        sections.append(
            "## Rulings and Decisions\n\n"
            + "\n".join(f"{i}. {d}" for i, d in enumerate(result.decisions, start=1))
        )
    if result.action_items:
        sections.append("## Next Steps\n\n" + _action_table(result.action_items))

    nxt = result.next_meeting
    if nxt and (nxt.date or nxt.time):
        when = " ".join(v for v in (nxt.date, nxt.time) if v)
        sections.append(f"## Next Hearing\n\n**Scheduled:** {when}")

    sections.append(
        _footer(
            result,
            [
                f"{len(result.participants)} participants",
                f"{len(result.motions)} motions",
                f"{len(result.decisions)} rulings and decisions",
                f"{len(result.action_items)} next steps",
            ],
        )
    )
    return "\n\n".join(sections) + "\n"


def strip_usage_guide(template: str) -> str:
    """Drop the usage guide section that ships at the end of the template."""
    idx = template.find(TEMPLATE_GUIDE_MARKER)
    if idx == -1:
        return template.strip()
    line_start = template.rfind("\n", 0, idx) + 1
    return template[:line_start].strip()


def fill_template(
    template: str,
    result: AnalysisResult,
    *,
    quorum_size: int = DEFAULT_QUORUM,
    recording_filename: str | None = None,
) -> str:
    """Substitute ``[TOKEN]`` placeholders with analysis values.

    Repeated tokens such as ``[MEMBER_NAME]`` are filled in order of
    appearance. Any token still left afterwards becomes "None".
    """
    text = strip_usage_guide(template)
    info = result.meeting_info
    present = len(result.present_members)
    start_time = result.call_to_order.time or info.time
    end_time = result.adjournment.time

    text = _MEMBERS_PRESENT_RE.sub(lambda m: f"{present} of {m.group(1)} members present", text)

    text = _BUSINESS_BLOCK_RE.sub(lambda _: _business_section(result.new_business) or "None", text)
    text = _ACTION_BLOCK_RE.sub(
        lambda _: (_action_table(result.action_items) + "\n") if result.action_items else "None\n", text
    )

    scalars = {
        "MEETING_TYPE": info.type,
        "MEETING_DATE": info.date,
        "START_TIME": start_time,
        "END_TIME": end_time,
        "DURATION": meeting_duration(start_time, end_time),
        "LOCATION": info.location,
        "CHAIRPERSON": result.call_to_order.chairperson,
        "RECORDING_FILENAME": recording_filename,
        "QUORUM_STATUS": "Met" if _quorum_met(result, quorum_size) else "Not Met",
        "OLD_BUSINESS_ITEMS": _business_section(result.old_business),
        "PREPARATION_DATE": date.today().isoformat(),
    }
    for token, value in scalars.items():
        if value:
            text = text.replace(f"[{token}]", str(value))

    by_name = {a.name.lower(): a for a in result.attendance}
    attendance_queue = list(result.attendance)
    names: list[str] = []
    results: list[str] = []
    counts: list[str] = []
    for motion in result.motions:
        names += [motion.maker, motion.seconder]
        results.append(motion.vote.result)
        if motion.vote.tally:
            tally = motion.vote.tally
            counts += [str(tally.yes), str(tally.no)]
    if not result.motions and result.agenda_approval.proposed:
        agenda = result.agenda_approval
        names += [agenda.maker or "Member", agenda.seconder or "Member"]
        results.append(agenda.result or "Unknown")
    vote_results, motion_results = list(results), list(results)

    def fill_line(line: str) -> str:
        def replace(m: re.Match) -> str:
            token = m.group(1)
            if token == "ATTENDANCE_STATUS":
                record = next((a for n, a in by_name.items() if n in line.lower()), None)
                if record is None and attendance_queue:
                    record = attendance_queue[0]
                if record is None:
                    return "None"
                if record in attendance_queue:
                    attendance_queue.remove(record)
                return "Present" if record.present else "Absent"
            queue = {
                "MEMBER_NAME": names,
                "X": counts,
                "VOTE_RESULT": vote_results,
                "MOTION_RESULT": motion_results,
            }[token]
            return queue.pop(0) if queue else "None"

        return _SEQUENTIAL_TOKEN_RE.sub(replace, line)

    text = "\n".join(fill_line(line) for line in text.split("\n"))
    text = _LEFTOVER_TOKEN_RE.sub("None", text)

    footer = _footer(
        result,
        [
            f"{present} members identified as present",
            f"{len(result.motions)} motions extracted",
            f"{len(result.old_business) + len(result.new_business)} business items found",
            f"{len(result.action_items)} action items identified",
        ],
    )
    return f"{text}\n\n{footer}\n"


def hearing_type(title: str, transcript: str) -> str | None:
    """Status conference, adjudication hearing or show cause, from the title first."""
    for source in (title, transcript):
        lowered = source.lower()
        for keyword, label in HEARING_TYPES:
            if keyword in lowered:
                return label
    return None


def fill_case_template(
    template: str,
    result: AnalysisResult,
    *,
    recording_filename: str | None = None,
) -> str:
    """Substitute ``[TOKEN]`` placeholders in a case notes template.

    Same rules as ``fill_template``: any token left over becomes "None".
    """
    text = strip_usage_guide(template)
    info = result.meeting_info
    officer = next((p.name for p in result.participants if p.role == "Hearing Officer"), None)
    others = [p for p in result.participants if p.name != officer]
    department = _DEPARTMENT_RE.search(result.transcript)
    nxt = result.next_meeting

    scalars = {
        "CASE_NUMBER": find_case_number(result.transcript),
        "DEPARTMENT_NAME": department.group(0) if department else None,
        "HEARING_TYPE": hearing_type(info.title, result.transcript),
        "MEETING_DATE": info.date,
        "RECORDING_FILENAME": recording_filename,
        "HEARING_OFFICER": officer,
        "PARTICIPANT_LIST": "\n".join(
            f"- {p.name}" + (f" ({p.role})" if p.role and p.role != "Participant" else "") for p in others
        ),
        "DISCUSSION_POINTS": _discussion_section(result.discussions),
        "RULINGS": "\n".join(f"{i}. {d}" for i, d in enumerate(result.decisions, start=1)),
        "NEXT_STEPS": _action_table(result.action_items) if result.action_items else None,
        "NEXT_HEARING": " ".join(v for v in (nxt.date, nxt.time) if v) if nxt else None,
        "KEY_OUTCOMES": "\n".join(f"- {o}" for o in result.outcomes),
        "PREPARATION_DATE": date.today().isoformat(),
    }
    for token, value in scalars.items():
        if value:
            text = text.replace(f"[{token}]", str(value))
    text = _LEFTOVER_TOKEN_RE.sub("None", text)

    footer = _footer(
        result,
        [
            f"{len(result.participants)} participants",
            f"{len(result.decisions)} rulings and decisions",
            f"{len(result.action_items)} next steps",
        ],
    )
    return f"{text}\n\n{footer}\n"


def synthesize(
    result: AnalysisResult,
    kind: str = "minutes",
    template: str | None = None,
    *,
    quorum_size: int = DEFAULT_QUORUM,
    recording_filename: str | None = None,
) -> OutputDocument:
    """Build the output document for an analysis result.

    ``template`` is filled for minutes and case documents; general
    documents are always assembled directly.
    """
    if kind not in DOCUMENT_KINDS:
        raise ValueError(f"Unknown document kind: {kind!r}")
    match kind:
        case "minutes":
            if template:
                markdown = fill_template(
                    template, result, quorum_size=quorum_size, recording_filename=recording_filename
                )
            else:
                markdown = assemble_minutes(result, quorum_size=quorum_size)
        case "case":
            if template:
                markdown = fill_case_template(template, result, recording_filename=recording_filename)
            else:
                markdown = assemble_case(result)
        case _:
            markdown = assemble_general(result)
    return OutputDocument(markdown=markdown, kind=kind)


def document_kind_for(meeting_type: str) -> str:
    """Map a meeting type to the document kind used to render it."""
    if meeting_type in ("commission", "board"):
        return "minutes"
    if meeting_type == "case":
        return "case"
    return "general"


def render_summary(summary: LLMSummary, title: str) -> str:
    """Markdown for a model-generated summary; empty lists are left out."""
    sections = [f"# {title}", summary.summary.strip()]
    if summary.participants:
        sections.append("## Participants\n\n" + "\n".join(f"- {p}" for p in summary.participants))
    if summary.key_decisions:
        sections.append("## Key Decisions\n\n" + "\n".join(f"- {d}" for d in summary.key_decisions))
    if summary.action_items:
        sections.append("## Action Items\n\n" + "\n".join(f"- {a}" for a in summary.action_items))
    return "\n\n".join(sections) + "\n"


def render_error(title: str, transcript: str, reason: str) -> str:
    """Labeled document written when the model call fails and no fallback is wanted."""
    preview = transcript[:ERROR_PREVIEW_CHARS]
    if len(transcript) > ERROR_PREVIEW_CHARS:
        preview += "..."
    return (
        f"# {title} - Processing Error\n\n"
        f"**Date:** {date.today().isoformat()}\n"
        f"**Error:** AI processing failed - {reason}\n\n"
        f"## Transcript Preview\n\n{preview}\n\n"
        f"## Details\n\n"
        f"- Transcript length: {len(transcript)} characters\n"
        f"- Cause: {reason}\n"
    )
