"""Prompt text for the language model and transcript pre-processing."""

from __future__ import annotations

import copy
import json
import re

_WHITESPACE_RE = re.compile(r"\s+")
_FILLER_RE = re.compile(r"\b(?:um|uh|ah|er)\b", re.IGNORECASE)
_INTERJECTION_RE = re.compile(r"\b(?:yeah|yes|ok|okay|right|sure|well)\b(?=\s)", re.IGNORECASE)
_TIMESTAMP_RE = re.compile(r"\[\d{2}:\d{2}:\d{2}\]")
_REPEATED_DOTS_RE = re.compile(r"\.{2,}")
_REPEATED_COMMAS_RE = re.compile(r",{2,}")

BASE_PROMPT = (
    "You are an assistant that analyzes meeting transcripts and writes structured "
    "summaries. Always respond with a single valid JSON object."
)

ONLY_WHAT_HAPPENED = (
    "Only include sections for things that actually happened in this meeting. "
    "If a topic was not discussed, leave its section out entirely rather than "
    "writing a placeholder."
)

BOARD_PROMPT = f"""{BASE_PROMPT}

You are an executive assistant who records board and commission meetings under
Robert's Rules of Order. The "summary" field must hold formal minutes in
markdown: call to order, roll call and quorum, approval of agenda and minutes,
reports, old business, new business with every motion (maker, seconder,
discussion, vote count, result), action items, next meeting and adjournment.

{ONLY_WHAT_HAPPENED}"""

CASE_PROMPT = f"""{BASE_PROMPT}

You are a legal analyst summarizing a civil service case hearing for attorneys
and commission staff. The "summary" field must hold a markdown case summary:
case number and hearing details, parties and representation, legal issues,
testimony, arguments from each side, evidence, rulings, procedural matters and
next steps.

{ONLY_WHAT_HAPPENED}"""

GENERAL_PROMPT = f"""{BASE_PROMPT}

You write friendly, readable notes for any kind of meeting, lecture or working
session. The "summary" field must hold markdown notes covering what was
discussed, key takeaways, decisions, action items with owners and anything
else worth remembering. Keep the tone plain and useful.

{ONLY_WHAT_HAPPENED}"""

_BASE_SHAPE = {
    "meetingInfo": {
        "title": "",
        "type": "",
        "date": "extracted date",
        "participants": ["names of participants"],
        "duration": "estimated duration",
    },
    "summary": "markdown summary",
    "actionItems": ["action items with responsible party and deadline"],
    "keyDecisions": ["decisions made"],
    "discussions": [{"topic": "", "keyPoints": [""], "outcome": ""}],
    "nextSteps": ["follow-ups"],
    "additionalNotes": "",
}

_BOARD_SHAPE = {
    "motions": [
        {
            "number": "motion number",
            "text": "motion text",
            "maker": "who moved",
            "seconder": "who seconded",
            "discussion": "summary of discussion",
            "vote": "Yes: #, No: #, Abstain: #",
            "result": "PASSED or FAILED",
        }
    ],
    "attendance": [{"name": "", "role": "", "present": True, "arrivalTime": ""}],
    "quorumStatus": {"met": True, "presentCount": 0, "requiredCount": 0},
    "agendaItems": [""],
}

_CASE_SHAPE = {
    "caseInformation": {"caseNumber": "", "caseTitle": ""},
    "parties": {"plaintiffs": [""], "defendants": [""], "attorneys": [""]},
    "courtPersonnel": {"hearingOfficer": ""},
    "hearingDetails": {"date": "", "type": ""},
    "legalIssues": [""],
    "proceduralMatters": [""],
    "evidence": [""],
    "rulings": [""],
    "importantDates": [""],
}


def system_prompt(meeting_type: str) -> str:
    match meeting_type:
        case "board" | "commission":
            return BOARD_PROMPT
        case "case":
            return CASE_PROMPT
        case _:
            return GENERAL_PROMPT


def user_prompt(title: str, transcript: str, meeting_type: str) -> str:
    """The request message: title, transcript and the JSON shape to return."""
    shape = copy.deepcopy(_BASE_SHAPE)
    shape["meetingInfo"]["title"] = title
    shape["meetingInfo"]["type"] = meeting_type
    if meeting_type in ("board", "commission"):
        shape.update(_BOARD_SHAPE)
    elif meeting_type == "case":
        shape.update(_CASE_SHAPE)

    return (
        f"Analyze this {meeting_type} meeting transcript and return a structured summary as JSON.\n\n"
        f"**Title:** {title}\n\n"
        f"**Transcript:**\n{transcript}\n\n"
        f"**Required JSON structure:**\n{json.dumps(shape, indent=2)}\n\n"
        f"{ONLY_WHAT_HAPPENED}"
    )


def optimize_transcript(transcript: str) -> str:
    """Shrink a transcript before sending it: whitespace, fillers, timestamps."""
    text = _WHITESPACE_RE.sub(" ", transcript)
    text = _FILLER_RE.sub("", text)
    text = _INTERJECTION_RE.sub("", text)
    text = _TIMESTAMP_RE.sub("", text)
    text = _REPEATED_DOTS_RE.sub(".", text)
    text = _REPEATED_COMMAS_RE.sub(",", text)
    return _WHITESPACE_RE.sub(" ", text).strip()
