"""Decide whether a processed meeting is an official order or routine notes."""

from __future__ import annotations

import re
from typing import Iterable

from .models import AnalysisResult

ORDER_KEYWORDS = (
    "hereby ordered",
    "status conference",
    "hearing notice",
    "scheduling order",
    "continuance notice",
    "final decision",
    "administrative order",
    "procedural notice",
    "civil service case",
    "csc-",
)

CASE_NUMBER_RE = re.compile(r"\bCSC-\d{2}-\d{3}\b", re.IGNORECASE)


def has_order_keyword(text: str) -> bool:
    lower = (text or "").lower()
    return any(keyword in lower for keyword in ORDER_KEYWORDS)


def find_case_number(text: str) -> str | None:
    """Return the first ``CSC-YY-NNN`` case number in text, upper-cased."""
    m = CASE_NUMBER_RE.search(text or "")
    return m.group(0).upper() if m else None


def classify_text(transcript: str, meeting_type: str, decisions: Iterable[str] = ()) -> bool:
    """Order keywords in the transcript, or in the decisions of a case meeting."""
    if has_order_keyword(transcript):
        return True
    return meeting_type == "case" and any(has_order_keyword(d) for d in decisions)


def is_official_order(result: AnalysisResult) -> bool:
    return classify_text(result.transcript, result.meeting_type, result.decisions)
