"""OpenAI access: structured meeting summaries and audio transcription."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import openai
from openai import OpenAI

from .cache import ResponseCache
from .models import LLMFailed, LLMSucceeded, LLMSummary
from .prompts import optimize_transcript, system_prompt, user_prompt

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 4000
DEFAULT_TEMPERATURE = 0.3

WHISPER_MODEL = "whisper-1"
MAX_AUDIO_BYTES = 25 * 1024 * 1024
SUPPORTED_AUDIO_FORMATS = (".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".wav", ".webm")

# Rough pricing for gpt-4o-mini, USD per million tokens
INPUT_COST_PER_MILLION = 0.15
OUTPUT_COST_PER_MILLION = 0.60
ESTIMATED_OUTPUT_TOKENS = 1500


class LLMError(RuntimeError):
    """A request to the model API could not be completed."""


@dataclass
class UsageEstimate:
    input_tokens: int
    output_tokens: int
    input_cost: float
    output_cost: float

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def total_cost(self) -> float:
        return self.input_cost + self.output_cost


def estimate_usage(transcript: str) -> UsageEstimate:
    """Approximate token count (4 characters per token) and cost of one summary."""
    input_tokens = math.ceil(len(transcript) / 4)
    return UsageEstimate(
        input_tokens=input_tokens,
        output_tokens=ESTIMATED_OUTPUT_TOKENS,
        input_cost=input_tokens / 1_000_000 * INPUT_COST_PER_MILLION,
        output_cost=ESTIMATED_OUTPUT_TOKENS / 1_000_000 * OUTPUT_COST_PER_MILLION,
    )


def _strings(value, field: str) -> list[str]:
    """Coerce a JSON list of strings or objects into display strings."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"'{field}' should be a list, got {type(value).__name__}")
    items: list[str] = []
    for item in value:
        if isinstance(item, dict):
            text = ", ".join(str(v) for v in item.values() if v not in (None, "", []))
            if text:
                items.append(text)
        elif item not in (None, ""):
            items.append(str(item))
    return items


def transform_response(data: dict, meeting_type: str) -> LLMSummary:
    """Map the model's JSON onto an LLMSummary, filling per-type defaults.

    Raises ValueError when a field has the wrong JSON type.
    """
    info = data.get("meetingInfo") or {}
    if not isinstance(info, dict):
        raise ValueError(f"'meetingInfo' should be an object, got {type(info).__name__}")
    summary = data.get("summary") or "Summary not available"
    if not isinstance(summary, str):
        raise ValueError(f"'summary' should be a string, got {type(summary).__name__}")
    extras: dict = {}
    if meeting_type == "case":
        extras = {
            "caseInformation": data.get("caseInformation") or {},
            "parties": data.get("parties") or {"plaintiffs": [], "defendants": [], "attorneys": []},
            "courtPersonnel": data.get("courtPersonnel") or {},
            "hearingDetails": data.get("hearingDetails") or {"date": date.today().isoformat()},
            "legalIssues": data.get("legalIssues") or [],
            "proceduralMatters": data.get("proceduralMatters") or [],
            "evidence": data.get("evidence") or [],
            "rulings": data.get("rulings") or [],
            "nextSteps": data.get("nextSteps") or [],
            "importantDates": data.get("importantDates") or [],
        }
    elif meeting_type in ("board", "commission"):
        extras = {
            "attendance": data.get("attendance") or [],
            "motions": data.get("motions") or [],
            "quorumStatus": data.get("quorumStatus") or {"met": True, "presentCount": 4, "requiredCount": 4},
            "agendaItems": data.get("agendaItems") or [],
        }

    return LLMSummary(
        summary=summary,
        action_items=_strings(data.get("actionItems"), "actionItems"),
        participants=_strings(info.get("participants"), "participants"),
        key_decisions=_strings(data.get("keyDecisions") or data.get("decisions"), "keyDecisions"),
        meeting_type=meeting_type,
        extras=extras,
    )


def _to_outcome(data: dict, meeting_type: str) -> LLMSucceeded | LLMFailed:
    try:
        return LLMSucceeded(transform_response(data, meeting_type))
    except ValueError as exc:
        log.warning("Model returned a malformed response: %s", exc)
        return LLMFailed("Malformed response from AI")


class LLMClient:
    """Thin wrapper over the OpenAI client.

    ``summarize`` reports failure as an ``LLMFailed`` value instead of raising,
    so callers pick the fallback explicitly. One attempt per call.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        cache: ResponseCache | None = None,
        client: OpenAI | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.cache = cache
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise LLMError("OpenAI API key not configured")
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def summarize(self, transcript: str, title: str, meeting_type: str) -> LLMSucceeded | LLMFailed:
        if self.cache is not None:
            cached = self.cache.get(transcript, meeting_type)
            if cached is not None:
                log.info("Using cached model response for %r", title)
                return _to_outcome(cached, meeting_type)

        if not self.configured:
            return LLMFailed("OpenAI API key not configured")

        optimized = optimize_transcript(transcript)
        log.info(
            "Summarizing %s meeting %r with %s (%d chars, %d after optimizing)",
            meeting_type, title, self.model, len(transcript), len(optimized),
        )

        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt(meeting_type)},
                    {"role": "user", "content": user_prompt(title, optimized, meeting_type)},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            log.warning("Model request failed: %s", exc)
            return LLMFailed(str(exc) or exc.__class__.__name__)

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            return LLMFailed("No response from OpenAI")

        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            log.warning("Model returned invalid JSON", exc_info=True)
            return LLMFailed("Invalid JSON response from AI")
        if not isinstance(data, dict):
            return LLMFailed("Invalid JSON response from AI")

        outcome = _to_outcome(data, meeting_type)
        if self.cache is not None and isinstance(outcome, LLMSucceeded):
            self.cache.put(transcript, meeting_type, data)
        return outcome

    def transcribe_audio(self, path: Path) -> str:
        """Transcribe an audio file with Whisper. Raises LLMError on failure."""
        path = Path(path)
        size = path.stat().st_size
        if size > MAX_AUDIO_BYTES:
            raise LLMError(
                f"Audio file too large ({size / 1024 / 1024:.2f}MB). Maximum size is 25MB."
            )
        if path.suffix.lower() not in SUPPORTED_AUDIO_FORMATS:
            log.warning("Audio format %s may not be supported, trying anyway", path.suffix)

        log.info("Transcribing %s (%.2fMB)", path.name, size / 1024 / 1024)
        try:
            with path.open("rb") as f:
                result = self.client.audio.transcriptions.create(
                    model=WHISPER_MODEL,
                    file=f,
                    language="en",
                    response_format="text",
                    temperature=0.0,
                )
        except openai.AuthenticationError as exc:
            raise LLMError("OpenAI API key is invalid") from exc
        except openai.RateLimitError as exc:
            if "quota" in str(exc).lower():
                raise LLMError("OpenAI API quota exceeded. Please check your billing.") from exc
            raise LLMError("OpenAI API rate limit hit. Please wait and try again.") from exc
        except openai.OpenAIError as exc:
            raise LLMError(f"Audio transcription failed: {exc}") from exc

        text = result if isinstance(result, str) else getattr(result, "text", "")
        return (text or "").strip()
