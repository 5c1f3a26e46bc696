"""Configuration loading and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .cache import DEFAULT_TTL_HOURS
from .llm_client import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, DEFAULT_TEMPERATURE
from .models import MEETING_TYPES
from .roster import Roster, load_roster

ANALYSIS_MODES = ("auto", "llm", "heuristic")

_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "busybee"
_DEFAULT_CONFIG_PATH = _DEFAULT_CONFIG_DIR / "config.yaml"
_DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "busybee"


@dataclass
class Config:
    output_root: Path
    inbox_dir: Path | None = None
    template_source: str | None = None
    case_template_source: str | None = None
    roster: Roster = field(default_factory=Roster.default)
    analysis_mode: str = "auto"
    default_meeting_type: str = "other"
    correct_names: bool = True
    include_frontmatter: bool = True
    quorum_size: int = 4
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_MODEL
    openai_max_tokens: int = DEFAULT_MAX_TOKENS
    openai_temperature: float = DEFAULT_TEMPERATURE
    cache_enabled: bool = False
    cache_ttl_hours: float = DEFAULT_TTL_HOURS
    cache_path: Path = field(default_factory=lambda: _DEFAULT_DATA_DIR / "response_cache.json")
    state_path: Path = field(default_factory=lambda: _DEFAULT_DATA_DIR / "processing_state.json")


def _env_overrides() -> dict:
    """Settings taken from the environment (and a .env file, if present)."""
    load_dotenv()
    env: dict = {}
    if os.environ.get("OPENAI_API_KEY"):
        env["openai_api_key"] = os.environ["OPENAI_API_KEY"]
    if os.environ.get("OPENAI_MODEL"):
        env["openai_model"] = os.environ["OPENAI_MODEL"]
    if os.environ.get("OPENAI_MAX_TOKENS"):
        env["openai_max_tokens"] = int(os.environ["OPENAI_MAX_TOKENS"])
    if os.environ.get("OPENAI_TEMPERATURE"):
        env["openai_temperature"] = float(os.environ["OPENAI_TEMPERATURE"])
    if os.environ.get("ENABLE_AI_CACHE"):
        env["cache_enabled"] = os.environ["ENABLE_AI_CACHE"].lower() == "true"
    if os.environ.get("CACHE_TTL_HOURS"):
        env["cache_ttl_hours"] = float(os.environ["CACHE_TTL_HOURS"])
    return env


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file, falling back to environment and defaults."""
    path = config_path or _DEFAULT_CONFIG_PATH
    path = Path(path).expanduser()

    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            f"Create one at {_DEFAULT_CONFIG_PATH} or pass --config.\n"
            f"See config.example.yaml for reference."
        )

    raw = yaml.safe_load(path.read_text())
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"Invalid config file: {path}")

    if "output_root" not in raw:
        raise ValueError("'output_root' is required in config")

    kwargs: dict = _env_overrides()
    kwargs["output_root"] = Path(raw["output_root"]).expanduser()

    for key in ("inbox_dir", "cache_path", "state_path"):
        if raw.get(key):
            kwargs[key] = Path(raw[key]).expanduser()
    for key in ("template_source", "case_template_source"):
        if raw.get(key):
            source = str(raw[key])
            if not source.startswith(("http://", "https://")):
                # Relative template paths are resolved against the config file
                source = str((path.parent / Path(source).expanduser()).resolve())
            kwargs[key] = source

    if raw.get("roster_path"):
        kwargs["roster"] = load_roster(path.parent / Path(raw["roster_path"]).expanduser())
    elif raw.get("roster"):
        if not isinstance(raw["roster"], dict):
            raise ValueError("'roster' must be a mapping of name to variants")
        kwargs["roster"] = Roster.from_mapping(raw["roster"])

    for key in (
        "analysis_mode",
        "default_meeting_type",
        "correct_names",
        "include_frontmatter",
        "quorum_size",
        "openai_model",
        "openai_max_tokens",
        "openai_temperature",
        "cache_enabled",
        "cache_ttl_hours",
    ):
        if key in raw:
            kwargs[key] = raw[key]

    if kwargs.get("default_meeting_type", "other") not in MEETING_TYPES:
        raise ValueError(f"'default_meeting_type' must be one of {', '.join(MEETING_TYPES)}")
    if kwargs.get("analysis_mode", "auto") not in ANALYSIS_MODES:
        raise ValueError(
            f"'analysis_mode' must be one of {', '.join(ANALYSIS_MODES)}, got {kwargs['analysis_mode']!r}"
        )

    return Config(**kwargs)
