"""Known commission roster and transcript name correction."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

log = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Person:
    name: str
    role: str = ""
    variants: tuple[str, ...] = field(default_factory=tuple)
    voting_member: bool = False

    @property
    def aliases(self) -> tuple[str, ...]:
        return (self.name, *self.variants)

    @property
    def title(self) -> str:
        """Role and name, e.g. 'Chairperson Raymond Muna'."""
        return f"{self.role} {self.name}".strip()


DEFAULT_PEOPLE: tuple[Person, ...] = (
    Person("Raymond Muna", "Chairperson",
           ("Muña", "Raymond", "Muna", "Chairman Muna", "Chair Muna"), True),
    Person("Patrick Fitial", "Vice Chair",
           ("Vittil", "Patrick", "Fitial", "Vice Chair Fitial"), True),
    Person("Victoria Bellas", "Secretary",
           ("Bellas", "Victoria", "Secretary Bellas"), True),
    Person("Richard Farrell", "Budget Officer",
           ("Farrell", "Richard", "Budget Officer Farrell"), True),
    Person("Elvira Mesgnon", "Commissioner",
           ("Olivia", "Elvira", "Mesgnon", "Commissioner Mesgnon"), True),
    Person("Michele Joab", "Commissioner",
           ("Michele", "Joab", "Commissioner Joab"), True),
    Person("Frances Torres", "Commissioner",
           ("Frances", "Torres", "Commissioner Torres"), True),
    Person("Joseph Pangelinan", "Director",
           ("Joseph", "Pangelinan", "Director Pangelinan")),
    Person("Teresa Borja", "Executive Assistant",
           ("Teresa", "Borja", "Executive Assistant Borja")),
    Person("Mark Scoggins", "Hearing Officer",
           ("Mark", "Scoggins", "Hearing Officer Scoggins")),
    Person("Kadianne Mangarero", "Executive Secretary",
           ("Kadianne", "Mangarero", "Executive Secretary Mangarero")),
)


def _alias_key(alias: str) -> str:
    return _WS_RE.sub(" ", alias.strip()).lower()


def _alias_regex(alias: str) -> str:
    return re.escape(alias.strip()).replace(r"\ ", r"\s+")


class Roster:
    """Immutable lookup table of known people and their name variants."""

    def __init__(self, people: tuple[Person, ...] | list[Person]):
        self._people: tuple[Person, ...] = tuple(people)
        self._by_alias: dict[str, Person] = {}
        for person in self._people:
            for alias in person.aliases:
                key = _alias_key(alias)
                if not key:
                    continue
                existing = self._by_alias.get(key)
                if existing is not None and existing.name != person.name:
                    log.debug("Alias %r is shared by %s and %s", alias, existing.name, person.name)
                    continue
                self._by_alias[key] = person

        # Longest first so "Raymond Muna" wins over "Raymond" at the same position
        aliases = sorted(self._by_alias, key=len, reverse=True)
        if aliases:
            alternatives = "|".join(_alias_regex(a) for a in aliases)
            self._pattern: re.Pattern | None = re.compile(
                rf"(?<!\w)(?:{alternatives})(?!\w)", re.IGNORECASE
            )
        else:
            self._pattern = None

    @classmethod
    def default(cls) -> Roster:
        return cls(DEFAULT_PEOPLE)

    @classmethod
    def from_mapping(cls, raw: dict) -> Roster:
        """Build a roster from a YAML-style mapping.

        Each value is either a list of variants or a mapping with
        ``role``, ``variants`` and ``voting_member`` keys.
        """
        people: list[Person] = []
        for name, entry in raw.items():
            if isinstance(entry, dict):
                people.append(
                    Person(
                        name=str(name),
                        role=str(entry.get("role", "")),
                        variants=tuple(str(v) for v in entry.get("variants", []) or []),
                        voting_member=bool(entry.get("voting_member", False)),
                    )
                )
            elif isinstance(entry, list):
                people.append(Person(name=str(name), variants=tuple(str(v) for v in entry)))
            elif entry is None:
                people.append(Person(name=str(name)))
            else:
                raise ValueError(f"Invalid roster entry for {name!r}")
        return cls(people)

    @property
    def voting_members(self) -> list[Person]:
        return [p for p in self._people if p.voting_member]

    @property
    def pattern(self) -> re.Pattern | None:
        return self._pattern

    def __len__(self) -> int:
        return len(self._people)

    def lookup(self, alias: str) -> Person | None:
        return self._by_alias.get(_alias_key(alias))

    def resolve(self, fragment: str) -> str | None:
        """Map a name fragment to a canonical name, or None if unknown."""
        if not fragment:
            return None
        person = self.lookup(fragment)
        if person is not None:
            return person.name
        if self._pattern is None:
            return None
        m = self._pattern.search(fragment)
        if m:
            return self._by_alias[_alias_key(m.group(0))].name
        return None

    def find_all(self, text: str) -> list[tuple[re.Match, Person]]:
        if self._pattern is None or not text:
            return []
        return [
            (m, self._by_alias[_alias_key(m.group(0))])
            for m in self._pattern.finditer(text)
        ]

    def mentions(self, text: str) -> list[Person]:
        """People mentioned in text, in order of first mention."""
        seen: dict[str, Person] = {}
        for _, person in self.find_all(text):
            seen.setdefault(person.name, person)
        return list(seen.values())


def load_roster(path: Path) -> Roster:
    """Load a roster YAML file (mapping of canonical name to entry)."""
    path = Path(path).expanduser()
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"Invalid roster file: {path}")
    roster = Roster.from_mapping(raw)
    log.debug("Loaded roster with %d people from %s", len(roster), path)
    return roster


def normalize_names(text: str, roster: Roster) -> str:
    """Replace every known name variant with its canonical name.

    Matching is case-insensitive and whole-word. Canonical names are part of
    the alternation, so running this on its own output changes nothing.
    """
    if not text or roster.pattern is None:
        return text

    def replacer(m: re.Match) -> str:
        person = roster.lookup(m.group(0))
        return person.name if person else m.group(0)

    return roster.pattern.sub(replacer, text)
