"""Roster entries and identity match results."""

from __future__ import annotations

from dataclasses import dataclass, field

from coitrack.domain.model.enums import MatchType


@dataclass(frozen=True, slots=True, kw_only=True)
class PersonRecord:
    """External roster entry. Read-only input to the resolver."""

    id: str
    first_name: str
    last_name: str
    email: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True, slots=True)
class Suggestion:
    person: PersonRecord
    score: int


@dataclass(frozen=True, slots=True, kw_only=True)
class EmployeeMatch:
    """Scored, ranked outcome of resolving a name against a roster.

    ``matched_person`` is only populated when the top score clears the
    confident-match gate; ``suggestions`` are reported either way.
    """

    confidence: int = 0
    match_type: MatchType = MatchType.NONE
    matched_person: PersonRecord | None = None
    suggestions: tuple[Suggestion, ...] = field(default_factory=tuple)

    @property
    def employee_id(self) -> str | None:
        return self.matched_person.id if self.matched_person is not None else None

    @property
    def is_confident(self) -> bool:
        return self.matched_person is not None

    @classmethod
    def none(cls) -> EmployeeMatch:
        return cls()
