"""Resolve an insured name against the employee roster.

Scoring ladder (highest applicable wins per roster entry):

- 100 EXACT: same tokens after normalization, middle initials ignored.
  Reversed "last first" order is also exact but ranks behind in-order.
- 95 EMAIL: the candidate is an email address found on the roster.
- 95 FUZZY: equivalent nickname plus identical last name.
- 90 FUZZY: same first and last name with extra middle names.
- rapidfuzz ratio FUZZY: over the full name, the reversed name and any
  person names embedded in a business name. Never reaches 100.
- PARTIAL: initial plus last name, or last name alone. Unique partial
  matches are boosted, ambiguous ones are capped below the gate.

Suggestions are every entry at or above the suggestion floor, ranked by
score, then in-order before reordered, then roster order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rapidfuzz import fuzz

from coitrack.config.compliance import MatchingConfig
from coitrack.domain.model import EmployeeMatch, MatchType, Suggestion

from .normalize import (
    email_local_part,
    embedded_person_names,
    first_names_equivalent,
    is_meaningful,
    looks_like_email,
    name_tokens,
    without_middle_initials,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coitrack.domain.model import PersonRecord

log = logging.getLogger(__name__)

EXACT_SCORE = 100
EMAIL_SCORE = 95
NICKNAME_SCORE = 95
MIDDLE_NAME_SCORE = 90
FUZZY_CEILING = 99
INITIAL_LAST_SCORE = 85
LAST_ONLY_SCORE = 75
AMBIGUOUS_PARTIAL_CAP = 60


@dataclass(slots=True)
class _Scored:
    person: PersonRecord
    index: int
    score: int = 0
    match_type: MatchType = MatchType.NONE
    in_order: bool = True

    def offer(self, score: float, match_type: MatchType, *, in_order: bool = True) -> None:
        value = round(score)
        if value > self.score or (value == self.score and in_order and not self.in_order):
            self.score = value
            self.match_type = match_type
            self.in_order = in_order

    @property
    def rank_key(self) -> tuple[int, bool, int]:
        return (-self.score, not self.in_order, self.index)


@dataclass(frozen=True, slots=True)
class _RosterName:
    first: tuple[str, ...]
    last: tuple[str, ...]

    @classmethod
    def of(cls, person: PersonRecord) -> _RosterName:
        return cls(
            first=name_tokens(person.first_name, strip_business=False),
            last=name_tokens(person.last_name, strip_business=False),
        )

    @property
    def forward(self) -> tuple[str, ...]:
        return self.first + self.last

    @property
    def reverse(self) -> tuple[str, ...]:
        return self.last + self.first


def resolve_identity(
    candidate_name: str | None,
    roster: Sequence[PersonRecord],
    *,
    config: MatchingConfig | None = None,
) -> EmployeeMatch:
    """Score ``candidate_name`` against every roster entry.

    Pure and deterministic: identical inputs give identical results, and
    meaningless input (blank, punctuation, single characters) yields a
    NONE match rather than an error.
    """

    config = config or MatchingConfig()
    text = (candidate_name or "").strip()
    if not text or not roster:
        return EmployeeMatch.none()

    if looks_like_email(text):
        by_email = _match_email(text, roster)
        if by_email is not None:
            return by_email
        text = email_local_part(text)

    tokens = name_tokens(text)
    if not is_meaningful(tokens):
        return EmployeeMatch.none()

    # Roster names keep business words, so exact matching also sees the unstripped form.
    unstripped = name_tokens(text, strip_business=False)
    scored = [
        _score(tokens, person, index, unstripped=unstripped)
        for index, person in enumerate(roster)
    ]
    _apply_partial(tokens, scored)

    ranked = sorted(
        (entry for entry in scored if entry.score >= config.suggestion_floor),
        key=lambda entry: entry.rank_key,
    )
    if not ranked:
        log.debug("No roster candidates for %r", candidate_name)
        return EmployeeMatch.none()

    top = ranked[0]
    matched = top.person if top.score >= config.confident_match_threshold else None
    return EmployeeMatch(
        confidence=top.score,
        match_type=top.match_type,
        matched_person=matched,
        suggestions=tuple(
            Suggestion(entry.person, entry.score) for entry in ranked[: config.max_suggestions]
        ),
    )


def _match_email(text: str, roster: Sequence[PersonRecord]) -> EmployeeMatch | None:
    wanted = text.strip().lower()
    for person in roster:
        if person.email and person.email.strip().lower() == wanted:
            return EmployeeMatch(
                confidence=EMAIL_SCORE,
                match_type=MatchType.EMAIL,
                matched_person=person,
                suggestions=(Suggestion(person, EMAIL_SCORE),),
            )
    return None


def _score(
    tokens: tuple[str, ...],
    person: PersonRecord,
    index: int,
    *,
    unstripped: tuple[str, ...] = (),
) -> _Scored:
    entry = _Scored(person=person, index=index)
    name = _RosterName.of(person)
    if not name.forward:
        return entry

    cores = {without_middle_initials(tokens), without_middle_initials(unstripped or tokens)}
    if without_middle_initials(name.forward) in cores:
        entry.offer(EXACT_SCORE, MatchType.EXACT)
        return entry
    if name.first and name.last and without_middle_initials(name.reverse) in cores:
        entry.offer(EXACT_SCORE, MatchType.EXACT, in_order=False)
        return entry

    if name.first and name.last and len(tokens) >= 2:
        last = name.last[-1]
        if tokens[-1] == last and first_names_equivalent(tokens[0], name.first[0]):
            if len(tokens) == 2 or len(name.forward) == 2:
                score = NICKNAME_SCORE if tokens[0] != name.first[0] else MIDDLE_NAME_SCORE
                entry.offer(score, MatchType.FUZZY)

    joined = " ".join(tokens)
    entry.offer(
        min(fuzz.ratio(joined, " ".join(name.forward)), FUZZY_CEILING), MatchType.FUZZY
    )
    entry.offer(
        min(fuzz.ratio(joined, " ".join(name.reverse)), FUZZY_CEILING),
        MatchType.FUZZY,
        in_order=False,
    )
    for embedded in embedded_person_names(tokens):
        entry.offer(
            min(fuzz.ratio(" ".join(embedded), " ".join(name.forward)), FUZZY_CEILING),
            MatchType.FUZZY,
        )
    return entry


def _partial_pattern(tokens: tuple[str, ...], name: _RosterName) -> int | None:
    """Boost score for a partial match on ``name``, or None when none applies."""

    if not name.last:
        return None
    last = " ".join(name.last)
    if len(tokens) == 1 and tokens[0] == last:
        return LAST_ONLY_SCORE
    if (
        len(tokens) == 2
        and len(tokens[0]) == 1
        and tokens[1] == last
        and name.first
        and name.first[0].startswith(tokens[0])
    ):
        return INITIAL_LAST_SCORE
    return None


def _apply_partial(tokens: tuple[str, ...], scored: list[_Scored]) -> None:
    hits = [
        (entry, boost)
        for entry in scored
        if entry.match_type is not MatchType.EXACT
        and (boost := _partial_pattern(tokens, _RosterName.of(entry.person))) is not None
    ]
    if len(hits) == 1:
        entry, boost = hits[0]
        entry.score = max(entry.score, boost)
        entry.match_type = MatchType.PARTIAL
        return
    for entry, _ in hits:
        entry.score = min(entry.score, AMBIGUOUS_PARTIAL_CAP)
        entry.match_type = MatchType.PARTIAL
