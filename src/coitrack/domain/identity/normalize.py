"""Name normalization for roster matching.

Responsibilities of this module:
- turn free-form insured names into comparable token tuples
- strip business and generational suffixes that never appear on a roster
- know which first names are interchangeable nicknames
"""

from __future__ import annotations

import re
import unicodedata
from typing import Final

BUSINESS_SUFFIXES: Final[frozenset[str]] = frozenset(
    {
        "llc",
        "inc",
        "corp",
        "ltd",
        "co",
        "company",
        "enterprises",
        "services",
        "roofing",
        "construction",
    }
)
GENERATIONAL_SUFFIXES: Final[frozenset[str]] = frozenset({"jr", "sr", "ii", "iii", "iv"})

_NICKNAMES: Final[dict[str, tuple[str, ...]]] = {
    "christopher": ("chris", "topher"),
    "michael": ("mike", "mikey", "mick"),
    "william": ("will", "bill", "billy", "willy", "liam"),
    "robert": ("rob", "robbie", "bob", "bobby"),
    "richard": ("rich", "rick", "ricky", "dick"),
    "nicholas": ("nick", "nicky", "nico"),
    "james": ("jim", "jimmy", "jamie"),
    "joseph": ("joe", "joey"),
    "daniel": ("dan", "danny"),
    "anthony": ("tony",),
    "matthew": ("matt", "matty"),
    "david": ("dave", "davey"),
    "thomas": ("tom", "tommy"),
    "elizabeth": ("beth", "liz", "lizzy", "betty", "eliza"),
    "jennifer": ("jen", "jenny", "jenn"),
    "katherine": ("kate", "katie", "kathy", "cathy"),
    "catherine": ("kate", "katie", "kathy", "cathy"),
    "benjamin": ("ben", "benny"),
    "alexander": ("alex", "xander"),
    "alexandra": ("alex",),
    "andrew": ("andy", "drew"),
    "edward": ("ed", "eddie", "ted", "teddy"),
    "samuel": ("sam", "sammy"),
    "samantha": ("sam",),
    "jonathan": ("jon", "jonny"),
}

_NON_WORD = re.compile(r"[^0-9a-z]+")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _build_equivalence_groups() -> dict[str, frozenset[str]]:
    groups: dict[str, set[str]] = {}
    for formal, nicknames in _NICKNAMES.items():
        members = {formal, *nicknames}
        for name in members:
            groups.setdefault(name, set()).update(members)
    return {name: frozenset(members) for name, members in groups.items()}


_EQUIVALENTS: Final[dict[str, frozenset[str]]] = _build_equivalence_groups()


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).lower()


def name_tokens(text: str | None, *, strip_business: bool = True) -> tuple[str, ...]:
    """Lower-cased, accent-folded word tokens with trailing suffixes removed.

    Generational suffixes are dropped, and with ``strip_business`` at most
    one trailing business word goes as well, so ``"Smith Roofing LLC"``
    keeps ``roofing``.
    """

    if not text:
        return ()
    folded = _fold(text).replace("'", "")
    tokens = [token for token in _NON_WORD.split(folded) if token]
    if strip_business and len(tokens) > 1 and tokens[-1] in BUSINESS_SUFFIXES:
        tokens.pop()
    while len(tokens) > 1 and tokens[-1] in GENERATIONAL_SUFFIXES:
        tokens.pop()
    return tuple(tokens)


def without_middle_initials(tokens: tuple[str, ...]) -> tuple[str, ...]:
    if len(tokens) <= 2:
        return tokens
    middle = tuple(token for token in tokens[1:-1] if len(token) > 1)
    return (tokens[0], *middle, tokens[-1])


def is_meaningful(tokens: tuple[str, ...]) -> bool:
    """At least one token carries two or more letters."""
    return any(sum(char.isalpha() for char in token) >= 2 for token in tokens)


def first_names_equivalent(left: str, right: str) -> bool:
    if left == right:
        return True
    return right in _EQUIVALENTS.get(left, frozenset())


def embedded_person_names(tokens: tuple[str, ...]) -> tuple[tuple[str, ...], ...]:
    """Plausible "first last" pairs inside a longer (often business) name."""

    if not 2 <= len(tokens) <= 4:
        return ()
    first = tokens[0]
    if not 2 <= len(first) <= 15 or any(char.isdigit() for char in first):
        return ()
    names = [(first, tokens[1])]
    if len(tokens) >= 3:
        names.append((first, tokens[2]))
    return tuple(names)


def looks_like_email(text: str) -> bool:
    return bool(_EMAIL.match(text.strip()))


def email_local_part(text: str) -> str:
    """``john.smith@example.com`` -> ``john smith``."""
    local = text.strip().split("@", 1)[0]
    return _NON_WORD.sub(" ", local.lower()).strip()
