from __future__ import annotations

import pytest

from coitrack.domain.identity.normalize import (
    email_local_part,
    embedded_person_names,
    first_names_equivalent,
    is_meaningful,
    looks_like_email,
    name_tokens,
    without_middle_initials,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("John Q. Smith", ("john", "q", "smith")),
        ("  JOHN   smith ", ("john", "smith")),
        ("O'Brien", ("obrien",)),
        ("José Núñez", ("jose", "nunez")),
        ("Smith Construction, LLC", ("smith", "construction")),
        ("Acme Roofing LLC", ("acme", "roofing")),
        ("Bob Roofing", ("bob",)),
        ("Robert Jones Jr. LLC", ("robert", "jones")),
        ("Robert Jones Jr.", ("robert", "jones")),
        ("", ()),
        (None, ()),
    ],
)
def test_name_tokens(raw: str | None, expected: tuple[str, ...]) -> None:
    assert name_tokens(raw) == expected


def test_name_tokens_keeps_business_words_for_roster_names() -> None:
    assert name_tokens("Ana Company", strip_business=False) == ("ana", "company")


def test_single_business_word_is_not_stripped_to_nothing() -> None:
    assert name_tokens("Construction") == ("construction",)


def test_without_middle_initials() -> None:
    assert without_middle_initials(("john", "q", "smith")) == ("john", "smith")
    assert without_middle_initials(("john", "quincy", "smith")) == ("john", "quincy", "smith")
    assert without_middle_initials(("j", "smith")) == ("j", "smith")


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("chris", "christopher", True),
        ("christopher", "chris", True),
        ("bill", "william", True),
        ("bill", "billy", True),
        ("john", "john", True),
        ("john", "jane", False),
        ("mike", "william", False),
    ],
)
def test_first_names_equivalent(left: str, right: str, expected: bool) -> None:
    assert first_names_equivalent(left, right) is expected


def test_embedded_person_names() -> None:
    assert embedded_person_names(("john", "smith", "painting")) == (
        ("john", "smith"),
        ("john", "painting"),
    )
    assert embedded_person_names(("acme",)) == ()
    assert embedded_person_names(("123", "main", "street")) == ()


def test_is_meaningful() -> None:
    assert is_meaningful(("jo",))
    assert not is_meaningful(("x",))
    assert not is_meaningful(("1", "2"))
    assert not is_meaningful(())


def test_email_helpers() -> None:
    assert looks_like_email(" john.smith@example.com ")
    assert not looks_like_email("john smith")
    assert email_local_part("John.Smith@example.com") == "john smith"
