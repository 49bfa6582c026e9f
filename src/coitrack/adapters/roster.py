"""Load the employee roster from a JSON export of the directory service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from coitrack.domain.model import PersonRecord

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


class RosterError(RuntimeError):
    """Raised when the roster file cannot be read or validated."""


class RosterEntryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, Mapping):
            data = dict(cast(Mapping[str, object], value))
            if isinstance(data.get("id"), int):
                data["id"] = str(data["id"])
            if data.get("email") is None:
                data["email"] = ""
            return data
        return value

    def to_person(self) -> PersonRecord:
        return PersonRecord(
            id=self.id,
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            email=self.email.strip(),
        )


class RosterPayload(BaseModel):
    """Either a bare list of entries or ``{"employees": [...]}``."""

    employees: list[RosterEntryPayload]

    @model_validator(mode="before")
    @classmethod
    def _wrap_list(cls, value: object) -> object:
        if isinstance(value, list):
            return {"employees": value}
        return value


_ROSTER_ADAPTER = TypeAdapter(RosterPayload)


def parse_roster(raw: str | bytes) -> tuple[PersonRecord, ...]:
    payload = _ROSTER_ADAPTER.validate_json(raw)
    return tuple(entry.to_person() for entry in payload.employees)


class JsonRosterSource:
    """Callable ``RosterSource`` reading a JSON file on every call."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def __call__(self) -> tuple[PersonRecord, ...]:
        try:
            raw = self.path.expanduser().read_bytes()
        except OSError as exc:
            raise RosterError(f"Cannot read roster {self.path}: {exc}") from exc
        try:
            roster = parse_roster(raw)
        except ValidationError as exc:
            raise RosterError(f"Invalid roster {self.path}: {exc.error_count()} error(s)") from exc
        log.info("Loaded %d roster entries from %s", len(roster), self.path)
        return roster
