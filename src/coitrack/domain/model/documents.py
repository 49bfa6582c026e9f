"""Extractor output, external file references and the persisted compliance record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from coitrack.domain.model.enums import CoverageType, ExtractedDocumentType

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date


def new_id() -> UUID:
    return uuid4()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalFile:
    """One entry of a remote folder listing."""

    source_file_id: str
    file_name: str
    web_link: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class ParsedDocumentFields:
    """Immutable output of the document-field extractor."""

    raw_insured_name: str | None = None
    insured_name: str | None = None
    policy_number: str | None = None
    effective_date: date | None = None
    expiration_date: date | None = None
    insurer_name: str | None = None
    coverage_amounts: Mapping[str, float] = field(default_factory=dict[str, float])
    document_type: ExtractedDocumentType = ExtractedDocumentType.UNKNOWN
    confidence: int = 0
    raw_text: str = ""

    @property
    def match_name(self) -> str:
        """Person-oriented name used for roster matching."""
        return self.insured_name or self.raw_insured_name or ""

    @property
    def display_name(self) -> str:
        """Name as printed on the certificate, company names included."""
        return self.raw_insured_name or self.insured_name or ""

    @property
    def coverage_type(self) -> CoverageType | None:
        try:
            return CoverageType(self.document_type.value)
        except ValueError:
            return None


@dataclass(eq=False, kw_only=True)
class ComplianceDocument:
    """A tracked certificate, assigned to a roster person XOR an external name.

    Status is never stored: only ``expiration_date`` is persisted and the
    classifier derives everything else on read.
    """

    id: UUID = field(default_factory=new_id)
    employee_id: str | None = None
    external_name: str | None = None
    type: CoverageType
    issue_date: date
    expiration_date: date
    policy_number: str | None = None
    insurer_name: str | None = None
    source_file_id: str | None = None
    parsed_insured_name: str | None = None
    document_url: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        self.employee_id = _blank_to_none(self.employee_id)
        self.external_name = _blank_to_none(self.external_name)
        _check_assignee(self.employee_id, self.external_name)
        self.type = CoverageType(self.type)

    @property
    def assignee_label(self) -> str:
        if self.employee_id is not None:
            return f"employee:{self.employee_id}"
        return f"external:{self.external_name}"

    def renew(self, expiration_date: date, *, issue_date: date | None = None) -> None:
        """Record a renewed certificate; the only way the expiration moves."""
        effective_issue = issue_date or self.issue_date
        if expiration_date < effective_issue:
            raise ValueError("Renewed expiration date precedes the issue date")
        self.issue_date = effective_issue
        self.expiration_date = expiration_date

    def reassign(self, *, employee_id: str | None = None, external_name: str | None = None) -> None:
        employee_id = _blank_to_none(employee_id)
        external_name = _blank_to_none(external_name)
        _check_assignee(employee_id, external_name)
        self.employee_id = employee_id
        self.external_name = external_name


def _check_assignee(employee_id: str | None, external_name: str | None) -> None:
    if (employee_id is None) == (external_name is None):
        raise ValueError("ComplianceDocument requires exactly one of employee_id or external_name")
