"""Shared reconciliation contract components.

This module holds only:
- the assignment value and its mode
- preview candidates and editable import decisions
- preview and commit result records
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from coitrack.domain.model import AssignmentMode, ImportOutcome

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from coitrack.domain.errors import ComplianceError, ExtractionFailure
    from coitrack.domain.model import CoverageType, EmployeeMatch, ParsedDocumentFields


@dataclass(frozen=True, slots=True)
class Assignment:
    """Who a document belongs to: a roster person or an external name."""

    employee_id: str | None = None
    external_name: str | None = None

    @classmethod
    def existing_person(cls, employee_id: str) -> Assignment:
        return cls(employee_id=employee_id)

    @classmethod
    def external(cls, name: str) -> Assignment:
        return cls(external_name=name)

    @property
    def mode(self) -> AssignmentMode:
        has_person = bool(self.employee_id and self.employee_id.strip())
        has_external = bool(self.external_name and self.external_name.strip())
        if has_person and has_external:
            return AssignmentMode.CONFLICTING
        if has_person:
            return AssignmentMode.EXISTING_PERSON
        if has_external:
            return AssignmentMode.EXTERNAL_NAME
        return AssignmentMode.UNASSIGNED


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportCandidate:
    """Preview-only view of one external file."""

    source_file_id: str
    file_name: str
    web_link: str
    parsed: ParsedDocumentFields
    match: EmployeeMatch
    already_imported: bool


@dataclass(slots=True, kw_only=True)
class ImportDecision:
    """User-editable overlay on a candidate, the unit of commit."""

    source_file_id: str | None
    file_name: str
    selected: bool
    assignment: Assignment
    coverage_type: CoverageType | str | None
    issue_date: date | None
    expiration_date: date | None
    policy_number: str | None = None
    insurer_name: str | None = None
    web_link: str = ""
    parsed_insured_name: str | None = None
    notes: str | None = None
    already_imported: bool = False


@dataclass(slots=True, kw_only=True)
class PreviewResult:
    candidates: list[ImportCandidate] = field(default_factory=list[ImportCandidate])
    errors: list[ExtractionFailure] = field(default_factory=list)
    decisions: list[ImportDecision] = field(default_factory=list[ImportDecision])

    @property
    def already_imported(self) -> int:
        return sum(1 for candidate in self.candidates if candidate.already_imported)

    @property
    def selected_count(self) -> int:
        return sum(1 for decision in self.decisions if decision.selected)


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemOutcome:
    source_file_id: str | None
    status: ImportOutcome
    document_id: UUID | None = None
    error: ComplianceError | None = None


@dataclass(slots=True)
class CommitResult:
    """Per-item outcomes of one commit batch plus their totals."""

    imported: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: list[ItemOutcome] = field(default_factory=list[ItemOutcome])

    def record(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)
        match outcome.status:
            case ImportOutcome.IMPORTED:
                self.imported += 1
            case ImportOutcome.SKIPPED:
                self.skipped += 1
            case ImportOutcome.FAILED:
                self.failed += 1
