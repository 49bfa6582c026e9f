"""Assignment defaults and commit validation shared by bulk import and single upload.

Responsibilities of this module:
- prefill an import decision from a candidate (confident-match gate)
- validate a decision before anything is persisted
- build the compliance document a valid decision describes
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from coitrack.domain.errors import ValidationFailure
from coitrack.domain.model import AssignmentMode, ComplianceDocument, CoverageType

from .contracts import Assignment, ImportDecision

if TYPE_CHECKING:
    from datetime import date

    from .contracts import ImportCandidate

BULK_IMPORT_LABEL = "Bulk imported"


@dataclass(frozen=True, slots=True)
class CoverageTerms:
    """The required fields of a decision once they have been checked."""

    coverage_type: CoverageType
    issue_date: date
    expiration_date: date


def default_notes(
    file_name: str,
    *,
    policy_number: str | None = None,
    insurer_name: str | None = None,
    label: str = BULK_IMPORT_LABEL,
) -> str:
    parts = [f"{label} from {file_name}"]
    if policy_number:
        parts.append(f"Policy: {policy_number}")
    if insurer_name:
        parts.append(f"Insurer: {insurer_name}")
    return " | ".join(parts)


def default_assignment(candidate: ImportCandidate) -> Assignment:
    """Roster person only when the match cleared the gate, external name otherwise."""

    if candidate.match.is_confident and candidate.match.employee_id is not None:
        return Assignment.existing_person(candidate.match.employee_id)
    return Assignment.external(candidate.parsed.display_name)


def default_decision(candidate: ImportCandidate, *, label: str = BULK_IMPORT_LABEL) -> ImportDecision:
    parsed = candidate.parsed
    return ImportDecision(
        source_file_id=candidate.source_file_id,
        file_name=candidate.file_name,
        web_link=candidate.web_link,
        selected=not candidate.already_imported,
        assignment=default_assignment(candidate),
        coverage_type=parsed.coverage_type or CoverageType.GENERAL_LIABILITY,
        issue_date=parsed.effective_date,
        expiration_date=parsed.expiration_date,
        policy_number=parsed.policy_number,
        insurer_name=parsed.insurer_name,
        parsed_insured_name=parsed.display_name or None,
        notes=default_notes(
            candidate.file_name,
            policy_number=parsed.policy_number,
            insurer_name=parsed.insurer_name,
            label=label,
        ),
        already_imported=candidate.already_imported,
    )


def _coverage_type(value: CoverageType | str | None) -> CoverageType:
    if value is None:
        raise ValidationFailure("coverage_type", "is required")
    try:
        return CoverageType(value)
    except ValueError:
        allowed = ", ".join(member.value for member in CoverageType)
        raise ValidationFailure("coverage_type", f"must be one of {allowed}") from None


def validate_decision(decision: ImportDecision) -> CoverageTerms:
    """Raise ``ValidationFailure`` for the first rule ``decision`` breaks."""

    match decision.assignment.mode:
        case AssignmentMode.CONFLICTING:
            raise ValidationFailure(
                "assignment", "set either employee_id or external_name, not both"
            )
        case AssignmentMode.UNASSIGNED:
            raise ValidationFailure("assignment", "one of employee_id or external_name is required")
        case _:
            pass
    issue_date = decision.issue_date
    expiration_date = decision.expiration_date
    if issue_date is None:
        raise ValidationFailure("issue_date", "is required")
    if expiration_date is None:
        raise ValidationFailure("expiration_date", "is required")
    if expiration_date < issue_date:
        raise ValidationFailure("expiration_date", "precedes issue_date")
    return CoverageTerms(
        coverage_type=_coverage_type(decision.coverage_type),
        issue_date=issue_date,
        expiration_date=expiration_date,
    )


def build_document(decision: ImportDecision) -> ComplianceDocument:
    """Validated decision -> new compliance document."""

    terms = validate_decision(decision)
    return ComplianceDocument(
        employee_id=decision.assignment.employee_id,
        external_name=decision.assignment.external_name,
        type=terms.coverage_type,
        issue_date=terms.issue_date,
        expiration_date=terms.expiration_date,
        policy_number=decision.policy_number,
        insurer_name=decision.insurer_name,
        source_file_id=decision.source_file_id,
        parsed_insured_name=decision.parsed_insured_name,
        document_url=decision.web_link or None,
        notes=decision.notes,
    )
