"""Public domain model surface."""

from __future__ import annotations

from coitrack.domain.model.documents import (
    ComplianceDocument,
    ExternalFile,
    ParsedDocumentFields,
)
from coitrack.domain.model.enums import (
    AlertSeverity,
    AssignmentMode,
    CadenceLabel,
    ComplianceStatus,
    CoverageType,
    ExtractedDocumentType,
    ImportOutcome,
    MatchType,
)
from coitrack.domain.model.people import EmployeeMatch, PersonRecord, Suggestion

__all__ = [
    "AlertSeverity",
    "AssignmentMode",
    "CadenceLabel",
    "ComplianceDocument",
    "ComplianceStatus",
    "CoverageType",
    "EmployeeMatch",
    "ExternalFile",
    "ExtractedDocumentType",
    "ImportOutcome",
    "MatchType",
    "ParsedDocumentFields",
    "PersonRecord",
    "Suggestion",
]
