"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class CoverageType(StrEnum):
    WORKERS_COMP = "WORKERS_COMP"
    GENERAL_LIABILITY = "GENERAL_LIABILITY"


class ExtractedDocumentType(StrEnum):
    """Document kinds an extractor may report; only two are trackable coverages."""

    WORKERS_COMP = "WORKERS_COMP"
    GENERAL_LIABILITY = "GENERAL_LIABILITY"
    AUTO = "AUTO"
    UMBRELLA = "UMBRELLA"
    UNKNOWN = "UNKNOWN"


class MatchType(StrEnum):
    EXACT = "EXACT"
    FUZZY = "FUZZY"
    EMAIL = "EMAIL"
    PARTIAL = "PARTIAL"
    NONE = "NONE"


class ComplianceStatus(StrEnum):
    ACTIVE = "ACTIVE"
    EXPIRES_SOON_1M = "EXPIRES_SOON_1M"
    EXPIRES_SOON_2W = "EXPIRES_SOON_2W"
    EXPIRES_IMMINENT = "EXPIRES_IMMINENT"
    EXPIRED = "EXPIRED"


class CadenceLabel(StrEnum):
    NONE = "NONE"
    MONTH_BEFORE = "MONTH_BEFORE"
    TWO_WEEKS = "TWO_WEEKS"
    DAILY = "DAILY"


class AlertSeverity(IntEnum):
    """Ordered so that comparisons express escalation."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class AssignmentMode(StrEnum):
    EXISTING_PERSON = "EXISTING_PERSON"
    EXTERNAL_NAME = "EXTERNAL_NAME"
    UNASSIGNED = "UNASSIGNED"
    CONFLICTING = "CONFLICTING"


class ImportOutcome(StrEnum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    FAILED = "failed"
