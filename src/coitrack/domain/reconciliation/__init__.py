"""Bulk import reconciliation: preview external files, then commit decisions."""

from .assignment import (
    build_document,
    default_assignment,
    default_decision,
    default_notes,
    validate_decision,
)
from .commit import commit_import
from .contracts import (
    Assignment,
    CommitResult,
    ImportCandidate,
    ImportDecision,
    ItemOutcome,
    PreviewResult,
)
from .persist import UnitOfWorkFactory, persist_decision
from .preview import preview_import

__all__ = [
    "Assignment",
    "CommitResult",
    "ImportCandidate",
    "ImportDecision",
    "ItemOutcome",
    "PreviewResult",
    "UnitOfWorkFactory",
    "build_document",
    "commit_import",
    "default_assignment",
    "default_decision",
    "default_notes",
    "persist_decision",
    "preview_import",
    "validate_decision",
]
