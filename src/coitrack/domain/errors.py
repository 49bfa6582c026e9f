"""Error taxonomy for the compliance engine.

Batch-scoped failures (extraction, validation, duplicate, persistence) are
collected per item by the reconciler and never raised past the batch boundary.
The single-document workflow raises them directly so callers can retry.
"""

from __future__ import annotations


class ComplianceError(Exception):
    """Base exception for all compliance engine errors."""


class ExtractionFailure(ComplianceError):
    """The document-field extractor could not process a file."""

    def __init__(self, file_name: str, message: str) -> None:
        self.file_name = file_name
        self.message = message
        super().__init__(f"Extraction failed for {file_name}: {message}")


class ValidationFailure(ComplianceError):
    """An import decision or review draft is not committable."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class DuplicateSkip(ComplianceError):
    """The source file was already imported; an expected outcome, not a fault."""

    def __init__(self, source_file_id: str) -> None:
        self.source_file_id = source_file_id
        super().__init__(f"Already imported: {source_file_id}")


class DuplicateKeyError(ComplianceError):
    """The store refused a write because the source file key already exists."""

    def __init__(self, source_file_id: str | None = None) -> None:
        self.source_file_id = source_file_id
        super().__init__(f"Duplicate source file key: {source_file_id or 'unknown'}")


class PersistenceFailure(ComplianceError):
    """The document store rejected a write. Retryable."""

    def __init__(self, source_file_id: str | None, message: str) -> None:
        self.source_file_id = source_file_id
        self.message = message
        super().__init__(f"Could not persist {source_file_id or 'document'}: {message}")


class MalformedRequestError(ComplianceError):
    """A top-level request is structurally unusable (e.g. no file listing at all)."""


class IllegalTransitionError(ComplianceError):
    """A confirmation workflow action is not allowed in the current state."""

    def __init__(self, state: str, action: str) -> None:
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while {state}")


__all__ = [
    "ComplianceError",
    "DuplicateKeyError",
    "DuplicateSkip",
    "ExtractionFailure",
    "IllegalTransitionError",
    "MalformedRequestError",
    "PersistenceFailure",
    "ValidationFailure",
]
