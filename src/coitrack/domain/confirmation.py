"""Single-document upload as an explicit confirmation state machine.

``EMPTY -> ANALYZING -> REVIEW -> {CONFIRMED | CANCELLED}``; both terminal
outcomes reset to ``EMPTY`` and are reported through ``last_outcome``.
Review is mandatory: nothing is persisted until ``confirm()`` is called,
however confident the identity match was.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from coitrack.domain.errors import (
    ComplianceError,
    ExtractionFailure,
    IllegalTransitionError,
    ValidationFailure,
)
from coitrack.domain.identity import resolve_identity
from coitrack.domain.reconciliation import (
    Assignment,
    ImportCandidate,
    default_decision,
    persist_decision,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coitrack.config.compliance import MatchingConfig
    from coitrack.domain.model import (
        ComplianceDocument,
        EmployeeMatch,
        ExternalFile,
        ParsedDocumentFields,
        PersonRecord,
    )
    from coitrack.domain.ports import DocumentFieldExtractor, RosterSource
    from coitrack.domain.reconciliation import ImportDecision, UnitOfWorkFactory

log = logging.getLogger(__name__)

UPLOAD_LABEL = "Uploaded"

EDITABLE_FIELDS = frozenset(
    {
        "coverage_type",
        "issue_date",
        "expiration_date",
        "policy_number",
        "insurer_name",
        "notes",
    }
)


class WorkflowState(StrEnum):
    EMPTY = "empty"
    ANALYZING = "analyzing"
    REVIEW = "review"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(slots=True, kw_only=True)
class ReviewDraft:
    """Everything the reviewer sees and edits before confirming."""

    file: ExternalFile
    parsed: ParsedDocumentFields
    match: EmployeeMatch
    decision: ImportDecision
    roster: Sequence[PersonRecord]


class ConfirmationWorkflow:
    """Drive one upload at a time from analysis to a confirmed document.

    Transitions are serialized by a lock. The extractor call runs outside
    it so ``cancel()`` can interrupt an analysis; a result that arrives
    after cancellation is discarded.
    """

    def __init__(
        self,
        *,
        extract: DocumentFieldExtractor,
        roster: RosterSource,
        unit_of_work_factory: UnitOfWorkFactory,
        config: MatchingConfig | None = None,
    ) -> None:
        self._extract = extract
        self._roster = roster
        self._unit_of_work_factory = unit_of_work_factory
        self._config = config
        self._lock = threading.Lock()
        self._state = WorkflowState.EMPTY
        self._draft: ReviewDraft | None = None
        self._generation = 0
        self.last_error: Exception | None = None
        self.last_outcome: WorkflowState | None = None
        self.last_document: ComplianceDocument | None = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def draft(self) -> ReviewDraft | None:
        return self._draft

    def _require(self, action: str, *allowed: WorkflowState) -> None:
        if self._state not in allowed:
            raise IllegalTransitionError(self._state.value, action)

    def _review_draft(self, action: str) -> ReviewDraft:
        draft = self._draft
        if self._state is not WorkflowState.REVIEW or draft is None:
            raise IllegalTransitionError(self._state.value, action)
        return draft

    def analyze(self, file: ExternalFile) -> ReviewDraft | None:
        """Extract and resolve ``file``; returns the draft, or None if cancelled meanwhile.

        On extractor failure the workflow returns to ``EMPTY``, records
        ``last_error`` and raises ``ExtractionFailure``. A roster that cannot
        be loaded does the same but re-raises the roster's own error.
        """

        with self._lock:
            self._require("analyze", WorkflowState.EMPTY)
            self._state = WorkflowState.ANALYZING
            self._generation += 1
            generation = self._generation
            self.last_error = None
            self.last_outcome = None
        log.info("Analyzing %s", file.file_name)

        outcome: ReviewDraft | Exception
        try:
            roster = tuple(self._roster())
        except Exception as exc:  # noqa: BLE001
            outcome = exc
        else:
            outcome = self._prepare(file, roster)

        with self._lock:
            if generation != self._generation or self._state is not WorkflowState.ANALYZING:
                log.info("Discarding analysis of %s after cancellation", file.file_name)
                return None
            if isinstance(outcome, Exception):
                self._state = WorkflowState.EMPTY
                self.last_error = outcome
                log.warning("Analysis of %s failed: %s", file.file_name, outcome)
                raise outcome
            self._draft = outcome
            self._state = WorkflowState.REVIEW
        log.info(
            "Review ready for %s (match %s, confidence %d)",
            file.file_name,
            outcome.match.match_type.value,
            outcome.match.confidence,
        )
        return outcome

    def _prepare(
        self, file: ExternalFile, roster: tuple[PersonRecord, ...]
    ) -> ReviewDraft | ExtractionFailure:
        try:
            parsed = self._extract(file)
        except ExtractionFailure as exc:
            return exc
        except Exception as exc:  # noqa: BLE001
            return ExtractionFailure(file.file_name, str(exc))
        match = resolve_identity(parsed.match_name, roster, config=self._config)
        candidate = ImportCandidate(
            source_file_id=file.source_file_id,
            file_name=file.file_name,
            web_link=file.web_link,
            parsed=parsed,
            match=match,
            already_imported=False,
        )
        return ReviewDraft(
            file=file,
            parsed=parsed,
            match=match,
            decision=default_decision(candidate, label=UPLOAD_LABEL),
            roster=roster,
        )

    def edit(self, **fields: Any) -> ImportDecision:
        """Overwrite editable fields of the draft decision."""

        with self._lock:
            draft = self._review_draft("edit")
            unknown = sorted(set(fields) - EDITABLE_FIELDS)
            if unknown:
                raise ValidationFailure(unknown[0], "is not an editable field")
            for name, value in fields.items():
                setattr(draft.decision, name, value)
            return draft.decision

    def assign_person(self, employee_id: str) -> ImportDecision:
        with self._lock:
            draft = self._review_draft("assign a person")
            if not any(person.id == employee_id for person in draft.roster):
                raise ValidationFailure("employee_id", f"{employee_id!r} is not on the roster")
            draft.decision.assignment = Assignment.existing_person(employee_id)
            return draft.decision

    def assign_external(self, name: str) -> ImportDecision:
        with self._lock:
            draft = self._review_draft("assign an external name")
            if not name.strip():
                raise ValidationFailure("external_name", "must not be blank")
            draft.decision.assignment = Assignment.external(name.strip())
            return draft.decision

    def confirm(self) -> ComplianceDocument:
        """Validate and persist the draft, then reset to ``EMPTY``.

        Any failure leaves the workflow in ``REVIEW`` with the draft intact.
        """

        with self._lock:
            draft = self._review_draft("confirm")
            try:
                document = persist_decision(
                    draft.decision, unit_of_work_factory=self._unit_of_work_factory
                )
            except ComplianceError as exc:
                self.last_error = exc
                log.warning("Confirmation of %s failed: %s", draft.file.file_name, exc)
                raise
            self._draft = None
            self._state = WorkflowState.EMPTY
            self.last_error = None
            self.last_outcome = WorkflowState.CONFIRMED
            self.last_document = document
        log.info("Confirmed %s as document %s", draft.file.file_name, document.id)
        return document

    def cancel(self) -> None:
        """Discard the current analysis or draft without persisting anything."""

        with self._lock:
            self._require("cancel", WorkflowState.ANALYZING, WorkflowState.REVIEW)
            self._generation += 1
            self._draft = None
            self._state = WorkflowState.EMPTY
            self.last_outcome = WorkflowState.CANCELLED
        log.info("Upload cancelled")
