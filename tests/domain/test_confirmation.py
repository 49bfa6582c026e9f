from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from coitrack.adapters.roster import RosterError
from coitrack.domain.confirmation import ConfirmationWorkflow, WorkflowState
from coitrack.domain.errors import (
    ExtractionFailure,
    IllegalTransitionError,
    PersistenceFailure,
    ValidationFailure,
)
from coitrack.domain.model import CoverageType, MatchType
from coitrack.domain.reconciliation import Assignment
from tests.helpers.documents import FakeExtractor, FakeStore, make_file, make_parsed

if TYPE_CHECKING:
    from coitrack.domain.model import ExternalFile, ParsedDocumentFields, PersonRecord


def _workflow(
    roster: tuple[PersonRecord, ...],
    store: FakeStore,
    extract: FakeExtractor | None = None,
) -> ConfirmationWorkflow:
    return ConfirmationWorkflow(
        extract=extract or FakeExtractor({"upload.pdf": make_parsed("John Smith")}),
        roster=lambda: roster,
        unit_of_work_factory=store.factory,
    )


def test_starts_empty(roster: tuple[PersonRecord, ...], fake_store: FakeStore) -> None:
    workflow = _workflow(roster, fake_store)

    assert workflow.state is WorkflowState.EMPTY
    assert workflow.draft is None
    assert workflow.last_outcome is None


def test_analyze_moves_to_review_without_persisting(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)

    draft = workflow.analyze(make_file("upload.pdf"))

    assert draft is not None
    assert workflow.state is WorkflowState.REVIEW
    assert draft.match.match_type is MatchType.EXACT
    assert draft.decision.assignment == Assignment.existing_person("emp-1")
    assert draft.decision.notes == (
        "Uploaded from upload.pdf | Policy: GL-100 | Insurer: Acme Mutual"
    )
    assert fake_store.documents == {}


def test_confirm_persists_one_document_and_resets(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))

    document = workflow.confirm()

    assert list(fake_store.documents.values()) == [document]
    assert document.employee_id == "emp-1"
    assert document.source_file_id == "upload.pdf"
    assert workflow.state is WorkflowState.EMPTY
    assert workflow.last_outcome is WorkflowState.CONFIRMED
    assert workflow.last_document is document
    assert workflow.draft is None


def test_review_edits_flow_into_the_document(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))

    workflow.edit(coverage_type=CoverageType.WORKERS_COMP, expiration_date=date(2026, 6, 1))
    workflow.assign_external("  Acme Roofing LLC ")
    document = workflow.confirm()

    assert document.type is CoverageType.WORKERS_COMP
    assert document.expiration_date == date(2026, 6, 1)
    assert document.employee_id is None
    assert document.external_name == "Acme Roofing LLC"


def test_assign_person_must_be_on_roster(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))

    decision = workflow.assign_person("emp-3")
    assert decision.assignment == Assignment.existing_person("emp-3")

    with pytest.raises(ValidationFailure):
        workflow.assign_person("emp-99")
    with pytest.raises(ValidationFailure):
        workflow.assign_external("   ")


def test_unknown_edit_field_is_rejected(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))

    with pytest.raises(ValidationFailure) as excinfo:
        workflow.edit(source_file_id="other.pdf")

    assert excinfo.value.field == "source_file_id"


def test_invalid_draft_stays_in_review(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))
    workflow.edit(expiration_date=date(2020, 1, 1))

    with pytest.raises(ValidationFailure):
        workflow.confirm()

    assert workflow.state is WorkflowState.REVIEW
    assert isinstance(workflow.last_error, ValidationFailure)
    assert fake_store.documents == {}

    workflow.edit(expiration_date=date(2026, 1, 15))
    workflow.confirm()
    assert len(fake_store.documents) == 1


def test_store_failure_stays_in_review(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    fake_store.fail_commits_for.add("upload.pdf")
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))

    with pytest.raises(PersistenceFailure):
        workflow.confirm()

    assert workflow.state is WorkflowState.REVIEW
    assert workflow.draft is not None


def test_extraction_failure_returns_to_empty(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    extract = FakeExtractor({"upload.pdf": RuntimeError("service unavailable")})
    workflow = _workflow(roster, fake_store, extract)

    with pytest.raises(ExtractionFailure):
        workflow.analyze(make_file("upload.pdf"))

    assert workflow.state is WorkflowState.EMPTY
    assert isinstance(workflow.last_error, ExtractionFailure)
    assert workflow.last_error.message == "service unavailable"


def test_roster_failure_is_reported_as_itself(fake_store: FakeStore) -> None:
    def broken_roster() -> tuple[PersonRecord, ...]:
        raise RosterError("Cannot read roster roster.json: permission denied")

    extract = FakeExtractor({"upload.pdf": make_parsed("John Smith")})
    workflow = ConfirmationWorkflow(
        extract=extract,
        roster=broken_roster,
        unit_of_work_factory=fake_store.factory,
    )

    with pytest.raises(RosterError):
        workflow.analyze(make_file("upload.pdf"))

    assert workflow.state is WorkflowState.EMPTY
    assert isinstance(workflow.last_error, RosterError)
    assert not isinstance(workflow.last_error, ExtractionFailure)
    assert extract.calls == []


def test_cancel_from_review_discards_draft(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))

    workflow.cancel()

    assert workflow.state is WorkflowState.EMPTY
    assert workflow.last_outcome is WorkflowState.CANCELLED
    assert workflow.draft is None
    assert fake_store.documents == {}


def test_result_arriving_after_cancel_is_discarded(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow: ConfirmationWorkflow

    def extract_then_cancel(file: ExternalFile) -> ParsedDocumentFields:
        assert workflow.state is WorkflowState.ANALYZING
        workflow.cancel()
        return make_parsed("John Smith")

    workflow = ConfirmationWorkflow(
        extract=extract_then_cancel,
        roster=lambda: roster,
        unit_of_work_factory=fake_store.factory,
    )

    assert workflow.analyze(make_file("upload.pdf")) is None
    assert workflow.state is WorkflowState.EMPTY
    assert workflow.last_outcome is WorkflowState.CANCELLED
    assert workflow.draft is None


@pytest.mark.parametrize("action", ["confirm", "cancel"])
def test_actions_outside_review_are_illegal(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore, action: str
) -> None:
    workflow = _workflow(roster, fake_store)

    with pytest.raises(IllegalTransitionError):
        getattr(workflow, action)()


def test_analyze_twice_is_illegal(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)
    workflow.analyze(make_file("upload.pdf"))

    with pytest.raises(IllegalTransitionError) as excinfo:
        workflow.analyze(make_file("upload.pdf"))

    assert excinfo.value.state == "review"
    assert workflow.state is WorkflowState.REVIEW


def test_edit_outside_review_is_illegal(
    roster: tuple[PersonRecord, ...], fake_store: FakeStore
) -> None:
    workflow = _workflow(roster, fake_store)

    with pytest.raises(IllegalTransitionError):
        workflow.edit(notes="x")
