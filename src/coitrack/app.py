"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from coitrack.adapters.extraction import SidecarFieldExtractor
from coitrack.adapters.folder import LocalFolderListing
from coitrack.adapters.roster import JsonRosterSource
from coitrack.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyComplianceUnitOfWork,
    is_started,
    startup,
)
from coitrack.config import get_import_source_config, get_matching_config
from coitrack.domain.compliance import (
    AlertSummary,
    ComplianceReading,
    classify,
    due_alerts,
    expiring_within,
    summarize,
)
from coitrack.domain.confirmation import ConfirmationWorkflow
from coitrack.domain.reconciliation import commit_import, preview_import

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import date
    from uuid import UUID

    from coitrack.domain.compliance import AlertNotice
    from coitrack.domain.model import ComplianceDocument
    from coitrack.domain.ports import DocumentFieldExtractor, ExternalFileListing, RosterSource
    from coitrack.domain.reconciliation import CommitResult, PreviewResult, UnitOfWorkFactory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportSources:
    listing: ExternalFileListing
    extract: DocumentFieldExtractor
    roster: RosterSource


@dataclass(frozen=True, slots=True)
class DocumentStatus:
    document: ComplianceDocument
    reading: ComplianceReading


@dataclass(frozen=True, slots=True)
class ComplianceReport:
    entries: list[DocumentStatus] = field(default_factory=list[DocumentStatus])
    summary: AlertSummary = field(default_factory=AlertSummary)


def _unit_of_work_factory(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyComplianceUnitOfWork


def build_import_sources(
    *,
    folder: str | None = None,
    roster_path: str | None = None,
) -> ImportSources:
    """Folder listing, sidecar extractor and roster loader from configuration."""

    config = get_import_source_config(folder=folder, roster_path=roster_path)
    return ImportSources(
        listing=LocalFolderListing(config.folder),
        extract=SidecarFieldExtractor(config.folder),
        roster=JsonRosterSource(config.roster_path),
    )


def load_imported_keys(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> frozenset[str]:
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        return uow.repositories.documents.imported_keys()


def list_documents(
    *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> list[ComplianceDocument]:
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        return uow.repositories.documents.list()


def preview_folder_import(
    *,
    sources: ImportSources | None = None,
    folder: str | None = None,
    roster_path: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> PreviewResult:
    """Preview every document in the import folder against the roster."""

    effective_sources = sources or build_import_sources(folder=folder, roster_path=roster_path)
    keys = load_imported_keys(unit_of_work_factory=unit_of_work_factory)
    log.info("Starting import preview with %d key(s) already imported", len(keys))
    return preview_import(
        effective_sources.listing(),
        extract=effective_sources.extract,
        roster=effective_sources.roster(),
        imported_keys=keys,
        config=get_matching_config(),
    )


def commit_folder_import(
    *,
    only: Collection[str] | None = None,
    sources: ImportSources | None = None,
    folder: str | None = None,
    roster_path: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> CommitResult:
    """Commit the default decisions of a fresh preview.

    With ``only``, exactly the listed source file ids are selected.
    """

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    preview = preview_folder_import(
        sources=sources,
        folder=folder,
        roster_path=roster_path,
        unit_of_work_factory=effective_uow,
    )
    decisions = preview.decisions
    if only is not None:
        wanted = set(only)
        for decision in decisions:
            decision.selected = decision.source_file_id in wanted
        unknown = wanted - {decision.source_file_id for decision in decisions}
        if unknown:
            log.warning("Not in the import folder: %s", ", ".join(sorted(unknown)))
    return commit_import(
        decisions,
        unit_of_work_factory=effective_uow,
        imported_keys={
            candidate.source_file_id
            for candidate in preview.candidates
            if candidate.already_imported
        },
    )


def compliance_report(
    *,
    days: int | None = None,
    now: date | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ComplianceReport:
    """Status of every document (or those expiring within ``days``) plus the summary."""

    documents = list_documents(unit_of_work_factory=unit_of_work_factory)
    shown = documents if days is None else expiring_within(documents, days, now=now)
    return ComplianceReport(
        entries=[
            DocumentStatus(document, classify(document.expiration_date, now=now))
            for document in shown
        ],
        summary=summarize(documents, now=now),
    )


def due_alert_notices(
    *,
    now: date | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[AlertNotice]:
    return due_alerts(list_documents(unit_of_work_factory=unit_of_work_factory), now=now)


def renew_document(
    document_id: UUID,
    expiration_date: date,
    *,
    issue_date: date | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ComplianceDocument:
    """Move a document's expiration date after a renewed certificate arrives."""

    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        document = uow.repositories.documents.get(document_id)
        if document is None:
            raise LookupError(f"No compliance document with id {document_id}")
        document.renew(expiration_date, issue_date=issue_date)
        uow.commit()
    log.info("Renewed document %s until %s", document_id, expiration_date)
    return document


def delete_document(
    document_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ComplianceDocument:
    """Remove a document; it drops out of status reports and alerts."""

    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        document = uow.repositories.documents.get(document_id)
        if document is None:
            raise LookupError(f"No compliance document with id {document_id}")
        uow.repositories.documents.remove(document)
        uow.commit()
    log.info("Deleted document %s (%s)", document_id, document.assignee_label)
    return document


def new_confirmation_workflow(
    *,
    folder: str | None = None,
    roster_path: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ConfirmationWorkflow:
    """Confirmation workflow wired to the configured extractor, roster and store."""

    sources = build_import_sources(folder=folder, roster_path=roster_path)
    return ConfirmationWorkflow(
        extract=sources.extract,
        roster=sources.roster,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        config=get_matching_config(),
    )
