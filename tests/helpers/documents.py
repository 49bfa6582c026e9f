"""Reusable fakes and builders for compliance-document tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Literal

from coitrack.domain.errors import DuplicateKeyError
from coitrack.domain.model import (
    ComplianceDocument,
    CoverageType,
    ExtractedDocumentType,
    ExternalFile,
    ParsedDocumentFields,
    PersonRecord,
)
from coitrack.domain.ports.unit_of_work import ComplianceRepositories

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType
    from uuid import UUID

ISSUED = date(2025, 1, 15)
EXPIRES = date(2026, 1, 15)


def make_person(
    person_id: str,
    first_name: str,
    last_name: str,
    email: str = "",
) -> PersonRecord:
    return PersonRecord(id=person_id, first_name=first_name, last_name=last_name, email=email)


def make_file(key: str) -> ExternalFile:
    return ExternalFile(
        source_file_id=key,
        file_name=key.rsplit("/", 1)[-1],
        web_link=f"file:///imports/{key}",
    )


def make_parsed(
    name: str | None = "John Smith",
    *,
    raw_name: str | None = None,
    document_type: ExtractedDocumentType = ExtractedDocumentType.GENERAL_LIABILITY,
    effective_date: date | None = ISSUED,
    expiration_date: date | None = EXPIRES,
    policy_number: str | None = "GL-100",
    insurer_name: str | None = "Acme Mutual",
) -> ParsedDocumentFields:
    return ParsedDocumentFields(
        raw_insured_name=raw_name if raw_name is not None else name,
        insured_name=name,
        policy_number=policy_number,
        effective_date=effective_date,
        expiration_date=expiration_date,
        insurer_name=insurer_name,
        document_type=document_type,
        confidence=90,
    )


def make_document(
    *,
    employee_id: str | None = "emp-1",
    external_name: str | None = None,
    expiration_date: date = EXPIRES,
    issue_date: date = ISSUED,
    source_file_id: str | None = None,
    coverage: CoverageType = CoverageType.GENERAL_LIABILITY,
) -> ComplianceDocument:
    return ComplianceDocument(
        employee_id=employee_id,
        external_name=external_name,
        type=coverage,
        issue_date=issue_date,
        expiration_date=expiration_date,
        source_file_id=source_file_id,
    )


class FakeExtractor:
    """Extractor returning canned results (or raising canned errors) per source file."""

    def __init__(self, results: Mapping[str, ParsedDocumentFields | Exception]) -> None:
        self._results = dict(results)
        self.calls: list[str] = []

    def __call__(self, file: ExternalFile) -> ParsedDocumentFields:
        self.calls.append(file.source_file_id)
        result = self._results[file.source_file_id]
        if isinstance(result, Exception):
            raise result
        return result


class FakeDocumentRepository:
    """In-memory repository; ``staged`` holds adds until the unit of work commits."""

    def __init__(self, store: dict[UUID, ComplianceDocument]) -> None:
        self._store = store
        self.staged: list[ComplianceDocument] = []

    def add(self, entity: ComplianceDocument) -> None:
        self.staged.append(entity)

    def get(self, document_id: UUID) -> ComplianceDocument | None:
        return self._store.get(document_id)

    def get_by_source_file_id(self, source_file_id: str) -> ComplianceDocument | None:
        for document in self._store.values():
            if document.source_file_id == source_file_id:
                return document
        return None

    def exists_source_file_id(self, source_file_id: str) -> bool:
        return self.get_by_source_file_id(source_file_id) is not None

    def imported_keys(self) -> frozenset[str]:
        return frozenset(
            document.source_file_id
            for document in self._store.values()
            if document.source_file_id is not None
        )

    def list(self) -> list[ComplianceDocument]:
        return sorted(self._store.values(), key=lambda document: document.expiration_date)

    def remove(self, document: ComplianceDocument) -> None:
        self._store.pop(document.id, None)


@dataclass
class FakeStore:
    """Shared state behind every fake unit of work a factory hands out."""

    documents: dict[UUID, ComplianceDocument] = field(default_factory=dict)
    fail_commits_for: set[str] = field(default_factory=set)
    hidden_keys: set[str] = field(default_factory=set)
    commits: int = 0
    rollbacks: int = 0

    def factory(self) -> FakeUnitOfWork:
        return FakeUnitOfWork(self)

    def seed(self, documents: Iterable[ComplianceDocument]) -> None:
        for document in documents:
            self.documents[document.id] = document


class _RacingRepository(FakeDocumentRepository):
    """Hides some stored keys from the pre-insert check, as a concurrent writer would."""

    def __init__(self, store: dict[UUID, ComplianceDocument], hidden: set[str]) -> None:
        super().__init__(store)
        self._hidden = hidden

    def exists_source_file_id(self, source_file_id: str) -> bool:
        if source_file_id in self._hidden:
            return False
        return super().exists_source_file_id(source_file_id)


class FakeUnitOfWork:
    def __init__(self, store: FakeStore) -> None:
        self._store = store
        self._repositories = ComplianceRepositories(
            documents=_RacingRepository(store.documents, store.hidden_keys)
        )

    @property
    def repositories(self) -> ComplianceRepositories:
        return self._repositories

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        documents = self._repositories.documents
        assert isinstance(documents, FakeDocumentRepository)
        for document in documents.staged:
            key = document.source_file_id
            if key is not None and key in self._store.fail_commits_for:
                documents.staged.clear()
                raise OSError(f"disk full while writing {key}")
            if key is not None and FakeDocumentRepository.exists_source_file_id(documents, key):
                documents.staged.clear()
                raise DuplicateKeyError(key)
        for document in documents.staged:
            self._store.documents[document.id] = document
        documents.staged.clear()
        self._store.commits += 1

    def rollback(self) -> None:
        documents = self._repositories.documents
        assert isinstance(documents, FakeDocumentRepository)
        documents.staged.clear()
        self._store.rollbacks += 1


if TYPE_CHECKING:
    from coitrack.domain.ports import ComplianceDocumentRepository, ComplianceUnitOfWork

    _check_repo: ComplianceDocumentRepository = FakeDocumentRepository({})
    _check_uow: ComplianceUnitOfWork = FakeUnitOfWork(FakeStore())
