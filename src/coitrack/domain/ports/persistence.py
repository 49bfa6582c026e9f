"""Ports for persisting compliance documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from coitrack.domain.model import ComplianceDocument

if TYPE_CHECKING:
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ComplianceDocumentRepository(Repository[ComplianceDocument], Protocol):
    """Persistence contract for compliance documents keyed by source file."""

    def get(self, document_id: UUID) -> ComplianceDocument | None: ...

    def get_by_source_file_id(self, source_file_id: str) -> ComplianceDocument | None: ...

    def exists_source_file_id(self, source_file_id: str) -> bool: ...

    def imported_keys(self) -> frozenset[str]: ...

    def list(self) -> list[ComplianceDocument]: ...

    def remove(self, document: ComplianceDocument) -> None: ...
