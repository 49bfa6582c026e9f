"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import exists, select

from coitrack.adapters.sqlalchemy.mappings import compliance_document_table
from coitrack.domain.model import ComplianceDocument

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session


class SqlAlchemyComplianceDocumentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ComplianceDocument) -> None:
        self.session.add(entity)

    def get(self, document_id: uuid.UUID) -> ComplianceDocument | None:
        return self.session.get(ComplianceDocument, document_id)

    def get_by_source_file_id(self, source_file_id: str) -> ComplianceDocument | None:
        stmt = select(ComplianceDocument).where(
            compliance_document_table.c.source_file_id == source_file_id
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def exists_source_file_id(self, source_file_id: str) -> bool:
        stmt = select(
            exists().where(compliance_document_table.c.source_file_id == source_file_id)
        )
        return bool(self.session.execute(stmt).scalar())

    def imported_keys(self) -> frozenset[str]:
        column = compliance_document_table.c.source_file_id
        stmt = select(column).where(column.is_not(None))
        return frozenset(self.session.execute(stmt).scalars())

    def list(self) -> list[ComplianceDocument]:
        stmt = select(ComplianceDocument).order_by(
            compliance_document_table.c.expiration_date,
            compliance_document_table.c.created_at,
        )
        return list(self.session.execute(stmt).scalars())

    def remove(self, document: ComplianceDocument) -> None:
        self.session.delete(document)
