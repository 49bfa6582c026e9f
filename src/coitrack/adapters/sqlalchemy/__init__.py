"""SQLAlchemy adapter package for coitrack."""

from __future__ import annotations

from .mappings import (
    compliance_document_table,
    mapper_registry,
    start_mappers,
)
from .repositories import SqlAlchemyComplianceDocumentRepository

__all__ = [
    "SqlAlchemyComplianceDocumentRepository",
    "compliance_document_table",
    "mapper_registry",
    "start_mappers",
]
