"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import DocumentFieldExtractor, ExternalFileListing, RosterSource
from .persistence import ComplianceDocumentRepository, Repository
from .unit_of_work import (
    ComplianceRepositories,
    ComplianceUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ComplianceDocumentRepository",
    "ComplianceRepositories",
    "ComplianceUnitOfWork",
    "DocumentFieldExtractor",
    "ExternalFileListing",
    "Repository",
    "RepositoryCollection",
    "RosterSource",
    "UnitOfWork",
]
