"""Ports for reading external documents, extractor output, and the roster."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coitrack.domain.model import ExternalFile, ParsedDocumentFields, PersonRecord


@runtime_checkable
class DocumentFieldExtractor(Protocol):
    """Callable port turning one stored file into extracted document fields.

    Implementations raise on failure; callers isolate the failure per file.
    """

    def __call__(self, file: ExternalFile) -> ParsedDocumentFields: ...


@runtime_checkable
class ExternalFileListing(Protocol):
    """Callable port listing the files available for bulk import."""

    def __call__(self) -> Sequence[ExternalFile]: ...


@runtime_checkable
class RosterSource(Protocol):
    """Callable port returning the current employee roster."""

    def __call__(self) -> Sequence[PersonRecord]: ...


__all__ = ["DocumentFieldExtractor", "ExternalFileListing", "RosterSource"]
