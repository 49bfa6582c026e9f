"""Persist one validated decision inside its own unit of work.

Both the bulk commit and the single-upload confirmation go through
``persist_decision`` so the two paths store structurally identical records.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coitrack.domain.errors import (
    ComplianceError,
    DuplicateKeyError,
    DuplicateSkip,
    PersistenceFailure,
)

from .assignment import build_document

if TYPE_CHECKING:
    from collections.abc import Callable

    from coitrack.domain.model import ComplianceDocument
    from coitrack.domain.ports import ComplianceUnitOfWork

    from .contracts import ImportDecision

log = logging.getLogger(__name__)

type UnitOfWorkFactory = Callable[[], ComplianceUnitOfWork]


def persist_decision(
    decision: ImportDecision,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
) -> ComplianceDocument:
    """Validate, re-check the key against the store, and insert.

    Raises ``ValidationFailure`` for invalid input, ``DuplicateSkip`` when the
    key is already stored (including a concurrent insert that won the race)
    and ``PersistenceFailure`` for any other store error. A failed item is
    rolled back on its own.
    """

    document = build_document(decision)
    key = document.source_file_id
    try:
        with unit_of_work_factory() as uow:
            documents = uow.repositories.documents
            if key is not None and documents.exists_source_file_id(key):
                raise DuplicateSkip(key)
            documents.add(document)
            uow.commit()
    except DuplicateKeyError:
        log.info("Lost insert race for %s; treating as already imported", key)
        raise DuplicateSkip(key or "") from None
    except ComplianceError:
        raise
    except Exception as exc:  # noqa: BLE001
        log.warning("Store rejected %s: %s", key or document.id, exc)
        raise PersistenceFailure(key, str(exc)) from exc
    log.debug("Persisted document %s for %s", document.id, key)
    return document
