"""Commit selected import decisions, one isolated transaction per item."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coitrack.domain.errors import (
    DuplicateSkip,
    MalformedRequestError,
    PersistenceFailure,
    ValidationFailure,
)
from coitrack.domain.model import ImportOutcome

from .contracts import CommitResult, ItemOutcome
from .persist import persist_decision

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .contracts import ImportDecision
    from .persist import UnitOfWorkFactory

log = logging.getLogger(__name__)


def commit_import(
    decisions: Iterable[ImportDecision] | None,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    imported_keys: Iterable[str] | None = None,
) -> CommitResult:
    """Persist every selected decision; always returns totals.

    Unselected decisions are ignored. A decision is skipped when its key was
    already imported at preview time, is present in the store now, or was
    committed earlier in this batch. Invalid decisions and store errors fail
    only their own item.
    """

    if decisions is None:
        raise MalformedRequestError("A list of import decisions is required for commit")

    preview_keys = frozenset(imported_keys or ())
    committed: set[str] = set()
    result = CommitResult()
    for decision in decisions:
        if not decision.selected:
            continue
        key = decision.source_file_id
        if decision.already_imported or (
            key is not None and (key in preview_keys or key in committed)
        ):
            result.record(_skipped(key))
            continue

        try:
            document = persist_decision(decision, unit_of_work_factory=unit_of_work_factory)
        except DuplicateSkip as exc:
            result.record(
                ItemOutcome(source_file_id=key, status=ImportOutcome.SKIPPED, error=exc)
            )
        except (ValidationFailure, PersistenceFailure) as exc:
            log.warning("Import of %s failed: %s", key or decision.file_name, exc)
            result.record(ItemOutcome(source_file_id=key, status=ImportOutcome.FAILED, error=exc))
        else:
            if key is not None:
                committed.add(key)
            result.record(
                ItemOutcome(
                    source_file_id=key,
                    status=ImportOutcome.IMPORTED,
                    document_id=document.id,
                )
            )

    log.info(
        "Import commit finished: %d imported, %d skipped, %d failed",
        result.imported,
        result.skipped,
        result.failed,
    )
    return result


def _skipped(key: str | None) -> ItemOutcome:
    return ItemOutcome(
        source_file_id=key,
        status=ImportOutcome.SKIPPED,
        error=DuplicateSkip(key or ""),
    )
