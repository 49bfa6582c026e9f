"""Build an import preview from an external file listing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coitrack.domain.errors import ExtractionFailure, MalformedRequestError
from coitrack.domain.identity import resolve_identity

from .assignment import default_decision
from .contracts import ImportCandidate, PreviewResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from coitrack.config.compliance import MatchingConfig
    from coitrack.domain.model import ExternalFile, PersonRecord
    from coitrack.domain.ports import DocumentFieldExtractor

log = logging.getLogger(__name__)


def preview_import(
    files: Sequence[ExternalFile] | None,
    *,
    extract: DocumentFieldExtractor,
    roster: Sequence[PersonRecord],
    imported_keys: Iterable[str] = (),
    config: MatchingConfig | None = None,
) -> PreviewResult:
    """Extract, resolve, and check every file; one failure never aborts the batch.

    Candidates and decisions keep the order of ``files``. Failed extractions
    are reported in ``errors`` and produce no candidate.
    """

    if files is None:
        raise MalformedRequestError("An external file listing is required for preview")

    keys = frozenset(imported_keys)
    result = PreviewResult()
    for file in files:
        try:
            parsed = extract(file)
        except ExtractionFailure as exc:
            log.warning("Extraction failed for %s: %s", file.file_name, exc.message)
            result.errors.append(exc)
            continue
        except Exception as exc:  # noqa: BLE001
            log.warning("Extraction failed for %s: %s", file.file_name, exc)
            result.errors.append(ExtractionFailure(file.file_name, str(exc)))
            continue

        candidate = ImportCandidate(
            source_file_id=file.source_file_id,
            file_name=file.file_name,
            web_link=file.web_link,
            parsed=parsed,
            match=resolve_identity(parsed.match_name, roster, config=config),
            already_imported=file.source_file_id in keys,
        )
        result.candidates.append(candidate)
        result.decisions.append(default_decision(candidate))

    log.info(
        "Previewed %d file(s): %d candidate(s), %d already imported, %d error(s)",
        len(files),
        len(result.candidates),
        result.already_imported,
        len(result.errors),
    )
    return result
