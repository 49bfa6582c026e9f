"""Document-field extractor reading precomputed ``<file>.json`` sidecars.

The OCR/AI service runs out of process and drops its JSON result next to
each scanned certificate; this adapter only validates and translates it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from coitrack.domain.errors import ExtractionFailure

from .schema import ExtractorPayload
from .translator import parse_document_fields

if TYPE_CHECKING:
    from pathlib import Path

    from coitrack.domain.model import ExternalFile, ParsedDocumentFields

log = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".json"


class SidecarFieldExtractor:
    """Callable ``DocumentFieldExtractor`` over a local folder."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def sidecar_path(self, file: ExternalFile) -> Path:
        target = self.root / file.source_file_id
        return target.with_name(target.name + SIDECAR_SUFFIX)

    def __call__(self, file: ExternalFile) -> ParsedDocumentFields:
        path = self.sidecar_path(file)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ExtractionFailure(file.file_name, f"no extractor output at {path.name}") from None
        except OSError as exc:
            raise ExtractionFailure(file.file_name, str(exc)) from exc

        try:
            payload = ExtractorPayload.model_validate_json(raw)
        except ValidationError as exc:
            log.debug("Invalid extractor payload in %s: %s", path, exc)
            raise ExtractionFailure(
                file.file_name, f"invalid extractor output ({exc.error_count()} error(s))"
            ) from exc
        return parse_document_fields(payload)
