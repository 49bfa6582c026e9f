"""Translate extractor payloads into domain value objects."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from coitrack.domain.model import ExtractedDocumentType, ParsedDocumentFields

from .schema import ExtractorPayload

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date

log = getLogger(__name__)


def _one_year_after(value: date) -> date:
    try:
        return value.replace(year=value.year + 1)
    except ValueError:  # Feb 29
        return value.replace(year=value.year + 1, day=28)


def parse_document_fields(payload: ExtractorPayload | Mapping[str, object]) -> ParsedDocumentFields:
    """Validate ``payload`` and build ``ParsedDocumentFields``.

    Certificates showing only an effective date are read as one-year policies.
    """

    if not isinstance(payload, ExtractorPayload):
        payload = ExtractorPayload.model_validate(payload)

    expiration = payload.expiration_date
    if expiration is None and payload.effective_date is not None:
        expiration = _one_year_after(payload.effective_date)
        log.debug("Inferred expiration %s from effective date", expiration)

    return ParsedDocumentFields(
        raw_insured_name=payload.raw_insured_name,
        insured_name=payload.insured_name,
        policy_number=payload.policy_number,
        effective_date=payload.effective_date,
        expiration_date=expiration,
        insurer_name=payload.insurer_name,
        coverage_amounts=payload.coverage_amounts.as_mapping(),
        document_type=ExtractedDocumentType(payload.document_type),
        confidence=payload.confidence,
        raw_text=payload.raw_text,
    )
