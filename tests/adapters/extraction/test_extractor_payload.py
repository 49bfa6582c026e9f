from __future__ import annotations

import json
from datetime import date
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from coitrack.adapters.extraction import (
    ExtractorPayload,
    SidecarFieldExtractor,
    parse_document_date,
    parse_document_fields,
)
from coitrack.domain.errors import ExtractionFailure
from coitrack.domain.model import CoverageType, ExtractedDocumentType
from tests.helpers.documents import make_file

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2025-03-01", date(2025, 3, 1)),
        ("03/01/2025", date(2025, 3, 1)),
        ("03-01-2025", date(2025, 3, 1)),
        ("3/1/25", date(2025, 3, 1)),
        ("March 1, 2025", date(2025, 3, 1)),
        ("2025-03-01T00:00:00Z", date(2025, 3, 1)),
        ("  ", None),
        (None, None),
    ],
)
def test_parse_document_date(raw: str | None, expected: date | None) -> None:
    assert parse_document_date(raw) == expected


def test_parse_document_date_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="Unrecognised date"):
        parse_document_date("next tuesday")


def test_payload_uses_extractor_field_names() -> None:
    payload = ExtractorPayload.model_validate(
        {
            "insuredName": "John Smith",
            "rawInsuredName": "SMITH, JOHN dba Smith Roofing",
            "policyNumber": " WC-77 ",
            "effectiveDate": "01/15/2025",
            "expirationDate": "01/15/2026",
            "insurerName": "",
            "coverageAmounts": {"workersComp": 1000000, "umbrella": None},
            "documentType": "workers comp",
            "confidence": 130.4,
        }
    )

    assert payload.insured_name == "John Smith"
    assert payload.policy_number == "WC-77"
    assert payload.insurer_name is None
    assert payload.effective_date == date(2025, 1, 15)
    assert payload.coverage_amounts.as_mapping() == {"workers_comp": 1000000.0}
    assert payload.document_type == "WORKERS_COMP"
    assert payload.confidence == 100


def test_unknown_document_type_is_kept_as_unknown() -> None:
    fields = parse_document_fields({"documentType": "Professional Liability"})

    assert fields.document_type is ExtractedDocumentType.UNKNOWN
    assert fields.coverage_type is None


def test_missing_expiration_is_one_year_after_effective_date() -> None:
    fields = parse_document_fields({"effectiveDate": "2024-02-29", "coverageAmounts": None})

    assert fields.expiration_date == date(2025, 2, 28)
    assert fields.coverage_amounts == {}


def test_parsed_fields_carry_coverage_type() -> None:
    fields = parse_document_fields(
        {"insuredName": "Jane Doe", "documentType": "GENERAL_LIABILITY", "expirationDate": "2026-01-01"}
    )

    assert fields.coverage_type is CoverageType.GENERAL_LIABILITY
    assert fields.match_name == "Jane Doe"
    assert fields.display_name == "Jane Doe"


def test_invalid_dates_fail_validation() -> None:
    with pytest.raises(ValidationError):
        ExtractorPayload.model_validate({"expirationDate": "someday"})


def _write_sidecar(root: Path, key: str, content: str) -> None:
    path = root / f"{key}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_sidecar_extractor_reads_json_next_to_document(tmp_path: Path) -> None:
    _write_sidecar(
        tmp_path,
        "2025/cert.pdf",
        json.dumps({"insuredName": "Maria Garcia", "expirationDate": "2026-05-01"}),
    )
    extract = SidecarFieldExtractor(tmp_path)

    fields = extract(make_file("2025/cert.pdf"))

    assert fields.insured_name == "Maria Garcia"
    assert fields.expiration_date == date(2026, 5, 1)


def test_sidecar_extractor_missing_output(tmp_path: Path) -> None:
    extract = SidecarFieldExtractor(tmp_path)

    with pytest.raises(ExtractionFailure) as excinfo:
        extract(make_file("cert.pdf"))

    assert excinfo.value.file_name == "cert.pdf"
    assert "cert.pdf.json" in excinfo.value.message


def test_sidecar_extractor_invalid_output(tmp_path: Path) -> None:
    _write_sidecar(tmp_path, "cert.pdf", "{not json")
    extract = SidecarFieldExtractor(tmp_path)

    with pytest.raises(ExtractionFailure, match="invalid extractor output"):
        extract(make_file("cert.pdf"))
