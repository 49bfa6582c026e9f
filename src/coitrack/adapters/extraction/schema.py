"""Pydantic models describing document-field extractor payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

DocumentTypeName = Literal["WORKERS_COMP", "GENERAL_LIABILITY", "AUTO", "UMBRELLA", "UNKNOWN"]

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m/%d/%y",
    "%m-%d-%y",
    "%B %d, %Y",
    "%B %d %Y",
    "%d %B %Y",
)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def parse_document_date(value: object) -> date | None:
    """Accept ISO dates and the US formats printed on certificates."""

    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")
    text = value.replace("T00:00:00Z", "").replace("T00:00:00", "")
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {value!r}")


class ExtractorBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CoverageAmountsPayload(ExtractorBaseModel):
    general_liability: float | None = Field(default=None, alias="generalLiability")
    workers_comp: float | None = Field(default=None, alias="workersComp")
    auto_liability: float | None = Field(default=None, alias="autoLiability")
    umbrella: float | None = None

    def as_mapping(self) -> dict[str, float]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


class ExtractorPayload(ExtractorBaseModel):
    """One extractor result, as written by the OCR/AI service."""

    insured_name: str | None = Field(default=None, alias="insuredName")
    raw_insured_name: str | None = Field(default=None, alias="rawInsuredName")
    policy_number: str | None = Field(default=None, alias="policyNumber")
    effective_date: date | None = Field(default=None, alias="effectiveDate")
    expiration_date: date | None = Field(default=None, alias="expirationDate")
    insurer_name: str | None = Field(default=None, alias="insurerName")
    coverage_amounts: CoverageAmountsPayload = Field(
        default_factory=CoverageAmountsPayload, alias="coverageAmounts"
    )
    document_type: DocumentTypeName = Field(default="UNKNOWN", alias="documentType")
    raw_text: str = Field(default="", alias="rawText")
    confidence: int = 0

    _normalize_names = field_validator(
        "insured_name", "raw_insured_name", "policy_number", "insurer_name", mode="before"
    )(_blank_to_none)

    @field_validator("effective_date", "expiration_date", mode="before")
    @classmethod
    def _parse_dates(cls, value: object) -> date | None:
        return parse_document_date(value)

    @field_validator("document_type", mode="before")
    @classmethod
    def _normalize_document_type(cls, value: object) -> object:
        if value is None:
            return "UNKNOWN"
        if isinstance(value, str):
            upper = value.strip().upper().replace(" ", "_")
            if upper not in get_args(DocumentTypeName):
                return "UNKNOWN"
            return upper
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: object) -> object:
        if value is None:
            return 0
        if isinstance(value, int | float):
            return max(0, min(100, round(value)))
        return value

    @field_validator("coverage_amounts", mode="before")
    @classmethod
    def _default_coverage_amounts(cls, value: object) -> object:
        return {} if value is None else value
