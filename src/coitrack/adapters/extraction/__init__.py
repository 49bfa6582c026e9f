"""Public interface for the extractor-output adapter."""

from __future__ import annotations

from .schema import ExtractorPayload, parse_document_date
from .sidecar import SidecarFieldExtractor
from .translator import parse_document_fields

__all__ = [
    "ExtractorPayload",
    "SidecarFieldExtractor",
    "parse_document_date",
    "parse_document_fields",
]
