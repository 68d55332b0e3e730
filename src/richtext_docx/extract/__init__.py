"""Markup -> DocumentModel extraction."""

from richtext_docx.extract.extractor import BlockExtractor, extract_document
from richtext_docx.extract.lists import ListContinuityTracker, ReferenceIdGenerator
from richtext_docx.extract.styles import collect_runs, derive_alignment, parse_style_attribute, resolve_style

__all__ = [
    "BlockExtractor",
    "ListContinuityTracker",
    "ReferenceIdGenerator",
    "collect_runs",
    "derive_alignment",
    "extract_document",
    "parse_style_attribute",
    "resolve_style",
]
