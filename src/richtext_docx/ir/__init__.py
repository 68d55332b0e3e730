"""Normalized document model."""

from richtext_docx.ir.schema import (
    Alignment,
    Block,
    DocumentModel,
    ImageBlock,
    ListMetadata,
    ListType,
    ParagraphBlock,
    StyleSet,
    TableBlock,
    TableCellBlock,
    TableRowBlock,
    TextRun,
)

__all__ = [
    "Alignment",
    "Block",
    "DocumentModel",
    "ImageBlock",
    "ListMetadata",
    "ListType",
    "ParagraphBlock",
    "StyleSet",
    "TableBlock",
    "TableCellBlock",
    "TableRowBlock",
    "TextRun",
]
