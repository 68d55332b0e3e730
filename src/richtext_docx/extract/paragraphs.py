"""Paragraph construction shared by the block and table extractors."""

from __future__ import annotations

from typing import Optional

from richtext_docx.extract.styles import LINE_BREAK, collect_runs, derive_alignment
from richtext_docx.ir.schema import ListMetadata, ParagraphBlock, TextRun
from richtext_docx.parsers.base import BLOCK_KINDS, MarkupNode


def build_paragraph(
    node: MarkupNode,
    align_class_prefix: str = "ql-align-",
    list_metadata: Optional[ListMetadata] = None,
) -> ParagraphBlock:
    """Build a paragraph from the inline content of an element.

    Trailing line breaks are dropped, so an element holding only a break
    has no runs.
    """
    runs = collect_runs(node)
    while runs and runs[-1].text == LINE_BREAK:
        runs.pop()
    return ParagraphBlock(
        runs=runs,
        alignment=derive_alignment(node, align_class_prefix),
        heading_level=node.heading_level,
        list_metadata=list_metadata,
    )


def text_paragraph(text: str) -> ParagraphBlock:
    """A single unstyled run."""
    return ParagraphBlock(runs=[TextRun(text=text)])


def wraps_blocks(node: MarkupNode) -> bool:
    """True if the element directly contains block-level children."""
    return any(child.kind in BLOCK_KINDS for child in node.children)
