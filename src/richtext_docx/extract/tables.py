"""Table extraction: markup table -> TableBlock."""

from __future__ import annotations

import re
from typing import Optional

from richtext_docx.config import MarkupConfig
from richtext_docx.extract.lists import ListContinuityTracker, indent_level_of, list_type_of
from richtext_docx.extract.paragraphs import build_paragraph, text_paragraph, wraps_blocks
from richtext_docx.ir.schema import ParagraphBlock, TableBlock, TableCellBlock, TableRowBlock
from richtext_docx.parsers.base import MarkupNode, NodeKind

_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_positive_int(value: Optional[str]) -> Optional[int]:
    """Leading integer of an attribute value, or None unless it is >= 1."""
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if not match:
        return None
    number = int(match.group(1))
    return number if number >= 1 else None


def table_rows(table: MarkupNode) -> list[MarkupNode]:
    """Rows owned by this table, including rows of thead/tbody/tfoot.

    Rows of nested tables are not included.
    """
    rows = []
    for child in table.children:
        if child.kind is NodeKind.ROW:
            rows.append(child)
        elif child.kind is NodeKind.TABLE_SECTION:
            rows.extend(row for row in child.children if row.kind is NodeKind.ROW)
    return rows


def extract_table(
    table: MarkupNode,
    markup: Optional[MarkupConfig] = None,
    tracker: Optional[ListContinuityTracker] = None,
) -> TableBlock:
    """Extract a table. List runs inside a cell never continue past it."""
    markup = markup or MarkupConfig()
    tracker = tracker or ListContinuityTracker()
    rows = []
    for row in table_rows(table):
        cells = [
            _extract_cell(cell, markup, tracker)
            for cell in row.children
            if cell.kind is NodeKind.CELL
        ]
        rows.append(TableRowBlock(cells=cells))
    return TableBlock(rows=rows)


def _extract_cell(
    cell: MarkupNode, markup: MarkupConfig, tracker: ListContinuityTracker
) -> TableCellBlock:
    tracker.reset()
    blocks = cell_blocks(cell, markup, tracker)
    tracker.reset()
    if not blocks:
        blocks = [ParagraphBlock()]
    return TableCellBlock(
        blocks=blocks,
        colspan=parse_positive_int(cell.get("colspan")),
        rowspan=parse_positive_int(cell.get("rowspan")),
    )


def cell_blocks(
    node: MarkupNode,
    markup: Optional[MarkupConfig] = None,
    tracker: Optional[ListContinuityTracker] = None,
) -> list[ParagraphBlock]:
    """Paragraphs of a cell's content; wrappers are recursed into."""
    markup = markup or MarkupConfig()
    tracker = tracker or ListContinuityTracker()
    prefix = markup.align_class_prefix

    if node.is_text:
        text = node.text.strip()
        if not text:
            return []
        tracker.reset()
        return [text_paragraph(text)]

    if node.kind is NodeKind.LIST:
        blocks = []
        for child in node.children:
            blocks.extend(cell_blocks(child, markup, tracker))
        tracker.reset()
        return blocks

    if node.kind is NodeKind.LIST_ITEM:
        list_type = list_type_of(node, markup)
        if list_type is not None:
            metadata = tracker.next_item(list_type, indent_level_of(node, markup))
            return [build_paragraph(node, prefix, metadata)]

    tracker.reset()
    if not wraps_blocks(node):
        paragraph = build_paragraph(node, prefix)
        return [paragraph] if paragraph.runs else []

    blocks = []
    for child in node.children:
        blocks.extend(cell_blocks(child, markup, tracker))
    return blocks
