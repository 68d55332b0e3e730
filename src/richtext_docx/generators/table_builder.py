"""Table rendering with merged cell support for python-docx.

Lays out HTML-style rows (cells with colspan/rowspan) on a grid, then
creates a python-docx Table with the spanned cells merged.
"""

from __future__ import annotations

import logging
from typing import Callable

from docx.document import Document
from docx.exceptions import InvalidSpanError
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.table import Table

from richtext_docx.config import Config
from richtext_docx.generators.primitives import ParagraphPrimitive, TableCellPrimitive, TablePrimitive

logger = logging.getLogger(__name__)

# (paragraph, primitive) -> None
ParagraphWriter = Callable[[object, ParagraphPrimitive], None]


def layout_cells(block: TablePrimitive) -> tuple[list[tuple[int, int, TableCellPrimitive]], int, int]:
    """Assign grid positions to cells, honouring spans from earlier rows.

    Returns:
        ``(placements, num_rows, num_cols)`` where each placement is
        ``(row, col, cell)``.
    """
    occupied: set[tuple[int, int]] = set()
    placements = []
    num_cols = 0
    num_rows = len(block.rows)

    for r, row in enumerate(block.rows):
        c = 0
        for cell in row.cells:
            while (r, c) in occupied:
                c += 1
            placements.append((r, c, cell))
            for dr in range(cell.rowspan):
                for dc in range(cell.colspan):
                    occupied.add((r + dr, c + dc))
            c += cell.colspan
            num_cols = max(num_cols, c)

    if occupied:
        num_cols = max(num_cols, max(col for _, col in occupied) + 1)
    return placements, num_rows, num_cols


def build_table(
    doc: Document,
    block: TablePrimitive,
    config: Config,
    write_paragraph: ParagraphWriter,
) -> Table:
    """Create a python-docx Table from a TablePrimitive.

    Args:
        doc: The python-docx Document to add the table to.
        block: The mapped table.
        config: Application configuration.
        write_paragraph: Fills a python-docx paragraph from a primitive.

    Returns:
        The created Table object.
    """
    placements, num_rows, num_cols = layout_cells(block)

    if num_rows == 0 or num_cols == 0:
        # Empty table: add a minimal 1x1 placeholder
        table = doc.add_table(rows=1, cols=1, style=config.style.table_style)
        _set_table_layout(table)
        return table

    table = doc.add_table(rows=num_rows, cols=num_cols, style=config.style.table_style)

    for r, c, cell_data in placements:
        # Spans running past the grid are clipped
        end_row = min(r + cell_data.rowspan - 1, num_rows - 1)
        end_col = min(c + cell_data.colspan - 1, num_cols - 1)

        cell = table.cell(r, c)
        if end_row > r or end_col > c:
            try:
                cell = cell.merge(table.cell(end_row, end_col))
            except InvalidSpanError:
                logger.warning("Overlapping table spans at row %d, col %d; not merging", r, c)

        _write_cell(cell, cell_data, write_paragraph)

    _set_table_layout(table)
    return table


def _write_cell(cell, cell_data: TableCellPrimitive, write_paragraph: ParagraphWriter) -> None:
    paragraphs = cell_data.paragraphs or (ParagraphPrimitive(),)
    first = cell.paragraphs[0]
    first.clear()
    write_paragraph(first, paragraphs[0])
    for primitive in paragraphs[1:]:
        write_paragraph(cell.add_paragraph(), primitive)


def _set_table_layout(table: Table) -> None:
    """Full page width (100%) with a fixed column layout."""
    table.autofit = False

    tblPr = table._tbl.tblPr
    tblW = tblPr.find(qn("w:tblW"))
    if tblW is None:
        tblW = OxmlElement("w:tblW")
        tblPr.append(tblW)
    tblW.set(qn("w:type"), "pct")
    tblW.set(qn("w:w"), "5000")  # 5000 = 100% in fifths of a percent
