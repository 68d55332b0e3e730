"""Word-processor primitives produced by the mapper and consumed by the generator.

Every field here is already in the target format's terms: hex colours
without '#', half-point font sizes, python-docx alignment enums and style
names. Unset fields are None and are not written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

from docx.enum.text import WD_ALIGN_PARAGRAPH

NumberFormat = Literal["bullet", "decimal"]


@dataclass(frozen=True)
class RunPrimitive:
    text: str
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strike: Optional[bool] = None
    color: Optional[str] = None  # RRGGBB
    shading: Optional[str] = None  # RRGGBB
    font: Optional[str] = None
    size_half_points: Optional[int] = None
    vertical_align: Optional[Literal["superscript", "subscript"]] = None


@dataclass(frozen=True)
class NumberingReference:
    reference: str
    level: int


@dataclass(frozen=True)
class ParagraphPrimitive:
    runs: tuple[RunPrimitive, ...] = ()
    alignment: Optional[WD_ALIGN_PARAGRAPH] = None
    style: Optional[str] = None
    numbering: Optional[NumberingReference] = None


@dataclass(frozen=True)
class TableCellPrimitive:
    paragraphs: tuple[ParagraphPrimitive, ...]
    colspan: int = 1
    rowspan: int = 1


@dataclass(frozen=True)
class TableRowPrimitive:
    cells: tuple[TableCellPrimitive, ...]


@dataclass(frozen=True)
class TablePrimitive:
    rows: tuple[TableRowPrimitive, ...]


@dataclass(frozen=True)
class ImagePrimitive:
    data: bytes
    width_px: int
    height_px: int
    alignment: Optional[WD_ALIGN_PARAGRAPH] = None
    alt_text: Optional[str] = None


@dataclass(frozen=True)
class NumberingLevel:
    level: int
    format: NumberFormat
    text: str
    start: Optional[int] = None


@dataclass(frozen=True)
class NumberingDefinition:
    reference: str
    levels: tuple[NumberingLevel, ...]


Primitive = Union[ParagraphPrimitive, TablePrimitive, ImagePrimitive]


@dataclass
class MappedDocument:
    """Mapper output: body primitives in order plus numbering definitions."""

    elements: list[Primitive] = field(default_factory=list)
    numbering: list[NumberingDefinition] = field(default_factory=list)
