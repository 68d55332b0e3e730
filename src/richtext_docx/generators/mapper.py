"""DocumentModel -> word-processor primitives.

Normalizes CSS colours, font sizes and font families into the target
format's units, maps alignment and heading levels onto python-docx terms,
and groups list metadata into one numbering definition per reference id.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Mapping, Optional

from docx.enum.text import WD_ALIGN_PARAGRAPH

from richtext_docx.config import Config, StyleConfig
from richtext_docx.generators.image_handler import compute_pixel_size
from richtext_docx.generators.primitives import (
    ImagePrimitive,
    MappedDocument,
    NumberingDefinition,
    NumberingLevel,
    NumberingReference,
    ParagraphPrimitive,
    RunPrimitive,
    TableCellPrimitive,
    TablePrimitive,
    TableRowPrimitive,
)
from richtext_docx.generators.styles import heading_style_name
from richtext_docx.ir.schema import (
    DocumentModel,
    ImageBlock,
    ListMetadata,
    ParagraphBlock,
    TableBlock,
    TextRun,
)

logger = logging.getLogger(__name__)

ALIGNMENT_MAP = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}

_HEX_COLOR = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$")
_RGB_COLOR = re.compile(r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})")
_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)")

HALF_POINTS_PER_UNIT = 0.5


def normalize_color(value: Optional[str]) -> Optional[str]:
    """Convert ``#abc``, ``#aabbcc`` or ``rgb()/rgba()`` to ``RRGGBB``.

    Returns None for any other representation or out-of-range channels.
    """
    if not value:
        return None
    value = value.strip().lower()

    match = _HEX_COLOR.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return digits.upper()

    match = _RGB_COLOR.match(value)
    if match:
        channels = [int(group) for group in match.groups()]
        if all(0 <= channel <= 255 for channel in channels):
            return "".join(f"{channel:02X}" for channel in channels)
    return None


def normalize_size(value: Optional[str]) -> Optional[int]:
    """Leading numeric portion of a size declaration, in half-points."""
    if not value:
        return None
    match = _LEADING_NUMBER.match(value)
    if not match:
        return None
    half_points = math.floor(float(match.group(1)) * HALF_POINTS_PER_UNIT + 0.5)
    return half_points if half_points > 0 else None


def normalize_font(value: Optional[str]) -> Optional[str]:
    """First family of a font-family list, without quotes."""
    if not value:
        return None
    family = value.split(",")[0].strip().strip("'\"").strip()
    return family or None


def build_numbering_definitions(
    metadata: list[ListMetadata], style: Optional[StyleConfig] = None
) -> list[NumberingDefinition]:
    """Group list metadata by reference id into numbering definitions.

    Each definition has one level per distinct indent in its group; a level
    carries a start value only if one was recorded for that indent.
    """
    style = style or StyleConfig()
    groups: dict[str, dict[int, NumberingLevel]] = {}

    for meta in metadata:
        levels = groups.setdefault(meta.reference_id, {})
        existing = levels.get(meta.indent_level)
        if existing is None:
            levels[meta.indent_level] = NumberingLevel(
                level=meta.indent_level,
                format="decimal" if meta.list_type == "ordered" else "bullet",
                text=_level_text(meta, style),
                start=meta.start_value,
            )
            continue

        if existing.format != ("decimal" if meta.list_type == "ordered" else "bullet"):
            logger.warning(
                "List %s mixes list types at indent %d; keeping %s",
                meta.reference_id, meta.indent_level, existing.format,
            )
        if existing.start is None and meta.start_value is not None:
            levels[meta.indent_level] = NumberingLevel(
                level=existing.level,
                format=existing.format,
                text=existing.text,
                start=meta.start_value,
            )

    return [
        NumberingDefinition(
            reference=reference,
            levels=tuple(levels[indent] for indent in sorted(levels)),
        )
        for reference, levels in groups.items()
    ]


def _level_text(meta: ListMetadata, style: StyleConfig) -> str:
    if meta.list_type == "bullet":
        return style.bullet_text
    return f"%{meta.indent_level + 1}."


class PrimitiveMapper:
    """Maps a DocumentModel to primitives for the Word generator."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config.default()

    def map(
        self,
        model: DocumentModel,
        payloads: Optional[Mapping[str, bytes]] = None,
    ) -> MappedDocument:
        """Map every block of ``model``.

        Args:
            model: The extracted document model.
            payloads: Resolved image bytes keyed by image source. Image
                blocks without a payload are omitted.
        """
        payloads = payloads or {}
        mapped = MappedDocument()

        for block in model.blocks:
            if isinstance(block, ParagraphBlock):
                mapped.elements.append(self.map_paragraph(block))
            elif isinstance(block, TableBlock):
                mapped.elements.append(self.map_table(block))
            elif isinstance(block, ImageBlock):
                data = payloads.get(block.source)
                if data is None:
                    logger.debug("Skipping unresolved image %.60s", block.source)
                    continue
                mapped.elements.append(self.map_image(block, data))
            else:
                logger.warning("Unknown block type: %s", type(block).__name__)

        mapped.numbering = build_numbering_definitions(model.list_metadata(), self.config.style)
        return mapped

    def map_run(self, run: TextRun) -> RunPrimitive:
        styles = run.styles
        vertical_align = None
        if styles.vertical_script == "super":
            vertical_align = "superscript"
        elif styles.vertical_script == "sub":
            vertical_align = "subscript"

        return RunPrimitive(
            text=run.text,
            bold=styles.bold,
            italic=styles.italic,
            underline=styles.underline,
            strike=styles.strike,
            color=normalize_color(styles.color),
            shading=normalize_color(styles.background),
            font=normalize_font(styles.font),
            size_half_points=normalize_size(styles.size),
            vertical_align=vertical_align,
        )

    def map_paragraph(self, block: ParagraphBlock) -> ParagraphPrimitive:
        runs = tuple(self.map_run(run) for run in block.runs) or (RunPrimitive(text=""),)

        if block.heading_level is not None:
            style = heading_style_name(self.config.style, block.heading_level)
        elif block.list_metadata is not None:
            style = self.config.style.list_style
        else:
            style = self.config.style.body_style

        numbering = None
        if block.list_metadata is not None:
            numbering = NumberingReference(
                reference=block.list_metadata.reference_id,
                level=block.list_metadata.indent_level,
            )

        return ParagraphPrimitive(
            runs=runs,
            alignment=ALIGNMENT_MAP.get(block.alignment) if block.alignment else None,
            style=style,
            numbering=numbering,
        )

    def map_table(self, block: TableBlock) -> TablePrimitive:
        rows = []
        for row in block.rows:
            cells = []
            for cell in row.cells:
                paragraphs = tuple(self.map_paragraph(p) for p in cell.blocks)
                if not paragraphs:
                    paragraphs = (ParagraphPrimitive(runs=(RunPrimitive(text=""),)),)
                cells.append(TableCellPrimitive(
                    paragraphs=paragraphs,
                    colspan=cell.colspan or 1,
                    rowspan=cell.rowspan or 1,
                ))
            rows.append(TableRowPrimitive(cells=tuple(cells)))
        return TablePrimitive(rows=tuple(rows))

    def map_image(self, block: ImageBlock, data: bytes) -> ImagePrimitive:
        width, height = compute_pixel_size(block, data, self.config.image)
        return ImagePrimitive(
            data=data,
            width_px=width,
            height_px=height,
            alignment=ALIGNMENT_MAP.get(block.alignment) if block.alignment else None,
            alt_text=block.alt_text,
        )
