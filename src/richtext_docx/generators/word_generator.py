"""Mapped primitives -> .docx renderer.

Writes numbering definitions first, then renders each body primitive in
order. python-docx is the serializer; nothing here inspects the source
markup.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from docx import Document
from docx.image.exceptions import (
    InvalidImageStreamError,
    UnexpectedEndOfFileError,
    UnrecognizedImageError,
)
from docx.shared import Emu, Pt, RGBColor

from richtext_docx.config import Config
from richtext_docx.exceptions import GenerationError
from richtext_docx.generators.primitives import (
    ImagePrimitive,
    MappedDocument,
    ParagraphPrimitive,
    RunPrimitive,
    TablePrimitive,
)
from richtext_docx.generators.styles import (
    add_numbering_definitions,
    apply_list_numbering,
    apply_shading,
    doc_style_or_fallback,
)
from richtext_docx.generators.table_builder import build_table

logger = logging.getLogger(__name__)

EMU_PER_PIXEL = 9525  # at 96 DPI


class WordGenerator:
    """Generates a Word document from mapped primitives."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config.default()
        self._num_ids: dict[str, int] = {}

    def generate(self, mapped: MappedDocument, output_path: Path) -> Path:
        """Generate a .docx file.

        Args:
            mapped: Output of the primitive mapper.
            output_path: Where to write the .docx file.

        Returns:
            The output path (for convenience).
        """
        output_path = Path(output_path)
        doc = self.generate_document(mapped)
        try:
            doc.save(str(output_path))
        except OSError as exc:
            raise GenerationError(f"Failed to save document: {exc}") from exc

        logger.info("Generated %s", output_path)
        return output_path

    def to_bytes(self, mapped: MappedDocument) -> bytes:
        """Generate the .docx and return it as a byte blob."""
        buffer = io.BytesIO()
        self.generate_document(mapped).save(buffer)
        return buffer.getvalue()

    def generate_document(self, mapped: MappedDocument) -> Document:
        """Generate and return a python-docx Document object."""
        doc = Document()
        self._num_ids = add_numbering_definitions(doc, mapped.numbering, self.config.style)

        for element in mapped.elements:
            if isinstance(element, ParagraphPrimitive):
                self._write_paragraph(doc.add_paragraph(), element)
            elif isinstance(element, TablePrimitive):
                build_table(doc, element, self.config, self._write_paragraph)
            elif isinstance(element, ImagePrimitive):
                self._render_image(doc, element)
            else:
                logger.warning("Unknown primitive: %s", type(element).__name__)

        return doc

    def _write_paragraph(self, paragraph, primitive: ParagraphPrimitive) -> None:
        """Fill an existing python-docx paragraph from a primitive."""
        if primitive.style:
            paragraph.style = doc_style_or_fallback(
                paragraph.part.document, primitive.style, self.config.style.body_style
            )
        if primitive.alignment is not None:
            paragraph.alignment = primitive.alignment

        if primitive.numbering is not None:
            num_id = self._num_ids.get(primitive.numbering.reference)
            if num_id is None:
                logger.warning("No numbering definition for %s", primitive.numbering.reference)
            else:
                apply_list_numbering(paragraph, num_id, primitive.numbering.level)

        for run_data in primitive.runs:
            _write_run(paragraph, run_data)

    def _render_image(self, doc: Document, image: ImagePrimitive) -> None:
        paragraph = doc.add_paragraph()
        if image.alignment is not None:
            paragraph.alignment = image.alignment
        try:
            shape = paragraph.add_run().add_picture(
                io.BytesIO(image.data),
                width=Emu(image.width_px * EMU_PER_PIXEL),
                height=Emu(image.height_px * EMU_PER_PIXEL),
            )
        except (UnrecognizedImageError, UnexpectedEndOfFileError, InvalidImageStreamError) as exc:
            logger.warning("Skipping unreadable image: %s", type(exc).__name__)
            paragraph._p.getparent().remove(paragraph._p)
            return

        if image.alt_text:
            shape._inline.docPr.set("descr", image.alt_text)


def _write_run(paragraph, run_data: RunPrimitive) -> None:
    """Write one formatted run into a paragraph."""
    run = paragraph.add_run(run_data.text)
    if run_data.bold is not None:
        run.bold = run_data.bold
    if run_data.italic is not None:
        run.italic = run_data.italic
    if run_data.underline is not None:
        run.underline = run_data.underline
    if run_data.strike is not None:
        run.font.strike = run_data.strike
    if run_data.font:
        run.font.name = run_data.font
    if run_data.size_half_points is not None:
        run.font.size = Pt(run_data.size_half_points / 2)
    if run_data.color:
        run.font.color.rgb = RGBColor.from_string(run_data.color)
    if run_data.shading:
        apply_shading(run, run_data.shading)
    # vertAlign follows shd in run properties
    if run_data.vertical_align == "superscript":
        run.font.superscript = True
    elif run_data.vertical_align == "subscript":
        run.font.subscript = True
