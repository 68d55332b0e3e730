"""Block extraction: markup tree -> DocumentModel.

Walks the children of the document root in order and classifies each node
into a block. List items are grouped into numbered runs by a
``ListContinuityTracker``; every other block ends the current run.
"""

from __future__ import annotations

import logging
from typing import Optional

from richtext_docx.config import Config
from richtext_docx.extract.images import extract_image
from richtext_docx.extract.lists import (
    ListContinuityTracker,
    ReferenceIdGenerator,
    indent_level_of,
    list_type_of,
)
from richtext_docx.extract.paragraphs import build_paragraph, text_paragraph, wraps_blocks
from richtext_docx.extract.tables import extract_table
from richtext_docx.ir.schema import Block, DocumentModel
from richtext_docx.parsers.base import MarkupNode, NodeKind
from richtext_docx.parsers.factory import parse_markup

logger = logging.getLogger(__name__)


class BlockExtractor:
    """Converts one markup tree into a DocumentModel.

    An extractor (and its tracker) serves a single extraction pass.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        id_generator: Optional[ReferenceIdGenerator] = None,
    ):
        self.config = config or Config.default()
        self.tracker = ListContinuityTracker(id_generator or ReferenceIdGenerator())
        self._blocks: list[Block] = []

    @property
    def _align_prefix(self) -> str:
        return self.config.markup.align_class_prefix

    def extract(self, root: Optional[MarkupNode]) -> DocumentModel:
        """Extract all blocks below ``root``. A missing root yields an empty model."""
        self._blocks = []
        self.tracker.reset()
        if root is None:
            return DocumentModel()

        for child in root.children:
            self._visit(child)
        self.tracker.reset()

        logger.debug("Extracted %d blocks", len(self._blocks))
        return DocumentModel(blocks=self._blocks)

    def _visit(self, node: MarkupNode) -> None:
        kind = node.kind

        if kind is NodeKind.TEXT:
            text = node.text.strip()
            if text:
                self.tracker.reset()
                self._blocks.append(text_paragraph(text))
            return

        if kind is NodeKind.TABLE:
            self.tracker.reset()
            self._blocks.append(extract_table(node, self.config.markup, self.tracker))
            self.tracker.reset()
            return

        if kind is NodeKind.IMAGE:
            self.tracker.reset()
            self._blocks.append(extract_image(node, self._align_prefix))
            return

        if kind is NodeKind.LIST:
            for child in node.children:
                self._visit(child)
            self.tracker.reset()
            return

        if kind is NodeKind.LIST_ITEM:
            list_type = list_type_of(node, self.config.markup)
            if list_type is not None:
                metadata = self.tracker.next_item(list_type, indent_level_of(node, self.config.markup))
                paragraph = build_paragraph(node, self._align_prefix, metadata)
                logger.debug(
                    "List item %s level %d: %.40r",
                    metadata.reference_id, metadata.indent_level, paragraph.text,
                )
                self._blocks.append(paragraph)
                return

        self.tracker.reset()
        if not wraps_blocks(node):
            paragraph = build_paragraph(node, self._align_prefix)
            if paragraph.runs:
                self._blocks.append(paragraph)
                return

        for child in node.children:
            self._visit(child)


def extract_document(
    html: str,
    config: Optional[Config] = None,
    id_generator: Optional[ReferenceIdGenerator] = None,
) -> DocumentModel:
    """Parse markup and extract its DocumentModel.

    Returns an empty model when no markup parser is available.
    """
    config = config or Config.default()
    root = parse_markup(html, config)
    if root is None:
        logger.warning("No markup parser available; returning an empty document")
    return BlockExtractor(config, id_generator).extract(root)
