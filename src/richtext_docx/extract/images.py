"""Image extraction: markup image -> ImageBlock."""

from __future__ import annotations

from richtext_docx.extract.styles import derive_alignment
from richtext_docx.extract.tables import parse_positive_int
from richtext_docx.ir.schema import ImageBlock
from richtext_docx.parsers.base import MarkupNode


def extract_image(image: MarkupNode, align_class_prefix: str = "ql-align-") -> ImageBlock:
    """Capture an image's source, alt text, pixel size and alignment.

    Alignment comes from the image itself, else from its parent element.
    """
    alignment = derive_alignment(image, align_class_prefix) or derive_alignment(
        image.parent, align_class_prefix
    )
    return ImageBlock(
        source=image.get("src") or "",
        alt_text=image.get("alt"),
        width=parse_positive_int(image.get("width")),
        height=parse_positive_int(image.get("height")),
        alignment=alignment,
    )
