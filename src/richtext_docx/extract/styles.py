"""Inline style cascade and paragraph alignment for markup nodes.

``resolve_style`` merges the formatting carried by one element onto the
style inherited from its ancestors. Child values override the parent's only
for the fields the child sets; everything else is inherited unchanged.
"""

from __future__ import annotations

import re
from typing import Optional

from richtext_docx.ir.schema import Alignment, StyleSet, TextRun
from richtext_docx.parsers.base import MarkupNode, NodeKind

BOLD_TAGS = {"strong", "b"}
ITALIC_TAGS = {"em", "i", "cite"}
UNDERLINE_TAGS = {"u", "ins"}
STRIKE_TAGS = {"s", "strike", "del"}

ALIGNMENTS = ("left", "center", "right", "justify")

_WHITESPACE = re.compile(r"\s+")

# Rendered as a line break inside the paragraph
LINE_BREAK = "\n"


def parse_style_attribute(value: Optional[str]) -> dict[str, str]:
    """Parse an inline ``style`` declaration into a lower-cased key mapping."""
    if not value:
        return {}
    declarations = {}
    for part in value.split(";"):
        key, sep, val = part.partition(":")
        key, val = key.strip().lower(), val.strip()
        if sep and key and val:
            declarations[key] = val
    return declarations


def _is_bold_weight(value: str) -> Optional[bool]:
    value = value.lower()
    if value in ("bold", "bolder"):
        return True
    if value in ("normal", "lighter"):
        return False
    if value.isdigit():
        return int(value) >= 600
    return None


def resolve_style(node: MarkupNode, inherited: Optional[StyleSet] = None) -> StyleSet:
    """Return the style of ``node`` given the style of its ancestors."""
    inherited = inherited or StyleSet()
    if node.is_text:
        return inherited

    updates: dict = {}
    tag = node.tag
    if tag in BOLD_TAGS:
        updates["bold"] = True
    if tag in ITALIC_TAGS:
        updates["italic"] = True
    if tag in UNDERLINE_TAGS:
        updates["underline"] = True
    if tag in STRIKE_TAGS:
        updates["strike"] = True
    if tag == "sup":
        updates["vertical_script"] = "super"
    elif tag == "sub":
        updates["vertical_script"] = "sub"

    declarations = parse_style_attribute(node.get("style"))

    if "font-weight" in declarations:
        bold = _is_bold_weight(declarations["font-weight"])
        if bold is not None:
            updates["bold"] = bold
    if "font-style" in declarations:
        updates["italic"] = declarations["font-style"].lower() in ("italic", "oblique")
    decoration = declarations.get("text-decoration", declarations.get("text-decoration-line", "")).lower()
    if "underline" in decoration:
        updates["underline"] = True
    if "line-through" in decoration:
        updates["strike"] = True

    if "color" in declarations:
        updates["color"] = declarations["color"]
    background = declarations.get("background-color") or declarations.get("background")
    if background:
        updates["background"] = background
    if "font-family" in declarations:
        updates["font"] = declarations["font-family"]
    if "font-size" in declarations:
        updates["size"] = declarations["font-size"]

    # Legacy <font face size> loses to a declaration on the same element.
    if tag == "font":
        face = node.get("face")
        if face and "font" not in updates:
            updates["font"] = face
        size = node.get("size")
        if size and "size" not in updates:
            updates["size"] = size

    if not updates:
        return inherited
    return inherited.model_copy(update=updates)


def collect_runs(node: MarkupNode, inherited: Optional[StyleSet] = None) -> list[TextRun]:
    """Collect styled text runs from a node and all of its descendants."""
    styles = inherited or StyleSet()
    if node.is_text:
        text = _WHITESPACE.sub(" ", node.text)
        if not text.strip():
            return []
        return [TextRun(text=text, styles=styles)]

    if node.kind is NodeKind.BREAK:
        return [TextRun(text=LINE_BREAK, styles=styles)] if node.tag == "br" else []

    styles = resolve_style(node, styles)
    runs: list[TextRun] = []
    for child in node.children:
        runs.extend(collect_runs(child, styles))
    return runs


def _valid_alignment(value: Optional[str]) -> Optional[Alignment]:
    if value is None:
        return None
    value = value.strip().lower()
    return value if value in ALIGNMENTS else None


def derive_alignment(node: Optional[MarkupNode], class_prefix: str = "ql-align-") -> Optional[Alignment]:
    """Derive paragraph alignment from a node.

    Precedence: ``align`` attribute, then ``text-align`` declaration, then an
    alignment class such as ``ql-align-center``. The first valid value wins.
    """
    if node is None or node.is_text:
        return None

    alignment = _valid_alignment(node.get("align"))
    if alignment:
        return alignment

    declarations = parse_style_attribute(node.get("style"))
    alignment = _valid_alignment(declarations.get("text-align"))
    if alignment:
        return alignment

    for cls in node.classes:
        if cls.startswith(class_prefix):
            alignment = _valid_alignment(cls[len(class_prefix):])
            if alignment:
                return alignment
    return None
