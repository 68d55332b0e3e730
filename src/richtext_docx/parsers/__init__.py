"""Markup parser adapters."""

from richtext_docx.parsers.base import BaseMarkupParser, MarkupNode, NodeKind
from richtext_docx.parsers.factory import create_parser, parse_markup

__all__ = ["BaseMarkupParser", "MarkupNode", "NodeKind", "create_parser", "parse_markup"]
