"""Markup tree capability shared by all markup parser adapters.

Extraction never touches a concrete HTML library. Adapters wrap whatever
parsing facility is available in a ``MarkupNode`` tree whose nodes are
classified into a small set of kinds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from richtext_docx.config import Config


class NodeKind(str, Enum):
    TEXT = "text"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    TABLE_SECTION = "table_section"
    ROW = "row"
    CELL = "cell"
    IMAGE = "image"
    BREAK = "break"
    INLINE = "inline"


HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

_TAG_KINDS = {
    "ul": NodeKind.LIST,
    "ol": NodeKind.LIST,
    "li": NodeKind.LIST_ITEM,
    "table": NodeKind.TABLE,
    "thead": NodeKind.TABLE_SECTION,
    "tbody": NodeKind.TABLE_SECTION,
    "tfoot": NodeKind.TABLE_SECTION,
    "tr": NodeKind.ROW,
    "td": NodeKind.CELL,
    "th": NodeKind.CELL,
    "img": NodeKind.IMAGE,
    "br": NodeKind.BREAK,
    "hr": NodeKind.BREAK,
}

_PARAGRAPH_TAGS = {
    "p", "div", "blockquote", "pre", "section", "article", "header",
    "footer", "main", "aside", "nav", "address", "figure", "figcaption",
    "center", "dl", "dt", "dd",
}

# Kinds that make an enclosing element a wrapper rather than a paragraph.
BLOCK_KINDS = frozenset({
    NodeKind.PARAGRAPH,
    NodeKind.HEADING,
    NodeKind.LIST,
    NodeKind.LIST_ITEM,
    NodeKind.TABLE,
    NodeKind.IMAGE,
})


def classify_tag(tag: str) -> NodeKind:
    """Return the node kind of an element by its lower-case tag name."""
    if tag in HEADING_TAGS:
        return NodeKind.HEADING
    if tag in _PARAGRAPH_TAGS:
        return NodeKind.PARAGRAPH
    return _TAG_KINDS.get(tag, NodeKind.INLINE)


class MarkupNode(ABC):
    """One node of a parsed markup tree (an element or a text node)."""

    @property
    @abstractmethod
    def tag(self) -> str:
        """Lower-case tag name; empty string for text nodes."""

    @property
    @abstractmethod
    def text(self) -> str:
        """Raw text content of a text node; empty string for elements."""

    @property
    @abstractmethod
    def children(self) -> list[MarkupNode]:
        """Child nodes in document order."""

    @property
    @abstractmethod
    def parent(self) -> Optional[MarkupNode]:
        """Enclosing element, or None at the root."""

    @abstractmethod
    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return an attribute value as a string."""

    @property
    def is_text(self) -> bool:
        return not self.tag

    @property
    def kind(self) -> NodeKind:
        if self.is_text:
            return NodeKind.TEXT
        return classify_tag(self.tag)

    @property
    def classes(self) -> list[str]:
        return (self.get("class") or "").split()

    @property
    def heading_level(self) -> Optional[int]:
        return HEADING_TAGS.get(self.tag)

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        if self.is_text:
            return f"<{type(self).__name__} text={self.text[:20]!r}>"
        return f"<{type(self).__name__} {self.tag}>"


class BaseMarkupParser(ABC):
    """Base class that all markup parser adapters must extend."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config.default()

    @abstractmethod
    def parse(self, html: str) -> Optional[MarkupNode]:
        """Parse markup and return its root node.

        Returns:
            The root ``MarkupNode``, or None when no parsing capability is
            available in this environment.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the adapter name (e.g. 'beautifulsoup')."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Return the underlying library version string."""
