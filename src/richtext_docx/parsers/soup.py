"""BeautifulSoup-backed markup tree adapter."""

from __future__ import annotations

import logging
from typing import Optional

import bs4
from bs4 import BeautifulSoup, FeatureNotFound, NavigableString, Tag
from bs4.element import PreformattedString

from richtext_docx.config import Config
from richtext_docx.parsers.base import BaseMarkupParser, MarkupNode

logger = logging.getLogger(__name__)

# Elements whose content never reaches the document.
_SKIPPED_TAGS = {"script", "style", "template", "head", "title", "meta", "link"}


def _is_content(element) -> bool:
    if isinstance(element, Tag):
        return element.name not in _SKIPPED_TAGS
    # Comments, doctypes, CDATA and processing instructions
    return isinstance(element, NavigableString) and not isinstance(element, PreformattedString)


class SoupNode(MarkupNode):
    """A ``MarkupNode`` wrapping a bs4 ``Tag`` or ``NavigableString``."""

    def __init__(self, element, parent: Optional[SoupNode] = None):
        self._element = element
        self._parent = parent

    @property
    def tag(self) -> str:
        if isinstance(self._element, Tag):
            return (self._element.name or "").lower()
        return ""

    @property
    def text(self) -> str:
        if isinstance(self._element, Tag):
            return ""
        return str(self._element)

    @property
    def children(self) -> list[MarkupNode]:
        if not isinstance(self._element, Tag):
            return []
        return [SoupNode(child, self) for child in self._element.children if _is_content(child)]

    @property
    def parent(self) -> Optional[MarkupNode]:
        if self._parent is not None:
            return self._parent
        parent = self._element.parent
        if parent is None:
            return None
        return SoupNode(parent)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        if not isinstance(self._element, Tag):
            return default
        value = self._element.get(name)
        if value is None:
            return default
        if isinstance(value, list):
            return " ".join(value)
        return value


class SoupMarkupParser(BaseMarkupParser):
    """Markup parser using BeautifulSoup with a configurable tree builder."""

    def __init__(self, config: Config | None = None):
        super().__init__(config)

    @property
    def name(self) -> str:
        return "beautifulsoup"

    @property
    def version(self) -> str:
        return bs4.__version__

    def parse(self, html: str) -> Optional[MarkupNode]:
        """Parse an HTML fragment or document.

        Returns None when the configured tree builder is not installed.
        """
        features = self.config.markup.features
        try:
            soup = BeautifulSoup(html or "", features)
        except FeatureNotFound:
            logger.warning("Markup tree builder %r is not available", features)
            return None

        root = soup.body or soup
        return SoupNode(root)
