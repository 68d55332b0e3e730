"""Parser factory: selects a markup parser adapter based on config."""

from __future__ import annotations

from typing import Optional

from richtext_docx.config import Config
from richtext_docx.exceptions import ConfigError
from richtext_docx.parsers.base import BaseMarkupParser, MarkupNode


def create_parser(config: Config | None = None) -> BaseMarkupParser:
    """Create a markup parser instance based on config.

    Args:
        config: Exporter configuration. Uses default if None.

    Returns:
        A BaseMarkupParser implementation.

    Raises:
        ConfigError: If the configured engine is unknown.
    """
    config = config or Config.default()
    engine = config.markup.engine.lower()

    if engine in ("beautifulsoup", "bs4"):
        from richtext_docx.parsers.soup import SoupMarkupParser

        return SoupMarkupParser(config)
    else:
        raise ConfigError(
            f"Unknown markup engine: '{engine}'. Available: beautifulsoup"
        )


def parse_markup(html: str, config: Config | None = None) -> Optional[MarkupNode]:
    """Parse markup with the configured adapter."""
    return create_parser(config).parse(html)
