"""Logic-less template rendering and placeholder helpers.

Templates use Mustache syntax: ``{{key}}`` value tokens and
``{{#key}}...{{/key}}`` sections that are included when the value is truthy
or repeated once per element of a list. Rendering is delegated to chevron.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Union

import chevron
from bs4 import BeautifulSoup
from chevron.tokenizer import ChevronError

from richtext_docx.exceptions import TemplateRenderError

logger = logging.getLogger(__name__)

PlaceholderKind = Literal["value", "section"]

PLACEHOLDER_CLASSES = ("template-placeholder", "template-section")


@dataclass
class RenderResult:
    """Preview output: rendered markup, or diagnostic text when ``is_error``."""

    html: str
    is_error: bool = False


def render_template(template: str, values: Optional[Mapping[str, Any]] = None) -> str:
    """Expand a template with the given values.

    Raises:
        TemplateRenderError: If section tokens are malformed or unbalanced.
    """
    try:
        return chevron.render(template or "", dict(values or {}))
    except ChevronError as exc:
        raise TemplateRenderError(" ".join(str(exc).split())) from exc


def render_preview(template: str, values: Optional[Mapping[str, Any]] = None) -> RenderResult:
    """Render for display. Failures become visible diagnostic text."""
    try:
        return RenderResult(html=render_template(template, values))
    except TemplateRenderError as exc:
        logger.debug("Template rendering failed: %s", exc)
        return RenderResult(html=f"Rendering error: {exc}", is_error=True)


@dataclass
class PlaceholderDefinition:
    key: str
    label: str
    description: Optional[str] = None
    sample_value: Union[str, bool, int, float, None] = None
    allow_section: Optional[bool] = None
    kind: Optional[PlaceholderKind] = None
    section_content: Optional[str] = None

    @property
    def supports_section(self) -> bool:
        if self.allow_section is not None:
            return self.allow_section
        return bool(self.section_content) or self.kind == "section"


def build_initial_values(
    placeholders: list[PlaceholderDefinition],
    overrides: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Preview values: override, else sample value, else a kind default."""
    overrides = overrides or {}
    values = {}
    for placeholder in placeholders:
        if overrides.get(placeholder.key) is not None:
            values[placeholder.key] = overrides[placeholder.key]
        elif placeholder.sample_value is not None:
            values[placeholder.key] = placeholder.sample_value
        else:
            values[placeholder.key] = placeholder.kind == "section" or ""
    return values


def format_section_token(placeholder: PlaceholderDefinition, override: Optional[str] = None) -> str:
    content = (override or placeholder.section_content or "Conditional content here.").strip()
    return f"{{{{#{placeholder.key}}}}}{content}{{{{/{placeholder.key}}}}}"


def format_value_token(placeholder: PlaceholderDefinition) -> str:
    return f"{{{{{placeholder.key}}}}}"


def strip_placeholder_spans(html: str) -> str:
    """Unwrap the highlight spans an editor puts around template tokens."""
    soup = BeautifulSoup(html or "", "html.parser")
    for span in soup.find_all(class_=list(PLACEHOLDER_CLASSES)):
        span.unwrap()
    return str(soup)
