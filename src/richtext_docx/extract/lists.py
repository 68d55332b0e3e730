"""List continuity tracking.

Consecutive list items of the same type and indent form one numbered (or
bulleted) run that shares a reference id. Any non-list block ends the
current run; runs are never resumed after an interruption.
"""

from __future__ import annotations

import itertools
import logging
import re
from dataclasses import dataclass
from typing import Optional

from richtext_docx.config import MarkupConfig
from richtext_docx.ir.schema import ListMetadata, ListType
from richtext_docx.parsers.base import MarkupNode, NodeKind

logger = logging.getLogger(__name__)

_REFERENCE_PREFIXES = {"ordered": "decimal", "bullet": "bullet"}

# Word numbering supports levels 0-8
MAX_LIST_LEVEL = 8

_LEADING_INT = re.compile(r"^\s*(-?\d+)")


class ReferenceIdGenerator:
    """Mints list reference ids (``decimal-0``, ``bullet-0``, ...).

    One instance belongs to one export call, so ids are deterministic per
    document and never shared between concurrent exports.
    """

    def __init__(self):
        self._counters = {list_type: itertools.count() for list_type in _REFERENCE_PREFIXES}

    def next_id(self, list_type: ListType) -> str:
        return f"{_REFERENCE_PREFIXES[list_type]}-{next(self._counters[list_type])}"


@dataclass
class ListRun:
    list_type: ListType
    indent_level: int
    reference_id: str
    started: bool = False


class ListContinuityTracker:
    """State machine grouping list items into runs. ``state is None`` means idle."""

    def __init__(self, id_generator: Optional[ReferenceIdGenerator] = None):
        self.id_generator = id_generator or ReferenceIdGenerator()
        self.state: Optional[ListRun] = None

    def next_item(self, list_type: ListType, indent_level: int) -> ListMetadata:
        """Return the list metadata for the next item of the given type and indent."""
        run = self.state
        if run is None or run.list_type != list_type or run.indent_level != indent_level:
            run = ListRun(
                list_type=list_type,
                indent_level=indent_level,
                reference_id=self.id_generator.next_id(list_type),
            )
            self.state = run

        start_value = None if run.started else 1
        run.started = True
        return ListMetadata(
            list_type=list_type,
            indent_level=indent_level,
            reference_id=run.reference_id,
            start_value=start_value,
        )

    def reset(self) -> None:
        """End the current run, if any."""
        self.state = None


def list_type_of(item: MarkupNode, markup: MarkupConfig) -> Optional[ListType]:
    """List type from the item's annotation, else from its container."""
    annotation = item.get(markup.list_type_attribute)
    if annotation:
        return "ordered" if annotation.strip().lower() == "ordered" else "bullet"

    container = item.parent
    if container is not None and container.kind is NodeKind.LIST:
        return "ordered" if container.tag == "ol" else "bullet"
    return None


def indent_level_of(item: MarkupNode, markup: MarkupConfig) -> int:
    """Indent from the indent attribute, else an indent class.

    Invalid or negative values give 0; values above ``MAX_LIST_LEVEL`` are
    clamped to it.
    """
    value = item.get(markup.list_indent_attribute)
    if value is None:
        for cls in item.classes:
            if cls.startswith(markup.indent_class_prefix):
                value = cls[len(markup.indent_class_prefix):]
                break
    if value is None:
        return 0

    match = _LEADING_INT.match(value)
    if not match or int(match.group(1)) < 0:
        logger.debug("Invalid list indent %r, using 0", value)
        return 0
    level = int(match.group(1))
    if level > MAX_LIST_LEVEL:
        logger.debug("List indent %d exceeds %d, clamping", level, MAX_LIST_LEVEL)
        return MAX_LIST_LEVEL
    return level
