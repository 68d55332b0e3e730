"""Pydantic models for the normalized document model.

The model is a flat, ordered sequence of top-level blocks (paragraphs,
tables, images) extracted from rich-text markup. It is the contract between
the extraction stage and the primitive mapper, and it can be checkpointed
to JSON for debugging.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Alignment = Literal["left", "center", "right", "justify"]
ListType = Literal["ordered", "bullet"]
VerticalScript = Literal["super", "sub"]


# ---------------------------------------------------------------------------
# Inline formatting
# ---------------------------------------------------------------------------


class StyleSet(BaseModel):
    """Resolved inline style of a run. Unset fields are None."""

    model_config = ConfigDict(frozen=True)

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strike: Optional[bool] = None
    color: Optional[str] = None  # raw CSS value, normalized by the mapper
    background: Optional[str] = None
    font: Optional[str] = None
    size: Optional[str] = None
    vertical_script: Optional[VerticalScript] = None


class TextRun(BaseModel):
    """A span of text sharing one resolved style."""

    model_config = ConfigDict(frozen=True)

    text: str
    styles: StyleSet = Field(default_factory=StyleSet)


# ---------------------------------------------------------------------------
# Paragraphs and lists
# ---------------------------------------------------------------------------


class ListMetadata(BaseModel):
    """Membership of a paragraph in one contiguous numbered/bulleted run."""

    list_type: ListType
    indent_level: int = Field(default=0, ge=0)
    reference_id: str
    start_value: Optional[int] = Field(default=None, ge=1)


class ParagraphBlock(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    runs: list[TextRun] = Field(default_factory=list)
    alignment: Optional[Alignment] = None
    heading_level: Optional[int] = Field(default=None, ge=1, le=6)
    list_metadata: Optional[ListMetadata] = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class TableCellBlock(BaseModel):
    blocks: list[ParagraphBlock] = Field(default_factory=list)
    colspan: Optional[int] = Field(default=None, ge=1)
    rowspan: Optional[int] = Field(default=None, ge=1)


class TableRowBlock(BaseModel):
    cells: list[TableCellBlock] = Field(default_factory=list)


class TableBlock(BaseModel):
    type: Literal["table"] = "table"
    rows: list[TableRowBlock] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    source: str = ""  # data URI, remote URL or local path, unmodified
    alt_text: Optional[str] = None
    width: Optional[int] = Field(default=None, ge=1)
    height: Optional[int] = Field(default=None, ge=1)
    alignment: Optional[Alignment] = None


# The top-level discriminated union of all block types
Block = Annotated[
    Union[ParagraphBlock, TableBlock, ImageBlock],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Top-level document model
# ---------------------------------------------------------------------------


class DocumentModel(BaseModel):
    """The normalized representation of one rendered document."""

    blocks: list[Block] = Field(default_factory=list)

    def list_metadata(self) -> list[ListMetadata]:
        """All list annotations, including those in table cells, in document order."""
        metadata = []
        for block in self.blocks:
            if isinstance(block, ParagraphBlock):
                paragraphs = [block]
            elif isinstance(block, TableBlock):
                paragraphs = [p for row in block.rows for cell in row.cells for p in cell.blocks]
            else:
                continue
            metadata.extend(p.list_metadata for p in paragraphs if p.list_metadata is not None)
        return metadata

    def images(self) -> list[ImageBlock]:
        return [block for block in self.blocks if isinstance(block, ImageBlock)]

    def to_json(self, **kwargs) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(indent=2, exclude_none=True, **kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> DocumentModel:
        """Deserialize from JSON string."""
        return cls.model_validate_json(json_str)
