"""Tests for document model Pydantic models: round-trip serialization and validation."""

import json

import pytest
from pydantic import ValidationError

from richtext_docx.ir import (
    DocumentModel,
    ImageBlock,
    ListMetadata,
    ParagraphBlock,
    StyleSet,
    TableBlock,
    TableCellBlock,
    TableRowBlock,
    TextRun,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sample_document() -> DocumentModel:
    """Build a realistic document model for testing."""
    return DocumentModel(
        blocks=[
            ParagraphBlock(
                heading_level=1,
                alignment="center",
                runs=[TextRun(text="Quarterly Report")],
            ),
            ParagraphBlock(
                runs=[
                    TextRun(text="Revenue grew "),
                    TextRun(text="12%", styles=StyleSet(bold=True, color="#c00")),
                    TextRun(text="."),
                ],
            ),
            ParagraphBlock(
                runs=[TextRun(text="First")],
                list_metadata=ListMetadata(
                    list_type="ordered", indent_level=0, reference_id="decimal-0", start_value=1
                ),
            ),
            ParagraphBlock(
                runs=[TextRun(text="Second")],
                list_metadata=ListMetadata(list_type="ordered", indent_level=0, reference_id="decimal-0"),
            ),
            TableBlock(
                rows=[
                    TableRowBlock(cells=[
                        TableCellBlock(blocks=[ParagraphBlock(runs=[TextRun(text="Region")])], colspan=2),
                    ]),
                    TableRowBlock(cells=[
                        TableCellBlock(blocks=[ParagraphBlock(runs=[TextRun(text="North")])]),
                        TableCellBlock(blocks=[ParagraphBlock()]),
                    ]),
                ],
            ),
            ImageBlock(source="https://example.com/chart.png", alt_text="Chart", width=320),
        ],
    )


# ---------------------------------------------------------------------------
# Round-trip
# ---------------------------------------------------------------------------

class TestRoundTrip:
    def test_json_round_trip(self):
        doc = _sample_document()
        restored = DocumentModel.from_json(doc.to_json())
        assert restored == doc

    def test_blocks_restore_to_their_types(self):
        restored = DocumentModel.from_json(_sample_document().to_json())
        kinds = [type(block) for block in restored.blocks]
        assert kinds == [ParagraphBlock, ParagraphBlock, ParagraphBlock, ParagraphBlock, TableBlock, ImageBlock]

    def test_json_omits_unset_fields(self):
        data = json.loads(_sample_document().to_json())
        first_run = data["blocks"][1]["runs"][0]
        assert first_run["styles"] == {}
        assert "list_metadata" not in data["blocks"][0]
        assert data["blocks"][0]["type"] == "paragraph"

    def test_empty_document(self):
        restored = DocumentModel.from_json(DocumentModel().to_json())
        assert restored.blocks == []


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    def test_unknown_block_type_rejected(self):
        with pytest.raises(ValidationError):
            DocumentModel.model_validate({"blocks": [{"type": "chart"}]})

    def test_heading_level_range(self):
        with pytest.raises(ValidationError):
            ParagraphBlock(heading_level=7)
        with pytest.raises(ValidationError):
            ParagraphBlock(heading_level=0)

    def test_negative_indent_rejected(self):
        with pytest.raises(ValidationError):
            ListMetadata(list_type="bullet", indent_level=-1, reference_id="bullet-0")

    def test_start_value_positive(self):
        with pytest.raises(ValidationError):
            ListMetadata(list_type="ordered", reference_id="decimal-0", start_value=0)

    def test_invalid_alignment_rejected(self):
        with pytest.raises(ValidationError):
            ParagraphBlock(alignment="middle")

    def test_style_set_is_immutable(self):
        styles = StyleSet(bold=True)
        with pytest.raises(ValidationError):
            styles.bold = False

    def test_style_set_equality_ignores_identity(self):
        assert StyleSet(bold=True) == StyleSet(bold=True)
        assert StyleSet() != StyleSet(italic=False)


# ---------------------------------------------------------------------------
# Helpers on the model
# ---------------------------------------------------------------------------

class TestModelHelpers:
    def test_paragraph_text(self):
        assert _sample_document().blocks[1].text == "Revenue grew 12%."

    def test_list_metadata_in_order(self):
        metadata = _sample_document().list_metadata()
        assert [m.reference_id for m in metadata] == ["decimal-0", "decimal-0"]
        assert [m.start_value for m in metadata] == [1, None]

    def test_list_metadata_includes_table_cells(self):
        item = ParagraphBlock(
            runs=[TextRun(text="in cell")],
            list_metadata=ListMetadata(list_type="bullet", reference_id="bullet-0", start_value=1),
        )
        doc = DocumentModel(blocks=[
            TableBlock(rows=[TableRowBlock(cells=[TableCellBlock(blocks=[item])])]),
            *_sample_document().blocks,
        ])
        assert [m.reference_id for m in doc.list_metadata()] == ["bullet-0", "decimal-0", "decimal-0"]

    def test_images(self):
        images = _sample_document().images()
        assert len(images) == 1
        assert images[0].alt_text == "Chart"
