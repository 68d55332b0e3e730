"""Tests for markup -> DocumentModel extraction."""

from richtext_docx.config import Config
from richtext_docx.extract import extract_document
from richtext_docx.ir import ImageBlock, ParagraphBlock, StyleSet, TableBlock
from richtext_docx.parsers import NodeKind, parse_markup


def _paragraphs(html: str) -> list[ParagraphBlock]:
    return [b for b in extract_document(html).blocks if isinstance(b, ParagraphBlock)]


class TestMarkupTree:
    def test_fragment_root(self):
        root = parse_markup("<p>a</p><p>b</p>")
        assert [c.tag for c in root.children] == ["p", "p"]

    def test_document_uses_body(self):
        root = parse_markup("<html><head><title>T</title></head><body><h1>x</h1></body></html>")
        assert [c.kind for c in root.children] == [NodeKind.HEADING]

    def test_node_kinds(self):
        root = parse_markup("<ul><li>a</li></ul><table></table><img src='x'>text")
        assert [c.kind for c in root.children] == [
            NodeKind.LIST, NodeKind.TABLE, NodeKind.IMAGE, NodeKind.TEXT,
        ]

    def test_classes(self):
        node = parse_markup('<p class="a ql-align-center">x</p>').children[0]
        assert node.classes == ["a", "ql-align-center"]


class TestParagraphs:
    def test_paragraphs_in_order(self):
        assert [p.text for p in _paragraphs("<p>one</p><p>two</p><p>three</p>")] == ["one", "two", "three"]

    def test_heading_level_and_alignment(self):
        (heading,) = _paragraphs('<h2 class="ql-align-center">Title</h2>')
        assert heading.heading_level == 2
        assert heading.alignment == "center"
        assert heading.list_metadata is None

    def test_styled_runs(self):
        (paragraph,) = _paragraphs("<p>plain <strong>bold</strong></p>")
        assert paragraph.runs[1].styles == StyleSet(bold=True)

    def test_bare_text_becomes_paragraph(self):
        assert [p.text for p in _paragraphs("hello<p>world</p>")] == ["hello", "world"]

    def test_wrapper_elements_are_flattened(self):
        blocks = _paragraphs("<div><p>a</p><div><p>b</p></div></div>")
        assert [p.text for p in blocks] == ["a", "b"]

    def test_line_break_becomes_break_run(self):
        (paragraph,) = _paragraphs("<p>line1<br>line2</p>")
        assert [r.text for r in paragraph.runs] == ["line1", "\n", "line2"]
        assert paragraph.text == "line1\nline2"

    def test_trailing_line_break_dropped(self):
        (paragraph,) = _paragraphs("<p><b>x</b><br></p>")
        assert paragraph.text == "x"

    def test_break_only_paragraph_dropped(self):
        assert [p.text for p in _paragraphs("<p><br></p><p>x</p>")] == ["x"]

    def test_empty_elements_are_dropped(self):
        assert _paragraphs("<p></p><p>   </p><p>x</p>")[0].text == "x"

    def test_empty_markup(self):
        assert extract_document("").blocks == []

    def test_missing_tree_builder_yields_empty_model(self):
        cfg = Config.default()
        cfg.markup.features = "no-such-tree-builder"
        assert extract_document("<p>x</p>", cfg).blocks == []


class TestLists:
    def test_annotated_items_share_reference(self):
        a, b = _paragraphs('<ol><li data-list="ordered">a</li><li data-list="ordered">b</li></ol>')
        assert a.list_metadata.reference_id == b.list_metadata.reference_id
        assert a.list_metadata.list_type == "ordered"
        assert a.list_metadata.start_value == 1
        assert b.list_metadata.start_value is None

    def test_annotation_wins_over_container(self):
        (item,) = _paragraphs('<ol><li data-list="bullet">a</li></ol>')
        assert item.list_metadata.list_type == "bullet"
        assert item.list_metadata.reference_id == "bullet-0"

    def test_container_decides_unannotated_items(self):
        ordered, bullet = _paragraphs("<ol><li>a</li></ol><ul><li>b</li></ul>")
        assert ordered.list_metadata.list_type == "ordered"
        assert bullet.list_metadata.list_type == "bullet"
        assert bullet.list_metadata.indent_level == 0

    def test_indent_change_is_new_run(self):
        a, b = _paragraphs(
            '<ol><li data-list="ordered">a</li><li data-list="ordered" data-indent="1">b</li></ol>'
        )
        assert b.list_metadata.indent_level == 1
        assert a.list_metadata.reference_id != b.list_metadata.reference_id

    def test_interruption_is_never_resumed(self):
        blocks = _paragraphs(
            '<ul><li data-list="bullet">a</li></ul><p>break</p><ul><li data-list="bullet">b</li></ul>'
        )
        first, middle, last = blocks
        assert middle.list_metadata is None
        assert first.list_metadata.reference_id != last.list_metadata.reference_id
        assert last.list_metadata.start_value == 1

    def test_separate_containers_are_separate_runs(self):
        a, b = _paragraphs("<ol><li>a</li></ol><ol><li>b</li></ol>")
        assert a.list_metadata.reference_id != b.list_metadata.reference_id

    def test_indent_class(self):
        (item,) = _paragraphs('<ol><li data-list="bullet" class="ql-indent-2">a</li></ol>')
        assert item.list_metadata.indent_level == 2

    def test_indent_above_word_limit_is_clamped(self):
        (item,) = _paragraphs('<ol><li data-list="ordered" data-indent="12">a</li></ol>')
        assert item.list_metadata.indent_level == 8

    def test_indent_class_above_limit_is_clamped(self):
        (item,) = _paragraphs('<ul><li data-list="bullet" class="ql-indent-9">a</li></ul>')
        assert item.list_metadata.indent_level == 8

    def test_invalid_indent_is_zero(self):
        a, b = _paragraphs(
            '<ul><li data-list="bullet" data-indent="abc">a</li>'
            '<li data-list="bullet" data-indent="-1">b</li></ul>'
        )
        assert a.list_metadata.indent_level == 0
        assert b.list_metadata.indent_level == 0

    def test_list_item_keeps_formatting(self):
        (item,) = _paragraphs('<ul><li data-list="bullet"><em>x</em></li></ul>')
        assert item.runs[0].styles.italic is True

    def test_reference_ids_are_deterministic(self):
        html = '<ol><li data-list="ordered">a</li></ol><p>x</p><ol><li data-list="ordered">b</li></ol>'
        first = [m.reference_id for m in extract_document(html).list_metadata()]
        second = [m.reference_id for m in extract_document(html).list_metadata()]
        assert first == second == ["decimal-0", "decimal-1"]


class TestTables:
    def test_two_by_two(self):
        (table,) = extract_document(
            "<table><tr><td>A</td><td>B</td></tr><tr><td>C</td><td>D</td></tr></table>"
        ).blocks
        assert isinstance(table, TableBlock)
        assert [[c.blocks[0].text for c in row.cells] for row in table.rows] == [["A", "B"], ["C", "D"]]

    def test_sections_and_header_cells(self):
        (table,) = extract_document(
            "<table><thead><tr><th>H</th></tr></thead><tbody><tr><td>b</td></tr></tbody></table>"
        ).blocks
        assert len(table.rows) == 2
        assert table.rows[0].cells[0].blocks[0].text == "H"

    def test_empty_cell_has_one_empty_paragraph(self):
        (table,) = extract_document("<table><tr><td></td><td>x</td></tr></table>").blocks
        empty = table.rows[0].cells[0]
        assert len(empty.blocks) == 1
        assert empty.blocks[0].runs == []

    def test_cell_inline_content_is_one_paragraph(self):
        (table,) = extract_document("<table><tr><td><b>Total</b> due</td></tr></table>").blocks
        cell = table.rows[0].cells[0]
        assert [p.text for p in cell.blocks] == ["Total due"]
        assert cell.blocks[0].runs[0].styles.bold is True

    def test_cell_with_paragraphs(self):
        (table,) = extract_document("<table><tr><td><p>a</p><p>b</p></td></tr></table>").blocks
        assert [p.text for p in table.rows[0].cells[0].blocks] == ["a", "b"]

    def test_spans(self):
        (table,) = extract_document(
            '<table><tr><td colspan="2" rowspan="x">A</td><td colspan="0">B</td></tr></table>'
        ).blocks
        first, second = table.rows[0].cells
        assert first.colspan == 2
        assert first.rowspan is None
        assert second.colspan is None

    def test_nested_table_rows_stay_nested(self):
        (table,) = extract_document(
            "<table><tr><td><table><tr><td>inner</td></tr></table></td></tr></table>"
        ).blocks
        assert len(table.rows) == 1

    def test_list_in_cell_keeps_metadata(self):
        (table,) = extract_document(
            '<table><tr><td><ol><li data-list="ordered">a</li>'
            '<li data-list="ordered">b</li></ol></td></tr></table>'
        ).blocks
        a, b = table.rows[0].cells[0].blocks
        assert a.list_metadata.list_type == "ordered"
        assert a.list_metadata.reference_id == b.list_metadata.reference_id
        assert a.list_metadata.start_value == 1
        assert b.list_metadata.start_value is None

    def test_cell_boundary_ends_list_run(self):
        (table,) = extract_document(
            "<table><tr><td><ul><li>a</li></ul></td><td><ul><li>b</li></ul></td></tr></table>"
        ).blocks
        a, b = (cell.blocks[0].list_metadata for cell in table.rows[0].cells)
        assert a.reference_id != b.reference_id

    def test_text_in_cell_ends_list_run(self):
        (table,) = extract_document(
            "<table><tr><td><ol><li>a</li></ol><p>note</p><ol><li>b</li></ol></td></tr></table>"
        ).blocks
        a, note, b = table.rows[0].cells[0].blocks
        assert note.list_metadata is None
        assert a.list_metadata.reference_id != b.list_metadata.reference_id

    def test_cell_lists_share_export_ids(self):
        html = (
            "<ol><li>top</li></ol>"
            "<table><tr><td><ol><li>cell</li></ol></td></tr></table>"
            "<ol><li>after</li></ol>"
        )
        refs = [m.reference_id for m in extract_document(html).list_metadata()]
        assert refs == ["decimal-0", "decimal-1", "decimal-2"]

    def test_table_ends_list_run(self):
        html = "<ul><li>a</li></ul><table><tr><td>x</td></tr></table><ul><li>b</li></ul>"
        a, b = extract_document(html).list_metadata()
        assert a.reference_id != b.reference_id


class TestImages:
    def test_image_attributes(self):
        (image,) = extract_document(
            '<img src="https://example.com/a.png" alt="Logo" width="100" height="50px">'
        ).blocks
        assert image == ImageBlock(
            source="https://example.com/a.png", alt_text="Logo", width=100, height=50
        )

    def test_alignment_from_parent(self):
        (image,) = extract_document('<p class="ql-align-center"><img src="a.png"></p>').blocks
        assert image.alignment == "center"

    def test_own_alignment_wins(self):
        (image,) = extract_document('<p align="right"><img src="a.png" style="text-align: left"></p>').blocks
        assert image.alignment == "left"

    def test_missing_or_invalid_dimensions(self):
        (image,) = extract_document('<img src="a.png" width="auto">').blocks
        assert image.width is None
        assert image.height is None

    def test_text_around_image_keeps_order(self):
        blocks = extract_document('<p>before<img src="a.png">after</p>').blocks
        assert [type(b) for b in blocks] == [ParagraphBlock, ImageBlock, ParagraphBlock]
        assert blocks[0].text == "before"
