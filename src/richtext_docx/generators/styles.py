"""Word style, numbering and run-property helpers.

Numbering definitions are written as one ``w:abstractNum`` plus one
``w:num`` per list reference, so each contiguous list run restarts its own
numbering.
"""

from __future__ import annotations

from docx.document import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from richtext_docx.config import StyleConfig
from richtext_docx.generators.primitives import NumberingDefinition


def heading_style_name(config: StyleConfig, level: int) -> str:
    """Return the Word style name for a heading level (e.g. 'Heading 1')."""
    return f"{config.heading_prefix} {level}"


def add_numbering_definitions(
    doc: Document, definitions: list[NumberingDefinition], config: StyleConfig
) -> dict[str, int]:
    """Write numbering definitions into the document's numbering part.

    Ids are allocated after any definitions the template already carries.

    Returns:
        The concrete ``numId`` for each reference.
    """
    numbering_elem = doc.part.numbering_part._element
    existing = [int(v) for v in numbering_elem.xpath("./w:abstractNum/@w:abstractNumId")]
    next_abstract_id = max(existing, default=-1) + 1

    num_ids = {}
    for definition in definitions:
        abstract_num = _build_abstract_num(next_abstract_id, definition, config)
        # abstractNum elements must precede every w:num
        first_num = numbering_elem.find(qn("w:num"))
        if first_num is not None:
            first_num.addprevious(abstract_num)
        else:
            numbering_elem.append(abstract_num)

        num = numbering_elem.add_num(next_abstract_id)
        num_ids[definition.reference] = num.numId
        next_abstract_id += 1
    return num_ids


def _build_abstract_num(abstract_num_id: int, definition: NumberingDefinition, config: StyleConfig):
    abstract_num = OxmlElement("w:abstractNum")
    abstract_num.set(qn("w:abstractNumId"), str(abstract_num_id))

    multi_level = OxmlElement("w:multiLevelType")
    multi_level.set(qn("w:val"), "hybridMultilevel")
    abstract_num.append(multi_level)

    for level in definition.levels:
        lvl = OxmlElement("w:lvl")
        lvl.set(qn("w:ilvl"), str(level.level))

        if level.start is not None:
            start = OxmlElement("w:start")
            start.set(qn("w:val"), str(level.start))
            lvl.append(start)

        num_fmt = OxmlElement("w:numFmt")
        num_fmt.set(qn("w:val"), level.format)
        lvl.append(num_fmt)

        lvl_text = OxmlElement("w:lvlText")
        lvl_text.set(qn("w:val"), level.text)
        lvl.append(lvl_text)

        lvl_jc = OxmlElement("w:lvlJc")
        lvl_jc.set(qn("w:val"), "left")
        lvl.append(lvl_jc)

        ppr = OxmlElement("w:pPr")
        ind = OxmlElement("w:ind")
        ind.set(qn("w:left"), str(config.list_indent_twips * (level.level + 1)))
        ind.set(qn("w:hanging"), str(config.list_hanging_twips))
        ppr.append(ind)
        lvl.append(ppr)

        abstract_num.append(lvl)
    return abstract_num


def apply_list_numbering(paragraph, num_id: int, level: int) -> None:
    """Attach ``<w:numPr>`` to a paragraph so it renders as a list item."""
    num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
    num_pr.get_or_add_ilvl().val = level
    num_pr.get_or_add_numId().val = num_id


def apply_shading(run, fill: str) -> None:
    """Apply a background fill colour (RRGGBB) to a run via ``<w:shd>``."""
    rPr = run._element.get_or_add_rPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    rPr.append(shd)


def doc_style_or_fallback(
    doc: Document, style_name: str, fallback: str = "Normal"
) -> str:
    """Return style_name if it exists in doc, otherwise fallback."""
    try:
        doc.styles[style_name]
        return style_name
    except KeyError:
        return fallback
