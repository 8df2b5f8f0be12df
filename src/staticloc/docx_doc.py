"""DOCX documents as a text-node host.

Every paragraph made only of simple runs becomes one text node, addressed by a stable
location such as ``body/t0/r1/c2/p0``. Run properties are read into the eight style
facets; on commit the paragraph's runs are rebuilt from the node's style runs, starting
from the original ``<w:rPr>`` of a matching run so properties outside the facets
(language, caps, vertical alignment) survive.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

from docx import Document
from docx.enum.text import WD_COLOR_INDEX
from docx.oxml import OxmlElement, parse_xml
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor
from docx.table import Table, _Cell
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from .models import FontName, LetterSpacing, LineHeight, Paint, Style
from .styled_text import StyledTextNode

_logger = logging.getLogger(__name__)

AUTO_COLOR = "auto"

# Simple run children; anything else (drawings, fields, footnote refs) makes the paragraph unsupported.
_ALLOWED_RUN_CHILDREN = {"rPr", "t", "tab", "br", "cr", "noBreakHyphen", "softHyphen", "lastRenderedPageBreak"}
_ALLOWED_PARAGRAPH_EXTRAS = {"bookmarkstart", "bookmarkend", "prooferr"}
# Page and column breaks read as empty text and would be lost on rebuild.
_TEXT_BREAK_TYPES = {None, "textWrapping"}

# CT_RPr children that must come after <w:spacing>.
_SPACING_SUCCESSORS = (
    "w:w", "w:kern", "w:position", "w:sz", "w:szCs", "w:highlight", "w:u", "w:effect",
    "w:bdr", "w:shd", "w:fitText", "w:vertAlign", "w:rtl", "w:cs", "w:em", "w:lang",
    "w:eastAsianLayout", "w:specVanish", "w:oMath",
)


def is_supported_paragraph(paragraph: Paragraph) -> bool:
    """True if the paragraph holds only runs (plus harmless markers) with plain text content."""
    for child in paragraph._p.iterchildren():
        tag = child.tag.lower()
        if tag.endswith("}ppr"):
            continue
        local = tag.split("}")[-1]
        if local in _ALLOWED_PARAGRAPH_EXTRAS:
            continue
        if local != "r":
            return False
    for run in paragraph.runs:
        for child in run._r.iterchildren():
            local = child.tag.split("}")[-1]
            if local not in _ALLOWED_RUN_CHILDREN:
                return False
            if local == "br" and child.get(qn("w:type")) not in _TEXT_BREAK_TYPES:
                return False
    return True


# --- reading -------------------------------------------------------------------------


def _font_style_name(bold: bool, italic: bool) -> str:
    if bold and italic:
        return "Bold Italic"
    if bold:
        return "Bold"
    if italic:
        return "Italic"
    return "Regular"


def _run_spacing_pt(run: Run) -> float:
    rpr = run._r.rPr
    if rpr is None:
        return 0.0
    spacing = rpr.find(qn("w:spacing"))
    if spacing is None or spacing.get(qn("w:val")) is None:
        return 0.0
    return int(spacing.get(qn("w:val"))) / 20.0


def _paragraph_line_height(paragraph: Paragraph) -> LineHeight:
    spacing = paragraph.paragraph_format.line_spacing
    if spacing is None:
        return LineHeight()
    if hasattr(spacing, "pt"):
        return LineHeight(float(spacing.pt), "POINTS")
    return LineHeight(round(float(spacing) * 100, 2), "PERCENT")


def _run_text_style_id(run: Run) -> str:
    rstyle = run._r.rPr.rStyle if run._r.rPr is not None else None
    return str(rstyle.val) if rstyle is not None and rstyle.val else ""


def style_from_run(run: Run, line_height: LineHeight) -> Style:
    font = run.font
    color = AUTO_COLOR
    if font.color is not None and font.color.type is not None and font.color.rgb is not None:
        color = str(font.color.rgb)
    highlight = font.highlight_color
    if run.underline:
        decoration = "UNDERLINE"
    elif font.strike:
        decoration = "STRIKETHROUGH"
    else:
        decoration = "NONE"
    return Style(
        fills=(Paint(color=color),),
        fill_style_id=highlight.name if highlight is not None else "",
        font_name=FontName(font.name or "", _font_style_name(bool(run.bold), bool(run.italic))),
        font_size=float(font.size.pt) if font.size is not None else 0.0,
        letter_spacing=LetterSpacing(_run_spacing_pt(run), "POINTS"),
        line_height=line_height,
        text_decoration=decoration,
        text_style_id=_run_text_style_id(run),
    )


# --- writing -------------------------------------------------------------------------


def _set_run_spacing(run: Run, points: float) -> None:
    rpr = run._r.get_or_add_rPr()
    spacing = rpr.find(qn("w:spacing"))
    twips = int(round(points * 20))
    if twips == 0:
        if spacing is not None:
            rpr.remove(spacing)
        return
    if spacing is None:
        spacing = OxmlElement("w:spacing")
        rpr.insert_element_before(spacing, *_SPACING_SUCCESSORS)
    spacing.set(qn("w:val"), str(twips))


def _apply_rpr_xml(run: Run, rpr_xml: str) -> None:
    r = run._r
    old = r.find(qn("w:rPr"))
    if old is not None:
        r.remove(old)
    r.insert(0, parse_xml(rpr_xml))


def apply_style_to_run(run: Run, style: Style, current: Style | None = None) -> None:
    """Write the style facets onto the run.

    `current` is what the run already encodes (usually its restored ``<w:rPr>``
    template); facets equal to it are left alone so finer values such as a double
    underline or an explicit ``<w:b w:val="0"/>`` are kept.
    """
    font = run.font

    def differs(get) -> bool:
        return current is None or get(style) != get(current)

    if differs(lambda s: s.text_style_id):
        if style.text_style_id:
            run._r.style = style.text_style_id
        elif run._r.rPr is not None:
            run._r.rPr._remove_rStyle()

    if differs(lambda s: s.fills):
        color = style.fills[0].color if style.fills else AUTO_COLOR
        if color == AUTO_COLOR:
            if font.color.type is not None:
                font.color.rgb = None
        else:
            font.color.rgb = RGBColor.from_string(color)

    if differs(lambda s: s.fill_style_id):
        font.highlight_color = WD_COLOR_INDEX[style.fill_style_id] if style.fill_style_id else None
    if differs(lambda s: s.font_name.family):
        font.name = style.font_name.family or None
    if differs(lambda s: s.font_name.style):
        run.bold = True if "Bold" in style.font_name.style else None
        run.italic = True if "Italic" in style.font_name.style else None
    if differs(lambda s: s.font_size):
        font.size = Pt(style.font_size) if style.font_size else None
    if differs(lambda s: s.letter_spacing):
        _set_run_spacing(run, style.letter_spacing.value)
    if differs(lambda s: s.text_decoration):
        run.underline = True if style.text_decoration == "UNDERLINE" else None
        font.strike = True if style.text_decoration == "STRIKETHROUGH" else None


def _apply_line_height(paragraph: Paragraph, line_height: LineHeight) -> None:
    if line_height == _paragraph_line_height(paragraph):
        return
    fmt = paragraph.paragraph_format
    if line_height.unit == "POINTS" and line_height.value is not None:
        fmt.line_spacing = Pt(line_height.value)
    elif line_height.unit == "PERCENT" and line_height.value is not None:
        fmt.line_spacing = line_height.value / 100.0
    else:
        fmt.line_spacing = None


def _clear_paragraph_runs(paragraph: Paragraph) -> None:
    for run in list(paragraph.runs):
        run._element.getparent().remove(run._element)


# --- traversal -----------------------------------------------------------------------


def _parent_element(parent: Any):
    if isinstance(parent, _Cell):
        return parent._tc
    # Document / Header / Footer
    return parent._element.body if hasattr(parent._element, "body") else parent._element


def iter_block_items(parent: Any) -> Iterator[Paragraph | Table]:
    """Paragraphs and tables of a Document, _Cell, Header or Footer in document order."""
    for child in _parent_element(parent).iterchildren():
        tag = child.tag.lower()
        if tag.endswith("}p"):
            yield Paragraph(child, parent)
        elif tag.endswith("}tbl"):
            yield Table(child, parent)


def iter_paragraphs(parent: Any, base_loc: str) -> Iterator[tuple[str, Paragraph]]:
    """(location, paragraph) pairs, descending into tables and text boxes."""
    p_i = 0
    t_i = 0
    for item in iter_block_items(parent):
        if isinstance(item, Paragraph):
            yield f"{base_loc}/p{p_i}", item
            p_i += 1
        else:
            yield from _iter_table(item, f"{base_loc}/t{t_i}")
            t_i += 1
    if not isinstance(parent, _Cell):
        yield from _iter_textboxes(parent, base_loc)


def _iter_table(table: Table, base_loc: str) -> Iterator[tuple[str, Paragraph]]:
    seen: set[Any] = set()
    for r_i, row in enumerate(table.rows):
        for c_i, cell in enumerate(row.cells):
            # Merged cells are reported once per spanned grid column.
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            yield from iter_paragraphs(cell, f"{base_loc}/r{r_i}/c{c_i}")


def _iter_textboxes(container: Any, base_loc: str) -> Iterator[tuple[str, Paragraph]]:
    for txbx_i, content in enumerate(
        node for node in _parent_element(container).iter() if node.tag.lower().endswith("}txbxcontent")
    ):
        p_i = 0
        for child in content.iterchildren():
            if str(getattr(child, "tag", "")).lower().endswith("}p"):
                yield f"{base_loc}/textbox{txbx_i}/p{p_i}", Paragraph(child, container)
                p_i += 1


def _selected(location: str, selection: Sequence[str]) -> bool:
    if not selection:
        return True
    return any(location == prefix or location.startswith(prefix.rstrip("/") + "/") for prefix in selection)


class DocxDocument:
    def __init__(self, doc: Any, *, include_headers: bool = False, include_footers: bool = False) -> None:
        self.doc = doc
        self.text_nodes: list[StyledTextNode] = []
        self._rpr_templates: dict[str, dict[Style, str]] = {}
        self.unsupported: list[str] = []

        parts: list[tuple[Any, str]] = [(doc, "body")]
        for s_i, section in enumerate(doc.sections):
            if include_headers:
                parts.append((section.header, f"header{s_i}"))
            if include_footers:
                parts.append((section.footer, f"footer{s_i}"))
        for container, base_loc in parts:
            for location, paragraph in iter_paragraphs(container, base_loc):
                self._add_paragraph(location, paragraph)

    def _add_paragraph(self, location: str, paragraph: Paragraph) -> None:
        if not (paragraph.text or "").strip():
            return
        if not is_supported_paragraph(paragraph):
            self.unsupported.append(location)
            _logger.warning("Skipping paragraph with complex structure at %s", location)
            return
        line_height = _paragraph_line_height(paragraph)
        runs: list[tuple[str, Style]] = []
        templates: dict[Style, str] = {}
        for run in paragraph.runs:
            text = run.text
            if not text:
                continue
            style = style_from_run(run, line_height)
            runs.append((text, style))
            if run._r.rPr is not None:
                templates.setdefault(style, run._r.rPr.xml)
        self._rpr_templates[location] = templates
        self.text_nodes.append(StyledTextNode(location, runs, ref=paragraph))

    def find_text_nodes(self, selection: Sequence[str] = ()) -> list[StyledTextNode]:
        """Text nodes whose location equals or lies under one of the selected locations."""
        return [node for node in self.text_nodes if _selected(node.node_id, selection)]

    def commit(self) -> int:
        """Rebuild the runs of every changed paragraph."""
        written = 0
        for node in self.text_nodes:
            if not node.changed:
                continue
            paragraph: Paragraph = node.ref
            templates = self._rpr_templates.get(node.node_id, {})
            fallback = next(iter(templates.values()), None)
            runs = node.runs()
            _clear_paragraph_runs(paragraph)
            for text, style in runs:
                run = paragraph.add_run(text)
                template = templates.get(style, fallback)
                current = None
                if template is not None:
                    _apply_rpr_xml(run, template)
                    current = style_from_run(run, style.line_height)
                apply_style_to_run(run, style, current)
            if runs:
                _apply_line_height(paragraph, runs[0][1].line_height)
            node.changed = False
            written += 1
        return written

    def save(self, path: Path) -> None:
        self.commit()
        path.parent.mkdir(parents=True, exist_ok=True)
        self.doc.save(str(path))


def load_docx_document(path: Path, *, include_headers: bool = False, include_footers: bool = False) -> DocxDocument:
    return DocxDocument(Document(str(path)), include_headers=include_headers, include_footers=include_footers)
