from __future__ import annotations
import io
import zipfile
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from docx.document import Document as DocxDocument
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, Inches

# Fixed zip entry time: python-docx stamps every part with "now"
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

STYLE_WELL_SPACED = "Well Spaced"
STYLE_TABLE_HEADER = "Table Header"
STYLE_TABLE_CELL = "Table Cell"
STYLE_ITALIC_NOTE = "Italic Note"

HEADER_FILL = "F2F2F2"


def ensure_styles(doc: DocxDocument) -> None:
    """Register the paragraph styles used by the RFP templates (idempotent)."""
    styles = doc.styles
    existing = {s.name for s in styles}

    def _add(name: str, *, bold: bool = False, italic: bool = False, size: int = 12):
        if name in existing:
            return styles[name]
        st = styles.add_style(name, WD_STYLE_TYPE.PARAGRAPH)
        st.base_style = styles["Normal"]
        st.next_paragraph_style = styles["Normal"]
        st.font.size = Pt(size)
        st.font.bold = bold
        st.font.italic = italic
        return st

    ws = _add(STYLE_WELL_SPACED)
    ws.paragraph_format.line_spacing = 1.5
    ws.paragraph_format.space_before = Pt(12)
    ws.paragraph_format.space_after = Pt(12)
    _add(STYLE_TABLE_HEADER, bold=True)
    th = styles[STYLE_TABLE_HEADER]
    th.paragraph_format.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add(STYLE_TABLE_CELL)
    _add(STYLE_ITALIC_NOTE, italic=True)


def set_margins(doc: DocxDocument, inches: float = 1.0) -> None:
    for section in doc.sections:
        section.top_margin = section.bottom_margin = Inches(inches)
        section.left_margin = section.right_margin = Inches(inches)


def shade_cell(cell, fill: str) -> None:
    tcPr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd"); shd.set(qn("w:val"), "clear"); shd.set(qn("w:color"), "auto"); shd.set(qn("w:fill"), fill)
    tcPr.append(shd)


def set_cell_width_pct(cell, pct: int) -> None:
    # OOXML percentages are in fiftieths of a percent
    tcW = cell._tc.get_or_add_tcPr().get_or_add_tcW()
    tcW.set(qn("w:w"), str(pct * 50)); tcW.set(qn("w:type"), "pct")


# Elements that must follow tblW / tblBorders inside w:tblPr
_AFTER_TBLW = ("w:jc", "w:tblCellSpacing", "w:tblInd", "w:tblBorders", "w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook")
_AFTER_TBLBORDERS = ("w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook")


def set_table_full_width(table) -> None:
    tblPr = table._tbl.tblPr
    for old in tblPr.findall(qn("w:tblW")):
        tblPr.remove(old)
    tblW = OxmlElement("w:tblW"); tblW.set(qn("w:w"), "5000"); tblW.set(qn("w:type"), "pct")
    tblPr.insert_element_before(tblW, *_AFTER_TBLW)


def set_table_borders(table, size: int = 4, color: str = "000000") -> None:
    tblPr = table._tbl.tblPr
    tblBorders = OxmlElement("w:tblBorders")
    for b in ("top", "left", "bottom", "right", "insideH", "insideV"):
        el = OxmlElement(f"w:{b}")
        el.set(qn("w:val"), "single"); el.set(qn("w:sz"), str(size)); el.set(qn("w:space"), "0"); el.set(qn("w:color"), color)
        tblBorders.append(el)
    tblPr.insert_element_before(tblBorders, *_AFTER_TBLBORDERS)


def mark_header_row(row) -> None:
    """Repeat this row at the top of every page the table spans."""
    trPr = row._tr.get_or_add_trPr()
    tblHeader = OxmlElement("w:tblHeader"); tblHeader.set(qn("w:val"), "true")
    trPr.append(tblHeader)


def fill_cell(cell, lines: Sequence[str], style: Optional[str] = None, align=None) -> None:
    """Write one paragraph per line into a table cell, reusing the cell's empty first paragraph."""
    lines = list(lines) or [""]
    first = cell.paragraphs[0]
    first.text = lines[0]
    paragraphs = [first]
    for ln in lines[1:]:
        paragraphs.append(cell.add_paragraph(ln))
    for p in paragraphs:
        if style:
            p.style = style
        if align is not None:
            p.alignment = align


def add_field(paragraph, instr: str, placeholder: str = "") -> None:
    """
    Append a complex field (PAGE, TOC, ...) to a paragraph.
    Word computes the value on open or on F9; `placeholder` is shown until then.
    """
    def _fld(kind: str):
        fc = OxmlElement("w:fldChar"); fc.set(qn("w:fldCharType"), kind)
        r = OxmlElement("w:r"); r.append(fc)
        return r

    instr_run = OxmlElement("w:r")
    it = OxmlElement("w:instrText"); it.set(qn("xml:space"), "preserve"); it.text = f" {instr} "
    instr_run.append(it)

    p = paragraph._p
    p.append(_fld("begin"))
    p.append(instr_run)
    p.append(_fld("separate"))
    if placeholder:
        r = OxmlElement("w:r"); t = OxmlElement("w:t"); t.text = placeholder; r.append(t)
        p.append(r)
    p.append(_fld("end"))


def add_table_of_contents(doc: DocxDocument, levels: str = "1-3") -> None:
    p = doc.add_paragraph()
    add_field(p, f'TOC \\o "{levels}" \\h \\z \\u', "Right-click and choose Update Field to build the table of contents.")
    update_fields_on_open(doc)


def update_fields_on_open(doc: DocxDocument) -> None:
    settings = doc.settings.element
    if settings.find(qn("w:updateFields")) is None:
        uf = OxmlElement("w:updateFields"); uf.set(qn("w:val"), "true")
        settings.append(uf)


def set_header_footer(doc: DocxDocument, header_text: str, font_size: int = 9) -> None:
    for section in doc.sections:
        hp = section.header.paragraphs[0]
        hp.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        r = hp.add_run(header_text); r.font.size = Pt(font_size)

        fp = section.footer.paragraphs[0]
        fp.alignment = WD_ALIGN_PARAGRAPH.CENTER
        add_field(fp, "PAGE", "1")


def add_labelled_paragraph(doc: DocxDocument, label: str, text: str, *, indent: Optional[float] = None, style: Optional[str] = None):
    """'a) ' in bold followed by the clause text; label may be empty."""
    p = doc.add_paragraph(style=style)
    if label:
        p.add_run(f"{label} ").bold = True
    p.add_run(text)
    if indent:
        p.paragraph_format.left_indent = Inches(indent)
    return p


def add_lines(doc: DocxDocument, lines: Iterable[str], *, style: Optional[str] = None, indent: Optional[float] = None) -> List:
    out = []
    for ln in lines:
        p = doc.add_paragraph(ln, style=style)
        if indent:
            p.paragraph_format.left_indent = Inches(indent)
        out.append(p)
    return out


def pin_core_properties(doc: DocxDocument, *, title: str, subject: str, author: str, when: datetime) -> None:
    cp = doc.core_properties
    cp.title = title
    cp.subject = subject
    cp.author = author
    cp.last_modified_by = author
    cp.revision = 1
    cp.created = when
    cp.modified = when
    cp.last_printed = when


def docx_bytes(doc: DocxDocument) -> bytes:
    """
    Serialise to bytes with every zip entry stamped with the same fixed time,
    so the same document content always yields the same bytes.
    """
    raw = io.BytesIO()
    doc.save(raw)
    raw.seek(0)
    out = io.BytesIO()
    with zipfile.ZipFile(raw) as src, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for info in src.infolist():
            zi = zipfile.ZipInfo(info.filename, date_time=_ZIP_EPOCH)
            zi.compress_type = zipfile.ZIP_DEFLATED
            zi.external_attr = 0o644 << 16
            dst.writestr(zi, src.read(info.filename))
    return out.getvalue()
