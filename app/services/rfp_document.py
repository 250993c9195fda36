# app/services/rfp_document.py
"""
Builds the RFP .docx for the consultancy / maintenance / supply templates.

The "other" type is not generated: the user uploads a finished document and
it is handed back untouched.

Output is deterministic. Nothing here reads the clock, core properties are
derived from the form's month/year, and docx_bytes() re-packs the zip with
fixed entry times, so the same RfpFormData always yields the same bytes.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from app.config import (
    BANK_DETAILS,
    DOCUMENT_CREATOR,
    ORG_ADDRESS_LINES,
    ORG_CONTACT_LINES,
    ORG_NAME,
    ORG_SHORT,
    ORG_TENDER_PORTAL,
    ORG_WEBSITE,
)
from app.models.schemas import Deliverable, RfpFormData, RfpType, ScopeOfWork
from app.services import rfp_clauses as C
from app.services.fees import format_currency
from app.utils.doc_helpers import (
    HEADER_FILL,
    STYLE_ITALIC_NOTE,
    STYLE_TABLE_CELL,
    STYLE_TABLE_HEADER,
    STYLE_WELL_SPACED,
    add_labelled_paragraph,
    add_lines,
    add_table_of_contents,
    docx_bytes,
    ensure_styles,
    fill_cell,
    mark_header_row,
    pin_core_properties,
    set_cell_width_pct,
    set_header_footer,
    set_margins,
    set_table_borders,
    set_table_full_width,
    shade_cell,
)
from app.utils.text import split_lines
from app.utils.timeit import timeit

logger = logging.getLogger("rfp_document")

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DELIVERABLE_WIDTHS = (70, 30)
SCHEDULE_WIDTHS = (10, 30, 60)


class MissingCustomDocumentError(ValueError):
    """RFP type "other" was requested without an uploaded document."""


# -----------------------------
# Small formatting helpers
# -----------------------------
def format_date(d: Optional[date]) -> str:
    return d.strftime("%d/%m/%Y") if d else C.DATE_PLACEHOLDER


def _money(amount: int) -> str:
    return format_currency(amount) if amount > 0 else C.BLANK


def _document_timestamp(data: RfpFormData) -> datetime:
    # Core properties come from the form, never from "now"
    year = int(data.year) if data.year.strip().isdigit() else 2000
    if not 1900 <= year <= 9999:
        year = 2000
    month = MONTHS.index(data.month) + 1 if data.month in MONTHS else 1
    return datetime(year, month, 1)


def _context(data: RfpFormData, profile: C.TemplateProfile) -> Dict[str, Any]:
    if profile.rfp_type == RfpType.SUPPLY:
        title = (data.item_name or "").strip() or data.tender_title.strip()
    else:
        title = data.tender_title.strip()
    title = title or profile.subject_placeholder
    sow = data.scope_of_work or ScopeOfWork()

    ctx: Dict[str, Any] = {
        "org": ORG_SHORT,
        "org_name": ORG_NAME,
        "title": title,
        "provider": profile.provider,
        "department": data.department_name.strip() or C.BLANK,
        "duration": data.contract_duration,
        "extension_year": sow.extension_year.strip() or "1",
        "fee": _money(data.fees.tender_fee),
        "emd": _money(data.fees.emd),
    }
    ctx["engagement"] = profile.engagement.format(**ctx)
    return ctx


# -----------------------------
# Tables
# -----------------------------
def _styled_table(doc, headers: Sequence[str], widths: Sequence[int]):
    table = doc.add_table(rows=1, cols=len(headers))
    set_table_full_width(table)
    set_table_borders(table)
    hdr = table.rows[0]
    mark_header_row(hdr)
    for cell, text, w in zip(hdr.cells, headers, widths):
        fill_cell(cell, [text], style=STYLE_TABLE_HEADER)
        shade_cell(cell, HEADER_FILL)
        set_cell_width_pct(cell, w)
    return table


def _add_row(table, columns: Sequence[Sequence[str]], widths: Sequence[int]) -> None:
    cells = table.add_row().cells
    for cell, lines, w in zip(cells, columns, widths):
        fill_cell(cell, lines, style=STYLE_TABLE_CELL)
        set_cell_width_pct(cell, w)


def add_deliverables_table(doc, deliverables: List[Deliverable], timeline_placeholder: str) -> None:
    table = _styled_table(doc, ("Deliverables", "Timeline"), DELIVERABLE_WIDTHS)
    rows = deliverables or [Deliverable()]
    for d in rows:
        _add_row(
            table,
            [[d.description.strip() or C.TO_BE_DEFINED], [d.timeline.strip() or timeline_placeholder]],
            DELIVERABLE_WIDTHS,
        )


def _schedule_rows(data: RfpFormData) -> List[tuple[str, List[str]]]:
    s = data.schedule
    address = ", ".join(ORG_ADDRESS_LINES)
    return [
        ("Date of availability of RFP Document",
         [format_date(s.rfp_available_date), f"On {ORG_WEBSITE} and {ORG_TENDER_PORTAL}"]),
        ("Last date for receiving queries / clarifications",
         [format_date(s.query_deadline_date),
          f"Issuing Authority: {(s.issuing_authority or '').strip() or C.BLANK}",
          f"Email: {(s.contact_email or '').strip() or C.BLANK}",
          *ORG_CONTACT_LINES]),
        ("Pre-Bid Meeting",
         [format_date(s.pre_bid_meeting_date), f"At {ORG_NAME}, {address}"]),
        ("Last date for online submission of Price Bid",
         [format_date(s.price_bid_deadline_date), f"On {ORG_TENDER_PORTAL}"]),
        ("Last date for submission of Technical Bid in hard copy",
         [format_date(s.technical_bid_deadline_date), ORG_NAME, *ORG_ADDRESS_LINES]),
        ("Opening of Technical Bids",
         [format_date(s.technical_bid_opening_date), f"At {ORG_NAME}, {address}"]),
        ("Opening of Price Bids",
         ["To be indicated to later after completion of Technical Evaluation"]),
        ("Signing of Agreement",
         ["Within 30 days from the date of issuance of LOA."]),
    ]


def add_schedule_table(doc, data: RfpFormData) -> None:
    table = _styled_table(doc, C.SCHEDULE_HEADERS, SCHEDULE_WIDTHS)
    for i, (event, details) in enumerate(_schedule_rows(data), start=1):
        _add_row(table, [[str(i)], [event], details], SCHEDULE_WIDTHS)


# -----------------------------
# Sections
# -----------------------------
def add_cover_page(doc, data: RfpFormData, profile: C.TemplateProfile, ctx: Dict[str, Any]) -> None:
    def centered(text: str, size: int, bold: bool = True) -> None:
        p = doc.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        r = p.add_run(text)
        r.font.size = Pt(size)
        r.bold = bold

    for ln in profile.cover_lines:
        centered(ln, 20)
    centered(ctx["title"], 24)
    if profile.cover_shows_month:
        centered(f"{data.month} {data.year}".strip(), 14, bold=False)
    centered(f"RFP No: {data.rfp_number or C.BLANK}", 14)
    doc.add_paragraph()
    centered(ORG_NAME, 16)
    for ln in ORG_ADDRESS_LINES:
        centered(ln, 12, bold=False)
    doc.add_page_break()


def add_front_matter(doc, profile: C.TemplateProfile, ctx: Dict[str, Any]) -> None:
    doc.add_heading("Table of Contents", level=1)
    add_table_of_contents(doc)
    doc.add_page_break()

    doc.add_heading("Disclaimer", level=1)
    add_lines(doc, (t.format(**ctx) for t in C.DISCLAIMER), style=STYLE_WELL_SPACED)

    doc.add_heading("Glossary / Definitions", level=1)
    doc.add_paragraph(C.DEFINITIONS_INTRO, style=STYLE_WELL_SPACED)
    definitions = [*C.DEFINITIONS, *profile.extra_definitions]
    for i, text in enumerate(definitions, start=1):
        add_labelled_paragraph(doc, f"{i}.", text.format(**ctx), indent=0.25)
    doc.add_paragraph(C.DEFINITIONS_OUTRO, style=STYLE_WELL_SPACED)
    doc.add_page_break()


def add_background(doc, data: RfpFormData, ctx: Dict[str, Any]) -> None:
    doc.add_heading("SECTION I: Background", level=1)
    add_lines(doc, (t.format(**ctx) for t in C.BACKGROUND), style=STYLE_WELL_SPACED)
    doc.add_paragraph(C.BACKGROUND_ENGAGEMENT.format(**ctx), style=STYLE_WELL_SPACED)
    if data.fees.estimated_amount > 0:
        doc.add_paragraph(
            f"The total estimated amount for this tender is Rs. {format_currency(data.fees.estimated_amount)}/-",
            style=STYLE_WELL_SPACED,
        )
    doc.add_page_break()


def add_scope_of_work(doc, data: RfpFormData, ctx: Dict[str, Any]) -> None:
    sow = data.scope_of_work or ScopeOfWork()
    doc.add_heading("SECTION II: Scope of Work", level=1)

    title_lines = split_lines(sow.project_title) or [ctx["title"]]
    add_labelled_paragraph(doc, "Project Title:", title_lines[0].strip(), style=STYLE_WELL_SPACED)
    add_lines(doc, (ln.strip() for ln in title_lines[1:]), style=STYLE_WELL_SPACED)
    budget = split_lines(sow.budget)
    if budget:
        add_labelled_paragraph(doc, "Budget:", budget[0].strip(), style=STYLE_WELL_SPACED)
        add_lines(doc, (ln.strip() for ln in budget[1:]), style=STYLE_WELL_SPACED)
    special = split_lines(sow.special_requirements)
    if special:
        doc.add_paragraph().add_run("Special Requirements:").bold = True
        add_lines(doc, special, indent=0.25)

    doc.add_heading("Scope of Work Details", level=2)
    add_lines(doc, split_lines(sow.scope_of_work_details) or [C.DETAILS_PLACEHOLDER], style=STYLE_WELL_SPACED)

    doc.add_heading("Deliverables and Timelines", level=2)
    doc.add_paragraph(C.DELIVERABLES_INTRO)
    add_deliverables_table(doc, sow.deliverables, C.TIMELINE_PLACEHOLDER)
    doc.add_paragraph(C.T_NOTE.format(**ctx), style=STYLE_ITALIC_NOTE)

    doc.add_heading("Extension of Contract", level=2)
    doc.add_paragraph(C.EXTENSION_NOTE.format(**ctx), style=STYLE_WELL_SPACED)
    add_deliverables_table(doc, sow.extension_deliverables, C.EXTENSION_TIMELINE_PLACEHOLDER)
    doc.add_paragraph(C.T1_NOTE.format(**ctx), style=STYLE_ITALIC_NOTE)
    doc.add_page_break()


def add_instructions(doc, data: RfpFormData, ctx: Dict[str, Any]) -> None:
    doc.add_heading("SECTION III: Instructions to Bidders", level=1)

    doc.add_heading("1.1. Bidding Process", level=2)
    for label, text in C.BIDDING_PROCESS:
        add_labelled_paragraph(doc, label, text.format(**ctx), indent=0.25)

    doc.add_heading("1.2. Due Diligence by Bidders", level=2)
    doc.add_paragraph(C.DUE_DILIGENCE, style=STYLE_WELL_SPACED)

    doc.add_heading("1.3. Acknowledgement by Bidder", level=2)
    doc.add_paragraph(C.ACKNOWLEDGEMENT_INTRO)
    for label, text in C.ACKNOWLEDGEMENTS:
        add_labelled_paragraph(doc, label, text.format(**ctx), indent=0.25)

    doc.add_heading("1.4. Cost of Bidding", level=2)
    doc.add_paragraph(C.COST_OF_BIDDING.format(**ctx), style=STYLE_WELL_SPACED)

    doc.add_heading("1.5. RFP Document Fee", level=2)
    doc.add_paragraph(C.RFP_FEE.format(**ctx), style=STYLE_WELL_SPACED)
    for label, text in C.RFP_FEE_MODES:
        add_labelled_paragraph(doc, label, text.format(**ctx), indent=0.25)
    add_lines(doc, BANK_DETAILS, indent=0.5)
    doc.add_paragraph(C.RFP_FEE_RECEIPT, style=STYLE_WELL_SPACED)

    doc.add_heading("1.6. Schedule of Bidding Process", level=2)
    doc.add_paragraph(C.SCHEDULE_INTRO.format(**ctx))
    doc.add_paragraph(C.SCHEDULE_HEADER_NOTE, style=STYLE_ITALIC_NOTE)
    add_schedule_table(doc, data)
    doc.add_paragraph(C.SCHEDULE_OUTRO.format(**ctx), style=STYLE_WELL_SPACED)

    doc.add_heading("2. General", level=2)
    for heading, clauses in C.GENERAL:
        doc.add_heading(heading, level=3)
        for label, text in clauses:
            add_labelled_paragraph(doc, label, text.format(**ctx), indent=0.25 if label else None)

    doc.add_heading("2.5. Earnest Money Deposit", level=3)
    doc.add_paragraph(C.EMD_TEXT.format(**ctx), style=STYLE_WELL_SPACED)
    for label, text in C.EMD_FORMS:
        add_labelled_paragraph(doc, label, text.format(**ctx), indent=0.25)


# -----------------------------
# Public entrypoint
# -----------------------------
def assemble_document(data: RfpFormData, custom_document: Optional[bytes] = None) -> bytes:
    """
    Render `data` as a .docx and return its bytes.

    - consultancy / maintenance / supply: generated from the matching template profile
    - other: `custom_document` is returned unchanged; MissingCustomDocumentError if absent
    Empty fields never fail; each section falls back to a placeholder.
    """
    if data.rfp_type == RfpType.OTHER:
        if not custom_document:
            raise MissingCustomDocumentError("RFP type 'other' requires an uploaded document")
        return custom_document

    profile = C.PROFILES[data.rfp_type]
    ctx = _context(data, profile)

    with timeit(f"assemble {data.rfp_type.value} RFP", logger):
        doc = Document()
        set_margins(doc, 1.0)
        ensure_styles(doc)
        set_header_footer(doc, DOCUMENT_CREATOR)
        pin_core_properties(
            doc,
            title=data.tender_title.strip() or ctx["title"],
            subject=data.rfp_number or "Request for Proposal",
            author=DOCUMENT_CREATOR,
            when=_document_timestamp(data),
        )

        add_cover_page(doc, data, profile, ctx)
        add_front_matter(doc, profile, ctx)
        add_background(doc, data, ctx)
        add_scope_of_work(doc, data, ctx)
        add_instructions(doc, data, ctx)

        out = docx_bytes(doc)

    logger.info("Assembled %s (%d bytes)", data.download_filename, len(out))
    return out


__all__ = ["assemble_document", "format_date", "MissingCustomDocumentError", "DOCX_MEDIA_TYPE", "MONTHS"]
