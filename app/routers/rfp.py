# app/routers/rfp.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from app.config import Settings, get_settings
from app.models.schemas import FeeDetails, FormEdit, RfpFormData, RfpType, TenderRequest
from app.services.fees import format_currency, parse_currency
from app.services.form_state import FormEditError, FormState, apply_edit, initial_state
from app.services.rfp_document import DOCX_MEDIA_TYPE, MissingCustomDocumentError, assemble_document
from app.services.rfp_number import is_valid_segment, rfp_number
from app.services.sow_client import SowGenerationError, generate_scope_of_work

logger = logging.getLogger("rfp")
router = APIRouter(prefix="/api/rfp", tags=["rfp"])


class FormEditRequest(BaseModel):
    state: Optional[FormState] = None
    edit: FormEdit


def _attachment(content: bytes, filename: str, media_type: str = DOCX_MEDIA_TYPE) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# -----------------------------
# Scope of work (server-side client)
# -----------------------------
@router.post("/scope-of-work")
def scope_of_work(req: TenderRequest, settings: Settings = Depends(get_settings)):
    """
    Ask the /api/generate-sow proxy for a draft and return it in canonical form.
    On failure the message is preserved so the form can show it and fall back
    to manual entry.
    """
    try:
        sow = generate_scope_of_work(req, url=settings.sow_proxy_url)
    except SowGenerationError as e:
        logger.warning("Scope of work generation failed: %s", e)
        return JSONResponse(status_code=502, content={**e.to_dict(), "message": str(e)})
    return sow.model_dump(by_alias=True)


# -----------------------------
# Fees / RFP number
# -----------------------------
@router.get("/fees")
def fees(amount: str = Query("0", description="Estimated amount, raw digits or comma formatted")) -> Dict[str, Any]:
    details = FeeDetails(estimated_amount=parse_currency(amount))
    out = details.model_dump(by_alias=True)
    out["formatted"] = {
        "estimatedAmount": format_currency(details.estimated_amount),
        "tenderFee": format_currency(details.tender_fee),
        "emd": format_currency(details.emd),
    }
    return out


@router.get("/number")
def number(
    location: str = Query(...),
    department: str = Query(...),
    short_title: str = Query(..., alias="shortTitle"),
    serial: str = Query("01"),
    financial_year: str = Query("24-25", alias="financialYear"),
) -> Dict[str, str]:
    segments = {
        "location": location,
        "department": department,
        "shortTitle": short_title,
        "serial": serial,
        "financialYear": financial_year,
    }
    bad = [k for k, v in segments.items() if not is_valid_segment(v)]
    if bad:
        raise HTTPException(status_code=400, detail=f"Invalid RFP number segment(s): {', '.join(bad)}")
    return {"rfpNumber": rfp_number(*(v.strip() for v in segments.values()))}


# -----------------------------
# Form reducer
# -----------------------------
@router.post("/form/edit")
def form_edit(body: FormEditRequest) -> Dict[str, Any]:
    state = body.state or initial_state()
    try:
        new_state = apply_edit(state, body.edit)
    except FormEditError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return new_state.model_dump(by_alias=True, mode="json")


# -----------------------------
# Documents
# -----------------------------
@router.post("/document")
def document(data: RfpFormData) -> Response:
    # python-docx is CPU-bound; a sync route runs in the threadpool
    if data.rfp_type == RfpType.OTHER:
        raise HTTPException(status_code=400, detail="RFP type 'other' needs an uploaded document: use /api/rfp/document/custom")
    content = assemble_document(data)
    return _attachment(content, data.download_filename)


@router.post("/document/custom")
async def custom_document(
    file: UploadFile = File(...),
    short_tender_title: str = Form("", alias="shortTenderTitle"),
) -> Response:
    """The uploaded document is returned byte for byte."""
    data = RfpFormData(rfp_type=RfpType.OTHER, short_tender_title=short_tender_title)
    raw = await file.read()
    try:
        content = assemble_document(data, raw)
    except MissingCustomDocumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _attachment(content, data.download_filename, file.content_type or DOCX_MEDIA_TYPE)
