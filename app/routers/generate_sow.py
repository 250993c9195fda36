# app/routers/generate_sow.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import AsyncIterator

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.models.schemas import ErrorPayload, TenderRequest
from app.services.sow_proxy import forward_to_sow_service

log = logging.getLogger("generate_sow")
router = APIRouter(prefix="/api", tags=["scope-of-work"])

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept",
    "Access-Control-Max-Age": "86400",
}


async def get_sow_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    """
    One AsyncClient per request, closed when the response is done.
    Overridden in tests with an httpx.MockTransport-backed client.
    """
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.sow_timeout_seconds)) as cx:
        yield cx


def _bad_request(details: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "invalid_request", "details": details})


def _validation_details(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


ERROR_RESPONSES = {code: {"model": ErrorPayload} for code in (400, 500, 502)}


@router.post("/generate-sow", responses=ERROR_RESPONSES)
async def generate_sow(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_sow_http_client),
):
    """
    Proxy a tender description to the SOW drafting service.

    Always answers with JSON:
    - 200: downstream JSON, verbatim
    - 400: request body is not JSON or misses tenderTitle / departmentName / contractDuration
    - 502: downstream unreachable, timed out, or returned a body that is not a JSON document
    - 4xx/5xx from downstream: passed through with a structured error body
    - 500: anything unexpected on our side
    """
    try:
        try:
            body = await request.json()
        except ValueError:
            return _bad_request("Request body must be valid JSON")
        if not isinstance(body, dict):
            return _bad_request("Request body must be a JSON object")

        try:
            TenderRequest.model_validate(body)
        except ValidationError as e:
            return _bad_request(_validation_details(e))

        outcome = await forward_to_sow_service(
            body,
            url=settings.sow_api_url,
            timeout=settings.sow_timeout_seconds,
            client=client,
        )
        return JSONResponse(status_code=outcome.status_code, content=outcome.body)

    except Exception:
        log.exception("Error in generate_sow")
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "details": "Failed to generate scope of work",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )


@router.options("/generate-sow")
async def generate_sow_preflight() -> Response:
    # Browsers sending Origin + Access-Control-Request-Method are answered by
    # CORSMiddleware before reaching this handler.
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)
