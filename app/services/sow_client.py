# app/services/sow_client.py
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from app.config import get_settings
from app.models.schemas import ScopeOfWork, TenderRequest

log = logging.getLogger("sow_client")

# Keys a canonical (flat, v1) payload must carry. The rest default.
REQUIRED_KEYS = ("scopeOfWorkDetails", "deliverables")
LEGACY_WRAPPER = "scopeOfWork"

_title_label = re.compile(r"PROJECT TITLE:\s*\n?", re.IGNORECASE)
_detailed_label = re.compile(r"^\s*DETAILED\s*\n?", re.IGNORECASE)
_wrapping_quotes = re.compile(r"^[\"']|[\"']$")


class SowGenerationError(Exception):
    """
    Raised when a scope of work could not be produced. `str(e)` is meant to be
    shown to the user as-is; `error` / `details` carry the proxy's structured payload.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error or "sow_generation_failed",
            "details": self.details or str(self),
            "status": self.status_code,
        }


def _error_fields(resp: requests.Response) -> tuple[Optional[str], Optional[str]]:
    try:
        body = resp.json()
    except ValueError:
        return None, (resp.text or "")[:300] or None
    if isinstance(body, dict):
        details = body.get("details")
        if details is not None and not isinstance(details, str):
            details = str(details)
        return body.get("error"), details
    return None, str(body)[:300]


def upgrade_legacy_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Older SOW service builds nested everything under "scopeOfWork".
    Lift that object to the top level; top-level keys fill gaps only.
    """
    inner = data.get(LEGACY_WRAPPER)
    if not isinstance(inner, dict) or all(k in data for k in REQUIRED_KEYS):
        return data
    merged = {k: v for k, v in data.items() if k != LEGACY_WRAPPER}
    merged.update(inner)
    return merged


def clean_project_title(title: str) -> str:
    t = title or ""
    if "project title:" in t.lower():
        t = _title_label.sub("", t, count=1).strip()
        t = _wrapping_quotes.sub("", t)
    return t.strip()


def clean_scope_details(details: str) -> str:
    return _detailed_label.sub("", details or "", count=1).strip()


def parse_scope_of_work(data: Any, request: Optional[TenderRequest] = None) -> ScopeOfWork:
    """Validate a downstream payload against the canonical schema and tidy it."""
    if not isinstance(data, dict):
        raise SowGenerationError(
            "Scope of work response has an unexpected shape",
            error="sow_shape_error",
            details=f"Expected a JSON object, got {type(data).__name__}",
        )
    data = upgrade_legacy_payload(data)
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise SowGenerationError(
            "Scope of work response has an unexpected shape",
            error="sow_shape_error",
            details=f"Missing keys: {', '.join(missing)}",
        )
    try:
        sow = ScopeOfWork.model_validate(data)
    except ValidationError as e:
        raise SowGenerationError(
            "Scope of work response has an unexpected shape",
            error="sow_shape_error",
            details=str(e),
        ) from e

    title = clean_project_title(sow.project_title)
    updates: Dict[str, Any] = {"scope_of_work_details": clean_scope_details(sow.scope_of_work_details)}
    if request is not None:
        updates["project_title"] = title or request.tender_title
        if not sow.budget and request.budget:
            updates["budget"] = request.budget
        if not sow.special_requirements and request.special_requirements:
            updates["special_requirements"] = request.special_requirements
    else:
        updates["project_title"] = title
    return sow.model_copy(update=updates)


def generate_scope_of_work(
    request: TenderRequest,
    *,
    url: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> ScopeOfWork:
    """
    Call the /api/generate-sow proxy once and return a canonical ScopeOfWork.
    Raises SowGenerationError on any failure; never retries.
    """
    s = get_settings()
    target = url or s.sow_proxy_url
    http = session or requests
    payload = request.model_dump(by_alias=True, exclude_none=True)
    # proxy budget plus a margin so the proxy's own timeout answer wins
    wait = timeout if timeout is not None else s.sow_timeout_seconds + 5

    log.info("Requesting scope of work for %r (%s)", request.tender_title, request.department_name)
    try:
        r = http.post(target, json=payload, headers={"Accept": "application/json"}, timeout=wait)
    except requests.RequestException as e:
        log.error("SOW proxy call failed: %s", e)
        raise SowGenerationError(f"Failed to reach scope of work service: {e}", error="sow_unreachable") from e

    if not r.ok:
        err, details = _error_fields(r)
        log.error("SOW proxy error %s: %s", r.status_code, (details or "")[:300])
        raise SowGenerationError(
            f"Failed to generate scope of work: {details or err or f'HTTP {r.status_code}'}",
            status_code=r.status_code,
            error=err,
            details=details,
        )

    try:
        data = r.json()
    except ValueError as e:
        raise SowGenerationError(
            "Scope of work response is not valid JSON",
            status_code=r.status_code,
            error="sow_invalid_json",
            details=(r.text or "")[:300],
        ) from e

    return parse_scope_of_work(data, request)


__all__ = [
    "SowGenerationError",
    "generate_scope_of_work",
    "parse_scope_of_work",
    "upgrade_legacy_payload",
    "clean_project_title",
    "clean_scope_details",
]
