# app/services/sow_proxy.py
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

import httpx

from app.utils.text import truncate

log = logging.getLogger("generate_sow")

RAW_EXCERPT_LIMIT = 1000
CONTEXT_RADIUS = 60
LOG_BODY_LIMIT = 300

FORWARD_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

DecodeKind = Literal["ok", "non_json", "parse_error", "shape_error"]


# -----------------------------
# Typed decode of the downstream body
# -----------------------------
@dataclass(frozen=True)
class DecodeResult:
    kind: DecodeKind
    data: Any = None
    error: Optional[str] = None
    position: Optional[int] = None
    context: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind == "ok"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_downstream(text: str | None) -> DecodeResult:
    """
    Strictly decode a downstream body.

    - ok:          a JSON object or array
    - non_json:    nothing JSON-like at the start (HTML page, plain text, empty body)
    - parse_error: starts like JSON but breaks later (truncated, trailing garbage, ...)
    - shape_error: valid JSON scalar ("x", 1, true, null) where a document was expected
    """
    body = (text or "").strip()
    try:
        data = json.loads(body, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        if e.pos == 0:
            return DecodeResult("non_json", error=e.msg, position=0)
        lo = max(0, e.pos - CONTEXT_RADIUS)
        hi = min(len(body), e.pos + CONTEXT_RADIUS)
        return DecodeResult("parse_error", error=str(e), position=e.pos, context=body[lo:hi])
    except ValueError as e:
        # NaN/Infinity, integers past the int-parsing digit limit
        return DecodeResult("parse_error", error=str(e), context=body[: 2 * CONTEXT_RADIUS])
    if not isinstance(data, (dict, list)):
        return DecodeResult("shape_error", data=data, error=f"Expected a JSON object or array, got {type(data).__name__}")
    return DecodeResult("ok", data=data)


# -----------------------------
# Outcome of one proxied call
# -----------------------------
@dataclass
class ProxyOutcome:
    status_code: int
    body: Any = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def _error(status_code: int, error: str, details: str, **extra: Any) -> ProxyOutcome:
    payload: Dict[str, Any] = {"error": error, "details": details}
    payload.update(extra)
    return ProxyOutcome(status_code=status_code, body=payload)


_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "temporary failure in name resolution",
    "no address associated",
    "name resolution",
)
_REFUSED_MARKERS = ("connection refused", "errno 111", "actively refused", "econnrefused")


def classify_transport_error(exc: Exception) -> tuple[str, str]:
    """Map a transport failure to (error key, human readable details)."""
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return "upstream_timeout", "The scope of work service timed out before responding"
    msg = (str(exc) or exc.__class__.__name__).lower()
    if any(m in msg for m in _DNS_MARKERS):
        return "upstream_dns_failure", f"Could not resolve the scope of work service host ({exc})"
    if any(m in msg for m in _REFUSED_MARKERS):
        return "upstream_connection_refused", f"Connection to the scope of work service was refused ({exc})"
    return "upstream_unreachable", f"Could not reach the scope of work service ({exc.__class__.__name__}: {exc})"


def outcome_from_response(resp: httpx.Response) -> ProxyOutcome:
    text = resp.text
    if not resp.is_success:
        log.error("SOW service error %s: %s", resp.status_code, text[:LOG_BODY_LIMIT])
        decoded = decode_downstream(text)
        # Only 4xx/5xx are passed through; anything else non-2xx becomes a gateway error
        status = resp.status_code if resp.status_code >= 400 else 502
        return _error(
            status,
            "upstream_error",
            truncate(text, RAW_EXCERPT_LIMIT) or f"HTTP {resp.status_code}",
            status=resp.status_code,
            statusText=resp.reason_phrase,
            upstream=decoded.data if decoded.ok else None,
        )

    decoded = decode_downstream(text)
    if decoded.kind == "non_json":
        log.error("SOW service returned non-JSON body: %s", text[:LOG_BODY_LIMIT])
        return _error(
            502,
            "upstream_non_json",
            "The scope of work service returned a non-JSON response",
            rawResponse=text[:RAW_EXCERPT_LIMIT],
        )
    if decoded.kind == "parse_error":
        log.error("SOW service returned malformed JSON at %s: %s", decoded.position, decoded.error)
        return _error(
            502,
            "upstream_invalid_json",
            f"The scope of work service returned malformed JSON: {decoded.error}",
            position=decoded.position,
            context=decoded.context,
            rawResponse=text[:RAW_EXCERPT_LIMIT],
        )
    if decoded.kind == "shape_error":
        log.error("SOW service returned unexpected JSON value: %s", text[:LOG_BODY_LIMIT])
        return _error(
            502,
            "upstream_unexpected_shape",
            decoded.error or "Unexpected JSON value",
            rawResponse=text[:RAW_EXCERPT_LIMIT],
        )
    return ProxyOutcome(status_code=200, body=decoded.data)


async def forward_to_sow_service(
    payload: Dict[str, Any],
    *,
    url: str,
    timeout: float,
    client: httpx.AsyncClient,
) -> ProxyOutcome:
    """
    Forward the tender payload as-is to the SOW service and normalise the result.

    The whole call (connect + send + read) is bounded by `timeout`; on expiry the
    in-flight request is cancelled. Nothing is retried.
    """
    log.info("Forwarding SOW request to %s (timeout %.1fs)", url, timeout)
    try:
        resp = await asyncio.wait_for(
            client.post(url, json=payload, headers=FORWARD_HEADERS),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, httpx.TransportError) as e:
        key, details = classify_transport_error(e)
        log.error("SOW service call failed (%s): %s", key, e)
        return _error(502, key, details, url=url)
    except httpx.DecodingError as e:
        # Content-Encoding did not match the bytes sent
        log.error("SOW service body could not be decoded: %s", e)
        return _error(
            502,
            "upstream_invalid_json",
            f"The scope of work service returned an undecodable body: {e}",
            url=url,
        )
    return outcome_from_response(resp)


__all__ = [
    "DecodeResult",
    "ProxyOutcome",
    "decode_downstream",
    "classify_transport_error",
    "outcome_from_response",
    "forward_to_sow_service",
]
