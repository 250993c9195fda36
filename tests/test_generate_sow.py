import asyncio

import httpx
import pytest

from app.config import get_settings
from app.main import app
from app.routers.generate_sow import get_sow_http_client
from app.services.sow_proxy import decode_downstream

from conftest import SOW_URL, make_settings

VALID = {"tenderTitle": "AI Tools for Geology", "departmentName": "IT", "contractDuration": 12}


def use_downstream(handler, timeout: float = 2.0):
    """Route the proxy's outbound calls to `handler` instead of the network."""
    async def _client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as cx:
            yield cx

    app.dependency_overrides[get_settings] = lambda: make_settings(SOW_TIMEOUT_SECONDS=timeout)
    app.dependency_overrides[get_sow_http_client] = _client


def test_success_is_returned_verbatim(client):
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["body"] = request.content
        seen["accept"] = request.headers.get("accept")
        return httpx.Response(200, json={"projectTitle": "X"})

    use_downstream(handler)
    r = client.post("/api/generate-sow", json={**VALID, "location": "Ahmedabad"})
    assert r.status_code == 200
    assert r.json() == {"projectTitle": "X"}
    assert seen["url"] == SOW_URL
    assert seen["accept"] == "application/json"
    assert b'"location"' in seen["body"] and b"Ahmedabad" in seen["body"]


def test_downstream_error_status_is_propagated(client):
    use_downstream(lambda request: httpx.Response(500, text="boom"))
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "upstream_error"
    assert "boom" in body["details"]
    assert body["status"] == 500
    assert body["statusText"] == "Internal Server Error"
    assert body["upstream"] is None


def test_downstream_error_keeps_parsed_json(client):
    use_downstream(lambda request: httpx.Response(422, json={"detail": "bad duration"}))
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 422
    assert r.json()["upstream"] == {"detail": "bad duration"}


def test_non_json_success_is_a_gateway_error(client):
    use_downstream(lambda request: httpx.Response(200, text="not json"))
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 502
    body = r.json()
    assert body["error"] == "upstream_non_json"
    assert body["rawResponse"] == "not json"


def test_raw_excerpt_is_capped(client):
    use_downstream(lambda request: httpx.Response(200, text="<html>" + "x" * 5000))
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 502
    assert len(r.json()["rawResponse"]) == 1000


def test_malformed_json_reports_position(client):
    use_downstream(lambda request: httpx.Response(200, text='{"projectTitle": "X", "deliverables": [}'))
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 502
    body = r.json()
    assert body["error"] == "upstream_invalid_json"
    assert body["position"] > 0
    assert "deliverables" in body["context"]


def test_scalar_json_is_unexpected_shape(client):
    use_downstream(lambda request: httpx.Response(200, text='"just a string"'))
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 502
    assert r.json()["error"] == "upstream_unexpected_shape"


def test_timeout_cancels_outbound_call(client):
    state = {"cancelled": False}

    async def slow(request: httpx.Request):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            state["cancelled"] = True
            raise
        return httpx.Response(200, json={})

    use_downstream(slow, timeout=0.2)
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 502
    assert r.json()["error"] == "upstream_timeout"
    assert state["cancelled"] is True


@pytest.mark.parametrize("message, key", [
    ("[Errno 111] Connection refused", "upstream_connection_refused"),
    ("[Errno -2] Name or service not known", "upstream_dns_failure"),
    ("Network is unreachable", "upstream_unreachable"),
])
def test_transport_errors_are_classified(client, message, key):
    def handler(request: httpx.Request):
        raise httpx.ConnectError(message, request=request)

    use_downstream(handler)
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 502
    body = r.json()
    assert body["error"] == key
    assert body["url"] == SOW_URL


@pytest.mark.parametrize("content", [
    b"not json",
    b"[1, 2]",
    b'{"tenderTitle": "X", "departmentName": "IT"}',
    b'{"tenderTitle": "", "departmentName": "IT", "contractDuration": 12}',
])
def test_bad_requests_are_rejected_before_forwarding(client, content):
    calls = []
    use_downstream(lambda request: calls.append(request) or httpx.Response(200, json={}))
    r = client.post("/api/generate-sow", content=content, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_request"
    assert calls == []


def test_unexpected_fault_is_a_sanitised_500(client):
    def handler(request: httpx.Request):
        raise RuntimeError("secret internals")

    use_downstream(handler)
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "internal_error"
    assert "secret" not in body["details"]
    assert body["timestamp"]


def test_options_preflight(client):
    r = client.options("/api/generate-sow")
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"
    assert "POST" in r.headers["access-control-allow-methods"]
    assert r.content == b""


@pytest.mark.parametrize("text, kind", [
    ('{"a": 1}', "ok"),
    ("[]", "ok"),
    ("", "non_json"),
    ("<html></html>", "non_json"),
    ('{"a": 1', "parse_error"),
    ('{"a": 1} trailing', "parse_error"),
    ("42", "shape_error"),
    ("null", "shape_error"),
])
def test_decode_downstream(text, kind):
    assert decode_downstream(text).kind == kind


@pytest.mark.parametrize("content, headers", [
    (b"[NaN]", {}),
    (b'{"projectTitle": Infinity}', {}),
    (b"[" + b"1" * 5000 + b"]", {}),
    (b"not really gzip", {"Content-Encoding": "gzip"}),
])
def test_unrenderable_success_bodies_are_gateway_errors(client, content, headers):
    use_downstream(lambda request: httpx.Response(200, content=content, headers=headers))
    r = client.post("/api/generate-sow", json=VALID)
    assert r.status_code == 502
    assert r.json()["error"] == "upstream_invalid_json"


@pytest.mark.parametrize("text", ["[NaN]", '{"a": -Infinity}', "[" + "9" * 5000 + "]"])
def test_decode_rejects_non_standard_numbers(text):
    assert decode_downstream(text).kind == "parse_error"
