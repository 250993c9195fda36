import json

import pytest
import requests

from app.models.schemas import TenderRequest
from app.services.sow_client import (
    SowGenerationError,
    clean_project_title,
    clean_scope_details,
    generate_scope_of_work,
    parse_scope_of_work,
)

REQ = TenderRequest(
    tenderTitle="AI Tools for Geology",
    departmentName="IT",
    contractDuration=12,
    budget="50 Lakh",
    specialRequirements="On-site support",
)


def _response(status: int, body) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = (body if isinstance(body, str) else json.dumps(body)).encode("utf-8")
    r.encoding = "utf-8"
    return r


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.response


def test_single_post_with_camel_case_payload():
    s = FakeSession(_response(200, {"projectTitle": "Geo AI", "scopeOfWorkDetails": "Do it", "deliverables": []}))
    sow = generate_scope_of_work(REQ, url="http://proxy.test/api/generate-sow", session=s)
    assert len(s.calls) == 1
    url, kwargs = s.calls[0]
    assert url == "http://proxy.test/api/generate-sow"
    assert kwargs["json"]["tenderTitle"] == "AI Tools for Geology"
    assert kwargs["json"]["contractDuration"] == 12
    assert "projectType" not in kwargs["json"]
    assert sow.project_title == "Geo AI"


def test_error_status_keeps_proxy_details():
    s = FakeSession(_response(502, {"error": "upstream_timeout", "details": "The scope of work service timed out"}))
    with pytest.raises(SowGenerationError) as ei:
        generate_scope_of_work(REQ, url="http://proxy.test", session=s)
    e = ei.value
    assert e.status_code == 502
    assert e.error == "upstream_timeout"
    assert str(e) == "Failed to generate scope of work: The scope of work service timed out"
    assert len(s.calls) == 1


def test_network_failure_is_wrapped():
    s = FakeSession(exc=requests.ConnectionError("refused"))
    with pytest.raises(SowGenerationError) as ei:
        generate_scope_of_work(REQ, url="http://proxy.test", session=s)
    assert ei.value.error == "sow_unreachable"
    assert "refused" in str(ei.value)


def test_non_json_body_is_rejected():
    s = FakeSession(_response(200, "<html>oops</html>"))
    with pytest.raises(SowGenerationError) as ei:
        generate_scope_of_work(REQ, url="http://proxy.test", session=s)
    assert ei.value.error == "sow_invalid_json"


def test_legacy_nested_shape_is_upgraded():
    legacy = {"scopeOfWork": {
        "projectTitle": "Legacy",
        "scopeOfWorkDetails": "line one\nline two",
        "deliverables": [{"description": "Report", "timeline": "T+1"}],
        "extensionYear": 2,
    }}
    sow = parse_scope_of_work(legacy, REQ)
    assert sow.project_title == "Legacy"
    assert sow.deliverables[0].description == "Report"
    assert sow.extension_year == "2"


@pytest.mark.parametrize("data", [
    [],
    "text",
    {"projectTitle": "No details"},
    {"scopeOfWorkDetails": "x", "deliverables": "not a list"},
])
def test_bad_shapes_are_rejected(data):
    with pytest.raises(SowGenerationError) as ei:
        parse_scope_of_work(data, REQ)
    assert ei.value.error == "sow_shape_error"


def test_fallbacks_to_request_values():
    sow = parse_scope_of_work({"projectTitle": "", "scopeOfWorkDetails": "", "deliverables": None}, REQ)
    assert sow.project_title == "AI Tools for Geology"
    assert sow.budget == "50 Lakh"
    assert sow.special_requirements == "On-site support"
    assert sow.deliverables == []


@pytest.mark.parametrize("raw, clean", [
    ('PROJECT TITLE:\n"Geo AI"', "Geo AI"),
    ("project title: Geo AI", "Geo AI"),
    ("Geo AI", "Geo AI"),
    ("", ""),
])
def test_clean_project_title(raw, clean):
    assert clean_project_title(raw) == clean


@pytest.mark.parametrize("raw, clean", [
    ("DETAILED\nThe consultant shall...", "The consultant shall..."),
    ("The DETAILED plan", "The DETAILED plan"),
])
def test_clean_scope_details(raw, clean):
    assert clean_scope_details(raw) == clean
