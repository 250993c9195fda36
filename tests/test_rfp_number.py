import pytest

from app.models.schemas import RfpFormData
from app.services.rfp_number import is_valid_segment, rfp_number


def test_rfp_number_format():
    assert rfp_number("Ahmedabad", "IT", "AITG", "01", "24-25") == "GMDC/Ahmedabad/IT/AITG/01/24-25"


def test_rfp_number_does_not_validate():
    assert rfp_number("", "IT", "A/B", "01", "24-25") == "GMDC//IT/A/B/01/24-25"


@pytest.mark.parametrize("segment, ok", [
    ("Ahmedabad", True),
    ("Corporate Office", True),
    ("", False),
    ("   ", False),
    (None, False),
    ("A/B", False),
])
def test_is_valid_segment(segment, ok):
    assert is_valid_segment(segment) is ok


def test_form_derives_number_only_from_valid_segments():
    data = RfpFormData(locationName="Ahmedabad", departmentName="IT", shortTenderTitle="AITG")
    assert data.rfp_number == "GMDC/Ahmedabad/IT/AITG/01/24-25"
    assert RfpFormData(locationName="Ahmedabad", departmentName="IT").rfp_number == ""
    assert RfpFormData(locationName="Ahmedabad", departmentName="IT", shortTenderTitle="A/B").rfp_number == ""


@pytest.mark.parametrize("short, filename", [
    ("AITG", "GMDC_RFP_AITG.docx"),
    ("", "GMDC_RFP_Document.docx"),
    ("AI Tools (v1)", "GMDC_RFP_AI_Tools_(v1).docx"),
])
def test_download_filename(short, filename):
    assert RfpFormData(shortTenderTitle=short).download_filename == filename
