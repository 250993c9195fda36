# app/services/rfp_number.py
RFP_PREFIX = "GMDC"


def rfp_number(location: str, department: str, short_title: str, serial: str, financial_year: str) -> str:
    """
    GMDC/LocationName/DepartmentName/ShortTenderTitle/SerialNumber/FinancialYear

    Plain concatenation. Segments are not checked here; use is_valid_segment
    before calling if the inputs come straight from a user.
    """
    return f"{RFP_PREFIX}/{location}/{department}/{short_title}/{serial}/{financial_year}"


def is_valid_segment(segment: str | None) -> bool:
    s = (segment or "").strip()
    return bool(s) and "/" not in s
