# app/routers/meta.py
from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter

from app.models.schemas import RfpType
from app.services.fees import fee_schedule
from app.services.rfp_document import MONTHS

# Option lists the RFP form renders in its select boxes.
router = APIRouter(prefix="/meta", tags=["meta"])

LOCATIONS = ["Corporate Office", "Ahmedabad", "Vadodara", "Surat", "Rajkot", "Bhavnagar", "Jamnagar"]
DEPARTMENTS = [
    "IT", "HR", "Finance", "Operations", "Legal", "Marketing", "Procurement", "Bauxite", "Cement",
    "CGM", "CS", "E-Auction", "Environment", "Facilities Management", "GEO", "GVT or CSR", "ICEM",
    "Ind AS", "Insurance", "ISO", "KEP", "LAND", "LP", "MM", "PD", "POWER", "PPD", "PR", "PUR",
    "PYRITE", "RE", "S & M", "SALE", "SCRAP", "Security", "SS", "Tech 2", "UMR",
]
DURATIONS = [3, 6, 9, 12, 18, 24, 36]  # months


def selectable_years(today: date | None = None) -> List[str]:
    """Current year and the two following ones."""
    y = (today or date.today()).year
    return [str(y + i) for i in range(3)]


@router.get("/options")
def options() -> Dict[str, Any]:
    return {
        "locations": LOCATIONS,
        "departments": DEPARTMENTS,
        "months": MONTHS,
        "years": selectable_years(),
        "durations": DURATIONS,
        "rfpTypes": [t.value for t in RfpType],
        "feeSchedule": fee_schedule(),
    }
