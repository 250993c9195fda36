from datetime import date
from enum import Enum
from typing import List, Optional, Any

from pydantic import BaseModel, Field, ConfigDict, computed_field, field_validator
from pydantic.alias_generators import to_camel

from app.services.fees import parse_currency, tender_fee, emd
from app.services.rfp_number import rfp_number, is_valid_segment
from app.utils.text import sanitize_filename

# ---------- Shared config ----------
#
# The browser client speaks camelCase (tenderTitle, departmentName, ...).
# Every model accepts camelCase aliases and snake_case names; responses are
# dumped with by_alias=True so the wire format stays camelCase.
_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RfpType(str, Enum):
    CONSULTANCY = "consultancy"
    MAINTENANCE = "maintenance"
    SUPPLY = "supply"
    OTHER = "other"


# ---------- Scope of Work (request to and response from the SOW service) ----------

class TenderRequest(BaseModel):
    # Body of POST /api/generate-sow. Lives for one request only.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    tender_title: str = Field(..., min_length=1)
    department_name: str = Field(..., min_length=1)
    contract_duration: int = Field(..., ge=1)  # months
    project_type: Optional[str] = None
    location: Optional[str] = None
    budget: Optional[str] = None
    special_requirements: Optional[str] = None


class Deliverable(BaseModel):
    model_config = _WIRE

    description: str = ""
    timeline: str = ""

    @field_validator("description", "timeline", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else str(v) if isinstance(v, (int, float)) else v


class ScopeOfWork(BaseModel):
    # Canonical (v1, flat) scope-of-work shape. The nested legacy shape
    # {"scopeOfWork": {...}} is upgraded in app.services.sow_client.
    model_config = _WIRE

    project_title: str = ""
    scope_of_work_details: str = ""
    deliverables: List[Deliverable] = Field(default_factory=list)
    extension_year: str = "1"
    extension_deliverables: List[Deliverable] = Field(default_factory=list)
    budget: Optional[str] = None
    special_requirements: Optional[str] = None

    @field_validator("project_title", "scope_of_work_details", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("extension_year", mode="before")
    @classmethod
    def _year_as_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return str(v) if isinstance(v, (int, float)) else v

    @field_validator("deliverables", "extension_deliverables", mode="before")
    @classmethod
    def _list_or_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ---------- RFP form ----------

class BiddingSchedule(BaseModel):
    model_config = _WIRE

    rfp_available_date: Optional[date] = None
    query_deadline_date: Optional[date] = None
    pre_bid_meeting_date: Optional[date] = None
    price_bid_deadline_date: Optional[date] = None
    technical_bid_deadline_date: Optional[date] = None
    technical_bid_opening_date: Optional[date] = None
    issuing_authority: Optional[str] = None
    contact_email: Optional[str] = None

    @field_validator(
        "rfp_available_date", "query_deadline_date", "pre_bid_meeting_date",
        "price_bid_deadline_date", "technical_bid_deadline_date", "technical_bid_opening_date",
        mode="before",
    )
    @classmethod
    def _blank_date(cls, v: Any) -> Any:
        # HTML date inputs post "" when cleared
        if isinstance(v, str) and not v.strip():
            return None
        return v


class FeeDetails(BaseModel):
    # Only the estimated amount is input. Fee and EMD are projections of it,
    # so a client-sent tenderFee/emd is ignored rather than trusted.
    model_config = _WIRE

    estimated_amount: int = Field(0, ge=0)

    @field_validator("estimated_amount", mode="before")
    @classmethod
    def _parse_amount(cls, v: Any) -> Any:
        if v is None:
            return 0
        if isinstance(v, str):
            return parse_currency(v)
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tender_fee(self) -> int:
        return tender_fee(self.estimated_amount) if self.estimated_amount > 0 else 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def emd(self) -> int:
        return emd(self.estimated_amount)


class RfpFormData(BaseModel):
    model_config = _WIRE

    tender_title: str = ""
    short_tender_title: str = ""
    location_name: str = ""
    department_name: str = ""
    serial_number: str = "01"
    financial_year: str = "24-25"
    month: str = "May"
    year: str = "2025"
    rfp_type: RfpType = RfpType.CONSULTANCY
    item_name: Optional[str] = None
    contract_duration: int = Field(12, ge=1)

    schedule: BiddingSchedule = Field(default_factory=BiddingSchedule)
    fees: FeeDetails = Field(default_factory=FeeDetails)
    scope_of_work: Optional[ScopeOfWork] = None

    @field_validator("contract_duration", mode="before")
    @classmethod
    def _duration(cls, v: Any) -> Any:
        # The form select posts strings; an unparseable value falls back to 12 months.
        if v is None or (isinstance(v, str) and not v.strip().isdigit()):
            return 12
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rfp_number(self) -> str:
        required = (self.location_name, self.department_name, self.short_tender_title, self.financial_year)
        if not all(is_valid_segment(s) for s in required):
            return ""
        return rfp_number(
            self.location_name,
            self.department_name,
            self.short_tender_title,
            self.serial_number,
            self.financial_year,
        )

    @property
    def download_filename(self) -> str:
        short = self.short_tender_title.strip()
        return f"GMDC_RFP_{sanitize_filename(short) if short else 'Document'}.docx"


# ---------- Form reducer ----------

class FormEdit(BaseModel):
    # One edit event from the form: either a field change or a tab switch.
    model_config = _WIRE

    field: Optional[str] = None
    value: Any = None
    tab: Optional[str] = None


# ---------- Error payloads ----------

class ErrorPayload(BaseModel):
    # Every failure of /api/generate-sow serialises to this shape (plus
    # optional diagnostic fields, hence extra="allow").
    model_config = ConfigDict(extra="allow")

    error: str
    details: Optional[str] = None
    status: Optional[int] = None
