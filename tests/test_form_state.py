from datetime import date

import pytest

from app.models.schemas import FormEdit, RfpType, ScopeOfWork
from app.services.form_state import FormEditError, FormState, apply_edit, initial_state, set_field, switch_tab


def edit(**kw) -> FormEdit:
    return FormEdit(**kw)


def test_edit_returns_new_state():
    s0 = initial_state()
    s1 = apply_edit(s0, edit(field="tenderTitle", value="AI Tools"))
    assert s1.tender_title == "AI Tools"
    assert s0.tender_title == ""


def test_estimated_amount_drives_fee_and_emd():
    s = apply_edit(initial_state(), edit(field="estimatedAmount", value="5,000,000"))
    assert s.fees.estimated_amount == 5_000_000
    assert s.fees.tender_fee == 2_500
    assert s.fees.emd == 150_000

    s = apply_edit(s, edit(field="estimatedAmount", value=""))
    assert s.fees.tender_fee == 0 and s.fees.emd == 0


@pytest.mark.parametrize("field", ["tenderFee", "emd", "rfpNumber", "fees.tenderFee"])
def test_derived_fields_cannot_be_set(field):
    with pytest.raises(FormEditError):
        set_field(initial_state(), field, 1)


def test_unknown_field_is_rejected():
    with pytest.raises(FormEditError):
        set_field(initial_state(), "colour", "red")


def test_rfp_number_follows_segments():
    s = initial_state()
    for f, v in [("locationName", "Ahmedabad"), ("departmentName", "IT")]:
        s = set_field(s, f, v)
    assert s.rfp_number == ""
    s = set_field(s, "shortTenderTitle", "AITG")
    assert s.rfp_number == "GMDC/Ahmedabad/IT/AITG/01/24-25"
    s = set_field(s, "serialNumber", "07")
    assert s.rfp_number == "GMDC/Ahmedabad/IT/AITG/07/24-25"


def test_leaving_details_tab_locks_rfp_type():
    s = set_field(initial_state(), "rfpType", "supply")
    assert s.rfp_type == RfpType.SUPPLY

    s = switch_tab(s, "schedule")
    assert s.rfp_type_locked
    s = set_field(s, "rfpType", "maintenance")
    assert s.rfp_type == RfpType.SUPPLY

    s = switch_tab(s, "details")
    assert s.rfp_type_locked


def test_unknown_tab_is_rejected():
    with pytest.raises(FormEditError):
        switch_tab(initial_state(), "payments")


def test_project_title_follows_tender_title_until_edited():
    s = FormState(scope_of_work=ScopeOfWork())
    s = set_field(s, "tenderTitle", "A")
    assert s.scope_of_work.project_title == "A"
    s = set_field(s, "tenderTitle", "B")
    assert s.scope_of_work.project_title == "B"

    custom = FormState(tender_title="B", scope_of_work=ScopeOfWork(project_title="Custom"))
    assert set_field(custom, "tenderTitle", "C").scope_of_work.project_title == "Custom"


@pytest.mark.parametrize("field", ["rfpAvailableDate", "schedule.rfpAvailableDate"])
def test_schedule_fields(field):
    s = set_field(initial_state(), field, "2025-05-10")
    assert s.schedule.rfp_available_date == date(2025, 5, 10)
    s = set_field(s, field, "")
    assert s.schedule.rfp_available_date is None


def test_invalid_value_is_an_edit_error():
    with pytest.raises(FormEditError):
        set_field(initial_state(), "rfpType", "lease")


def test_field_and_tab_in_one_edit():
    s = apply_edit(initial_state(), edit(field="rfpType", value="maintenance", tab="scope"))
    assert s.rfp_type == RfpType.MAINTENANCE
    assert s.active_tab == "scope"
    assert s.rfp_type_locked
