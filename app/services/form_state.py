# app/services/form_state.py
"""
Form state as an explicit reducer.

The form used to keep one large mutable record and overwrite the fee / EMD /
RFP number on every keystroke. Here a state transition is a pure function
(state, edit) -> new state, and those values are computed fields of the
state (see FeeDetails and RfpFormData in app.models.schemas), so they can
never drift from their inputs.
"""
from __future__ import annotations

import re
from typing import Any, Dict

from app.models.schemas import BiddingSchedule, FormEdit, RfpFormData, RfpType

DETAILS_TAB = "details"
TABS = ("details", "schedule", "scope")

DERIVED_FIELDS = {"tender_fee", "emd", "rfp_number"}
CURRENCY_FIELDS = {"estimated_amount"}

_camel_boundary = re.compile(r"(?<!^)(?=[A-Z])")


class FormState(RfpFormData):
    active_tab: str = DETAILS_TAB
    rfp_type_locked: bool = False


class FormEditError(ValueError):
    pass


def to_snake(name: str) -> str:
    return _camel_boundary.sub("_", name.strip()).lower()


def _resolve(field: str) -> tuple[str, ...]:
    """
    'tenderTitle' -> ('tender_title',)
    'schedule.rfpAvailableDate' / 'rfpAvailableDate' -> ('schedule', 'rfp_available_date')
    'estimatedAmount' -> ('fees', 'estimated_amount')
    """
    parts = tuple(to_snake(p) for p in field.split(".") if p.strip())
    if not parts:
        raise FormEditError("Empty field name")
    leaf = parts[-1]
    if leaf in DERIVED_FIELDS:
        raise FormEditError(f"{field} is derived and cannot be set directly")
    if len(parts) == 1:
        if leaf in BiddingSchedule.model_fields:
            return ("schedule", leaf)
        if leaf in CURRENCY_FIELDS:
            return ("fees", leaf)
        if leaf in RfpFormData.model_fields:
            return parts
    elif len(parts) == 2:
        if parts[0] == "schedule" and leaf in BiddingSchedule.model_fields:
            return parts
        if parts[0] == "fees" and leaf in CURRENCY_FIELDS:
            return parts
    raise FormEditError(f"Unknown form field: {field}")


def switch_tab(state: FormState, tab: str) -> FormState:
    if tab not in TABS:
        raise FormEditError(f"Unknown tab: {tab}")
    # Leaving the details tab fixes the RFP type for the rest of the session
    locked = state.rfp_type_locked or tab != DETAILS_TAB
    return state.model_copy(update={"active_tab": tab, "rfp_type_locked": locked})


def set_field(state: FormState, field: str, value: Any) -> FormState:
    path = _resolve(field)
    if path == ("rfp_type",) and state.rfp_type_locked:
        return state

    data: Dict[str, Any] = state.model_dump(exclude=DERIVED_FIELDS)
    if len(path) == 1:
        data[path[0]] = value
    else:
        section = dict(data.get(path[0]) or {})
        section[path[1]] = value
        data[path[0]] = section

    if path == ("tender_title",):
        _follow_tender_title(data, old_title=state.tender_title, new_title=value or "")

    try:
        return FormState.model_validate(data)
    except ValueError as e:
        raise FormEditError(str(e)) from e


def _follow_tender_title(data: Dict[str, Any], *, old_title: str, new_title: str) -> None:
    # The SOW project title tracks the tender title until the user edits it
    sow = data.get("scope_of_work")
    if not sow:
        return
    current = sow.get("project_title") or ""
    if not current or current == old_title:
        data["scope_of_work"] = {**sow, "project_title": new_title}


def apply_edit(state: FormState, edit: FormEdit) -> FormState:
    new_state = state
    if edit.field:
        new_state = set_field(new_state, edit.field, edit.value)
    if edit.tab:
        new_state = switch_tab(new_state, edit.tab)
    return new_state


def initial_state(rfp_type: RfpType = RfpType.CONSULTANCY) -> FormState:
    return FormState(rfp_type=rfp_type)


__all__ = ["FormState", "FormEditError", "apply_edit", "set_field", "switch_tab", "initial_state"]
