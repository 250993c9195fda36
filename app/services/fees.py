# app/services/fees.py
from __future__ import annotations
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Dict

# (upper bound inclusive, fee) in rupees; anything above the last bound pays TOP_FEE
FEE_BANDS: List[tuple[int, int]] = [
    (2_500_000, 1_500),    # up to Rs. 25 Lakh
    (5_000_000, 2_500),    # up to Rs. 50 Lakh
    (10_000_000, 5_000),   # up to Rs. 1 Cr
]
TOP_FEE = 15_000
EMD_RATE = Decimal("0.03")

_non_digit = re.compile(r"\D")
_group3 = re.compile(r"\B(?=(\d{3})+(?!\d))")


def tender_fee(estimated_amount: int) -> int:
    """Non-refundable RFP / tender fee for an estimated contract value."""
    for bound, fee in FEE_BANDS:
        if estimated_amount <= bound:
            return fee
    return TOP_FEE


def emd(estimated_amount: int) -> int:
    """
    Earnest Money Deposit: 3% of the estimated amount, rounded half-up
    to whole rupees. Decimal keeps e.g. 0.5 rupee cases from banker's rounding.
    """
    val = (Decimal(int(estimated_amount)) * EMD_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(val)


def format_currency(amount: int) -> str:
    """12345678 -> '12,345,678' (groups of three from the right)."""
    return _group3.sub(",", str(int(amount)))


def parse_currency(value: str | None) -> int:
    """
    Inverse of format_currency. Separators and any other non-digit characters
    are dropped; empty or digit-less input yields 0.
    """
    digits = _non_digit.sub("", value or "")
    return int(digits) if digits else 0


def fee_schedule() -> List[Dict[str, int | str | None]]:
    rows: List[Dict[str, int | str | None]] = []
    lower = 0
    for bound, fee in FEE_BANDS:
        rows.append({"from": lower, "upTo": bound, "tenderFee": fee, "emdRate": str(EMD_RATE)})
        lower = bound + 1
    rows.append({"from": lower, "upTo": None, "tenderFee": TOP_FEE, "emdRate": str(EMD_RATE)})
    return rows


__all__ = ["tender_fee", "emd", "format_currency", "parse_currency", "fee_schedule"]
