import pytest

from app.services.fees import emd, fee_schedule, format_currency, parse_currency, tender_fee

FEE_CASES = [
    (0, 1_500),
    (1, 1_500),
    (2_500_000, 1_500),
    (2_500_001, 2_500),
    (5_000_000, 2_500),
    (5_000_001, 5_000),
    (10_000_000, 5_000),
    (10_000_001, 15_000),
    (250_000_000, 15_000),
]


@pytest.mark.parametrize("amount, fee", FEE_CASES)
def test_tender_fee_bands(amount, fee):
    assert tender_fee(amount) == fee


@pytest.mark.parametrize("amount, expected", [
    (5_000_000, 150_000),
    (0, 0),
    (50, 2),        # 1.5 rounds half-up
    (16, 0),        # 0.48
    (17, 1),        # 0.51
    (1_234_567, 37_037),
])
def test_emd_is_three_percent_rounded_half_up(amount, expected):
    assert emd(amount) == expected


@pytest.mark.parametrize("amount, text", [
    (0, "0"),
    (999, "999"),
    (1000, "1,000"),
    (12_345_678, "12,345,678"),
])
def test_format_currency(amount, text):
    assert format_currency(amount) == text


@pytest.mark.parametrize("text, amount", [
    ("12,345,678", 12_345_678),
    ("Rs. 50,00,000/-", 5_000_000),
    ("", 0),
    (None, 0),
    ("abc", 0),
])
def test_parse_currency(text, amount):
    assert parse_currency(text) == amount


@pytest.mark.parametrize("n", [0, 7, 1_000, 2_500_001, 987_654_321])
def test_parse_inverts_format(n):
    assert parse_currency(format_currency(n)) == n


def test_fee_schedule_is_contiguous():
    rows = fee_schedule()
    assert rows[0]["from"] == 0
    for prev, nxt in zip(rows, rows[1:]):
        assert nxt["from"] == prev["upTo"] + 1
    assert rows[-1]["upTo"] is None and rows[-1]["tenderFee"] == 15_000
