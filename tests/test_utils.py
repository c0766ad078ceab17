from decimal import Decimal

import pytest

from emi_calc.errors import InvalidLoanInput
from emi_calc.formatter import format_inr
from emi_calc.utils import (
    decimal_from_str,
    parse_amount,
    round_currency,
    round_percent,
    to_decimal,
)


class TestParseAmount:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("500000", Decimal("500000")),
            ("500k", Decimal("500000")),
            ("5l", Decimal("500000")),
            ("5 lakh", Decimal("500000")),
            ("1.2cr", Decimal("12000000")),
            ("2M", Decimal("2000000")),
            ("1,00,000", Decimal("100000")),
        ],
    )
    def test_shorthand(self, text, expected):
        assert parse_amount(text) == expected

    def test_garbage(self):
        with pytest.raises(InvalidLoanInput):
            parse_amount("lots")


class TestToDecimal:
    def test_float_keeps_its_short_form(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_string(self):
        assert to_decimal(12) == Decimal("12")
        assert to_decimal(" 7.5 ") == Decimal("7.5")

    @pytest.mark.parametrize("value", [True, None, "abc", float("nan"), float("inf"), [1]])
    def test_rejected(self, value):
        with pytest.raises(InvalidLoanInput):
            to_decimal(value, "interestRate")

    def test_error_names_field(self):
        with pytest.raises(InvalidLoanInput, match="interestRate"):
            to_decimal("abc", "interestRate")

    def test_decimal_from_str_rejects_infinity(self):
        with pytest.raises(InvalidLoanInput):
            decimal_from_str("Infinity")


class TestRounding:
    def test_half_up(self):
        assert round_currency(Decimal("0.125")) == Decimal("0.13")
        assert round_percent(Decimal("94.75")) == Decimal("94.8")


class TestFormatInr:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("999"), "999.00"),
            (Decimal("100000"), "1,00,000.00"),
            (Decimal("1234567.891"), "12,34,567.89"),
            (Decimal("87915.89"), "87,915.89"),
            (Decimal("-25000"), "-25,000.00"),
        ],
    )
    def test_grouping(self, amount, expected):
        assert format_inr(amount) == expected
