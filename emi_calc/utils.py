"""Utility functions for the EMI calculator.

This module provides helpers for turning user input (JSON numbers, form
strings, shorthand amounts such as ``"5l"``) into ``Decimal`` values and for
the rounding rules shared by the engine, the CLI and the web endpoints.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Any

from .errors import InvalidLoanInput

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")

# Suffix multipliers accepted by ``parse_amount``, longest first.
AMOUNT_SUFFIXES = (
    ("lakh", Decimal("100000")),
    ("cr", Decimal("10000000")),
    ("k", Decimal("1000")),
    ("l", Decimal("100000")),
    ("m", Decimal("1000000")),
)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and surrounding whitespace. It raises
    ``InvalidLoanInput`` if conversion fails or the value is not finite.
    """
    try:
        cleaned = value.replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise InvalidLoanInput(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise InvalidLoanInput(f"Invalid numeric value: {value}")
    return result


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """Coerce a JSON/form value to ``Decimal``.

    Floats go through their ``str()`` form so ``0.1`` stays ``Decimal("0.1")``.
    Booleans are rejected even though they are ints in Python.
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidLoanInput(f"{field} must be a finite number")
        return value
    if isinstance(value, bool) or value is None:
        raise InvalidLoanInput(f"{field} must be a number")
    if isinstance(value, (int, float)):
        return decimal_from_str(str(value))
    if isinstance(value, str):
        try:
            return decimal_from_str(value)
        except InvalidLoanInput as exc:
            raise InvalidLoanInput(f"{field} must be a number, got {value!r}") from exc
    raise InvalidLoanInput(f"{field} must be a number")


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000") and shorthand with ``k``, ``l``/``lakh``,
    ``cr`` and ``m`` suffixes (e.g. "5l" meaning 500_000, "1.2cr" meaning
    12_000_000).
    """
    text = value.strip().lower().replace(",", "")
    factor = Decimal("1")
    for suffix, multiplier in AMOUNT_SUFFIXES:
        if text.endswith(suffix):
            factor = multiplier
            text = text[: -len(suffix)]
            break
    try:
        return decimal_from_str(text) * factor
    except InvalidLoanInput as exc:
        raise InvalidLoanInput(f"Invalid amount: {value}") from exc


def round_currency(amount: Decimal) -> Decimal:
    """Round to the currency sub-unit (paise/cents)."""
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_percent(value: Decimal) -> Decimal:
    return value.quantize(ONE_PLACE, rounding=ROUND_HALF_UP)
