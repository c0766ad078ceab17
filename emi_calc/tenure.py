"""Tenure normalization.

Widgets collect tenure in whatever unit their toggle shows: years and
months, years or quarters, or weeks. Everything is converted here into a
single ``Tenure`` (periods per year plus a period count) before a
``LoanRequest`` is built, so the engine only ever sees period counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Tuple

from .errors import InvalidLoanInput
from .utils import to_decimal

MONTHS_PER_YEAR = 12
QUARTERS_PER_YEAR = 4
WEEKS_PER_YEAR = 52


class TenureSplit(Enum):
    """How a fractional year value is split into whole years and months.

    ``ROUND_TOTAL`` rounds the total month count first and then splits it
    (car and used-car widgets). ``FLOOR_YEARS`` floors the years and rounds
    the fractional remainder to months (personal-loan widget), which can
    yield a month count of 12. Both give the same total month count.
    """

    ROUND_TOTAL = "round_total"
    FLOOR_YEARS = "floor_years"


@dataclass(frozen=True)
class Tenure:
    periods_per_year: int
    periods: int

    @property
    def years(self) -> Decimal:
        return Decimal(self.periods) / Decimal(self.periods_per_year)


def _whole(value: object, field: str) -> int:
    """Round a count to a whole number, half up, rejecting negatives."""
    number = to_decimal(value, field)
    if number < 0:
        raise InvalidLoanInput(f"{field} cannot be negative")
    return int(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _years_to_periods(years: object, periods_per_year: int) -> int:
    """Convert a year count to periods, rejecting counts that fall between periods.

    ``2.5`` years is 30 months or 10 quarters; ``2.1`` years is not a whole
    number of quarters and raises ``InvalidLoanInput``.
    """
    number = to_decimal(years, "tenureYears")
    if number < 0:
        raise InvalidLoanInput("tenureYears cannot be negative")
    periods = number * periods_per_year
    if periods != periods.to_integral_value():
        raise InvalidLoanInput(
            f"tenureYears of {years} is not a whole number of periods "
            f"at {periods_per_year} per year"
        )
    return int(periods)


def from_years_months(years: object = 0, months: object = 0) -> Tenure:
    """Monthly tenure from a years + months pair."""
    return Tenure(
        MONTHS_PER_YEAR,
        _years_to_periods(years, MONTHS_PER_YEAR) + _whole(months, "tenureMonths"),
    )


def from_months(months: object) -> Tenure:
    return Tenure(MONTHS_PER_YEAR, _whole(months, "tenureMonths"))


def from_quarters(quarters: object) -> Tenure:
    return Tenure(QUARTERS_PER_YEAR, _whole(quarters, "tenureQuarters"))


def from_years_as_quarters(years: object) -> Tenure:
    """Quarterly tenure from a year count (the quarterly widget's year mode)."""
    return Tenure(QUARTERS_PER_YEAR, _years_to_periods(years, QUARTERS_PER_YEAR))


def from_weeks(weeks: object) -> Tenure:
    return Tenure(WEEKS_PER_YEAR, _whole(weeks, "tenureWeeks"))


def split_tenure(
    value: object,
    unit: str = "years",
    method: TenureSplit = TenureSplit.ROUND_TOTAL,
) -> Tuple[int, int]:
    """Split a tenure slider value into ``(years, months)``.

    ``unit`` is ``"years"`` (fractional, e.g. ``2.5``) or ``"months"``.
    """
    number = to_decimal(value, "tenure")
    if number < 0:
        raise InvalidLoanInput("tenure cannot be negative")
    unit = unit.lower()
    if unit == "months":
        total = int(number.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return divmod(total, MONTHS_PER_YEAR)
    if unit != "years":
        raise InvalidLoanInput(f"Tenure unit must be 'years' or 'months'; got {unit}")

    if method is TenureSplit.ROUND_TOTAL:
        total = int((number * MONTHS_PER_YEAR).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return divmod(total, MONTHS_PER_YEAR)
    years = int(number.to_integral_value(rounding=ROUND_FLOOR))
    months = int(
        ((number - years) * MONTHS_PER_YEAR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )
    return years, months
