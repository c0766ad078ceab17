"""Data models for the EMI calculator.

This module defines the dataclasses passed into and out of the amortization
engine: the payment-timing scheme, the loan request, one schedule row and
the aggregated result. All of them are frozen; a recalculation always builds
a new request and gets a new result back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Tuple

from .errors import InvalidLoanInput
from .utils import to_decimal

SUPPORTED_PERIODS_PER_YEAR = (12, 4, 52)


class PaymentScheme(Enum):
    """When each installment falls due within its period.

    ``ARREARS`` is the ordinary annuity (payment at the end of the period).
    ``ADVANCE`` is the annuity-due (payment at the start of the period).
    """

    ARREARS = "arrears"
    ADVANCE = "advance"

    @classmethod
    def parse(cls, value: object) -> "PaymentScheme":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidLoanInput(
            f"EMI scheme must be 'arrears' or 'advance'; got {value!r}"
        )


@dataclass(frozen=True)
class LoanRequest:
    """Inputs of a single EMI calculation.

    Attributes
    ----------
    principal: Decimal
        Amount borrowed, in currency units.
    annual_rate_percent: Decimal
        Nominal annual interest rate in percent (``10`` means 10 %).
    periods_per_year: int
        12 for monthly, 4 for quarterly and 52 for weekly installments.
    tenure_periods: int
        Total number of installments. Year/month splits are converted to a
        single count by :mod:`emi_calc.tenure` before reaching this class.
    payment_scheme: PaymentScheme
        Arrears (end of period) or advance (start of period).
    """

    principal: Decimal
    annual_rate_percent: Decimal
    periods_per_year: int
    tenure_periods: int
    payment_scheme: PaymentScheme = PaymentScheme.ARREARS

    def __post_init__(self) -> None:
        object.__setattr__(self, "principal", to_decimal(self.principal, "principal"))
        object.__setattr__(
            self,
            "annual_rate_percent",
            to_decimal(self.annual_rate_percent, "annual_rate_percent"),
        )
        object.__setattr__(self, "payment_scheme", PaymentScheme.parse(self.payment_scheme))
        if self.periods_per_year not in SUPPORTED_PERIODS_PER_YEAR:
            raise InvalidLoanInput(
                f"periods_per_year must be one of {SUPPORTED_PERIODS_PER_YEAR}; "
                f"got {self.periods_per_year}"
            )
        if isinstance(self.tenure_periods, bool) or not isinstance(self.tenure_periods, int):
            raise InvalidLoanInput(
                f"tenure_periods must be an integer; got {self.tenure_periods!r}"
            )


@dataclass(frozen=True)
class PeriodEntry:
    """One row of the amortization schedule, amounts rounded to 0.01."""

    period_index: int
    interest_portion: Decimal
    principal_portion: Decimal
    installment: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    """Installment, totals and (possibly truncated) schedule for a request.

    ``total_payment`` is the sum of every installment of the full schedule,
    so it already reflects the last-period balancing adjustment even when
    ``schedule`` only holds a preview. ``truncated`` counts the rows left out
    of that preview.

    With no periods nothing is lent or repaid, so ``total_principal`` is 0
    rather than the requested principal. Echoing the principal there would
    make ``total_interest`` (payment minus principal) negative.
    """

    periodic_installment: Decimal
    total_principal: Decimal
    total_interest: Decimal
    total_payment: Decimal
    schedule: Tuple[PeriodEntry, ...] = field(default_factory=tuple)
    truncated: int = 0

    @property
    def principal_percentage(self) -> Decimal:
        if self.total_payment <= 0:
            return Decimal("0")
        return self.total_principal / self.total_payment * 100

    @property
    def interest_percentage(self) -> Decimal:
        if self.total_payment <= 0:
            return Decimal("0")
        return self.total_interest / self.total_payment * 100
