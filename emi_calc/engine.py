"""Core calculation engine for the EMI calculator.

This module implements the amortizing-annuity model shared by every loan
widget (car, used car, personal, gold, quarterly and weekly EMI). It turns a
``LoanRequest`` into the periodic installment and a period-by-period
schedule, and aggregates the schedule into an ``AmortizationResult``.

The engine is a pure function of its input: no I/O, no shared state, and no
exceptions for degenerate input. A zero tenure gives a zero installment and
an empty schedule; a zero principal gives a schedule of zero rows.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import Iterator, List, Optional

from .data_models import AmortizationResult, LoanRequest, PaymentScheme, PeriodEntry
from .utils import round_currency

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def periodic_rate(annual_rate_percent: Decimal, periods_per_year: int) -> Decimal:
    """Convert a nominal annual rate in percent to a per-period fraction."""
    return Decimal(annual_rate_percent) / (Decimal(periods_per_year) * HUNDRED)


def compute_installment(request: LoanRequest) -> Decimal:
    """Return the unrounded periodic installment for ``request``.

    The formula is:

        installment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` the periodic rate and ``n`` the
    number of periods. When the rate is zero the payment simplifies to
    ``P / n``. Advance (annuity-due) payments are discounted by one period,
    i.e. divided by ``1 + i``.
    """
    term = request.tenure_periods
    principal = request.principal
    if term <= 0 or principal == 0:
        return ZERO

    rate = periodic_rate(request.annual_rate_percent, request.periods_per_year)
    if rate == 0:
        return principal / Decimal(term)

    factor = (1 + rate) ** term
    installment = principal * (rate * factor) / (factor - 1)
    if request.payment_scheme is PaymentScheme.ADVANCE:
        installment = installment / (1 + rate)
    return installment


def iter_schedule(request: LoanRequest) -> Iterator[PeriodEntry]:
    """Yield the amortization schedule one period at a time.

    Rows are built in the rounded (0.01) domain: the installment and each
    period's interest are rounded first, and the principal portion is the
    difference. The final period repays the exact remaining balance so the
    principal portions add up to the principal and the closing balance ends
    at zero.

    For advance payments the installment is made at the start of the period,
    so interest accrues on what is left after paying it.
    """
    term = request.tenure_periods
    if term <= 0:
        return

    rate = periodic_rate(request.annual_rate_percent, request.periods_per_year)
    installment = round_currency(compute_installment(request))
    advance = request.payment_scheme is PaymentScheme.ADVANCE
    balance = round_currency(request.principal)

    for period in range(1, term + 1):
        opening = balance
        accruing = opening - installment if advance else opening
        interest = round_currency(max(accruing, ZERO) * rate)

        if period == term:
            principal_part = opening
            payment = principal_part + interest
        else:
            principal_part = installment - interest
            payment = installment
            if principal_part > opening:
                # rounding drift paid the loan off early
                principal_part = opening
                payment = principal_part + interest

        balance = max(ZERO, opening - principal_part)
        yield PeriodEntry(
            period_index=period,
            interest_portion=interest,
            principal_portion=principal_part,
            installment=payment,
            closing_balance=balance,
        )


def compute_schedule(request: LoanRequest) -> List[PeriodEntry]:
    """Materialize the full schedule for ``request``."""
    return list(iter_schedule(request))


def amortize(request: LoanRequest, preview: Optional[int] = None) -> AmortizationResult:
    """Compute the installment, totals and schedule for a loan.

    Parameters
    ----------
    request: LoanRequest
        The loan to amortize.
    preview: Optional[int]
        When given, only the first ``preview`` rows are kept in
        ``AmortizationResult.schedule``. Totals are always computed from the
        full schedule.

    Returns
    -------
    AmortizationResult
        Installment rounded to 0.01, principal/interest/payment totals and
        the schedule rows.
    """
    total_payment = ZERO
    rows: List[PeriodEntry] = []
    count = 0
    for entry in iter_schedule(request):
        total_payment += entry.installment
        count += 1
        if preview is None or count <= preview:
            rows.append(entry)

    installment = round_currency(compute_installment(request))
    # an empty schedule lends nothing, so there is no principal to echo
    total_principal = round_currency(request.principal) if count else ZERO
    if not count:
        logger.debug("Tenure of %s periods gives an empty schedule", request.tenure_periods)

    result = AmortizationResult(
        periodic_installment=installment,
        total_principal=total_principal,
        total_interest=total_payment - total_principal,
        total_payment=total_payment,
        schedule=tuple(rows),
        truncated=count - len(rows),
    )
    logger.debug(
        "Amortized %s at %s%% over %d periods (%d/yr, %s): installment=%s",
        request.principal,
        request.annual_rate_percent,
        request.tenure_periods,
        request.periods_per_year,
        request.payment_scheme.value,
        installment,
    )
    return result
