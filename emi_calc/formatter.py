"""Output helpers for the EMI calculator CLI.

This module renders loan summaries and amortization schedules as plain text
tables. Amounts are grouped the Indian way (``12,34,567.89``) because the
calculators quote rupee loans.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable

from .data_models import PeriodEntry
from .utils import round_currency

FREQUENCY_NAMES = {12: "monthly", 4: "quarterly", 52: "weekly"}


def format_inr(amount) -> str:
    """Format ``amount`` with lakh/crore digit grouping and two decimals."""
    value = round_currency(Decimal(str(amount)))
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}{whole}.{fraction}"


def print_summary(summary: Dict[str, object]) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {format_inr(summary['principal'])}")
    print(f"Interest rate      : {summary['annual_rate_percent']}% p.a.")
    frequency = FREQUENCY_NAMES.get(summary["periods_per_year"], "periodic")
    print(f"Tenure             : {summary['tenure_periods']} {frequency} installments"
          f" ({summary['tenure_years']} years)")
    print(f"EMI scheme         : {summary['payment_scheme']}")
    print(f"Installment        : {format_inr(summary['installment'])}")
    print(f"Total interest     : {format_inr(summary['total_interest'])}")
    print(f"Total payment      : {format_inr(summary['total_payment'])}")
    print(f"Principal share    : {summary['principal_percentage']}%")
    print(f"Interest share     : {summary['interest_percentage']}%")
    print("-" * 72)


def print_schedule(schedule: Iterable[PeriodEntry]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Period", "Installment", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.period_index),
            format_inr(entry.installment),
            format_inr(entry.principal_portion),
            format_inr(entry.interest_portion),
            format_inr(entry.closing_balance),
        ]
        print("\t".join(row))


def print_comparison(s1: Dict[str, object], s2: Dict[str, object]) -> None:
    """Print a comparison of two loan summaries side by side.

    The difference column is scenario2 - scenario1; a negative difference
    means the second scenario is cheaper.
    """
    print("Comparison")
    print("=" * 72)
    keys = [
        "installment",
        "total_interest",
        "total_payment",
        "tenure_periods",
    ]
    print(f"{'Metric':20s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key in keys:
        v1 = float(s1[key])
        v2 = float(s2[key])
        diff = v2 - v1
        print(f"{key:20s} {v1:15.2f} {v2:15.2f} {diff:15.2f}")
    print("=" * 72)
