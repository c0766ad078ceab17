"""Command-line interface for the EMI calculator.

This module uses ``click`` to implement a multi-command interface. Users
can print the full amortization schedule, view summaries, compare two loan
scenarios or list the configured loan products. Results can be printed to
the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import shlex
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from . import tenure
from .data_models import AmortizationResult, LoanRequest, PeriodEntry
from .engine import amortize
from .errors import InvalidLoanInput
from .formatter import print_comparison, print_schedule, print_summary
from .logging_config import configure_logging
from .products import PRODUCTS
from .utils import parse_amount, round_currency, round_percent

FREQUENCIES = {"monthly": 12, "quarterly": 4, "weekly": 52}
MAX_PRINTED_ROWS = 120


def build_request_from_options(
    principal: str,
    rate: float,
    frequency: str = "monthly",
    years: Optional[float] = None,
    months: Optional[int] = None,
    quarters: Optional[int] = None,
    weeks: Optional[int] = None,
    scheme: str = "arrears",
) -> LoanRequest:
    """Build a ``LoanRequest`` from CLI option values.

    Monthly loans take ``years`` (fractional years are split into months) and
    ``months``; quarterly loans take ``quarters`` or whole ``years``; weekly
    loans take ``weeks``.
    """
    try:
        principal_value = parse_amount(principal)
        if principal_value < 0:
            raise InvalidLoanInput("Principal cannot be negative")
        if rate < 0:
            raise InvalidLoanInput("Interest rate cannot be negative")
        frequency = frequency.lower()
        if frequency == "monthly":
            whole_years, extra_months = tenure.split_tenure(years or 0, "years")
            normalized = tenure.from_years_months(whole_years, extra_months + (months or 0))
        elif frequency == "quarterly":
            if quarters is not None:
                normalized = tenure.from_quarters(quarters)
            else:
                normalized = tenure.from_years_as_quarters(years or 0)
        elif frequency == "weekly":
            normalized = tenure.from_weeks(weeks or 0)
        else:
            raise InvalidLoanInput(f"Unknown frequency: {frequency}")
        return LoanRequest(
            principal=principal_value,
            annual_rate_percent=Decimal(str(rate)),
            periods_per_year=normalized.periods_per_year,
            tenure_periods=normalized.periods,
            payment_scheme=scheme,
        )
    except InvalidLoanInput as exc:
        raise click.BadParameter(str(exc))


def summarize(request: LoanRequest, result: AmortizationResult) -> Dict[str, Any]:
    """Flatten a request and its result into a JSON-friendly summary."""
    normalized = tenure.Tenure(request.periods_per_year, request.tenure_periods)
    return {
        "principal": float(result.total_principal),
        "annual_rate_percent": float(request.annual_rate_percent),
        "periods_per_year": request.periods_per_year,
        "tenure_periods": request.tenure_periods,
        "tenure_years": float(round_currency(normalized.years)),
        "payment_scheme": request.payment_scheme.value,
        "installment": float(result.periodic_installment),
        "total_interest": float(round_currency(result.total_interest)),
        "total_payment": float(round_currency(result.total_payment)),
        "principal_percentage": float(round_percent(result.principal_percentage)),
        "interest_percentage": float(round_percent(result.interest_percentage)),
    }


def export_to_json(path: Path, schedule: List[PeriodEntry], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    sched_list = []
    for e in schedule:
        sched_list.append(
            {
                "period": e.period_index,
                "installment": float(e.installment),
                "principal": float(e.principal_portion),
                "interest": float(e.interest_portion),
                "balance": float(e.closing_balance),
            }
        )
    data = {"summary": summary, "schedule": sched_list}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[PeriodEntry]) -> None:
    """Export schedule to a CSV file."""
    header = ["Period", "Installment", "Principal", "Interest", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.period_index,
                    f"{e.installment:.2f}",
                    f"{e.principal_portion:.2f}",
                    f"{e.interest_portion:.2f}",
                    f"{e.closing_balance:.2f}",
                ]
            )


def loan_options(func):
    """Attach the loan parameter options shared by ``schedule`` and ``summary``."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (accepts 500k, 5l, 1cr)"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--frequency", "-f", "frequency", type=click.Choice(list(FREQUENCIES)), default="monthly", help="Installment frequency"),
        click.option("--years", "-y", "years", type=float, help="Tenure in years (half years allowed for monthly loans)"),
        click.option("--months", "-m", "months", type=int, help="Additional tenure in months (monthly loans)"),
        click.option("--quarters", "-q", "quarters", type=int, help="Tenure in quarters (quarterly loans)"),
        click.option("--weeks", "-w", "weeks", type=int, help="Tenure in weeks (weekly loans)"),
        click.option("--scheme", "scheme", type=click.Choice(["arrears", "advance"]), default="arrears", help="EMI due at period end (arrears) or start (advance)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--log-level", "log_level", default=None, help="Logging level (defaults to EMI_CALC_LOG_LEVEL or INFO)")
def cli(log_level: Optional[str]) -> None:
    """An EMI calculator for monthly, quarterly and weekly loans."""
    configure_logging(log_level)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    frequency: str,
    years: Optional[float],
    months: Optional[int],
    quarters: Optional[int],
    weeks: Optional[int],
    scheme: str,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    request = build_request_from_options(principal, rate, frequency, years, months, quarters, weeks, scheme)
    result = amortize(request)
    summary_data = summarize(request, result)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, list(result.schedule), summary_data)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, list(result.schedule))
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(summary_data)
    # Limit schedule length printed to avoid flooding the terminal
    if len(result.schedule) > MAX_PRINTED_ROWS:
        click.echo(
            f"Schedule has {len(result.schedule)} rows; showing first {MAX_PRINTED_ROWS} rows."
        )
    print_schedule(result.schedule[:MAX_PRINTED_ROWS])


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: float,
    frequency: str,
    years: Optional[float],
    months: Optional[int],
    quarters: Optional[int],
    weeks: Optional[int],
    scheme: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    request = build_request_from_options(principal, rate, frequency, years, months, quarters, weeks, scheme)
    summary_data = summarize(request, amortize(request, preview=0))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


# Scenario option tokens accepted by ``compare`` and the parameter each sets.
SCENARIO_TOKENS = {
    "-p": ("principal", str),
    "--principal": ("principal", str),
    "-r": ("rate", float),
    "--rate": ("rate", float),
    "-f": ("frequency", str),
    "--frequency": ("frequency", str),
    "-y": ("years", float),
    "--years": ("years", float),
    "-m": ("months", int),
    "--months": ("months", int),
    "-q": ("quarters", int),
    "--quarters": ("quarters", int),
    "-w": ("weeks", int),
    "--weeks": ("weeks", int),
    "--scheme": ("scheme", str),
}


def parse_scenario_opts(opts: str) -> Dict[str, Any]:
    """Convert a quoted scenario option string into ``build_request_from_options`` kwargs."""
    tokens = shlex.split(opts)
    params: Dict[str, Any] = {"frequency": "monthly", "scheme": "arrears"}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token not in SCENARIO_TOKENS:
            raise click.BadParameter(f"Unknown option in scenario: {token}")
        if i + 1 >= len(tokens):
            raise click.BadParameter(f"Option {token} needs a value")
        name, convert = SCENARIO_TOKENS[token]
        try:
            params[name] = convert(tokens[i + 1])
        except ValueError:
            raise click.BadParameter(f"Invalid value for {token}: {tokens[i + 1]}")
        i += 2
    for required in ("principal", "rate"):
        if required not in params:
            raise click.BadParameter(f"Scenario missing required option {required}")
    return params


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        emi-calc compare --scenario1 "-p 10l -r 10 -y 5" --scenario2 "-p 10l -r 9.5 -y 4"
    """
    summaries = []
    for opts in (scenario1, scenario2):
        request = build_request_from_options(**parse_scenario_opts(opts))
        summaries.append(summarize(request, amortize(request, preview=0)))
    print_comparison(summaries[0], summaries[1])


@cli.command()
def products() -> None:
    """List the configured loan products and their limits."""
    for product in PRODUCTS.values():
        click.echo(
            f"{product.key:15s} {product.label:15s} "
            f"amount<={product.amount_max} rate<={product.rate_max}% "
            f"tenure<={product.tenure_max} {product.period_field}s"
            f"{' (arrears/advance)' if product.scheme_selectable else ''}"
        )


if __name__ == "__main__":
    cli()
