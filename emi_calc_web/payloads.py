"""Turn widget JSON payloads into loan requests.

Every widget posts its own field names (``carLoanAmount``,
``usedCarLoanAmount``, ``tenureWeeks`` ...). This module validates those
fields, normalizes the tenure and builds the ``LoanRequest`` the engine
consumes. Any out-of-domain value raises ``InvalidLoanInput``; zero amounts
and tenures pass through so the engine can return its neutral result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional

from emi_calc import gold, tenure
from emi_calc.data_models import LoanRequest, PaymentScheme
from emi_calc.errors import InvalidLoanInput
from emi_calc.products import ProductConfig
from emi_calc.tenure import Tenure, TenureSplit
from emi_calc.utils import to_decimal


@dataclass(frozen=True)
class CalculationInput:
    """A validated request plus the response options that came with it."""

    request: LoanRequest
    include_schedule: bool
    full_schedule: bool
    extras: Dict[str, Any] = field(default_factory=dict)


def _bounded(value: Any, name: str, maximum: Decimal) -> Decimal:
    number = to_decimal(value, name)
    if number < 0:
        raise InvalidLoanInput(f"{name} cannot be negative")
    if number > maximum:
        raise InvalidLoanInput(f"{name} cannot exceed {maximum}")
    return number


def _flag(payload: Mapping[str, Any], name: str, default: bool) -> bool:
    value = payload.get(name, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.lower() in ("1", "true", "yes"):
        return True
    if isinstance(value, str) and value.lower() in ("0", "false", "no", ""):
        return False
    raise InvalidLoanInput(f"{name} must be true or false")


def _monthly_tenure(product: ProductConfig, payload: Mapping[str, Any]) -> Tenure:
    if "tenureValue" in payload:
        years, months = tenure.split_tenure(
            payload["tenureValue"],
            str(payload.get("tenureUnit", "years")),
            product.tenure_split or TenureSplit.ROUND_TOTAL,
        )
        return tenure.from_years_months(years, months)
    return tenure.from_years_months(
        payload.get("tenureYears", 0), payload.get("tenureMonths", 0)
    )


def _quarterly_tenure(product: ProductConfig, payload: Mapping[str, Any]) -> Tenure:
    if "tenureQuarters" in payload:
        return tenure.from_quarters(payload["tenureQuarters"])
    if "tenureYears" in payload:
        return tenure.from_years_as_quarters(payload["tenureYears"])
    raise InvalidLoanInput("tenureQuarters or tenureYears is required")


def _weekly_tenure(product: ProductConfig, payload: Mapping[str, Any]) -> Tenure:
    if "tenureWeeks" not in payload:
        raise InvalidLoanInput("tenureWeeks is required")
    return tenure.from_weeks(payload["tenureWeeks"])


def _gold_tenure(product: ProductConfig, payload: Mapping[str, Any]) -> Tenure:
    result = tenure.from_months(payload.get("tenureMonths", gold.DEFAULT_TENURE_MONTHS))
    if result.periods not in gold.TENURE_CHOICES:
        choices = ", ".join(str(c) for c in gold.TENURE_CHOICES)
        raise InvalidLoanInput(f"tenureMonths must be one of {choices}")
    return result


TENURE_PARSERS: Dict[str, Callable[[ProductConfig, Mapping[str, Any]], Tenure]] = {
    "car-loan": _monthly_tenure,
    "used-car-loan": _monthly_tenure,
    "personal-loan": _monthly_tenure,
    "quarterly": _quarterly_tenure,
    "weekly": _weekly_tenure,
    "gold-loan": _gold_tenure,
}


def parse_ornaments(raw: Any) -> List[gold.Ornament]:
    if not isinstance(raw, list):
        raise InvalidLoanInput("ornaments must be a list")
    ornaments = []
    for index, item in enumerate(raw, start=1):
        if not isinstance(item, Mapping):
            raise InvalidLoanInput(f"ornament {index} must be an object")
        try:
            ornaments.append(
                gold.Ornament(
                    carat=item.get("carat", gold.DEFAULT_CARAT),
                    weight_grams=item.get("weight"),
                )
            )
        except InvalidLoanInput as exc:
            raise InvalidLoanInput(f"ornament {index}: {exc}") from exc
    return ornaments


def _amount(product: ProductConfig, payload: Mapping[str, Any], extras: Dict[str, Any]) -> Decimal:
    if product.key == "gold-loan" and "ornaments" in payload:
        ornaments = parse_ornaments(payload["ornaments"])
        total_value = gold.gold_value(ornaments)
        eligible = gold.eligible_amount(ornaments)
        extras.update(
            totalGoldValue=total_value,
            eligibleAmount=eligible,
            ltvRatio=gold.DEFAULT_LTV_PERCENT,
        )
        return _bounded(eligible, "eligibleAmount", product.amount_max)
    for name in product.amount_fields:
        if name in payload:
            return _bounded(payload[name], name, product.amount_max)
    raise InvalidLoanInput(f"{product.amount_fields[0]} is required")


def _scheme(product: ProductConfig, payload: Mapping[str, Any]) -> PaymentScheme:
    if "emiScheme" not in payload:
        return product.default_scheme
    scheme = PaymentScheme.parse(payload["emiScheme"])
    if scheme is not product.default_scheme and not product.scheme_selectable:
        raise InvalidLoanInput(f"{product.label} only supports {product.default_scheme.value} EMI")
    return scheme


def parse_calculation(product: ProductConfig, payload: Any) -> CalculationInput:
    """Validate ``payload`` for ``product`` and build the engine request."""
    if not isinstance(payload, Mapping):
        raise InvalidLoanInput("Request body must be a JSON object")

    extras: Dict[str, Any] = {}
    principal = _amount(product, payload, extras)
    if "interestRate" not in payload:
        raise InvalidLoanInput("interestRate is required")
    rate = _bounded(payload["interestRate"], "interestRate", product.rate_max)

    normalized = TENURE_PARSERS[product.key](product, payload)
    if normalized.periods > product.tenure_max:
        raise InvalidLoanInput(
            f"Tenure cannot exceed {product.tenure_max} {product.period_field}s"
        )

    request = LoanRequest(
        principal=principal,
        annual_rate_percent=rate,
        periods_per_year=normalized.periods_per_year,
        tenure_periods=normalized.periods,
        payment_scheme=_scheme(product, payload),
    )
    return CalculationInput(
        request=request,
        include_schedule=_flag(payload, "includeSchedule", product.include_schedule),
        full_schedule=_flag(payload, "fullSchedule", False),
        extras=extras,
    )


def preview_length(product: ProductConfig, calc: CalculationInput, default: int) -> Optional[int]:
    """Rows to return: all of them for ``fullSchedule``, else the product preview."""
    if calc.full_schedule:
        return None
    return product.schedule_preview or default
