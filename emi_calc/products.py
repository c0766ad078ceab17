"""Per-product configuration for the loan widgets.

The car, used-car and personal loan widgets run the same calculation and
differ only in their slider bounds, field names and tenure handling, and
the quarterly, weekly and gold widgets only change the installment
frequency. Each is described here by a ``ProductConfig`` and served by the
one engine in :mod:`emi_calc.engine`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Tuple

from .data_models import PaymentScheme
from .errors import InvalidLoanInput
from .tenure import MONTHS_PER_YEAR, QUARTERS_PER_YEAR, WEEKS_PER_YEAR, TenureSplit


@dataclass(frozen=True)
class ProductConfig:
    """Bounds, defaults and wire names of one calculator widget.

    ``amount_max``, ``rate_max`` and ``tenure_max`` (in periods) are hard
    limits enforced on requests. The minimums are the slider starting points
    and are only reported to widgets, because a zero amount or tenure is a
    valid "nothing entered yet" request.
    """

    key: str
    label: str
    periods_per_year: int
    amount_fields: Tuple[str, ...]
    amount_min: Decimal
    amount_max: Decimal
    rate_min: Decimal
    rate_max: Decimal
    tenure_min: int
    tenure_max: int
    installment_field: str = "emi"
    period_field: str = "month"
    payment_field: str = "emi"
    scheme_selectable: bool = False
    default_scheme: PaymentScheme = PaymentScheme.ARREARS
    tenure_split: Optional[TenureSplit] = None
    include_schedule: bool = False
    schedule_preview: Optional[int] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "key": self.key,
            "label": self.label,
            "periodsPerYear": self.periods_per_year,
            "amount": {"min": float(self.amount_min), "max": float(self.amount_max)},
            "interestRate": {"min": float(self.rate_min), "max": float(self.rate_max)},
            "tenurePeriods": {"min": self.tenure_min, "max": self.tenure_max},
            "schemeSelectable": self.scheme_selectable,
            "defaultScheme": self.default_scheme.value,
            "schedulePreview": self.schedule_preview,
        }


CAR_LOAN = ProductConfig(
    key="car-loan",
    label="Car loan",
    periods_per_year=MONTHS_PER_YEAR,
    amount_fields=("carLoanAmount", "loanAmount", "principal"),
    amount_min=Decimal("100000"),
    amount_max=Decimal("1500000"),
    rate_min=Decimal("5"),
    rate_max=Decimal("17.5"),
    tenure_min=12,
    tenure_max=84,
    scheme_selectable=True,
    tenure_split=TenureSplit.ROUND_TOTAL,
)

USED_CAR_LOAN = ProductConfig(
    key="used-car-loan",
    label="Used car loan",
    periods_per_year=MONTHS_PER_YEAR,
    amount_fields=("usedCarLoanAmount", "loanAmount", "principal"),
    amount_min=Decimal("50000"),
    amount_max=Decimal("1000000"),
    rate_min=Decimal("6"),
    rate_max=Decimal("20"),
    tenure_min=12,
    tenure_max=84,
    scheme_selectable=True,
    tenure_split=TenureSplit.ROUND_TOTAL,
)

# The personal loan page reuses the car loan form, field name included.
PERSONAL_LOAN = ProductConfig(
    key="personal-loan",
    label="Personal loan",
    periods_per_year=MONTHS_PER_YEAR,
    amount_fields=("personalLoanAmount", "carLoanAmount", "loanAmount", "principal"),
    amount_min=Decimal("100000"),
    amount_max=Decimal("1500000"),
    rate_min=Decimal("5"),
    rate_max=Decimal("17.5"),
    tenure_min=12,
    tenure_max=84,
    scheme_selectable=True,
    tenure_split=TenureSplit.FLOOR_YEARS,
)

QUARTERLY = ProductConfig(
    key="quarterly",
    label="Quarterly EMI",
    periods_per_year=QUARTERS_PER_YEAR,
    amount_fields=("loanAmount", "principal"),
    amount_min=Decimal("100000"),
    amount_max=Decimal("20000000"),
    rate_min=Decimal("5"),
    rate_max=Decimal("20"),
    tenure_min=1,
    tenure_max=120,
    installment_field="quarterlyEmi",
    period_field="quarter",
    payment_field="quarterlyPayment",
    include_schedule=True,
    schedule_preview=20,
)

WEEKLY = ProductConfig(
    key="weekly",
    label="Weekly EMI",
    periods_per_year=WEEKS_PER_YEAR,
    amount_fields=("principal", "loanAmount"),
    amount_min=Decimal("10000"),
    amount_max=Decimal("10000000"),
    rate_min=Decimal("1"),
    rate_max=Decimal("30"),
    tenure_min=4,
    tenure_max=520,
    installment_field="weeklyEmi",
    period_field="week",
    payment_field="weeklyPayment",
    include_schedule=True,
    schedule_preview=20,
)

GOLD_LOAN = ProductConfig(
    key="gold-loan",
    label="Gold loan",
    periods_per_year=MONTHS_PER_YEAR,
    amount_fields=("eligibleAmount", "loanAmount", "principal"),
    amount_min=Decimal("0"),
    amount_max=Decimal("10000000"),
    rate_min=Decimal("7"),
    rate_max=Decimal("30"),
    tenure_min=3,
    tenure_max=12,
    include_schedule=True,
)

PRODUCTS: Dict[str, ProductConfig] = {
    product.key: product
    for product in (CAR_LOAN, USED_CAR_LOAN, PERSONAL_LOAN, QUARTERLY, WEEKLY, GOLD_LOAN)
}


def get_product(key: str) -> ProductConfig:
    try:
        return PRODUCTS[key]
    except KeyError:
        raise InvalidLoanInput(
            f"Unknown product {key!r}; expected one of {', '.join(PRODUCTS)}"
        ) from None
