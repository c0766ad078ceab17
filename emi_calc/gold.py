"""Gold loan eligibility.

A gold loan is sized from the pledged ornaments: each ornament's weight is
valued at the per-gram rate of its purity, and the lender advances a fixed
loan-to-value share of the total.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable

from .errors import InvalidLoanInput
from .utils import to_decimal

# Rupees per gram by purity.
GOLD_RATES: Dict[str, Decimal] = {
    "24K": Decimal("6500"),
    "23K": Decimal("6000"),
    "22K": Decimal("5800"),
    "21K": Decimal("5600"),
    "20K": Decimal("5400"),
    "18K": Decimal("4900"),
    "16K": Decimal("4300"),
    "14K": Decimal("3800"),
}
DEFAULT_CARAT = "24K"
DEFAULT_LTV_PERCENT = Decimal("75")
TENURE_CHOICES = (3, 6, 9, 12)
DEFAULT_TENURE_MONTHS = 6


@dataclass(frozen=True)
class Ornament:
    carat: str
    weight_grams: Decimal

    def __post_init__(self) -> None:
        weight = to_decimal(self.weight_grams, "weight")
        if weight < 0:
            raise InvalidLoanInput("Ornament weight cannot be negative")
        object.__setattr__(self, "weight_grams", weight)
        object.__setattr__(self, "carat", str(self.carat).strip().upper())

    @property
    def rate_per_gram(self) -> Decimal:
        # unknown purities are valued at the 24K rate, as the widget does
        return GOLD_RATES.get(self.carat, GOLD_RATES[DEFAULT_CARAT])

    @property
    def value(self) -> Decimal:
        return self.weight_grams * self.rate_per_gram


def gold_value(ornaments: Iterable[Ornament]) -> Decimal:
    return sum((o.value for o in ornaments), Decimal("0"))


def eligible_amount(
    ornaments: Iterable[Ornament], ltv_percent: Decimal = DEFAULT_LTV_PERCENT
) -> Decimal:
    """Loan amount available against ``ornaments`` at ``ltv_percent``."""
    return gold_value(ornaments) * Decimal(ltv_percent) / Decimal("100")
