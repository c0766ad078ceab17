from decimal import Decimal

import pytest

from emi_calc import gold
from emi_calc.data_models import PaymentScheme
from emi_calc.errors import InvalidLoanInput
from emi_calc.products import CAR_LOAN, PERSONAL_LOAN, PRODUCTS, get_product
from emi_calc.tenure import TenureSplit


class TestProducts:
    def test_registry_holds_every_widget(self):
        assert set(PRODUCTS) == {
            "car-loan",
            "used-car-loan",
            "personal-loan",
            "quarterly",
            "weekly",
            "gold-loan",
        }

    def test_lookup(self):
        assert get_product("car-loan") is CAR_LOAN

    def test_unknown_product(self):
        with pytest.raises(InvalidLoanInput):
            get_product("home-loan")

    def test_frequencies(self):
        assert PRODUCTS["quarterly"].periods_per_year == 4
        assert PRODUCTS["weekly"].periods_per_year == 52
        assert PRODUCTS["gold-loan"].periods_per_year == 12

    def test_tenure_split_per_product(self):
        assert CAR_LOAN.tenure_split is TenureSplit.ROUND_TOTAL
        assert PERSONAL_LOAN.tenure_split is TenureSplit.FLOOR_YEARS

    def test_default_scheme_is_arrears(self):
        assert all(p.default_scheme is PaymentScheme.ARREARS for p in PRODUCTS.values())

    def test_to_dict(self):
        data = CAR_LOAN.to_dict()
        assert data["amount"] == {"min": 100000.0, "max": 1500000.0}
        assert data["tenurePeriods"] == {"min": 12, "max": 84}
        assert data["schemeSelectable"] is True
        assert data["defaultScheme"] == "arrears"


class TestGold:
    def test_eligible_amount_at_75_percent_ltv(self):
        ornaments = [gold.Ornament("24K", 20)]
        assert gold.gold_value(ornaments) == Decimal("130000")
        assert gold.eligible_amount(ornaments) == Decimal("97500")

    def test_several_ornaments(self):
        ornaments = [gold.Ornament("22K", 10), gold.Ornament("18K", Decimal("5.5"))]
        assert gold.gold_value(ornaments) == Decimal("58000") + Decimal("26950")

    def test_custom_ltv(self):
        ornaments = [gold.Ornament("24K", 10)]
        assert gold.eligible_amount(ornaments, Decimal("60")) == Decimal("39000")

    def test_carat_is_case_insensitive(self):
        assert gold.Ornament("22k", 1).rate_per_gram == Decimal("5800")

    def test_unknown_carat_uses_24k_rate(self):
        assert gold.Ornament("25K", 1).rate_per_gram == Decimal("6500")

    def test_no_ornaments(self):
        assert gold.eligible_amount([]) == 0

    def test_negative_weight(self):
        with pytest.raises(InvalidLoanInput):
            gold.Ornament("24K", -1)
