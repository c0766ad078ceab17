"""Shared fixtures for engine, web and CLI tests.

Canonical loans: 10 lakh at 10% over 12 months (car loan style), 5 lakh
interest-free over 20 quarters, and a 97,500 gold loan at 12% over 6 months.
"""

from decimal import Decimal

import pytest

from emi_calc.data_models import LoanRequest, PaymentScheme


@pytest.fixture
def car_loan_request() -> LoanRequest:
    return LoanRequest(
        principal=Decimal("1000000"),
        annual_rate_percent=Decimal("10"),
        periods_per_year=12,
        tenure_periods=12,
    )


@pytest.fixture
def interest_free_quarterly_request() -> LoanRequest:
    return LoanRequest(
        principal=Decimal("500000"),
        annual_rate_percent=Decimal("0"),
        periods_per_year=4,
        tenure_periods=20,
    )


@pytest.fixture
def gold_loan_request() -> LoanRequest:
    return LoanRequest(
        principal=Decimal("97500"),
        annual_rate_percent=Decimal("12"),
        periods_per_year=12,
        tenure_periods=6,
    )


@pytest.fixture
def advance_request() -> LoanRequest:
    return LoanRequest(
        principal=Decimal("1000000"),
        annual_rate_percent=Decimal("10"),
        periods_per_year=12,
        tenure_periods=12,
        payment_scheme=PaymentScheme.ADVANCE,
    )


@pytest.fixture
def client():
    from emi_calc_web.app import app

    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
