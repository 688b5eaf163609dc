"""Canonical loans used across the test suite.

Annuity: 12 000 at 12 % over 12 monthly instalments, as of 2024-01-15.
Serial: the same loan repaid with constant amortization.
"""

from datetime import datetime

import pytest

from loan_amortizer.data_models import Loan

AS_OF = datetime(2024, 1, 15, 10, 30)


@pytest.fixture
def annuity_loan() -> Loan:
    return Loan(
        interest_rate=0.12,
        principal=12000,
        instalments=12,
        pay_every="month",
        type="annuity",
        as_of=AS_OF,
    )


@pytest.fixture
def serial_loan() -> Loan:
    return Loan(
        interest_rate=0.12,
        principal=12000,
        instalments=12,
        pay_every="month",
        type="serial",
        as_of=AS_OF,
    )


@pytest.fixture
def fee_loan() -> Loan:
    """Annuity loan with an invoice fee and an initial fee."""
    return Loan(
        interest_rate=0.06,
        principal=100000,
        instalments=120,
        pay_every="month",
        type="annuity",
        invoice_fee=25,
        initial_fee=500,
        as_of=AS_OF,
    )
