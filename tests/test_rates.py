import math

import pytest

from loan_amortizer.data_models import Loan
from loan_amortizer.rates import effect, effective_interest_rate, newton_rate, pmt, rate


class TestSpreadsheetFunctions:
    def test_pmt(self):
        assert pmt(0.01, 12, 12000) == pytest.approx(1066.1855, abs=1e-4)
        assert pmt(0.01, 12, -12000) == pytest.approx(-1066.1855, abs=1e-4)

    def test_pmt_zero_rate_is_nan(self):
        assert math.isnan(pmt(0, 12, 12000))

    def test_rate(self):
        payment = pmt(0.01, 12, 12000)
        assert rate(12, payment, -12000, guess=0.01) == pytest.approx(0.01)

    def test_rate_from_distant_guess(self):
        payment = pmt(0.02, 24, 5000)
        assert rate(24, payment, -5000, guess=0.005) == pytest.approx(0.02, abs=1e-6)

    def test_effect(self):
        assert effect(0.12, 12) == 0.1268
        assert effect(0, 12) == 0

    def test_newton_rate(self):
        assert newton_rate(12000, 12, pmt(0.01, 12, 12000)) == pytest.approx(0.01, abs=1e-9)


class TestSecant:
    def test_without_fees(self, annuity_loan):
        assert effective_interest_rate(annuity_loan) == 0.1268

    def test_default_method(self, annuity_loan):
        assert effective_interest_rate(annuity_loan) == effective_interest_rate(annuity_loan, "secant")

    def test_fees_raise_the_rate(self, fee_loan):
        result = effective_interest_rate(fee_loan)
        assert effect(0.06, 12) < result < 0.08

    def test_zero_rate_annuity(self):
        loan = Loan(principal=1200, instalments=12, type="annuity")
        assert effective_interest_rate(loan) == 0


class TestNewton:
    def test_without_fees(self, annuity_loan):
        assert effective_interest_rate(annuity_loan, "newton") == pytest.approx(0.12, abs=1e-4)

    def test_no_compounding(self, annuity_loan):
        assert effective_interest_rate(annuity_loan, "newton") < effective_interest_rate(annuity_loan)

    def test_fees_raise_the_rate(self, fee_loan):
        assert 0.06 < effective_interest_rate(fee_loan, "newton") < 0.08


class TestFallbacks:
    def test_serial_loan(self, serial_loan):
        assert effective_interest_rate(serial_loan) == 0
        assert effective_interest_rate(serial_loan, "newton") == 0

    def test_no_instalments(self, annuity_loan):
        assert effective_interest_rate(annuity_loan.evolve(instalments=0)) == 0

    def test_unknown_method(self, annuity_loan):
        assert effective_interest_rate(annuity_loan, "bisection") == 0
