"""Effective interest rate of a loan.

Two solvers are available:

``secant``
    Amortizes the initial fee into a level payment, adds the invoice fee and
    solves the time-value-of-money equation for the periodic rate with the
    secant method. The result is converted to an effective yearly rate.
``newton``
    Solves the annuity payment equation for the rate that makes the level
    payment equal the average periodic outflow (principal plus total cost)
    with Newton-Raphson. The result is the nominal yearly rate.

Both solvers stop after 20 iterations. Non-convergence is not an error; the
last iterate is returned.
"""

from __future__ import annotations

import logging

from .data_models import Loan
from .engine import interest_rate_per_instalment, total_cost
from .rounding import round_to
from .utils import compound, safe_divide

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 20
SECANT_TOLERANCE = 1e-7
NEWTON_TOLERANCE = 1e-10
NEWTON_SEED = 0.1 / 12
RATE_PRECISION = 4


def pmt(rate: float, nper: int, pv: float, fv: float = 0) -> float:
    """Level periodic payment that repays ``pv`` (and reaches ``fv``) in ``nper`` periods.

    The payment has the sign of ``pv``.
    """
    factor = compound(rate, nper)
    return safe_divide(rate * -(fv - factor * pv), factor - 1)


def _tvm_balance(rate: float, nper: int, pmt: float, pv: float, fv: float, when: int) -> float:
    # pv·f + pmt·(1/r + when)·(f − 1) + fv, linearized near r = 0
    if abs(rate) < SECANT_TOLERANCE:
        return pv * (1 + nper * rate) + pmt * (1 + rate * when) * nper + fv
    f = compound(rate, nper)
    return pv * f + pmt * (1 / rate + when) * (f - 1) + fv


def rate(nper: int, pmt: float, pv: float, fv: float = 0, when: int = 0, guess: float = 0.01) -> float:
    """Periodic interest rate of an annuity (spreadsheet ``RATE``).

    Secant iteration between 0 and ``guess``, stopping when two successive
    balances differ by less than ``SECANT_TOLERANCE``.
    """
    x0, x1 = 0.0, guess
    y0 = pv + pmt * nper + fv
    y1 = _tvm_balance(guess, nper, pmt, pv, fv, when)
    result = guess

    iterations = 0
    while abs(y0 - y1) > SECANT_TOLERANCE and iterations < MAX_ITERATIONS:
        result = (y1 * x0 - y0 * x1) / (y1 - y0)
        x0, x1 = x1, result
        y0, y1 = y1, _tvm_balance(result, nper, pmt, pv, fv, when)
        iterations += 1

    if iterations == MAX_ITERATIONS:
        logger.debug("Secant method stopped after %d iterations at %r", iterations, result)
    return result


def effect(nominal_rate: float, npery: int) -> float:
    """Effective yearly rate of a nominal rate compounded ``npery`` times."""
    return round_to(compound(nominal_rate / npery, npery) - 1, RATE_PRECISION)


def _annuity_gap(x: float, principal: float, instalments: int, payment: float) -> float:
    growth = compound(x, instalments)
    return safe_divide(principal * x * growth, growth - 1) - payment


def _annuity_gap_slope(x: float, principal: float, instalments: int) -> float:
    growth = compound(x, instalments)
    return principal * (
        safe_divide(growth, growth - 1)
        - safe_divide(instalments * x * compound(x, 2 * instalments - 1), (growth - 1) * (growth - 1))
        + safe_divide(instalments * x * compound(x, instalments - 1), growth - 1)
    )


def newton_rate(principal: float, instalments: int, payment: float) -> float:
    """Periodic rate at which ``principal`` amortizes with level ``payment``."""
    approx = NEWTON_SEED
    for _ in range(MAX_ITERATIONS):
        previous = approx
        approx = previous - safe_divide(
            _annuity_gap(previous, principal, instalments, payment),
            _annuity_gap_slope(previous, principal, instalments),
        )
        if abs(approx - previous) < NEWTON_TOLERANCE:
            break
    else:
        logger.debug("Newton-Raphson stopped after %d iterations at %r", MAX_ITERATIONS, approx)
    return approx


def _secant_effective_rate(loan: Loan) -> float:
    interest = interest_rate_per_instalment(loan)
    principal = loan.principal or 0
    payment = -pmt(interest, loan.instalments, -principal - (loan.initial_fee or 0))
    to_pay = payment + (loan.invoice_fee or 0)
    nominal = rate(loan.instalments, to_pay, -principal, 0, 0, interest) * 12
    return effect(nominal, 12)


def _newton_effective_rate(loan: Loan) -> float:
    average_payment = (total_cost(loan) + loan.principal) / loan.instalments
    return round_to(newton_rate(loan.principal, loan.instalments, average_payment) * 12, RATE_PRECISION)


METHODS = {
    "secant": _secant_effective_rate,
    "newton": _newton_effective_rate,
}


def effective_interest_rate(loan: Loan, method: str = "secant") -> float:
    """Return the effective yearly interest rate of an annuity loan.

    Loans without instalments, serial loans and unknown methods give 0.
    """
    if loan.instalments < 1:
        return 0
    if loan.type != "annuity":
        return 0
    solver = METHODS.get(method or "secant")
    if solver is None:
        logger.debug("Unknown effective rate method %r", method)
        return 0
    return solver(loan)
