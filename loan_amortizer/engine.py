"""Core calculation engine for the loan amortizer.

This module builds payment plans for serial loans (same amortization every
instalment) and annuity loans (same total payment every instalment). A plan
is a list of ``Loan`` snapshots, one per remaining instalment. The first
entry is seeded from the loan itself and every following entry is derived
from the one before it by a per-type step function.

Plans are recomputed from scratch on every call; nothing is cached and the
source loan is never modified.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .data_models import Loan, PaymentPlanEntry
from .utils import add_periods, compound, is_finite_number, safe_divide, start_of_period

logger = logging.getLogger(__name__)

PERIODS_PER_YEAR = {"month": 12, "quarter": 4, "year": 1}

Step = Callable[[PaymentPlanEntry, int], PaymentPlanEntry]


def interest_rate_per_instalment(loan: Loan) -> float:
    """Return the nominal interest rate of one instalment period.

    Unsupported ``pay_every`` values give a rate of 0.
    """
    periods = PERIODS_PER_YEAR.get(loan.pay_every)
    if periods is None:
        logger.debug("Unsupported pay_every %r, using a zero rate", loan.pay_every)
        return 0
    return loan.interest_rate / periods


def date_of_instalment(loan: Loan, instalment) -> Optional[datetime]:
    """Return the date of the instalment with 0-based index ``instalment``.

    The date is the loan's ``as_of`` moved forward by ``instalment`` periods
    and normalized to the start of that period. It depends only on the base
    date, so every entry is computed independently of the others.
    """
    if not is_finite_number(instalment):
        return loan.as_of
    base = loan.as_of if loan.as_of is not None else datetime.now()
    return start_of_period(add_periods(base, int(instalment), loan.pay_every), loan.pay_every)


def _serial_plan(loan: Loan, rate: float) -> Tuple[PaymentPlanEntry, Step]:
    # same for every instalment
    amortization = safe_divide(loan.principal, loan.instalments)

    def step(previous: PaymentPlanEntry, index: int) -> PaymentPlanEntry:
        principal = previous.principal - previous.amortization
        interest = principal * rate
        return previous.evolve(
            principal=principal,
            amortization=amortization,
            interest=interest,
            to_pay=amortization + interest,
            initial_fee=0,
            instalments=previous.instalments - 1,
            instalment=previous.instalment + 1,
            as_of=date_of_instalment(loan, index),
            data=dict(previous.data),
        )

    interest = loan.principal * rate
    first = loan.evolve(
        amortization=amortization,
        interest=interest,
        to_pay=amortization + interest,
        as_of=date_of_instalment(loan, 0),
        data=loan.public_data(),
    )
    return first, step


def _annuity_plan(loan: Loan, rate: float) -> Tuple[PaymentPlanEntry, Step]:
    # same for every instalment
    to_pay = safe_divide(rate * loan.principal, 1 - compound(rate, -loan.instalments))

    def step(previous: PaymentPlanEntry, index: int) -> PaymentPlanEntry:
        principal = previous.principal - previous.amortization
        interest = principal * rate
        return previous.evolve(
            principal=principal,
            interest=interest,
            amortization=to_pay - interest,
            to_pay=to_pay,
            initial_fee=0,
            instalments=previous.instalments - 1,
            instalment=previous.instalment + 1,
            as_of=date_of_instalment(loan, index),
            data=dict(previous.data),
        )

    interest = loan.principal * rate
    first = loan.evolve(
        interest=interest,
        amortization=to_pay - interest,
        to_pay=to_pay,
        as_of=date_of_instalment(loan, 0),
        data=loan.public_data(),
    )
    return first, step


PLAN_BUILDERS = {
    "serial": _serial_plan,
    "annuity": _annuity_plan,
}


def payment_plan(loan: Loan) -> List[PaymentPlanEntry]:
    """Return the payment plan of a loan, one entry per remaining instalment.

    A zero nominal interest rate makes every loan serial since the annuity
    payment is undefined at 0 %. Loans of an unknown type have no plan.
    """
    if loan.instalments < 1:
        return []

    loan_type = "serial" if loan.interest_rate == 0 else loan.type
    builder = PLAN_BUILDERS.get(loan_type)
    if builder is None:
        logger.debug("Unsupported loan type %r, no payment plan", loan.type)
        return []

    first, step = builder(loan, interest_rate_per_instalment(loan))
    plan = [first]
    for index in range(1, loan.instalments):
        plan.append(step(plan[-1], index))
    return plan


def plan_cost(plan: List[PaymentPlanEntry]) -> float:
    """Sum the fees and interest paid over a payment plan."""
    return sum(entry.invoice_fee + entry.initial_fee + entry.interest for entry in plan)


def total_cost(loan: Loan) -> float:
    """Return the total cost (fees and interest) of the remaining loan."""
    if loan.instalments < 1:
        return 0
    return plan_cost(payment_plan(loan))
