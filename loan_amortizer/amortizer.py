"""Project a loan to another date and derive its metadata.

``amortize`` is a stateless re-derivation: the payment plan is rebuilt from
the loan as given and the entry matching the target date becomes the new
snapshot. Calling it twice with the same input gives the same result.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Dict, Optional

from .data_models import Loan
from .engine import payment_plan, plan_cost
from .rates import effective_interest_rate
from .utils import nan_to_zero, periods_between, start_of_period

logger = logging.getLogger(__name__)


def _now_like(moment: datetime) -> datetime:
    # aware and naive datetimes do not compare
    return datetime.now(getattr(moment, "tzinfo", None))


def should_amortize(loan: Loan, compare: Optional[datetime] = None) -> bool:
    """Return True if the loan has a payment period due before ``compare``.

    A loan without ``as_of``, instalments or principal is never due.
    """
    if loan.as_of is None:
        return False
    if compare is None:
        compare = _now_like(loan.as_of)
    if loan.instalments <= 0 or loan.principal <= 0:
        return False
    return start_of_period(loan.as_of, loan.pay_every) < start_of_period(compare, loan.pay_every)


def calculate_meta(loan: Loan, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Return ``loan.data`` updated with freshly computed metadata.

    The keys written are ``interest_rate_effective``, ``should_amortize``,
    ``monthly_cost`` and ``total_cost``. A locked loan keeps the values it
    already has for any of these keys. ``loan`` itself is not modified.
    """
    data = dict(loan.data or {})
    plan = payment_plan(loan)
    first = plan[0] if plan else None

    meta = {
        "interest_rate_effective": effective_interest_rate(loan),
        "should_amortize": should_amortize(loan, now),
        "monthly_cost": nan_to_zero(first.to_pay) + nan_to_zero(first.invoice_fee) if first else 0,
        "total_cost": nan_to_zero(plan_cost(plan)) if loan.instalments >= 1 else 0,
    }

    if loan.locked:
        meta = {key: value for key, value in meta.items() if key not in data}
    data.update(meta)
    return data


def with_meta(loan: Loan, now: Optional[datetime] = None) -> Loan:
    """Return a copy of ``loan`` carrying its recalculated metadata."""
    return loan.evolve(data=calculate_meta(loan, now))


def amortize(loan: Loan, to_date: Optional[datetime] = None) -> Loan:
    """Return the loan as it will look at ``to_date``.

    The number of periods between ``as_of`` and ``to_date`` (rounded up)
    selects the payment plan entry to use. Past the last instalment the loan
    is fully paid: the last entry is returned with no principal and no
    instalments left.
    """
    if loan.as_of is None:
        return loan
    if to_date is None:
        to_date = _now_like(loan.as_of)

    plan = payment_plan(loan)
    if not plan:
        return loan

    diff = max(math.ceil(periods_between(loan.as_of, to_date, loan.pay_every)), 0)

    # out of bounds - loan has been fully amortized
    if diff >= len(plan):
        last = plan[-1]
        logger.debug("Loan fully amortized after %d instalments", len(plan))
        return last.evolve(principal=0, instalments=0, instalment=last.instalment + 1)

    return with_meta(plan[diff])
