"""Rounding helpers for monetary figures and interest rates.

Values are rounded half away from zero on their decimal representation, so
``round_to(1.005, 2)`` gives ``1.01`` rather than the binary-float ``1.0``.
"""

from __future__ import annotations

import math
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import TYPE_CHECKING, Any, Dict

from .utils import is_finite_number, is_number

if TYPE_CHECKING:
    from .data_models import Loan

MONEY_FIELDS = ("principal", "invoice_fee", "initial_fee", "amortization", "interest", "to_pay")
MONEY_DATA_KEYS = ("monthly_cost", "total_cost")
RATE_DATA_KEYS = ("interest_rate_effective",)

# beyond this magnitude a float has no fractional digits left to round
_EXACT_LIMIT = Decimal(2) ** 52


def _valid_precision(precision: Any) -> bool:
    return is_number(precision) and math.isfinite(precision) and precision >= 0


def round_to(value: Any, precision: Any) -> Any:
    """Round ``value`` to ``precision`` decimals, half away from zero.

    ``value`` is returned unchanged when ``precision`` is not a non-negative
    number, and NaN is returned when ``value`` is not a finite number.
    """
    if not _valid_precision(precision):
        return value
    if not is_finite_number(value):
        return math.nan
    factor = Decimal(10) ** Decimal(str(precision))
    scaled = Decimal(str(value)) * factor
    if abs(scaled) >= _EXACT_LIMIT:
        return value
    return float(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP) / factor)


def round_interest_to(value: Any, precision: Any) -> Any:
    """Round a decimal rate as a percentage with ``precision + 1`` decimals.

    ``round_interest_to(0.123456, 2)`` gives ``0.12346`` (12.346 %).
    """
    if not is_finite_number(value):
        return math.nan
    if not is_number(precision) or not _valid_precision(precision + 1):
        return value
    return round_to(value * 100, precision + 1) / 100


def _round_fields(container: Dict[str, Any], keys, fn, precision) -> Dict[str, Any]:
    rounded = {}
    for key in keys:
        num = container.get(key)
        if is_finite_number(num):
            rounded[key] = fn(num, precision)
    return rounded


def round_loan(loan: "Loan", precision: Any) -> "Loan":
    """Return a copy of ``loan`` with its monetary figures rounded.

    The six current-period money fields and the ``monthly_cost`` and
    ``total_cost`` metadata are rounded with :func:`round_to`; the effective
    interest rate with :func:`round_interest_to`. Non-finite values are left
    alone. When ``precision`` is not a number the loan is returned as is.
    """
    if loan is None:
        return None
    if not is_number(precision):
        return loan
    changes = _round_fields(vars(loan), MONEY_FIELDS, round_to, precision)
    if loan.data:
        data = dict(loan.data)
        data.update(_round_fields(data, MONEY_DATA_KEYS, round_to, precision))
        data.update(_round_fields(data, RATE_DATA_KEYS, round_interest_to, precision))
        changes["data"] = data
    return replace(loan, **changes)
