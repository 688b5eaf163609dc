"""Data models for the loan amortizer.

This module defines the ``Loan`` dataclass, a snapshot of a loan as of a
certain date. The same shape is used for the entries of a payment plan: each
entry is the loan as it will look at one instalment, so any entry can be
promoted to the current snapshot when the loan is amortized.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, Optional

from .rounding import round_loan

PAY_EVERY = ("month", "quarter", "year")
LOAN_TYPES = ("serial", "annuity")

# metadata keys that are never serialized
_TRANSIENT_DATA_KEYS = ("payment_plan",)


@dataclass(frozen=True)
class Loan:
    """A loan as of ``as_of``.

    Attributes
    ----------
    interest_rate: float
        Nominal yearly interest rate as a decimal (0.12 means 12 %).
    principal: float
        Current debt.
    instalments: int
        Instalments left.
    instalment: int
        Instalments made up to ``as_of``.
    pay_every: str
        Period of payment: ``"month"``, ``"quarter"`` or ``"year"``.
    type: str
        Payment plan: ``"serial"`` or ``"annuity"``.
    invoice_fee: float
        Fee charged with every instalment.
    initial_fee: float
        One-time fee charged with the first instalment.
    to_pay, amortization, interest: float
        Amount due, amortization and interest of the current period.
    as_of: datetime or None
        Date the figures are current as of. ``None`` means unknown.
    locked: bool
        A locked loan keeps the metadata already present in ``data``.
    data: dict
        Derived metadata (effective rate, costs and so on).
    """

    interest_rate: float = 0
    principal: float = 0
    instalments: int = 0
    instalment: int = 0
    pay_every: str = "month"
    type: str = "annuity"
    invoice_fee: float = 0
    initial_fee: float = 0
    to_pay: float = 0
    amortization: float = 0
    interest: float = 0
    as_of: Optional[datetime] = field(default_factory=datetime.now)
    locked: bool = False
    data: Dict[str, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        """Return the default value of every field."""
        return {f.name: getattr(cls(), f.name) for f in fields(cls)}

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_dict(cls, props: Any) -> "Loan":
        """Build a loan from a mapping, ignoring keys that are not fields."""
        if not isinstance(props, dict):
            props = {}
        known = cls.field_names()
        return cls(**{key: value for key, value in props.items() if key in known})

    def to_dict(self, keep_all: bool = False) -> Dict[str, Any]:
        """Return a copy of this loan fit for serialization.

        Fields equal to their default value are left out unless ``keep_all``
        is set. ``as_of`` and ``data`` are always included.
        """
        defaults = self.defaults()
        result: Dict[str, Any] = {}
        for key in self.field_names():
            value = getattr(self, key)
            if key == "data":
                result[key] = self.public_data()
            elif key == "as_of" or keep_all or value != defaults[key]:
                result[key] = value
        return result

    def public_data(self) -> Dict[str, Any]:
        """Return a copy of ``data`` without transient keys."""
        return {
            key: value
            for key, value in (self.data or {}).items()
            if key not in _TRANSIENT_DATA_KEYS
        }

    def evolve(self, **changes: Any) -> "Loan":
        """Return a copy of this loan with ``changes`` applied."""
        return replace(self, **changes)

    def round(self, precision: Any) -> "Loan":
        """Return a copy of this loan with monetary figures rounded."""
        return round_loan(self.evolve(data=self.public_data()), precision)


# A payment plan entry is a loan snapshot at one instalment.
PaymentPlanEntry = Loan
