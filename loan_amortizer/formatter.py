"""Output helpers for the loan amortizer.

This module provides simple functions to render payment plans, loan
snapshots and their metadata in a tabular text format using built-in
printing and string formatting.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable

from .data_models import Loan, PaymentPlanEntry


def _date(value) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else "-"


def print_meta(meta: Dict[str, Any]) -> None:
    """Print loan metadata in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Effective rate     : {meta.get('interest_rate_effective', 0) * 100:.2f}%")
    print(f"Monthly cost       : {meta.get('monthly_cost', 0):.2f}")
    print(f"Total cost         : {meta.get('total_cost', 0):.2f}")
    print(f"Should amortize    : {'Yes' if meta.get('should_amortize') else 'No'}")
    print("-" * 72)


def print_loan(loan: Loan) -> None:
    """Print the current-period figures of a loan snapshot."""
    print("Loan")
    print("-" * 72)
    print(f"As of              : {_date(loan.as_of)}")
    print(f"Type               : {loan.type} (every {loan.pay_every})")
    print(f"Interest rate      : {loan.interest_rate * 100:.2f}%")
    print(f"Principal          : {loan.principal:.2f}")
    print(f"Instalments left   : {loan.instalments}")
    print(f"Instalments made   : {loan.instalment}")
    print(f"To pay             : {loan.to_pay:.2f}")
    print(f"Amortization       : {loan.amortization:.2f}")
    print(f"Interest           : {loan.interest:.2f}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PaymentPlanEntry]) -> None:
    """Print the payment plan as a simple table."""
    headers = [
        "No",
        "Date",
        "Principal",
        "ToPay",
        "Amort",
        "Interest",
        "Fees",
        "Left",
    ]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.instalment),
            _date(entry.as_of),
            f"{entry.principal:.2f}",
            f"{entry.to_pay:.2f}",
            f"{entry.amortization:.2f}",
            f"{entry.interest:.2f}",
            f"{entry.invoice_fee + entry.initial_fee:.2f}",
            str(entry.instalments),
        ]
        print("\t".join(row))
