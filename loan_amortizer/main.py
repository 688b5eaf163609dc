"""Command-line interface for the loan amortizer.

This module uses the ``click`` library to implement a multi-command
interface. Users can print a payment plan, view the derived metadata of a
loan, compute its effective interest rate or project it to another date.
Payment plans can be exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import click

from .amortizer import amortize, calculate_meta
from .data_models import LOAN_TYPES, PAY_EVERY, Loan, PaymentPlanEntry
from .engine import payment_plan
from .formatter import print_loan, print_meta, print_schedule
from .rates import METHODS, effective_interest_rate
from .rounding import round_loan, round_to
from .utils import parse_date


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def parse_percent(value: str) -> float:
    """Parse a rate given as a percentage ("12", "12%") or a decimal ("0.12")."""
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        p = float(value)
    except ValueError:
        raise click.BadParameter(f"Invalid percentage: {value}")
    # If the user enters a number like 12, treat it as 12%
    if p > 1:
        p = p / 100
    return p


def parse_as_of(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now()
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_loan_from_options(
    principal: str,
    rate: str,
    instalments: int,
    instalment: int = 0,
    pay_every: str = "month",
    loan_type: str = "annuity",
    invoice_fee: str = "0",
    initial_fee: str = "0",
    as_of: Optional[str] = None,
    locked: bool = False,
) -> Loan:
    return Loan(
        interest_rate=parse_percent(rate),
        principal=parse_amount(principal),
        instalments=instalments,
        instalment=instalment,
        pay_every=pay_every,
        type=loan_type,
        invoice_fee=parse_amount(invoice_fee),
        initial_fee=parse_amount(initial_fee),
        as_of=parse_as_of(as_of),
        locked=locked,
    )


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def export_to_json(path: Path, schedule: List[PaymentPlanEntry], meta: Dict[str, Any]) -> None:
    """Export payment plan and metadata to a JSON file."""
    data = {"summary": meta, "schedule": [entry.to_dict(keep_all=True) for entry in schedule]}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=_json_default)


def export_to_csv(path: Path, schedule: List[PaymentPlanEntry]) -> None:
    """Export payment plan to a CSV file."""
    header = [
        "Instalment",
        "Date",
        "Principal",
        "To_Pay",
        "Amortization",
        "Interest",
        "Invoice_Fee",
        "Initial_Fee",
        "Instalments_Left",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.instalment,
                    e.as_of.strftime("%Y-%m-%d") if e.as_of else "",
                    e.principal,
                    e.to_pay,
                    e.amortization,
                    e.interest,
                    e.invoice_fee,
                    e.initial_fee,
                    e.instalments,
                ]
            )


def loan_options(command: Callable) -> Callable:
    """Attach the options describing a loan to a command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Current debt"),
        click.option("--rate", "-r", "rate", required=True, help="Nominal yearly interest rate (percent or decimal)"),
        click.option("--instalments", "-n", "instalments", required=True, type=int, help="Instalments left"),
        click.option("--instalment", "instalment", type=int, default=0, show_default=True, help="Instalments made"),
        click.option("--pay-every", "pay_every", type=click.Choice(PAY_EVERY), default="month", show_default=True),
        click.option("--type", "loan_type", type=click.Choice(LOAN_TYPES), default="annuity", show_default=True),
        click.option("--invoice-fee", "invoice_fee", default="0", help="Fee charged every instalment"),
        click.option("--initial-fee", "initial_fee", default="0", help="Fee charged once"),
        click.option("--as-of", "-s", "as_of", help="Date the figures are current as of (YYYY-MM or YYYY-MM-DD)"),
        click.option("--locked", "locked", is_flag=True, help="Keep metadata that is already present"),
        click.option(
            "--precision",
            "precision",
            type=int,
            default=2,
            show_default=True,
            envvar="LOAN_AMORTIZER_PRECISION",
            help="Decimals to round money to",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _loan_from_kwargs(kwargs: Dict[str, Any]) -> Loan:
    return build_loan_from_options(
        kwargs["principal"],
        kwargs["rate"],
        kwargs["instalments"],
        kwargs["instalment"],
        kwargs["pay_every"],
        kwargs["loan_type"],
        kwargs["invoice_fee"],
        kwargs["initial_fee"],
        kwargs["as_of"],
        kwargs["locked"],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log calculation details")
def cli(verbose: bool) -> None:
    """A command-line loan amortizer for serial and annuity loans."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(output: Optional[str], **kwargs: Any) -> None:
    """Compute and print the payment plan."""
    loan = _loan_from_kwargs(kwargs)
    precision = kwargs["precision"]
    plan = [round_loan(entry, precision) for entry in payment_plan(loan)]
    meta = round_loan(loan.evolve(data=calculate_meta(loan)), precision).data
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, plan, meta)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, plan)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
    else:
        print_meta(meta)
        print_schedule(plan)


@cli.command()
@loan_options
def summary(**kwargs: Any) -> None:
    """Compute and print the loan metadata."""
    loan = _loan_from_kwargs(kwargs)
    meta = round_loan(loan.evolve(data=calculate_meta(loan)), kwargs["precision"]).data
    print_meta(meta)


@cli.command()
@loan_options
@click.option("--method", "method", type=click.Choice(sorted(METHODS)), default="secant", show_default=True)
def rate(method: str, **kwargs: Any) -> None:
    """Compute and print the effective yearly interest rate."""
    loan = _loan_from_kwargs(kwargs)
    value = effective_interest_rate(loan, method)
    click.echo(f"{round_to(value * 100, kwargs['precision']):.{kwargs['precision']}f}%")


@cli.command(name="amortize")
@loan_options
@click.option("--to-date", "-t", "to_date", help="Date to project the loan to (defaults to today)")
@click.option("--json", "as_json", is_flag=True, help="Print the projected loan as JSON")
def amortize_command(to_date: Optional[str], as_json: bool, **kwargs: Any) -> None:
    """Project the loan to another date and print it."""
    loan = _loan_from_kwargs(kwargs)
    projected = round_loan(amortize(loan, parse_as_of(to_date)), kwargs["precision"])
    if as_json:
        click.echo(json.dumps(projected.to_dict(), indent=2, default=_json_default))
    else:
        print_loan(projected)
        if projected.data:
            print_meta(projected.data)


if __name__ == "__main__":
    cli()
