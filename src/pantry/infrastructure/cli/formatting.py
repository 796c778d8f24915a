"""Display helpers shared by the CLI commands."""

from __future__ import annotations

from decimal import Decimal

import click

from pantry.application.dto import BatchDTO


def qty(value: Decimal) -> str:
    """Render a quantity without exponent or trailing zeros."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def echo_batches(batches: list[BatchDTO], unit: str) -> None:
    if not batches:
        click.echo("  (no stock)")
        return
    click.echo(f"  {'Batch':<34} {'Expiry':<12} {'Current':>10} {'Initial':>10}")
    click.echo(f"  {'-'*69}")
    for b in batches:
        click.echo(
            f"  {b.id:<34} {b.expiry_date.isoformat():<12} "
            f"{qty(b.current_quantity):>10} {qty(b.initial_quantity):>10}  {unit}"
        )
