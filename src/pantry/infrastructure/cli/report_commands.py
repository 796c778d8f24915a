"""CLI commands for stock history and alerts (read-only)."""

from __future__ import annotations

import click

from pantry.application.show_alerts import ShowAlertsHandler
from pantry.application.stock_history import StockHistoryHandler
from pantry.domain.exceptions import DomainException
from pantry.infrastructure.bootstrap import unit_of_work
from pantry.infrastructure.cli.formatting import qty
from pantry.infrastructure.config import Settings


@click.command("history")
@click.option("--ingredient", "ingredient_id", default=None, help="Only this ingredient ID.")
@click.option("--type", "type_", type=click.Choice(["in", "out"]), default=None, help="Stock in or out.")
@click.pass_obj
def history(config: Settings, ingredient_id: str | None, type_: str | None) -> None:
    """Show the stock history, newest first."""
    handler = StockHistoryHandler(unit_of_work(config))

    try:
        entries = handler.handle(ingredient_id=ingredient_id, type=type_)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not entries:
        click.echo("No stock history found.")
        return

    for e in entries:
        ref = f" order #{e.reference_id}" if e.reference_id is not None else ""
        click.echo(
            f"{e.timestamp.strftime('%Y-%m-%d %H:%M')} {e.type:<3} {e.ingredient_name:<20} "
            f"{qty(e.quantity):>8}  {qty(e.previous_stock)} -> {qty(e.new_stock)}  "
            f"{e.reason}{ref}"
        )


@click.command("alerts")
@click.pass_obj
def alerts(config: Settings) -> None:
    """Show expiring, expired and low-stock ingredients."""
    handler = ShowAlertsHandler(
        unit_of_work(config),
        expiry_window_days=config.expiry_window_days,
        low_stock_threshold=config.low_stock_threshold,
    )
    dto = handler.handle()

    click.echo(f"Expiring within {config.expiry_window_days} days:")
    for a in dto.expiring_soon:
        click.echo(f"  {a.expiry_date.isoformat()}  {a.ingredient_name:<20} {qty(a.quantity)} {a.unit}")
    click.echo("Expired:")
    for a in dto.expired:
        click.echo(f"  {a.expiry_date.isoformat()}  {a.ingredient_name:<20} {qty(a.quantity)} {a.unit}")
    click.echo(f"Low stock (below {config.low_stock_threshold}):")
    for low in dto.low_stock:
        click.echo(f"  {low.ingredient_name:<20} {qty(low.total_quantity)} {low.unit}")
