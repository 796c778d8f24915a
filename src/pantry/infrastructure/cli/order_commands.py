"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from pantry.application.cancel_order import CancelOrderHandler
from pantry.application.dto import OrderDTO
from pantry.application.fulfill_order import FulfillOrderHandler
from pantry.application.show_order import ListOrdersHandler, ShowOrderHandler
from pantry.domain.exceptions import DomainException
from pantry.infrastructure.bootstrap import unit_of_work
from pantry.infrastructure.cli.formatting import qty
from pantry.infrastructure.config import Settings


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Menu:     {dto.menu_name} x {dto.quantity}")
    click.echo(f"Created:  {dto.created_at.strftime('%Y-%m-%d %H:%M UTC')}")
    click.echo()
    click.echo(f"  {'Ingredient':<20} {'Batch':<34} {'Used':>10}")
    click.echo(f"  {'-'*66}")
    for u in dto.ingredients_used:
        click.echo(
            f"  {u.ingredient_name:<20} {u.batch_id:<34} {qty(u.quantity_used):>10} {u.unit}"
        )


@click.command("create")
@click.option("--menu", "menu_id", required=True, type=int, help="Menu ID.")
@click.option("--quantity", required=True, type=int, help="Number of servings.")
@click.pass_obj
def order_create(config: Settings, menu_id: int, quantity: int) -> None:
    """Fulfill a menu order (deducts stock oldest-expiry first)."""
    handler = FulfillOrderHandler(unit_of_work(config))

    try:
        dto = handler.handle(menu_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.pass_obj
def order_cancel(config: Settings, order_id: int) -> None:
    """Cancel an order (returns its stock and deletes it)."""
    handler = CancelOrderHandler(unit_of_work(config))

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled — stock returned.")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(config: Settings, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work(config))

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.pass_obj
def order_list(config: Settings) -> None:
    """List all orders."""
    orders = ListOrdersHandler(unit_of_work(config)).handle()

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Menu':<24} {'Qty':>5} {'Status':<10}")
    click.echo("-" * 48)
    for o in orders:
        click.echo(f"{o.id:<6} {o.menu_name:<24} {o.quantity:>5} {o.status:<10}")
