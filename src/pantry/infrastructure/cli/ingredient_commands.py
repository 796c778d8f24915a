"""CLI commands for the Ingredient aggregate and its batches."""

from __future__ import annotations

import click

from pantry.application.add_stock import AddStockHandler
from pantry.application.adjust_batch import AdjustBatchHandler, DiscardBatchHandler
from pantry.application.create_ingredient import CreateIngredientHandler
from pantry.application.dto import IngredientDTO
from pantry.application.show_ingredient import ListIngredientsHandler, ShowIngredientHandler
from pantry.application.update_ingredient import (
    CleanupEmptyBatchesHandler,
    DeleteIngredientHandler,
    UpdateIngredientHandler,
)
from pantry.domain.exceptions import DomainException
from pantry.infrastructure.bootstrap import unit_of_work
from pantry.infrastructure.cli.formatting import echo_batches, qty
from pantry.infrastructure.config import Settings


def _display_ingredient(dto: IngredientDTO) -> None:
    click.echo(f"{dto.name}  [{dto.category}]  id={dto.id}")
    click.echo(f"Total: {qty(dto.total_quantity)} {dto.unit}")
    echo_batches(dto.batches, dto.unit)


@click.command("add")
@click.option("--name", required=True, help="Ingredient name.")
@click.option("--unit", required=True, help="Unit label, e.g. kg or pcs.")
@click.option("--category", required=True, help="Category label.")
@click.option("--quantity", default=None, help="Initial stock quantity.")
@click.option("--expiry", default=None, help="Expiry date of the initial stock (YYYY-MM-DD).")
@click.pass_obj
def ingredient_add(
    config: Settings,
    name: str,
    unit: str,
    category: str,
    quantity: str | None,
    expiry: str | None,
) -> None:
    """Add a new ingredient, optionally with its first batch."""
    handler = CreateIngredientHandler(unit_of_work(config))

    try:
        dto = handler.handle(name, unit, category, quantity=quantity, expiry_date=expiry)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Ingredient '{dto.name}' added (id={dto.id})")


@click.command("update")
@click.option("--id", "ingredient_id", required=True, help="Ingredient ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--unit", default=None, help="New unit label.")
@click.option("--category", default=None, help="New category.")
@click.pass_obj
def ingredient_update(
    config: Settings,
    ingredient_id: str,
    name: str | None,
    unit: str | None,
    category: str | None,
) -> None:
    """Rename or re-label an ingredient (menus and orders keep their snapshot)."""
    handler = UpdateIngredientHandler(unit_of_work(config))

    try:
        dto = handler.handle(ingredient_id, name=name, unit=unit, category=category)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Ingredient {dto.id} updated: {dto.name} ({dto.unit}, {dto.category})")


@click.command("delete")
@click.option("--id", "ingredient_id", required=True, help="Ingredient ID.")
@click.pass_obj
def ingredient_delete(config: Settings, ingredient_id: str) -> None:
    """Delete an ingredient and all of its batches."""
    handler = DeleteIngredientHandler(unit_of_work(config))

    try:
        handler.handle(ingredient_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Ingredient {ingredient_id} deleted.")


@click.command("stock")
@click.option("--id", "ingredient_id", required=True, help="Ingredient ID.")
@click.option("--quantity", required=True, help="Quantity received.")
@click.option("--expiry", required=True, help="Expiry date (YYYY-MM-DD).")
@click.pass_obj
def ingredient_stock(config: Settings, ingredient_id: str, quantity: str, expiry: str) -> None:
    """Receive stock (merges into a batch with the same expiry date)."""
    handler = AddStockHandler(unit_of_work(config))

    try:
        dto = handler.handle(ingredient_id, quantity, expiry)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_ingredient(dto)


@click.command("adjust")
@click.option("--id", "ingredient_id", required=True, help="Ingredient ID.")
@click.option("--batch", "batch_id", required=True, help="Batch ID.")
@click.option("--quantity", default=None, help="New batch quantity.")
@click.option("--expiry", default=None, help="New expiry date (YYYY-MM-DD).")
@click.pass_obj
def ingredient_adjust(
    config: Settings,
    ingredient_id: str,
    batch_id: str,
    quantity: str | None,
    expiry: str | None,
) -> None:
    """Manually correct a batch's quantity and/or expiry date."""
    handler = AdjustBatchHandler(unit_of_work(config))

    try:
        dto = handler.handle(ingredient_id, batch_id, quantity=quantity, expiry_date=expiry)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_ingredient(dto)


@click.command("discard")
@click.option("--id", "ingredient_id", required=True, help="Ingredient ID.")
@click.option("--batch", "batch_id", required=True, help="Batch ID.")
@click.pass_obj
def ingredient_discard(config: Settings, ingredient_id: str, batch_id: str) -> None:
    """Write off a batch as expired."""
    handler = DiscardBatchHandler(unit_of_work(config))

    try:
        dto = handler.handle(ingredient_id, batch_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_ingredient(dto)


@click.command("batches")
@click.option("--id", "ingredient_id", required=True, help="Ingredient ID.")
@click.pass_obj
def ingredient_batches(config: Settings, ingredient_id: str) -> None:
    """Show an ingredient's batches in FIFO order."""
    handler = ShowIngredientHandler(unit_of_work(config))

    try:
        dto = handler.handle(ingredient_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_ingredient(dto)


@click.command("list")
@click.pass_obj
def ingredient_list(config: Settings) -> None:
    """List all ingredients with their total stock."""
    ingredients = ListIngredientsHandler(unit_of_work(config)).handle()

    if not ingredients:
        click.echo("No ingredients found.")
        return

    click.echo(f"{'ID':<34} {'Name':<20} {'Category':<14} {'Total':>10}")
    click.echo("-" * 81)
    for i in ingredients:
        click.echo(
            f"{i.id:<34} {i.name:<20} {i.category:<14} {qty(i.total_quantity):>10} {i.unit}"
        )


@click.command("cleanup")
@click.pass_obj
def ingredient_cleanup(config: Settings) -> None:
    """Remove empty batches left in the store."""
    handler = CleanupEmptyBatchesHandler(unit_of_work(config))

    try:
        results = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    total = sum(r.batches_removed for r in results)
    click.echo(f"Removed {total} empty batch(es).")
    for r in results:
        click.echo(f"  {r.ingredient_name}: {r.batches_removed}")
