"""CLI commands for the Menu aggregate."""

from __future__ import annotations

import click

from pantry.application.create_menu import CreateMenuHandler, ListMenusHandler
from pantry.application.dto import MenuDTO, RequirementSpec
from pantry.application.update_menu import (
    DeleteMenuHandler,
    ShowMenuHandler,
    UpdateMenuHandler,
)
from pantry.domain.exceptions import DomainException
from pantry.infrastructure.bootstrap import unit_of_work
from pantry.infrastructure.cli.formatting import qty
from pantry.infrastructure.config import Settings


def _parse_requirements(raw: str) -> list[RequirementSpec]:
    """Parse 'ingredientId:0.2,ingredientId:1' into RequirementSpec list."""
    specs: list[RequirementSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'IngredientId:Quantity'."
            )
        ingredient_id, qty_str = pair.rsplit(":", 1)
        specs.append(RequirementSpec(ingredient_id=ingredient_id.strip(), quantity=qty_str.strip()))
    return specs


def _echo_requirements(dto: MenuDTO) -> None:
    for req in dto.requirements:
        click.echo(f"  {req.ingredient_name:<20} {qty(req.quantity):>8} {req.unit}")


@click.command("create")
@click.option("--name", required=True, help="Menu name.")
@click.option("--items", required=True, help="Requirements as 'IngredientId:Qty,IngredientId:Qty'.")
@click.option("--description", default="", help="Optional description.")
@click.pass_obj
def menu_create(config: Settings, name: str, items: str, description: str) -> None:
    """Create a menu from per-serving ingredient requirements."""
    specs = _parse_requirements(items)

    handler = CreateMenuHandler(unit_of_work(config))

    try:
        dto = handler.handle(name=name, requirement_specs=specs, description=description)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Menu #{dto.id} '{dto.name}' created")
    _echo_requirements(dto)


@click.command("list")
@click.pass_obj
def menu_list(config: Settings) -> None:
    """List all menus."""
    menus = ListMenusHandler(unit_of_work(config)).handle()

    if not menus:
        click.echo("No menus found.")
        return

    for m in menus:
        click.echo(f"#{m.id:<5} {m.name}")
        for req in m.requirements:
            click.echo(f"        {req.ingredient_name:<20} {qty(req.quantity):>8} {req.unit}")


@click.command("show")
@click.option("--id", "menu_id", required=True, type=int, help="Menu ID to display.")
@click.pass_obj
def menu_show(config: Settings, menu_id: int) -> None:
    """Show one menu and its per-serving requirements."""
    try:
        dto = ShowMenuHandler(unit_of_work(config)).handle(menu_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Menu #{dto.id} '{dto.name}'")
    if dto.description:
        click.echo(f"  {dto.description}")
    _echo_requirements(dto)


@click.command("update")
@click.option("--id", "menu_id", required=True, type=int, help="Menu ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--items", default=None, help="Replacement requirements as 'IngredientId:Qty,...'.")
@click.option("--description", default=None, help="New description.")
@click.pass_obj
def menu_update(
    config: Settings,
    menu_id: int,
    name: str | None,
    items: str | None,
    description: str | None,
) -> None:
    """Rename a menu or replace its requirements."""
    specs = _parse_requirements(items) if items is not None else None

    handler = UpdateMenuHandler(unit_of_work(config))

    try:
        dto = handler.handle(
            menu_id, name=name, requirement_specs=specs, description=description
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Menu #{dto.id} '{dto.name}' updated")
    _echo_requirements(dto)


@click.command("delete")
@click.option("--id", "menu_id", required=True, type=int, help="Menu ID.")
@click.pass_obj
def menu_delete(config: Settings, menu_id: int) -> None:
    """Delete a menu; existing orders keep the name they recorded."""
    try:
        DeleteMenuHandler(unit_of_work(config)).handle(menu_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Menu #{menu_id} deleted.")
