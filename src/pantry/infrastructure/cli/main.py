from __future__ import annotations

from pathlib import Path

import click

from pantry.infrastructure.cli.ingredient_commands import (
    ingredient_add,
    ingredient_adjust,
    ingredient_batches,
    ingredient_cleanup,
    ingredient_delete,
    ingredient_discard,
    ingredient_list,
    ingredient_stock,
    ingredient_update,
)
from pantry.infrastructure.cli.menu_commands import (
    menu_create,
    menu_delete,
    menu_list,
    menu_show,
    menu_update,
)
from pantry.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_show,
)
from pantry.infrastructure.cli.report_commands import alerts, history
from pantry.infrastructure.config import Settings, settings
from pantry.infrastructure.logging_config import configure_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the inventory store (overrides PANTRY_DATA_DIR).",
)
@click.option("--log-level", default=None, help="Logging level, e.g. INFO or DEBUG.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, log_level: str | None) -> None:
    """Pantry — FIFO ingredient inventory for a small kitchen"""
    config = settings
    if data_dir is not None:
        config = Settings(data_dir=data_dir)
    configure_logging(log_level or config.log_level)
    ctx.obj = config


@cli.group()
def ingredient() -> None:
    """Manage ingredients and their batches."""


@cli.group()
def menu() -> None:
    """Manage menus."""


@cli.group()
def order() -> None:
    """Manage orders."""


# Register subcommands
ingredient.add_command(ingredient_add)
ingredient.add_command(ingredient_adjust)
ingredient.add_command(ingredient_batches)
ingredient.add_command(ingredient_cleanup)
ingredient.add_command(ingredient_delete)
ingredient.add_command(ingredient_discard)
ingredient.add_command(ingredient_list)
ingredient.add_command(ingredient_stock)
ingredient.add_command(ingredient_update)
menu.add_command(menu_create)
menu.add_command(menu_list)
menu.add_command(menu_show)
menu.add_command(menu_update)
menu.add_command(menu_delete)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
cli.add_command(history)
cli.add_command(alerts)
