from __future__ import annotations

from pathlib import Path

import click

from delivery.infrastructure.bootstrap import Container
from delivery.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_notes,
    cart_quantity,
    cart_remove,
    cart_show,
    checkout,
    menu_list,
)
from delivery.infrastructure.cli.order_commands import (
    order_list,
    order_print,
    order_show,
    order_status,
    track,
)
from delivery.infrastructure.cli.watch_command import watch
from delivery.infrastructure.config import load_settings
from delivery.infrastructure.logging_config import configure_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="DELIVERY_DATA_DIR",
    help="Directory holding tenant data, carts and print spool.",
)
@click.option(
    "--tenant",
    "tenant_id",
    envvar="DELIVERY_TENANT",
    default="default",
    show_default=True,
    help="Tenant (restaurant) to work with.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log verbosity; defaults to LOG_LEVEL or WARNING.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, tenant_id: str, log_level: str | None) -> None:
    """Delivery: take and run restaurant orders from the terminal."""
    settings = load_settings(data_dir)
    configure_logging((log_level or settings.log_level).upper())
    ctx.obj = Container(settings, tenant_id)


@cli.group()
def menu() -> None:
    """Browse the menu."""


@cli.group()
def cart() -> None:
    """Manage the cart on this device."""


@cli.group()
def order() -> None:
    """Operator order board."""


# Register subcommands
menu.add_command(menu_list)
cart.add_command(cart_add)
cart.add_command(cart_show)
cart.add_command(cart_remove)
cart.add_command(cart_quantity)
cart.add_command(cart_notes)
cart.add_command(cart_clear)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_print)
cli.add_command(checkout)
cli.add_command(track)
cli.add_command(watch)
