"""CLI commands for the operator board and customer tracking."""

from __future__ import annotations

import click

from delivery.application.dto import OrderDTO, TrackingDTO
from delivery.application.list_orders import ListOrdersHandler
from delivery.application.print_order import PrintOrderHandler
from delivery.application.show_order import ShowOrderHandler
from delivery.application.track_order import TrackOrderHandler
from delivery.application.update_order_status import UpdateOrderStatusHandler
from delivery.domain.exceptions import DomainException
from delivery.domain.model.order import OrderStatus
from delivery.domain.model.status_machine import BOARD_TABS
from delivery.infrastructure.bootstrap import Container

_STEP_MARKS = {"done": "[x]", "current": "[>]", "pending": "[ ]"}


def _print_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.short_code}  (status={dto.status})  {dto.created_at}")
    click.echo(f"Customer: {dto.customer_name}  {dto.customer_phone}")
    click.echo(f"{dto.delivery_type}: {dto.delivery_address}")
    click.echo(f"Payment: {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-' * 56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} "
            f"{item.unit_price:>12} {item.line_total:>12}"
        )
        for option in item.options:
            click.echo(f"    {option}")
        if item.notes:
            click.echo(f"    Note: {item.notes}")
    click.echo()
    click.echo(f"  Subtotal: {dto.subtotal}")
    click.echo(f"  Delivery fee: {dto.delivery_fee}")
    click.echo(f"  Total: {dto.total}")
    if dto.actions:
        click.echo(f"\nNext: {' | '.join(dto.actions)}")


def _print_tracking(dto: TrackingDTO) -> None:
    click.echo(f"Order #{dto.short_code}  {dto.created_at}  {dto.total}")
    if dto.is_cancelled:
        click.secho("  This order was cancelled.", fg="red")
        return
    for step in dto.steps:
        click.echo(f"  {_STEP_MARKS[step.state]} {step.label}")


@click.command("list")
@click.option(
    "--tab",
    type=click.Choice(list(BOARD_TABS)),
    default="All",
    show_default=True,
    help="Board tab to show.",
)
@click.pass_obj
def order_list(container: Container, tab: str) -> None:
    """List orders on the board, newest first."""
    handler = ListOrdersHandler(order_store=container.order_store)

    try:
        orders = handler.handle(container.tenant_id, tab)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Code':<8} {'Customer':<20} {'Type':<10} {'Status':<18} {'Total':>12}")
    click.echo("-" * 72)
    for o in orders:
        click.echo(
            f"{o.short_code:<8} {o.customer_name:<20} {o.delivery_type:<10} "
            f"{o.status:<18} {o.total:>12}"
        )


@click.command("show")
@click.argument("order_id")
@click.pass_obj
def order_show(container: Container, order_id: str) -> None:
    """Show an order's details."""
    handler = ShowOrderHandler(order_store=container.order_store)

    try:
        dto = handler.handle(container.tenant_id, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_order(dto)


@click.command("status")
@click.argument("order_id")
@click.argument("status", type=click.Choice([s.value for s in OrderStatus]))
@click.pass_obj
def order_status(container: Container, order_id: str, status: str) -> None:
    """Move an order to STATUS."""
    handler = UpdateOrderStatusHandler(
        order_store=container.order_store,
        tenant_settings=container.tenant_settings,
        errors=container.errors,
    )

    try:
        change = handler.handle(container.tenant_id, order_id, OrderStatus(status))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} is now '{change.status}'")
    if change.customer_link:
        click.echo(f"Notify the customer: {change.customer_link}")


@click.command("print")
@click.argument("order_id")
@click.pass_obj
def order_print(container: Container, order_id: str) -> None:
    """Print an order's receipt."""
    handler = PrintOrderHandler(
        order_store=container.order_store,
        tenant_settings=container.tenant_settings,
        printer=container.printer,
    )

    try:
        handler.handle(container.tenant_id, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    except OSError as exc:
        raise click.ClickException(f"Printing failed: {exc}")

    click.echo(f"Receipt for {order_id} sent to the printer.")


@click.command("track")
@click.option("--id", "order_id", help="Order ID.")
@click.option("--customer", help="Name the order was placed under.")
@click.pass_obj
def track(container: Container, order_id: str | None, customer: str | None) -> None:
    """Follow an order's progress by ID or by customer name."""
    if bool(order_id) == bool(customer):
        raise click.UsageError("Pass exactly one of --id or --customer.")

    handler = TrackOrderHandler(order_store=container.order_store)

    try:
        results = [handler.by_id(order_id)] if order_id else handler.by_customer(customer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for index, dto in enumerate(results):
        if index:
            click.echo()
        _print_tracking(dto)
