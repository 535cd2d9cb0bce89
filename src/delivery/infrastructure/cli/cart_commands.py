"""CLI commands for the customer side: menu, cart and checkout."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from delivery.application.dto import AddressInput, CheckoutRequest
from delivery.application.place_order import PlaceOrderHandler
from delivery.domain.exceptions import DomainException, EntityNotFoundError
from delivery.domain.model.variant_selection import VariantSelection
from delivery.infrastructure.bootstrap import Container


def _parse_option(raw: str) -> tuple[str, str]:
    """Parse 'Size=Large' into ('Size', 'Large')."""
    if "=" not in raw:
        raise click.BadParameter(
            f"Invalid option format '{raw}'. Expected 'Group=Item'.", param_hint="--option"
        )
    group, item = raw.split("=", 1)
    return group.strip(), item.strip()


@click.command("list")
@click.pass_obj
def menu_list(container: Container) -> None:
    """List the products on offer."""
    products = container.catalog.list_active_products(container.tenant_id)

    if not products:
        click.echo("The menu is empty.")
        return

    click.echo(f"{'ID':<10} {'Name':<28} {'Price':>12}")
    click.echo("-" * 52)
    for p in products:
        click.echo(f"{p.id:<10} {p.name:<28} {str(p.price):>12}")
        for group in p.variants:
            choices = ", ".join(
                f"{i.name} (+{i.price})" if not i.price.is_zero else i.name for i in group.items
            )
            click.echo(f"{'':<10}   {group.name} [{group.min}-{group.max}]: {choices}")


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="How many.")
@click.option("--notes", default="", help="Free-text note for the kitchen.")
@click.option("--option", "options", multiple=True, help="Chosen option as 'Group=Item'.")
@click.pass_obj
def cart_add(
    container: Container,
    product_id: str,
    quantity: int,
    notes: str,
    options: tuple[str, ...],
) -> None:
    """Add a product to the cart."""
    try:
        product = container.catalog.get_product(container.tenant_id, product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        selection = VariantSelection(product)
        for raw in options:
            selection.toggle(*_parse_option(raw))
        line = container.cart().add_configured(selection, quantity, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added {product.name} x{line.quantity} ({line.final_price} each)  [{line.id}]")


@click.command("show")
@click.pass_obj
def cart_show(container: Container) -> None:
    """Show the cart."""
    cart = container.cart()
    if cart.is_empty:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'Line':<24} {'Product':<20} {'Qty':>4} {'Total':>12}")
    for item in cart.items:
        click.echo(
            f"  {item.id:<24} {item.product.name:<20} {item.quantity:>4} "
            f"{str(item.line_total):>12}"
        )
        for variant in item.selected_variants:
            click.echo(f"  {'':<24}   {variant.group_name}: {variant.item_name}")
        if item.notes:
            click.echo(f"  {'':<24}   Note: {item.notes}")
    click.echo(f"\n  {cart.total_items} item(s), total {cart.total_price}")


@click.command("remove")
@click.argument("item_id")
@click.pass_obj
def cart_remove(container: Container, item_id: str) -> None:
    """Remove a line from the cart."""
    try:
        container.cart().remove(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Removed {item_id}")


@click.command("quantity")
@click.argument("item_id")
@click.argument("quantity", type=int)
@click.pass_obj
def cart_quantity(container: Container, item_id: str, quantity: int) -> None:
    """Set a line's quantity; zero or less removes it."""
    try:
        container.cart().set_quantity(item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Quantity of {item_id} set to {quantity}" if quantity > 0 else f"Removed {item_id}")


@click.command("notes")
@click.argument("item_id")
@click.argument("notes")
@click.pass_obj
def cart_notes(container: Container, item_id: str, notes: str) -> None:
    """Replace a line's notes."""
    try:
        container.cart().set_notes(item_id, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Notes of {item_id} updated")


@click.command("clear")
@click.pass_obj
def cart_clear(container: Container) -> None:
    """Empty the cart."""
    container.cart().clear()
    click.echo("Cart cleared.")


@click.command("checkout")
@click.option("--name", required=True, help="Your name.")
@click.option("--phone", required=True, help="Your phone number.")
@click.option(
    "--type",
    "delivery_type",
    type=click.Choice(["Delivery", "Pickup"]),
    default="Delivery",
    show_default=True,
)
@click.option("--payment", required=True, help="Payment method, e.g. 'PIX'.")
@click.option("--street", default="")
@click.option("--number", default="")
@click.option("--neighborhood", default="")
@click.option("--complement", default="")
@click.option("--change-for", default=None, help="Cash only: amount to bring change for.")
@click.pass_obj
def checkout(
    container: Container,
    name: str,
    phone: str,
    delivery_type: str,
    payment: str,
    street: str,
    number: str,
    neighborhood: str,
    complement: str,
    change_for: str | None,
) -> None:
    """Send the cart as an order."""
    try:
        change = Decimal(change_for) if change_for else None
    except InvalidOperation:
        raise click.BadParameter(f"Invalid amount '{change_for}'.", param_hint="--change-for")

    handler = PlaceOrderHandler(
        order_store=container.order_store,
        catalog=container.catalog,
        tenant_settings=container.tenant_settings,
        cart=container.cart(),
        errors=container.errors,
    )
    request = CheckoutRequest(
        tenant_id=container.tenant_id,
        customer_name=name,
        customer_phone=phone,
        delivery_type=delivery_type,
        payment_method=payment,
        address=AddressInput(street, number, neighborhood, complement),
        cash_change_for=change,
    )

    try:
        placed = handler.handle(request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{placed.short_code} sent!  (id={placed.order_id})")
    click.echo(f"Delivery fee: {placed.delivery_fee}")
    click.echo(f"Total:        {placed.total}")
    if placed.estimated_minutes:
        click.echo(f"Estimated time: {placed.estimated_minutes} min")
    if placed.vendor_link:
        click.echo(f"\nSend it to the restaurant: {placed.vendor_link}")
