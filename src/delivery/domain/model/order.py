"""Order aggregate: the record a checkout leaves in the order store.

An order is immutable once written; only its ``status`` moves afterwards,
and it moves through single-field writes in the order store. Line items
carry snapshots of the cart lines so catalog edits never alter history.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from delivery.domain.exceptions import ValidationError
from delivery.domain.model.cart import CartItem
from delivery.domain.model.product import SelectedVariant
from delivery.domain.model.value_objects import Money, Quantity


class DeliveryType(Enum):
    DELIVERY = "Delivery"
    PICKUP = "Pickup"


class OrderStatus(Enum):
    NEW = "New"
    AWAITING_PAYMENT = "Awaiting payment"
    PREPARING = "Preparing"
    OUT_FOR_DELIVERY = "Out for delivery"
    READY_FOR_PICKUP = "Ready for pickup"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


PICKUP_ADDRESS = "Pickup at store"


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    phone: str = ""


@dataclass(frozen=True)
class OrderLineItem:
    """Snapshot of one cart line at checkout time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # base product price, locked at checkout
    final_price: Money | None = None  # unit price plus options
    notes: str = ""
    selected_variants: tuple[SelectedVariant, ...] = ()

    @property
    def effective_price(self) -> Money:
        return self.final_price if self.final_price is not None else self.unit_price

    @property
    def line_total(self) -> Money:
        return self.effective_price * self.quantity.value

    @staticmethod
    def from_cart_item(item: CartItem) -> OrderLineItem:
        return OrderLineItem(
            product_id=item.product.id,
            product_name=item.product.name,
            quantity=Quantity(item.quantity),
            unit_price=item.product.price,
            final_price=item.final_price,
            notes=item.notes,
            selected_variants=item.selected_variants,
        )


@dataclass(frozen=True)
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules and computes the total. The plain constructor is what
    stores use to reconstitute persisted orders without re-validating.
    """

    id: str | None
    tenant_id: str
    customer: Customer
    delivery_type: DeliveryType
    delivery_address: str
    delivery_fee: Money
    payment_method: str
    items: tuple[OrderLineItem, ...]
    total_amount: Money
    status: OrderStatus = OrderStatus.NEW
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    estimated_minutes: int | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        tenant_id: str,
        customer: Customer,
        delivery_type: DeliveryType,
        delivery_address: str,
        delivery_fee: Money,
        payment_method: str,
        items: list[OrderLineItem],
        estimated_minutes: int | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not customer.name or not customer.name.strip():
            raise ValidationError("Customer name is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required")

        if delivery_type is DeliveryType.PICKUP:
            delivery_address = PICKUP_ADDRESS
            delivery_fee = Money.zero()

        total = Money.total(item.line_total for item in items) + delivery_fee
        return Order(
            id=None,
            tenant_id=tenant_id,
            customer=customer,
            delivery_type=delivery_type,
            delivery_address=delivery_address,
            delivery_fee=delivery_fee,
            payment_method=payment_method,
            items=tuple(items),
            total_amount=total,
            estimated_minutes=estimated_minutes,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return self.total_amount - self.delivery_fee

    @property
    def short_code(self) -> str:
        return (self.id or "")[:6].upper()

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def with_status(self, status: OrderStatus) -> Order:
        return replace(self, status=status)
