"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class AddressInput:
    street: str = ""
    number: str = ""
    neighborhood: str = ""
    complement: str = ""


@dataclass(frozen=True)
class CheckoutRequest:
    """Input: everything the customer typed on the checkout form."""

    tenant_id: str
    customer_name: str
    customer_phone: str
    delivery_type: str  # "Delivery" | "Pickup"
    payment_method: str
    address: AddressInput = field(default_factory=AddressInput)
    cash_change_for: Decimal | None = None
    customer_id: str | None = None


@dataclass(frozen=True)
class PlacedOrderDTO:
    """Output: confirmation shown after the order is sent."""

    order_id: str
    short_code: str
    total: str
    delivery_fee: str
    estimated_minutes: int | None
    vendor_message: str
    vendor_link: str | None


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "R$ 15.00"
    line_total: str
    options: list[str]
    notes: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the operator."""

    id: str
    short_code: str
    customer_name: str
    customer_phone: str
    status: str
    delivery_type: str
    delivery_address: str
    payment_method: str
    items: list[OrderLineItemDTO]
    subtotal: str
    delivery_fee: str
    total: str
    created_at: str
    actions: list[str]


@dataclass(frozen=True)
class StatusChangeDTO:
    order_id: str
    status: str
    customer_message: str | None
    customer_link: str | None


@dataclass(frozen=True)
class TrackingStepDTO:
    label: str
    state: str  # "done" | "current" | "pending"


@dataclass(frozen=True)
class TrackingDTO:
    order_id: str
    short_code: str
    status: str
    delivery_type: str
    total: str
    created_at: str
    is_cancelled: bool
    steps: list[TrackingStepDTO]
