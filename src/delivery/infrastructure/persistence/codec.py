"""JSON <-> domain mapping shared by the file-backed adapters.

Amounts are stored as decimal strings so they round-trip exactly.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from delivery.domain.model.order import (
    Customer,
    DeliveryType,
    Order,
    OrderLineItem,
    OrderStatus,
)
from delivery.domain.model.product import (
    Product,
    SelectedVariant,
    VariantGroup,
    VariantItem,
)
from delivery.domain.model.value_objects import Money, Quantity


def money_to_raw(money: Money) -> str:
    return str(money.amount)


def money_from_raw(raw: str | int | float, currency: str = "BRL") -> Money:
    return Money(Decimal(str(raw)), currency)


# --- Catalog ------------------------------------------------------------------


def variant_to_raw(variant: SelectedVariant) -> dict:
    return {
        "group_name": variant.group_name,
        "item_name": variant.item_name,
        "price": money_to_raw(variant.price),
    }


def variant_from_raw(raw: dict) -> SelectedVariant:
    return SelectedVariant(
        group_name=raw["group_name"],
        item_name=raw["item_name"],
        price=money_from_raw(raw["price"]),
    )


def product_to_raw(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": money_to_raw(product.price),
        "category": product.category,
        "is_active": product.is_active,
        "variants": [
            {
                "name": group.name,
                "min": group.min,
                "max": group.max,
                "items": [
                    {"name": item.name, "price": money_to_raw(item.price)}
                    for item in group.items
                ],
            }
            for group in product.variants
        ],
    }


def product_from_raw(raw: dict) -> Product:
    return Product(
        id=str(raw["id"]),
        name=raw["name"],
        description=raw.get("description", ""),
        price=money_from_raw(raw["price"]),
        category=raw.get("category", ""),
        is_active=raw.get("is_active", True),
        variants=tuple(
            VariantGroup(
                name=group["name"],
                min=group.get("min", 0),
                max=group.get("max", 1),
                items=tuple(
                    VariantItem(name=item["name"], price=money_from_raw(item.get("price", "0")))
                    for item in group.get("items", [])
                ),
            )
            for group in raw.get("variants", [])
        ),
    )


# --- Orders -------------------------------------------------------------------


def order_to_raw(order: Order) -> dict:
    return {
        "id": order.id,
        "tenant_id": order.tenant_id,
        "customer": {
            "id": order.customer.id,
            "name": order.customer.name,
            "phone": order.customer.phone,
        },
        "status": order.status.value,
        "created_at": order.created_at.isoformat(),
        "delivery_type": order.delivery_type.value,
        "delivery_address": order.delivery_address,
        "delivery_fee": money_to_raw(order.delivery_fee),
        "payment_method": order.payment_method,
        "estimated_minutes": order.estimated_minutes,
        "items": [
            {
                "product_id": item.product_id,
                "product_name": item.product_name,
                "quantity": item.quantity.value,
                "unit_price": money_to_raw(item.unit_price),
                "final_price": (
                    money_to_raw(item.final_price) if item.final_price is not None else None
                ),
                "notes": item.notes,
                "selected_variants": [variant_to_raw(v) for v in item.selected_variants],
            }
            for item in order.items
        ],
        "total_amount": money_to_raw(order.total_amount),
    }


def order_from_raw(raw: dict) -> Order:
    items = tuple(
        OrderLineItem(
            product_id=i["product_id"],
            product_name=i.get("product_name", ""),
            quantity=Quantity(i["quantity"]),
            unit_price=money_from_raw(i["unit_price"]),
            final_price=(
                money_from_raw(i["final_price"]) if i.get("final_price") is not None else None
            ),
            notes=i.get("notes", ""),
            selected_variants=tuple(variant_from_raw(v) for v in i.get("selected_variants", [])),
        )
        for i in raw["items"]
    )
    customer = raw.get("customer", {})
    return Order(
        id=raw["id"],
        tenant_id=raw["tenant_id"],
        customer=Customer(
            id=customer.get("id", "anonymous"),
            name=customer.get("name", ""),
            phone=customer.get("phone", ""),
        ),
        delivery_type=DeliveryType(raw["delivery_type"]),
        delivery_address=raw.get("delivery_address", ""),
        delivery_fee=money_from_raw(raw.get("delivery_fee", "0")),
        payment_method=raw.get("payment_method", ""),
        items=items,
        total_amount=money_from_raw(raw["total_amount"]),
        status=OrderStatus(raw["status"]),
        created_at=datetime.fromisoformat(raw["created_at"]),
        estimated_minutes=raw.get("estimated_minutes"),
    )
