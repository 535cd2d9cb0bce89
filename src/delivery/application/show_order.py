"""Application service: Show Order use case (query)."""

from __future__ import annotations

from delivery.application.dto import OrderDTO, OrderLineItemDTO
from delivery.domain.exceptions import EntityNotFoundError
from delivery.domain.model.order import Order
from delivery.domain.model.status_machine import operator_actions
from delivery.domain.repository.order_store import OrderStore
from delivery.domain.service.receipt import group_variants


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        short_code=order.short_code,
        customer_name=order.customer.name,
        customer_phone=order.customer.phone,
        status=order.status.value,
        delivery_type=order.delivery_type.value,
        delivery_address=order.delivery_address,
        payment_method=order.payment_method,
        items=[
            OrderLineItemDTO(
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.effective_price),
                line_total=str(item.line_total),
                options=[f"{group}: {', '.join(names)}" for group, names in group_variants(item)],
                notes=item.notes,
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        delivery_fee=str(order.delivery_fee),
        total=str(order.total_amount),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        actions=[status.value for status in operator_actions(order)],
    )


class ShowOrderHandler:

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def handle(self, tenant_id: str, order_id: str) -> OrderDTO:
        order = self._order_store.get_order(tenant_id, order_id)
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' not found")
        return to_order_dto(order)
