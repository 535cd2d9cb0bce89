"""Application service: customer order tracking (query).

Customers look an order up by its id, or by the name they ordered under.
The progress they see follows the branch of their order's delivery type.
"""

from __future__ import annotations

from delivery.application.dto import TrackingDTO, TrackingStepDTO
from delivery.domain.exceptions import EntityNotFoundError, ValidationError
from delivery.domain.model.order import Order
from delivery.domain.model.status_machine import tracker_position
from delivery.domain.repository.order_store import OrderStore

SEARCH_LIMIT = 10


def to_tracking_dto(order: Order) -> TrackingDTO:
    position = tracker_position(order)
    steps = []
    for index, step in enumerate(position.steps):
        if position.current_step is None or index > position.current_step:
            state = "pending"
        elif index == position.current_step:
            state = "current"
        else:
            state = "done"
        steps.append(TrackingStepDTO(label=step.label, state=state))
    return TrackingDTO(
        order_id=order.id,  # type: ignore[arg-type]
        short_code=order.short_code,
        status=order.status.value,
        delivery_type=order.delivery_type.value,
        total=str(order.total_amount),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        is_cancelled=position.is_cancelled,
        steps=steps,
    )


class TrackOrderHandler:

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def by_id(self, order_id: str) -> TrackingDTO:
        order = self._order_store.find_order_by_id(order_id.strip())
        if order is None:
            raise EntityNotFoundError(f"Order '{order_id}' not found")
        return to_tracking_dto(order)

    def by_customer(self, customer_name: str) -> list[TrackingDTO]:
        if not customer_name.strip():
            raise ValidationError("Please enter your name")
        orders = self._order_store.find_orders_by_customer(customer_name.strip(), SEARCH_LIMIT)
        if not orders:
            raise EntityNotFoundError(
                "No orders found for this name. Check that it is spelled correctly."
            )
        return [to_tracking_dto(order) for order in orders]
