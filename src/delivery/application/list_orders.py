"""Application service: operator order board (query)."""

from __future__ import annotations

from delivery.application.dto import OrderDTO
from delivery.application.show_order import to_order_dto
from delivery.domain.exceptions import ValidationError
from delivery.domain.model.status_machine import BOARD_TABS
from delivery.domain.repository.order_store import OrderStore


class ListOrdersHandler:

    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def handle(self, tenant_id: str, tab: str = "All") -> list[OrderDTO]:
        """Orders in the board *tab*, newest first."""
        if tab not in BOARD_TABS:
            raise ValidationError(
                f"Unknown tab '{tab}'. Expected one of: {', '.join(BOARD_TABS)}"
            )
        statuses = BOARD_TABS[tab]
        orders = [o for o in self._order_store.list_orders(tenant_id) if o.status in statuses]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return [to_order_dto(order) for order in orders]
