"""Abstract order store with a live "new orders" query.

Defined in the domain layer so the domain never depends on
infrastructure. The JSON implementation lives in the infrastructure layer;
tests use an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from delivery.domain.exceptions import StoreError
from delivery.domain.model.order import Order, OrderStatus


class ChangeType(Enum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class OrderChange:
    """One document change delivered by a live query."""

    type: ChangeType
    order: Order


ChangeListener = Callable[[OrderChange], None]
ErrorListener = Callable[[StoreError], None]
Unsubscribe = Callable[[], None]


class OrderStore(ABC):

    @abstractmethod
    def create_order(self, tenant_id: str, order: Order) -> str:
        """Write a new order in one atomic operation and return its id.

        The store assigns the id and the creation timestamp.
        """

    @abstractmethod
    def update_order_status(self, tenant_id: str, order_id: str, status: OrderStatus) -> None:
        """Overwrite the status field of an existing order."""

    @abstractmethod
    def get_order(self, tenant_id: str, order_id: str) -> Order | None:
        """Return one of the tenant's orders, or None."""

    @abstractmethod
    def list_orders(self, tenant_id: str) -> list[Order]:
        """Return every order of the tenant."""

    @abstractmethod
    def find_order_by_id(self, order_id: str) -> Order | None:
        """Look an order up by id across all tenants."""

    @abstractmethod
    def find_orders_by_customer(self, customer_name: str, limit: int = 10) -> list[Order]:
        """Return the newest orders placed under *customer_name*, across tenants."""

    @abstractmethod
    def subscribe_new_orders(
        self,
        tenant_id: str,
        statuses: Iterable[OrderStatus],
        on_change: ChangeListener,
        on_error: ErrorListener,
    ) -> Unsubscribe:
        """Start a live query over the tenant's orders in *statuses*.

        Every matching order that already exists is delivered first as an
        ``added`` change, followed by changes as they happen. Failures are
        passed to *on_error* rather than raised.
        """
