"""In-process fan-out of order changes to live-query subscribers.

Stores call ``publish`` with the before/after image of every order they
write. Each subscription turns that pair into the change its query sees:
an order entering the query is ``added``, one staying in it is
``modified``, one leaving it is ``removed``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from delivery.domain.exceptions import StoreError
from delivery.domain.model.order import Order, OrderStatus
from delivery.domain.repository.order_store import (
    ChangeListener,
    ChangeType,
    ErrorListener,
    OrderChange,
    Unsubscribe,
)


@dataclass
class _Subscription:
    tenant_id: str
    statuses: frozenset[OrderStatus]
    on_change: ChangeListener
    on_error: ErrorListener

    def matches(self, order: Order | None) -> bool:
        return order is not None and order.status in self.statuses


class OrderChangeFeed:

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    def subscribe(
        self,
        tenant_id: str,
        statuses: Iterable[OrderStatus],
        on_change: ChangeListener,
        on_error: ErrorListener,
        existing: Iterable[Order] = (),
    ) -> Unsubscribe:
        """Register a live query and replay *existing* matches as ``added``."""
        subscription = _Subscription(tenant_id, frozenset(statuses), on_change, on_error)
        self._subscriptions.append(subscription)

        for order in existing:
            if subscription.matches(order):
                subscription.on_change(OrderChange(ChangeType.ADDED, order))

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, tenant_id: str, before: Order | None, after: Order | None) -> None:
        for subscription in list(self._subscriptions):
            if subscription.tenant_id != tenant_id:
                continue
            was_in, is_in = subscription.matches(before), subscription.matches(after)
            if is_in and not was_in:
                change = OrderChange(ChangeType.ADDED, after)  # type: ignore[arg-type]
            elif is_in and was_in:
                change = OrderChange(ChangeType.MODIFIED, after)  # type: ignore[arg-type]
            elif was_in:
                change = OrderChange(ChangeType.REMOVED, before)  # type: ignore[arg-type]
            else:
                continue
            subscription.on_change(change)

    def fail(self, tenant_id: str, error: StoreError) -> None:
        """Report *error* to every subscription of the tenant."""
        for subscription in list(self._subscriptions):
            if subscription.tenant_id == tenant_id:
                subscription.on_error(error)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)
