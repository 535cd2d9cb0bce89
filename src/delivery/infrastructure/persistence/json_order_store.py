"""JSON-file-backed implementation of OrderStore.

Layout: ``<root>/<tenant id>/orders.json``, one list of order documents per
tenant. Every write replaces the file atomically, so an order either exists
completely or not at all.

Live queries are served in-process through an OrderChangeFeed. Writes made
by this instance are published immediately; ``refresh()`` re-reads the files
of subscribed tenants and publishes whatever other processes changed.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import structlog

from delivery.domain.exceptions import StoreError, StorePermissionError
from delivery.domain.model.order import Order, OrderStatus
from delivery.domain.repository.order_store import (
    ChangeListener,
    ErrorListener,
    OrderStore,
    Unsubscribe,
)
from delivery.infrastructure.persistence.change_feed import OrderChangeFeed
from delivery.infrastructure.persistence.codec import order_from_raw, order_to_raw

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class JsonOrderStore(OrderStore):

    def __init__(
        self,
        root: Path,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._root = root
        self._clock = clock
        self._id_factory = id_factory
        self._feed = OrderChangeFeed()
        # Last image of each subscribed tenant's orders, keyed by order id.
        self._known: dict[str, dict[str, Order]] = {}

    # --- OrderStore interface -------------------------------------------------

    def create_order(self, tenant_id: str, order: Order) -> str:
        records = self._load_raw(tenant_id, "create")
        created = replace(
            order,
            id=self._id_factory(),
            tenant_id=tenant_id,
            created_at=self._clock(),
        )
        raw = order_to_raw(created)
        self._persist_raw(tenant_id, records + [raw], "create", raw)
        logger.debug("order_store.created", tenant_id=tenant_id, order_id=created.id)
        self._publish(tenant_id, None, created)
        return created.id  # type: ignore[return-value]

    def update_order_status(self, tenant_id: str, order_id: str, status: OrderStatus) -> None:
        records = self._load_raw(tenant_id, "update")
        for raw in records:
            if raw["id"] == order_id:
                before = order_from_raw(raw)
                raw["status"] = status.value
                self._persist_raw(tenant_id, records, "update", {"status": status.value})
                self._publish(tenant_id, before, before.with_status(status))
                return
        raise StoreError(f"Order '{order_id}' does not exist in {self._path_of(tenant_id)}")

    def get_order(self, tenant_id: str, order_id: str) -> Order | None:
        for raw in self._load_raw(tenant_id, "get"):
            if raw["id"] == order_id:
                return order_from_raw(raw)
        return None

    def list_orders(self, tenant_id: str) -> list[Order]:
        return [order_from_raw(raw) for raw in self._load_raw(tenant_id, "list")]

    def find_order_by_id(self, order_id: str) -> Order | None:
        for tenant_id in self._tenant_ids():
            order = self.get_order(tenant_id, order_id)
            if order is not None:
                return order
        return None

    def find_orders_by_customer(self, customer_name: str, limit: int = 10) -> list[Order]:
        wanted = customer_name.strip().casefold()
        found = [
            order
            for tenant_id in self._tenant_ids()
            for order in self.list_orders(tenant_id)
            if order.customer.name.strip().casefold() == wanted
        ]
        found.sort(key=lambda o: o.created_at, reverse=True)
        return found[:limit]

    def subscribe_new_orders(
        self,
        tenant_id: str,
        statuses: Iterable[OrderStatus],
        on_change: ChangeListener,
        on_error: ErrorListener,
    ) -> Unsubscribe:
        try:
            existing = self.list_orders(tenant_id)
        except StoreError as exc:
            on_error(exc)
            return lambda: None
        self._known[tenant_id] = {o.id: o for o in existing}  # type: ignore[misc]
        return self._feed.subscribe(tenant_id, statuses, on_change, on_error, existing)

    # --- Cross-process changes ------------------------------------------------

    def refresh(self) -> None:
        """Publish changes other processes made to subscribed tenants."""
        for tenant_id, known in list(self._known.items()):
            try:
                current = {o.id: o for o in self.list_orders(tenant_id)}
            except StoreError as exc:
                self._feed.fail(tenant_id, exc)
                continue
            self._known[tenant_id] = current  # type: ignore[assignment]
            for order_id, after in current.items():
                before = known.get(order_id)  # type: ignore[arg-type]
                if before != after:
                    self._feed.publish(tenant_id, before, after)
            for order_id in known.keys() - current.keys():
                self._feed.publish(tenant_id, known[order_id], None)

    def _publish(self, tenant_id: str, before: Order | None, after: Order) -> None:
        if tenant_id in self._known:
            self._known[tenant_id][after.id] = after  # type: ignore[index]
        self._feed.publish(tenant_id, before, after)

    # --- File helpers ---------------------------------------------------------

    def _path_of(self, tenant_id: str) -> Path:
        return self._root / tenant_id / "orders.json"

    def _tenant_ids(self) -> list[str]:
        if not self._root.exists():
            return []
        return sorted(p.name for p in self._root.iterdir() if (p / "orders.json").exists())

    def _load_raw(self, tenant_id: str, operation: str) -> list[dict]:
        path = self._path_of(tenant_id)
        try:
            if not path.exists():
                return []
            return json.loads(path.read_text(encoding="utf-8"))
        except PermissionError as exc:
            raise StorePermissionError(str(path), operation) from exc
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc

    def _persist_raw(
        self,
        tenant_id: str,
        orders: list[dict],
        operation: str,
        request_data: dict,
    ) -> None:
        path = self._path_of(tenant_id)
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(orders, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, path)
        except PermissionError as exc:
            raise StorePermissionError(str(path), operation, request_data) from exc
        except OSError as exc:
            raise StoreError(f"Cannot write {path}: {exc}") from exc
