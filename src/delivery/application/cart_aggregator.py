"""Application service: the session cart.

Wraps the Cart aggregate with client-local persistence. The stored
snapshot is restored on construction and rewritten after every mutation,
so the cart survives a reload on the same device.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from delivery.domain.model.cart import Cart, CartItem, require_active
from delivery.domain.model.product import Product, SelectedVariant
from delivery.domain.model.value_objects import Money
from delivery.domain.model.variant_selection import VariantSelection, check_selection
from delivery.domain.repository.cart_storage import CartStorage

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CartAggregator:

    def __init__(
        self,
        storage: CartStorage,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._cart = Cart(storage.load())

    # --- Queries --------------------------------------------------------------

    @property
    def items(self) -> list[CartItem]:
        return self._cart.items

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty

    @property
    def total_items(self) -> int:
        return self._cart.total_items

    @property
    def total_price(self) -> Money:
        return self._cart.total_price

    # --- Mutations ------------------------------------------------------------

    def add(
        self,
        product: Product,
        quantity: int = 1,
        notes: str = "",
        variants: tuple[SelectedVariant, ...] = (),
    ) -> CartItem:
        """Add *product* with already chosen *variants*.

        The options are checked against the product's groups (existence,
        min and max) and re-priced from the catalog, so a line that breaks
        the group rules can never reach checkout.
        """
        require_active(product)
        priced = check_selection(product, variants)
        item = CartItem.create(
            product,
            created_at=self._clock(),
            quantity=quantity,
            notes=notes,
            variants=priced,
        )
        line = self._cart.add(item)
        self._persist()
        logger.debug("cart.added", item_id=line.id, product_id=product.id, quantity=line.quantity)
        return line

    def add_configured(
        self,
        selection: VariantSelection,
        quantity: int = 1,
        notes: str = "",
    ) -> CartItem:
        return self.add(selection.product, quantity, notes, selection.confirm())

    def remove(self, item_id: str) -> None:
        self._cart.remove(item_id)
        self._persist()

    def set_quantity(self, item_id: str, quantity: int) -> None:
        self._cart.set_quantity(item_id, quantity)
        self._persist()

    def set_notes(self, item_id: str, notes: str) -> None:
        self._cart.set_notes(item_id, notes)
        self._persist()

    def clear(self) -> None:
        self._cart.clear()
        self._persist()

    def _persist(self) -> None:
        self._storage.save(self._cart.items)
