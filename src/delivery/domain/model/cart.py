"""Cart aggregate: the customer's selected lines before checkout.

Each CartItem fixes its ``final_price`` when it is added. Later catalog
price changes do not reach lines that are already in the cart.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from delivery.domain.exceptions import EntityNotFoundError, ValidationError
from delivery.domain.model.product import Product, SelectedVariant
from delivery.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class CartItem:
    id: str
    product: Product
    quantity: int
    final_price: Money
    notes: str = ""
    selected_variants: tuple[SelectedVariant, ...] = ()

    def __post_init__(self) -> None:
        Quantity(self.quantity)

    @staticmethod
    def create(
        product: Product,
        created_at: datetime,
        quantity: int = 1,
        notes: str = "",
        variants: tuple[SelectedVariant, ...] = (),
    ) -> CartItem:
        """Build a new line, computing its price once."""
        final_price = product.price + Money.total(v.price for v in variants)
        return CartItem(
            id=f"{product.id}-{int(created_at.timestamp() * 1000)}",
            product=product,
            quantity=quantity,
            final_price=final_price,
            notes=notes,
            selected_variants=tuple(variants),
        )

    @property
    def line_total(self) -> Money:
        return self.final_price * self.quantity

    @property
    def is_mergeable(self) -> bool:
        return not self.selected_variants


def merge_policy(existing: list[CartItem], new_line: CartItem) -> list[CartItem]:
    """Return the lines after adding *new_line*.

    A variant-free line folds into an existing variant-free line for the
    same product. Lines carrying options are always appended, even when the
    same options were chosen before.
    """
    if new_line.is_mergeable:
        for index, line in enumerate(existing):
            if line.is_mergeable and line.product.id == new_line.product.id:
                merged = replace(line, quantity=line.quantity + new_line.quantity)
                return existing[:index] + [merged] + existing[index + 1:]

    line = new_line
    taken = {item.id for item in existing}
    suffix = 1
    while line.id in taken:
        line = replace(new_line, id=f"{new_line.id}-{suffix}")
        suffix += 1
    return existing + [line]


class Cart:
    """Ordered collection of CartItems owned by one browsing session."""

    def __init__(self, items: list[CartItem] | None = None) -> None:
        self._items: list[CartItem] = list(items or [])

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_price(self) -> Money:
        return Money.total(item.line_total for item in self._items)

    def add(self, item: CartItem) -> CartItem:
        """Add *item*, returning the line that now holds it."""
        self._items = merge_policy(self._items, item)
        if item.is_mergeable:
            for line in self._items:
                if line.is_mergeable and line.product.id == item.product.id:
                    return line
        return self._items[-1]

    def remove(self, item_id: str) -> None:
        self._index_of(item_id)
        self._items = [item for item in self._items if item.id != item_id]

    def set_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(item_id)
            return
        index = self._index_of(item_id)
        self._items[index] = replace(self._items[index], quantity=quantity)

    def set_notes(self, item_id: str, notes: str) -> None:
        index = self._index_of(item_id)
        self._items[index] = replace(self._items[index], notes=notes)

    def clear(self) -> None:
        self._items = []

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise EntityNotFoundError(f"Cart item '{item_id}' not found")


def require_active(product: Product) -> None:
    if not product.is_active:
        raise ValidationError(f"'{product.name}' is not available right now")
