"""Catalog read shape: products and their priced option groups.

Products are owned by the catalog; the ordering core only reads them.
Cart lines and orders keep value snapshots, so a later catalog edit never
changes what a customer already put in the cart or ordered.
"""

from __future__ import annotations

from dataclasses import dataclass

from delivery.domain.exceptions import ValidationError
from delivery.domain.model.value_objects import Money


@dataclass(frozen=True)
class VariantItem:
    name: str
    price: Money


@dataclass(frozen=True)
class VariantGroup:
    """A named set of priced options with a min/max selectable count.

    ``min == max == 1`` is a single-choice (radio) group; anything else is
    multi-choice with ``max`` as the ceiling.
    """

    name: str
    min: int
    max: int
    items: tuple[VariantItem, ...] = ()

    def __post_init__(self) -> None:
        if self.min < 0:
            raise ValidationError(f"Group '{self.name}': minimum cannot be negative")
        if self.max < 1 or self.max < self.min:
            raise ValidationError(
                f"Group '{self.name}': maximum must be at least 1 and not below the minimum"
            )

    @property
    def is_single_choice(self) -> bool:
        return self.min == 1 and self.max == 1

    def find_item(self, item_name: str) -> VariantItem:
        for item in self.items:
            if item.name == item_name:
                return item
        raise ValidationError(f"Option '{item_name}' not found in '{self.name}'")


@dataclass(frozen=True)
class SelectedVariant:
    """Snapshot of one chosen option, price included."""

    group_name: str
    item_name: str
    price: Money


@dataclass(frozen=True)
class Product:
    """A product in the tenant's menu."""

    id: str
    name: str
    price: Money
    description: str = ""
    category: str = ""
    is_active: bool = True
    variants: tuple[VariantGroup, ...] = ()

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def find_group(self, group_name: str) -> VariantGroup:
        for group in self.variants:
            if group.name == group_name:
                return group
        raise ValidationError(f"'{self.name}' has no option group named '{group_name}'")
