"""Variant selection rules for an item that is being configured.

The pure functions work on a single group and a tuple of already chosen
options; ``VariantSelection`` keeps that tuple for one product while the
customer is picking options, and refuses to confirm until every group's
minimum is met.
"""

from __future__ import annotations

from collections.abc import Iterable

from delivery.domain.exceptions import ValidationError, VariantLimitReachedError
from delivery.domain.model.product import Product, SelectedVariant, VariantGroup
from delivery.domain.model.value_objects import Money


def toggle_variant(
    group: VariantGroup,
    chosen: tuple[SelectedVariant, ...],
    item_name: str,
) -> tuple[SelectedVariant, ...]:
    """Return the new selection after the customer taps *item_name*.

    Single-choice groups behave like radio buttons. Multi-choice groups
    deselect on a second tap and raise VariantLimitReachedError instead of
    exceeding ``group.max``; the caller's tuple is never modified.
    """
    item = group.find_item(item_name)
    in_group = [v for v in chosen if v.group_name == group.name]
    picked = SelectedVariant(group_name=group.name, item_name=item.name, price=item.price)

    if group.is_single_choice:
        others = tuple(v for v in chosen if v.group_name != group.name)
        return others + (picked,)

    if any(v.item_name == item.name for v in in_group):
        return tuple(
            v for v in chosen
            if not (v.group_name == group.name and v.item_name == item.name)
        )

    if len(in_group) >= group.max:
        raise VariantLimitReachedError(group.name, group.max)
    return chosen + (picked,)


def selected_count(group_name: str, chosen: Iterable[SelectedVariant]) -> int:
    return sum(1 for v in chosen if v.group_name == group_name)


def check_minimums(
    groups: Iterable[VariantGroup],
    chosen: tuple[SelectedVariant, ...],
) -> None:
    """Raise ValidationError for the first group below its minimum."""
    for group in groups:
        if selected_count(group.name, chosen) < group.min:
            noun = "option" if group.min == 1 else "options"
            raise ValidationError(
                f"Incomplete selection: choose at least {group.min} {noun} for '{group.name}'"
            )


def check_selection(
    product: Product,
    chosen: Iterable[SelectedVariant],
) -> tuple[SelectedVariant, ...]:
    """Validate *chosen* against the product's own groups.

    Every option must exist in the catalog, appear at most once, and every
    group must end up within ``min..max``. Returns the selection re-priced
    from the catalog items; prices carried by *chosen* are ignored.
    """
    priced: list[SelectedVariant] = []
    for variant in chosen:
        item = product.find_group(variant.group_name).find_item(variant.item_name)
        if any(v.group_name == variant.group_name and v.item_name == item.name for v in priced):
            raise ValidationError(
                f"Option '{item.name}' chosen twice in '{variant.group_name}'"
            )
        priced.append(SelectedVariant(variant.group_name, item.name, item.price))

    result = tuple(priced)
    for group in product.variants:
        if selected_count(group.name, result) > group.max:
            raise VariantLimitReachedError(group.name, group.max)
    check_minimums(product.variants, result)
    return result


class VariantSelection:
    """Options picked so far for one product, before it enters the cart."""

    def __init__(self, product: Product) -> None:
        self.product = product
        self._chosen: tuple[SelectedVariant, ...] = ()

    @property
    def selected(self) -> tuple[SelectedVariant, ...]:
        return self._chosen

    @property
    def final_price(self) -> Money:
        return self.product.price + Money.total(v.price for v in self._chosen)

    def is_selected(self, group_name: str, item_name: str) -> bool:
        return any(
            v.group_name == group_name and v.item_name == item_name
            for v in self._chosen
        )

    def toggle(self, group_name: str, item_name: str) -> None:
        group = self.product.find_group(group_name)
        self._chosen = toggle_variant(group, self._chosen, item_name)

    def confirm(self) -> tuple[SelectedVariant, ...]:
        return check_selection(self.product, self._chosen)
