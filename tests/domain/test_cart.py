"""Unit tests for the Cart aggregate and its merge policy."""

from datetime import datetime, timedelta, timezone

import pytest

from delivery.domain.exceptions import EntityNotFoundError, ValidationError
from delivery.domain.model.cart import Cart, CartItem, merge_policy, require_active
from delivery.domain.model.product import Product, SelectedVariant
from delivery.domain.model.value_objects import Money

T0 = datetime(2024, 5, 6, 12, 0, tzinfo=timezone.utc)

COKE = Product(id="coke", name="Coke", price=Money.of("6.00"))
PIZZA = Product(id="pizza", name="Pizza", price=Money.of("40.00"))
LARGE = SelectedVariant("Size", "Large", Money.of("10.00"))


def _line(product=COKE, quantity=1, variants=(), at=T0) -> CartItem:
    return CartItem.create(product, created_at=at, quantity=quantity, variants=variants)


class TestCartItem:

    def test_final_price_includes_options(self):
        item = _line(PIZZA, variants=(LARGE,))
        assert item.final_price == Money.of("50.00")

    def test_id_is_product_and_millis(self):
        assert _line().id == f"coke-{int(T0.timestamp() * 1000)}"

    def test_line_total(self):
        assert _line(quantity=3).line_total == Money.of("18.00")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            _line(quantity=0)


class TestMergePolicy:

    def test_plain_lines_of_same_product_merge(self):
        lines = merge_policy([_line(quantity=2)], _line(quantity=3))
        assert len(lines) == 1
        assert lines[0].quantity == 5

    def test_lines_with_options_never_merge(self):
        first = _line(PIZZA, variants=(LARGE,))
        again = _line(PIZZA, variants=(LARGE,), at=T0.replace(second=1))
        lines = merge_policy([first], again)
        assert len(lines) == 2

    def test_plain_line_does_not_merge_into_configured_line(self):
        lines = merge_policy([_line(PIZZA, variants=(LARGE,))], _line(PIZZA))
        assert len(lines) == 2

    def test_colliding_ids_get_a_suffix(self):
        first = _line(PIZZA, variants=(LARGE,))
        lines = merge_policy([first], _line(PIZZA, variants=(LARGE,)))
        assert lines[1].id == f"{first.id}-1"

    def test_existing_list_is_not_modified(self):
        existing = [_line(quantity=1)]
        merge_policy(existing, _line(quantity=1))
        assert existing[0].quantity == 1


class TestCart:

    def test_add_returns_merged_line(self):
        cart = Cart()
        cart.add(_line(quantity=1))
        line = cart.add(_line(quantity=2))
        assert line.quantity == 3
        assert cart.total_items == 3

    def test_total_price(self):
        cart = Cart([_line(quantity=2), _line(PIZZA, variants=(LARGE,))])
        assert cart.total_price == Money.of("62.00")

    def test_set_quantity_zero_removes(self):
        line = _line()
        cart = Cart([line])
        cart.set_quantity(line.id, 0)
        assert cart.is_empty

    def test_set_notes(self):
        line = _line()
        cart = Cart([line])
        cart.set_notes(line.id, "no ice")
        assert cart.items[0].notes == "no ice"

    def test_unknown_line_raises(self):
        with pytest.raises(EntityNotFoundError, match="not found"):
            Cart().remove("nope")

    def test_clear(self):
        cart = Cart([_line()])
        cart.clear()
        assert cart.is_empty
        assert cart.total_price.is_zero


# Steps: ("add", product, quantity, variants), ("quantity", line index, n),
# ("remove", line index).
SEQUENCES = [
    (
        [
            ("add", COKE, 2, ()),
            ("add", COKE, 1, ()),
            ("add", PIZZA, 1, (LARGE,)),
            ("quantity", 0, 0),
            ("add", PIZZA, 2, ()),
            ("remove", 0),
        ],
        "80.00",
        2,
    ),
    (
        [
            ("add", PIZZA, 1, (LARGE,)),
            ("add", PIZZA, 1, (LARGE,)),
            ("quantity", 1, 3),
            ("add", COKE, 1, ()),
            ("quantity", 2, 0),
            ("remove", 0),
        ],
        "150.00",
        3,
    ),
    (
        [
            ("add", COKE, 1, ()),
            ("remove", 0),
            ("add", COKE, 4, ()),
            ("quantity", 0, 2),
        ],
        "12.00",
        2,
    ),
]


class TestCartTotals:

    @pytest.mark.parametrize("steps, expected_total, expected_items", SEQUENCES)
    def test_totals_follow_every_step(self, steps, expected_total, expected_items):
        cart = Cart()
        for tick, step in enumerate(steps):
            if step[0] == "add":
                _, product, quantity, variants = step
                cart.add(_line(product, quantity, variants, at=T0 + timedelta(seconds=tick)))
            elif step[0] == "quantity":
                cart.set_quantity(cart.items[step[1]].id, step[2])
            else:
                cart.remove(cart.items[step[1]].id)

            assert cart.total_price == Money.total(i.final_price * i.quantity for i in cart.items)
            assert cart.total_items == sum(i.quantity for i in cart.items)

        assert cart.total_price == Money.of(expected_total)
        assert cart.total_items == expected_items


class TestRequireActive:

    def test_inactive_product_rejected(self):
        sold_out = Product(id="x", name="Soup", price=Money.of("9"), is_active=False)
        with pytest.raises(ValidationError, match="not available"):
            require_active(sold_out)
