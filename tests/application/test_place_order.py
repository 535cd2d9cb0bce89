"""Integration tests for the checkout use case.

Uses in-memory fakes; no file I/O.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from delivery.application.cart_aggregator import CartAggregator
from delivery.application.dto import AddressInput, CheckoutRequest
from delivery.application.error_channel import ErrorChannel
from delivery.application.place_order import PlaceOrderHandler, capitalize_name, compose_address
from delivery.domain.exceptions import (
    StoreClosedError,
    StorePermissionError,
    SubmissionError,
    ValidationError,
)
from delivery.domain.model.order import PICKUP_ADDRESS, DeliveryType
from delivery.domain.model.product import Product
from delivery.domain.model.tenant import BusinessHours, DeliveryZone, TenantSettings
from delivery.domain.model.value_objects import Money
from tests.fakes import (
    FakeCatalogReader,
    FakeOrderStore,
    FakeTenantSettingsReader,
    InMemoryCartStorage,
)

MONDAY_NOON = datetime(2024, 5, 6, 12, 0)
SUNDAY_NOON = datetime(2024, 5, 12, 12, 0)

BURGER = Product(id="b1", name="Burger", price=Money.of("20.00"))
CENTRO = DeliveryZone("Centro", Money.of("5.00"), 30)


def _setup(settings: TenantSettings | None = None, now: datetime = MONDAY_NOON, items: int = 1):
    store = FakeOrderStore()
    storage = InMemoryCartStorage()
    cart = CartAggregator(storage)
    for _ in range(items):
        cart.add(BURGER)
    errors = ErrorChannel()
    received = []
    errors.subscribe(received.append)
    handler = PlaceOrderHandler(
        order_store=store,
        catalog=FakeCatalogReader([BURGER], [CENTRO]),
        tenant_settings=FakeTenantSettingsReader(settings or TenantSettings("t1", phone="1133334444")),
        cart=cart,
        errors=errors,
        clock=lambda: now,
    )
    return handler, store, cart, received


def _request(**overrides) -> CheckoutRequest:
    kwargs = dict(
        tenant_id="t1",
        customer_name="alice  souza",
        customer_phone="11999990000",
        delivery_type="Delivery",
        payment_method="PIX",
        address=AddressInput("Rua A", "10", "Centro"),
    )
    kwargs.update(overrides)
    return CheckoutRequest(**kwargs)


class TestPlaceOrderHappyPath:

    def test_delivery_total_includes_zone_fee(self):
        handler, store, _, _ = _setup()
        placed = handler.handle(_request())
        assert placed.delivery_fee == "R$ 5.00"
        assert placed.total == "R$ 25.00"
        assert placed.estimated_minutes == 30
        saved = store.get_order("t1", placed.order_id)
        assert saved.total_amount == Money.of("25.00")
        assert saved.delivery_address == "Rua A, 10 - Centro"

    def test_cart_cleared_after_acknowledged_write(self):
        handler, _, cart, _ = _setup()
        handler.handle(_request())
        assert cart.is_empty

    def test_name_is_capitalized(self):
        handler, store, _, _ = _setup()
        placed = handler.handle(_request())
        assert store.get_order("t1", placed.order_id).customer.name == "Alice Souza"

    def test_pickup_has_no_fee_and_store_address(self):
        handler, store, _, _ = _setup()
        placed = handler.handle(_request(delivery_type="Pickup", address=AddressInput()))
        saved = store.get_order("t1", placed.order_id)
        assert saved.delivery_type is DeliveryType.PICKUP
        assert saved.delivery_address == PICKUP_ADDRESS
        assert placed.total == "R$ 20.00"

    def test_vendor_message_and_link(self):
        handler, _, _, _ = _setup()
        placed = handler.handle(_request())
        assert placed.vendor_message.startswith(f"New order #{placed.short_code}")
        assert placed.vendor_link.startswith("https://wa.me/551133334444?text=")

    def test_unknown_neighborhood_is_free(self):
        handler, _, _, _ = _setup()
        placed = handler.handle(_request(address=AddressInput("Rua B", "2", "Moema")))
        assert placed.delivery_fee == "R$ 0.00"

    def test_cash_change_goes_into_payment_tag(self):
        handler, store, _, _ = _setup()
        placed = handler.handle(_request(payment_method="Cash", cash_change_for=Decimal("50")))
        saved = store.get_order("t1", placed.order_id)
        assert saved.payment_method == "Cash (change for R$ 50.00)"


class TestPlaceOrderValidation:

    def test_closed_store_rejected_first(self):
        handler, store, _, _ = _setup(now=SUNDAY_NOON)
        with pytest.raises(StoreClosedError, match="closed"):
            handler.handle(_request(customer_name=""))
        assert store.create_calls == 0

    def test_closed_store_uses_tenant_message(self):
        handler, _, _, _ = _setup(
            TenantSettings("t1", closed_message="Back at 6pm"), now=SUNDAY_NOON
        )
        with pytest.raises(StoreClosedError, match="Back at 6pm"):
            handler.handle(_request())

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"customer_name": " "}, "Please enter your name"),
            ({"customer_phone": ""}, "Please enter your phone number"),
            ({"payment_method": "Debit card"}, "Please select a payment method"),
            ({"address": AddressInput("Rua A", "", "Centro")}, "street, number and neighborhood"),
        ],
    )
    def test_invalid_form_writes_nothing(self, overrides, message):
        handler, store, cart, _ = _setup()
        with pytest.raises(ValidationError, match=message):
            handler.handle(_request(**overrides))
        assert store.create_calls == 0
        assert not cart.is_empty

    def test_name_checked_before_phone(self):
        handler, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="name"):
            handler.handle(_request(customer_name="", customer_phone=""))

    def test_empty_cart_rejected(self):
        handler, store, _, _ = _setup(items=0)
        with pytest.raises(ValidationError, match="cart is empty"):
            handler.handle(_request())
        assert store.create_calls == 0

    def test_always_open_tenant_accepts_sunday_orders(self):
        settings = TenantSettings("t1", business_hours=BusinessHours.always_open())
        handler, _, _, _ = _setup(settings, now=SUNDAY_NOON)
        assert handler.handle(_request()).order_id


class TestPlaceOrderFailures:

    def test_failed_write_keeps_cart(self):
        handler, store, cart, received = _setup()
        store.fail_writes = True
        with pytest.raises(SubmissionError, match="could not be sent"):
            handler.handle(_request())
        assert cart.total_items == 1
        assert received == []

    def test_permission_error_goes_to_error_channel(self):
        handler, store, cart, received = _setup()
        store.deny_writes = True
        with pytest.raises(SubmissionError):
            handler.handle(_request())
        assert len(received) == 1
        assert isinstance(received[0], StorePermissionError)
        assert received[0].operation == "create"
        assert not cart.is_empty

    def test_failed_read_back_still_reports_the_placed_order(self):
        handler, store, cart, _ = _setup()
        store.fail_reads = True
        placed = handler.handle(_request())
        assert store.create_calls == 1
        assert cart.is_empty
        assert placed.order_id == "order0001"
        assert placed.short_code == "ORDER0"
        assert placed.total == "R$ 25.00"
        assert placed.vendor_message.startswith("New order #ORDER0")


class TestFormHelpers:

    def test_capitalize_name(self):
        assert capitalize_name("  maria   da silva ") == "Maria Da Silva"

    def test_compose_address_with_complement(self):
        address = AddressInput("Rua A", "10", "Centro", "apt 3")
        assert compose_address(address) == "Rua A, 10 - Centro (apt 3)"
